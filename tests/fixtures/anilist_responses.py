"""Fixture data for AniList GraphQL responses."""

from typing import Any

JUNE_1_2024 = 1717200000  # 2024-06-01T00:00:00Z
JUNE_2_2024 = JUNE_1_2024 + 86400

SEASONAL_MEDIA_RESPONSE: dict[str, Any] = {
    "data": {
        "Page": {
            "media": [
                {
                    "id": 166873,
                    "status": "RELEASING",
                    "title": {"romaji": "Kaijuu 8-gou", "english": "Kaiju No. 8"},
                    "coverImage": {
                        "medium": "https://s4.anilist.co/file/anilistcdn/media/anime/cover/small/kaiju.jpg",
                        "color": "#e4a143",
                    },
                    "episodes": 12,
                    "averageScore": 78,
                    "popularity": 250000,
                    "genres": ["Action", "Sci-Fi"],
                    "nextAiringEpisode": {"airingAt": JUNE_1_2024 + 3600, "episode": 9},
                },
                {
                    "id": 162804,
                    "status": "FINISHED",
                    "title": {"romaji": "Sousou no Frieren", "english": "Frieren: Beyond Journey's End"},
                    "coverImage": {
                        "medium": "https://s4.anilist.co/file/anilistcdn/media/anime/cover/small/frieren.jpg",
                        "color": "#d6f1fe",
                    },
                    "episodes": 28,
                    "averageScore": 91,
                    "popularity": 400000,
                    "genres": ["Adventure", "Drama", "Fantasy"],
                    "nextAiringEpisode": None,
                },
                {
                    "id": 170942,
                    "status": "RELEASING",
                    "title": {"romaji": "Blue Lock 2nd Season", "english": None},
                    "coverImage": None,
                    "episodes": None,
                    "averageScore": None,
                    "popularity": 90000,
                    "genres": None,
                    "nextAiringEpisode": {"airingAt": JUNE_2_2024, "episode": 5},
                },
            ]
        }
    }
}

AIRING_SCHEDULE_RESPONSE: dict[str, Any] = {
    "data": {
        "Page": {
            "airingSchedules": [
                {
                    "id": 1,
                    "mediaId": 166873,
                    "episode": 9,
                    "airingAt": JUNE_1_2024 + 3600,
                    "timeUntilAiring": 3600,
                    "media": {
                        "title": {"romaji": "Kaijuu 8-gou", "english": "Kaiju No. 8"},
                        "coverImage": {"medium": None, "color": None},
                        "episodes": 12,
                        "genres": ["Action"],
                        "averageScore": 78,
                    },
                },
                {
                    "id": 2,
                    "mediaId": 170942,
                    "episode": 5,
                    "airingAt": JUNE_2_2024 + 7200,
                    "timeUntilAiring": 93600,
                    "media": {
                        "title": {"romaji": "Blue Lock 2nd Season", "english": None},
                        "coverImage": None,
                        "episodes": None,
                        "genres": ["Sports"],
                        "averageScore": None,
                    },
                },
                {
                    "id": 3,
                    "mediaId": 158028,
                    "episode": 3,
                    "airingAt": JUNE_1_2024 + 80000,
                    "timeUntilAiring": 80000,
                    "media": {
                        "title": {"romaji": None, "english": None},
                        "coverImage": None,
                        "episodes": 24,
                        "genres": [],
                        "averageScore": 64,
                    },
                },
            ]
        }
    }
}

TRENDING_RESPONSE: dict[str, Any] = {
    "data": {
        "Page": {
            "media": [
                {
                    "id": 166873,
                    "status": "RELEASING",
                    "title": {"romaji": "Kaijuu 8-gou", "english": "Kaiju No. 8"},
                    "coverImage": {"large": "https://s4.anilist.co/large/kaiju.jpg", "color": "#e4a143"},
                    "description": "Kafka Hibino works in monster disposal.",
                    "averageScore": 78,
                    "popularity": 250000,
                    "genres": ["Action", "Sci-Fi"],
                    "episodes": 12,
                    "nextAiringEpisode": {
                        "airingAt": JUNE_1_2024 + 3600,
                        "episode": 9,
                        "timeUntilAiring": 3600,
                    },
                }
            ]
        }
    }
}

GRAPHQL_ERROR_RESPONSE: dict[str, Any] = {
    "errors": [{"message": "Variable \"$season\" of required type \"MediaSeason!\" was not provided.", "status": 400}],
    "data": None,
}

EMPTY_PAGE_RESPONSE: dict[str, Any] = {"data": {"Page": {"media": [], "airingSchedules": []}}}
