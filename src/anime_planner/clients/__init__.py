from .anilist import AniListClient, AniListError, anilist_client, current_season

__all__ = ["AniListClient", "AniListError", "anilist_client", "current_season"]
