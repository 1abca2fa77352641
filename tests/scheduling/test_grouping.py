"""Tests for grouping airing events by UTC day."""

import pytest

from anime_planner.models import AiringEvent
from anime_planner.scheduling import InvalidArgumentError, group_by_day, utc_day_key
from tests.fixtures.anilist_responses import AIRING_SCHEDULE_RESPONSE, JUNE_1_2024, JUNE_2_2024


def make_event(media_id, airing_at, episode=1):
    return AiringEvent(media_id=media_id, episode=episode, airing_at=airing_at, time_until_airing=0)


def test_utc_day_key():
    assert utc_day_key(JUNE_1_2024) == "2024-06-01"
    assert utc_day_key(JUNE_2_2024 - 1) == "2024-06-01"
    assert utc_day_key(JUNE_2_2024) == "2024-06-02"


def test_buckets_preserve_input_order():
    a = make_event(1, JUNE_1_2024 + 60)
    b = make_event(2, JUNE_2_2024 + 60)
    c = make_event(3, JUNE_1_2024 + 120)

    grouped = group_by_day([a, b, c])

    assert list(grouped) == ["2024-06-01", "2024-06-02"]
    assert grouped["2024-06-01"] == [a, c]
    assert grouped["2024-06-02"] == [b]


def test_keys_follow_first_seen_order_not_chronology():
    late = make_event(1, JUNE_2_2024 + 10)
    early = make_event(2, JUNE_1_2024 + 10)

    grouped = group_by_day([late, early])

    assert list(grouped) == ["2024-06-02", "2024-06-01"]


def test_bucket_does_not_resort_events():
    later = make_event(1, JUNE_1_2024 + 5000)
    earlier = make_event(2, JUNE_1_2024 + 100)

    assert group_by_day([later, earlier])["2024-06-01"] == [later, earlier]


def test_empty_input_returns_empty_mapping():
    assert group_by_day([]) == {}


def test_partition_keeps_every_event_once():
    events = [make_event(i, JUNE_1_2024 + i * 20000) for i in range(1, 30)]
    events.append(events[0])

    grouped = group_by_day(events)

    flattened = [event for bucket in grouped.values() for event in bucket]
    assert len(flattened) == len(events)
    assert sorted(id(event) for event in flattened) == sorted(id(event) for event in events)
    assert all(bucket for bucket in grouped.values())


def test_groups_anilist_payload():
    events = [
        AiringEvent.model_validate(record)
        for record in AIRING_SCHEDULE_RESPONSE["data"]["Page"]["airingSchedules"]
    ]

    grouped = group_by_day(events)

    assert {day: [event.media_id for event in bucket] for day, bucket in grouped.items()} == {
        "2024-06-01": [166873, 158028],
        "2024-06-02": [170942],
    }
    assert grouped["2024-06-01"][1].title == "Untitled"


@pytest.mark.parametrize("events", [None, "events", 3])
def test_non_sequence_rejected(events):
    with pytest.raises(InvalidArgumentError, match="events must be a sequence"):
        group_by_day(events)


def test_non_event_element_rejected():
    with pytest.raises(InvalidArgumentError, match=r"events\[1\]"):
        group_by_day([make_event(1, JUNE_1_2024), {"airingAt": JUNE_1_2024}])


def test_non_positive_timestamp_rejected_by_model():
    with pytest.raises(ValueError):
        AiringEvent(media_id=1, airing_at=0)
