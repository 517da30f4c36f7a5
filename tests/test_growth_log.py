"""Unit tests for growth log enrichment."""

from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from src.domain.growth_log import (
    attach_status_and_age,
    calculate_age_parts,
    classify_trend,
    get_life_stage,
    newest_first,
    parse_dob,
)
from src.models.weight_log import AgeParts, LifeStage, TrendStatus

NOW = datetime(2024, 7, 15, 10, 30, tzinfo=timezone.utc)


def _reading(reading_id, animal_id, weight, at, dob=None):
    return {
        "id": reading_id,
        "animal_id": animal_id,
        "weight": weight,
        "recorded_at": at,
        "animal": {"name": f"Animal {animal_id}", "dob": dob},
    }


def test_single_animal_chain_resets_after_missing_weight() -> None:
    readings = [
        _reading(1, "A", 10, "2024-01-01T00:00:00Z"),
        _reading(2, "A", 12, "2024-02-01T00:00:00Z"),
        _reading(3, "A", None, "2024-03-01T00:00:00Z"),
        _reading(4, "A", 9, "2024-04-01T00:00:00Z"),
    ]

    entries = attach_status_and_age(readings, now=NOW)

    assert [e.id for e in entries] == [1, 2, 3, 4]
    assert [(e.trend_status, e.delta) for e in entries] == [
        (TrendStatus.stable, None),
        (TrendStatus.gain, 2),
        (TrendStatus.stable, None),
        (TrendStatus.stable, None),
    ]


def test_interleaved_animals_are_grouped_and_ordered() -> None:
    readings = [
        _reading(1, "B", 50, "2024-03-01T00:00:00Z"),
        _reading(2, "A", 20, "2024-02-01T00:00:00Z"),
        _reading(3, "B", 45, "2024-01-01T00:00:00Z"),
        _reading(4, "A", 25, "2024-01-01T00:00:00Z"),
        _reading(5, "B", 45, "2024-02-01T00:00:00Z"),
    ]

    entries = attach_status_and_age(readings, now=NOW)

    assert [(e.animal_id, e.id) for e in entries] == [
        ("A", 4),
        ("A", 2),
        ("B", 3),
        ("B", 5),
        ("B", 1),
    ]
    by_id = {e.id: e for e in entries}
    # First reading per animal has no baseline
    assert by_id[4].trend_status == TrendStatus.stable and by_id[4].delta is None
    assert by_id[3].trend_status == TrendStatus.stable and by_id[3].delta is None
    assert by_id[2].trend_status == TrendStatus.loss and by_id[2].delta == -5
    assert by_id[5].trend_status == TrendStatus.stable and by_id[5].delta == 0
    assert by_id[1].trend_status == TrendStatus.gain and by_id[1].delta == 5


def test_ordering_compares_instants_not_strings() -> None:
    readings = [
        _reading(1, "A", 30, "2024-01-01T08:00:00+07:00"),  # 01:00 UTC
        _reading(2, "A", 31, "2024-01-01T02:00:00+00:00"),
        _reading(3, "A", 29, "2024-01-01T00:30:00Z"),
    ]

    entries = attach_status_and_age(readings, now=NOW)

    assert [e.id for e in entries] == [3, 1, 2]
    assert all(
        earlier.recorded_at <= later.recorded_at
        for earlier, later in zip(entries, entries[1:])
    )


def test_enriched_entry_flattens_animal_snapshot() -> None:
    readings = [
        {
            "id": 7,
            "animal_id": "RFID-7",
            "weight": 210.5,
            "recorded_at": "2024-05-01T06:00:00Z",
            "device_serial": "SCALE-9",
            "animal": {
                "name": "Melati",
                "breed": "Bali",
                "dob": "2023-01-15",
                "sex": "Female",
                "species": "Cow",
                "photo_url": "https://cdn.example.com/melati.jpg",
                "vaccines": ["Anthrax", "SE"],
                "is_public": True,
            },
        }
    ]

    [entry] = attach_status_and_age(readings, now=NOW)

    assert entry.name == "Melati"
    assert entry.species == "Cow"
    assert entry.dob == "2023-01-15"
    assert entry.vaccines == ["Anthrax", "SE"]
    assert entry.is_public is True
    assert entry.device_serial == "SCALE-9"
    assert entry.age == AgeParts(years=1, months=6, days=0)
    assert entry.life_stage == LifeStage.juvenile


def test_missing_animal_snapshot_gives_zero_age() -> None:
    readings = [{"id": 1, "animal_id": "A", "weight": 5, "recorded_at": "2024-01-01T00:00:00Z"}]

    [entry] = attach_status_and_age(readings, now=NOW)

    assert entry.name is None
    assert entry.age == AgeParts(years=0, months=0, days=0)
    assert entry.life_stage is None


def test_all_entries_share_one_reference_instant() -> None:
    readings = [
        _reading(i, f"A{i}", 10 + i, f"2024-01-0{i}T00:00:00Z", dob="2024-01-15")
        for i in range(1, 6)
    ]

    entries = attach_status_and_age(readings, now=NOW)

    assert [e.age for e in entries] == [AgeParts(years=0, months=6, days=0)] * 5


def test_unparseable_timestamp_fails_loudly() -> None:
    with pytest.raises(ValidationError):
        attach_status_and_age([_reading(1, "A", 10, "not-a-timestamp")], now=NOW)


def test_newest_first_reverses_time_order() -> None:
    entries = attach_status_and_age(
        [
            _reading(1, "A", 10, "2024-01-01T00:00:00Z"),
            _reading(2, "B", 10, "2024-03-01T00:00:00Z"),
            _reading(3, "A", 11, "2024-02-01T00:00:00Z"),
        ],
        now=NOW,
    )

    assert [e.id for e in newest_first(entries)] == [2, 3, 1]


@pytest.mark.parametrize(
    "previous, current, expected",
    [
        (None, 10.0, (TrendStatus.stable, None)),
        (10.0, None, (TrendStatus.stable, None)),
        (10.0, 12.5, (TrendStatus.gain, 2.5)),
        (10.0, 7.5, (TrendStatus.loss, -2.5)),
        (10.0, 10.0, (TrendStatus.stable, 0.0)),
    ],
)
def test_classify_trend(previous, current, expected) -> None:
    assert classify_trend(previous, current) == expected


def test_age_borrows_days_from_previous_month() -> None:
    age = calculate_age_parts("2023-05-20", datetime(2024, 7, 10, tzinfo=timezone.utc))

    # June has 30 days: 10 - 20 + 30
    assert age == AgeParts(years=1, months=1, days=20)


def test_age_borrow_across_short_february() -> None:
    age = calculate_age_parts("2024-01-31", datetime(2024, 3, 1, tzinfo=timezone.utc))

    # February 2024 lends 29 days, one short of the 30-day gap
    assert age == AgeParts(years=0, months=1, days=-1)


def test_age_borrow_in_january_uses_december() -> None:
    age = calculate_age_parts("2022-03-25", date(2024, 1, 5))

    assert age == AgeParts(years=1, months=9, days=11)


def test_future_birth_date_is_not_clamped() -> None:
    age = calculate_age_parts("2025-07-15", NOW)

    assert age == AgeParts(years=-1, months=0, days=0)


@pytest.mark.parametrize("dob", [None, "", "15-01-2024", "2024-02-30", "2024/01/01", "abc"])
def test_unusable_birth_date_is_absent(dob) -> None:
    assert calculate_age_parts(dob, NOW) is None
    assert parse_dob(dob) is None


def test_date_objects_are_accepted() -> None:
    assert calculate_age_parts(date(2024, 1, 15), NOW) == AgeParts(years=0, months=6, days=0)


@pytest.mark.parametrize(
    "dob, expected",
    # Only whole months decide the stage; leftover days never move an animal up
    [
        ("2024-01-15", LifeStage.infant),  # exactly 6 months
        ("2024-01-14", LifeStage.infant),  # 6 months and 1 day: days do not count
        ("2023-12-15", LifeStage.juvenile),  # 7 months
        ("2023-01-15", LifeStage.juvenile),  # exactly 18 months
        ("2023-01-14", LifeStage.juvenile),  # 18 months and 1 day
        ("2022-12-15", LifeStage.adult),  # 19 months
        ("2024-07-15", LifeStage.infant),  # born today
    ],
)
def test_life_stage_boundaries(dob, expected) -> None:
    assert get_life_stage(calculate_age_parts(dob, NOW)) == expected


def test_life_stage_of_missing_age_is_none() -> None:
    assert get_life_stage(None) is None
