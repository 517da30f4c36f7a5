"""
Growth log enrichment.

Raw weight readings are grouped per animal, walked in chronological order and
annotated with the weight trend against the previous reading of the same
animal, the animal's age and its life stage.
"""

import calendar
import re
from datetime import date, datetime
from typing import Iterable, List, Optional, Tuple, Union
from zoneinfo import ZoneInfo

from src.core.configs import settings
from src.models.weight_log import (
    AgeParts,
    EnrichedLogEntry,
    LifeStage,
    RawWeightReading,
    TrendStatus,
)

_DOB_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")

INFANT_MAX_MONTHS = 6
JUVENILE_MAX_MONTHS = 18


def local_now() -> datetime:
    """Current wall-clock time in the configured farm timezone."""
    return datetime.now(ZoneInfo(settings.timezone))


def parse_dob(dob: Union[date, str, None]) -> Optional[date]:
    """
    Parse a date of birth given as a date or a "YYYY-MM-DD" string.

    Anything else, including impossible calendar dates, counts as absent.
    """
    if dob is None:
        return None
    if isinstance(dob, datetime):
        return dob.date()
    if isinstance(dob, date):
        return dob

    match = _DOB_PATTERN.match(dob.strip())
    if not match:
        return None
    try:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None


def calculate_age_parts(
    dob: Union[date, str, None], ref: Optional[Union[date, datetime]] = None
) -> Optional[AgeParts]:
    """
    Calendar age between ``dob`` and ``ref`` as years, months and days.

    A negative day count borrows the length of the month preceding the
    reference month; a negative month count borrows a year. Birth dates
    after ``ref`` are not clamped and yield negative years.
    """
    start = parse_dob(dob)
    if start is None:
        return None

    end = ref if ref is not None else local_now()

    years = end.year - start.year
    months = end.month - start.month
    days = end.day - start.day

    if days < 0:
        months -= 1
        prev_year, prev_month = (
            (end.year - 1, 12) if end.month == 1 else (end.year, end.month - 1)
        )
        days += calendar.monthrange(prev_year, prev_month)[1]

    if months < 0:
        years -= 1
        months += 12

    return AgeParts(years=years, months=months, days=days)


def get_life_stage(age: Optional[AgeParts]) -> Optional[LifeStage]:
    if age is None:
        return None

    total_months = age.years * 12 + age.months
    if total_months <= INFANT_MAX_MONTHS:
        return LifeStage.infant
    if total_months <= JUVENILE_MAX_MONTHS:
        return LifeStage.juvenile
    return LifeStage.adult


def classify_trend(
    previous: Optional[float], current: Optional[float]
) -> Tuple[TrendStatus, Optional[float]]:
    """Trend and delta of ``current`` against ``previous``; stable when either is missing."""
    if previous is None or current is None:
        return TrendStatus.stable, None

    delta = current - previous
    if current > previous:
        return TrendStatus.gain, delta
    if current < previous:
        return TrendStatus.loss, delta
    return TrendStatus.stable, delta


def attach_status_and_age(
    readings: Iterable[Union[RawWeightReading, dict]],
    now: Optional[datetime] = None,
) -> List[EnrichedLogEntry]:
    """
    Enrich raw readings with trend, delta, age and life stage.

    Args:
        readings: Readings in any order. Dicts are validated first, so a
            reading whose timestamp cannot be parsed raises ValidationError.
        now: Reference instant for every age in this call (defaults to the
            current farm-local time, captured once).

    Returns:
        list[EnrichedLogEntry]: ordered by animal id, then recorded_at ascending
    """
    parsed = [
        r if isinstance(r, RawWeightReading) else RawWeightReading.model_validate(r)
        for r in readings
    ]
    ordered = sorted(parsed, key=lambda r: (r.animal_id, r.recorded_at))

    reference = now if now is not None else local_now()
    last_weight_by_animal: dict[str, Optional[float]] = {}
    entries: List[EnrichedLogEntry] = []

    for reading in ordered:
        previous = last_weight_by_animal.get(reading.animal_id)
        current = reading.weight

        trend, delta = classify_trend(previous, current)

        animal = reading.animal
        dob = animal.dob if animal else None
        age = calculate_age_parts(dob, reference)

        entries.append(
            EnrichedLogEntry(
                id=reading.id,
                animal_id=reading.animal_id,
                weight=current,
                recorded_at=reading.recorded_at,
                device_serial=reading.device_serial,
                name=animal.name if animal else None,
                breed=animal.breed if animal else None,
                dob=dob.isoformat() if isinstance(dob, date) else dob,
                sex=animal.sex if animal else None,
                species=animal.species if animal else None,
                photo_url=animal.photo_url if animal else None,
                vaccines=(animal.vaccines or []) if animal else [],
                is_public=bool(animal.is_public) if animal else False,
                owner_email=animal.owner_email if animal else None,
                trend_status=trend,
                delta=delta,
                age=age or AgeParts(),
                life_stage=get_life_stage(age),
            )
        )

        # A missing weight breaks the chain: the next reading has no baseline
        last_weight_by_animal[reading.animal_id] = current

    return entries


def newest_first(entries: Iterable[EnrichedLogEntry]) -> List[EnrichedLogEntry]:
    return sorted(entries, key=lambda e: e.recorded_at, reverse=True)
