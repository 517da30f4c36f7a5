"""Summaries computed over enriched growth logs for cards and charts."""

import math
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Union
from zoneinfo import ZoneInfo

import pandas as pd

from src.core.configs import settings
from src.domain.growth_log import calculate_age_parts, get_life_stage, local_now
from src.models.livestock import LivestockOut
from src.models.weight_log import (
    AgeParts,
    DashboardStats,
    DataLogStats,
    EnrichedLogEntry,
    GlobalStats,
    MonthlyPoint,
    TrendStatus,
)

STUCK_OR_LOSS = (TrendStatus.stable, TrendStatus.loss)


def _local(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(ZoneInfo(settings.timezone))


def _month_key(value: datetime) -> str:
    return _local(value).strftime("%Y-%m")


def _valid_weights(entries: Iterable[EnrichedLogEntry]) -> List[float]:
    return [e.weight for e in entries if e.weight is not None and not math.isnan(e.weight)]


def data_log_stats(
    entries: Sequence[EnrichedLogEntry], now: Optional[datetime] = None
) -> DataLogStats:
    """
    Card figures for the data-log page.

    ``now`` is read from the wall clock on each call and is independent of
    the reference instant used while enriching the logs.
    """
    weights = _valid_weights(entries)
    current = _local(now) if now is not None else local_now()

    logs_this_month = 0
    for entry in entries:
        recorded = _local(entry.recorded_at)
        if recorded.year == current.year and recorded.month == current.month:
            logs_this_month += 1

    return DataLogStats(
        total_logs=len(entries),
        highest_weight=max(weights) if weights else None,
        stuck_loss_count=sum(1 for e in entries if e.trend_status in STUCK_OR_LOSS),
        logs_this_month=logs_this_month,
    )


def latest_per_animal(
    entries: Iterable[EnrichedLogEntry],
    livestock: Optional[Sequence[LivestockOut]] = None,
    now: Optional[datetime] = None,
) -> List[EnrichedLogEntry]:
    """
    One row per animal holding its most recent reading.

    When ``livestock`` is given every registered animal appears, including
    animals that were never weighed (as placeholder rows with negative ids).
    """
    latest: Dict[str, EnrichedLogEntry] = {}
    for entry in entries:
        existing = latest.get(entry.animal_id)
        if existing is None or entry.recorded_at > existing.recorded_at:
            latest[entry.animal_id] = entry

    if livestock is None:
        result = list(latest.values())
    else:
        reference = now if now is not None else local_now()
        placeholder_id = -1
        result = []
        for animal in livestock:
            existing = latest.get(animal.rfid)
            if existing is not None:
                result.append(existing)
                continue

            age = calculate_age_parts(animal.dob, reference)
            result.append(
                EnrichedLogEntry(
                    id=placeholder_id,
                    animal_id=animal.rfid,
                    weight=None,
                    recorded_at=animal.created_at or reference,
                    name=animal.name,
                    breed=animal.breed,
                    dob=animal.dob.isoformat() if animal.dob else None,
                    sex=animal.sex,
                    species=animal.species,
                    photo_url=animal.photo_url,
                    vaccines=animal.vaccines,
                    is_public=animal.is_public,
                    owner_email=animal.owner_email,
                    trend_status=TrendStatus.stable,
                    delta=None,
                    age=age or AgeParts(),
                    life_stage=get_life_stage(age),
                )
            )
            placeholder_id -= 1

    result.sort(key=lambda e: e.name or e.animal_id)
    return result


def global_stats(
    entries: Sequence[EnrichedLogEntry], latest: Sequence[EnrichedLogEntry]
) -> GlobalStats:
    weights = _valid_weights(entries)
    return GlobalStats(
        total_shared_livestock=len(latest),
        global_avg_weight=sum(weights) / len(weights) if weights else None,
        highest_recorded_weight=max(weights) if weights else None,
        total_logs=len(entries),
    )


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def monthly_series(
    livestock_created: Sequence[datetime],
    entries: Sequence[EnrichedLogEntry],
    max_months: Union[int, str] = 12,
) -> List[MonthlyPoint]:
    """
    Month-by-month herd metrics from the first registration to the last reading.

    Args:
        livestock_created: Registration timestamps of the owner's livestock
        entries: Enriched logs of that livestock (any order)
        max_months: Trailing number of months to keep, or "all"

    Returns:
        list[MonthlyPoint]: one point per calendar month, oldest first
    """
    if not livestock_created or not entries:
        return []

    livestock_keys = [_month_key(created) for created in livestock_created]
    first_key = min(livestock_keys)

    # Latest reading per animal within each month
    latest_by_month: Dict[str, Dict[str, EnrichedLogEntry]] = {}
    for entry in entries:
        bucket = latest_by_month.setdefault(_month_key(entry.recorded_at), {})
        existing = bucket.get(entry.animal_id)
        if existing is None or entry.recorded_at > existing.recorded_at:
            bucket[entry.animal_id] = entry

    last_key = _month_key(max(e.recorded_at for e in entries))

    periods = pd.period_range(start=first_key, end=last_key, freq="M")
    if max_months != "all":
        periods = periods[max(0, len(periods) - int(max_months)) :]

    points: List[MonthlyPoint] = []
    for period in periods:
        month_key = period.strftime("%Y-%m")
        herd_size = sum(1 for key in livestock_keys if key <= month_key)

        latest = list(latest_by_month.get(month_key, {}).values())
        weights = _valid_weights(latest)
        stuck_loss = sum(1 for e in latest if e.trend_status in STUCK_OR_LOSS)

        points.append(
            MonthlyPoint(
                month_key=month_key,
                label=period.strftime("%b %Y"),
                total_livestock=herd_size,
                avg_weight=sum(weights) / len(weights) if weights else None,
                stuck_loss_count=stuck_loss,
                stuck_loss_pct=(stuck_loss / herd_size) * 100 if herd_size else 0.0,
            )
        )

    # Months without readings carry the last known average forward
    last_avg: Optional[float] = None
    for point in points:
        has_logs = point.month_key in latest_by_month
        if has_logs and point.avg_weight is not None:
            last_avg = point.avg_weight
        elif not has_logs and last_avg is not None:
            point.avg_weight = last_avg

    previous: Optional[MonthlyPoint] = None
    for point in points:
        has_logs = point.month_key in latest_by_month

        if previous is not None and previous.total_livestock > 0:
            point.total_livestock_pct = (
                (point.total_livestock - previous.total_livestock)
                / previous.total_livestock
                * 100
            )

        if (
            has_logs
            and previous is not None
            and point.avg_weight is not None
            and previous.avg_weight
        ):
            point.avg_weight_pct = (
                (point.avg_weight - previous.avg_weight) / previous.avg_weight * 100
            )

        growth_down = -point.total_livestock_pct if point.total_livestock_pct < 0 else 0.0
        weight_down = -point.avg_weight_pct if point.avg_weight_pct < 0 else 0.0

        risk = (
            0.4 * _clamp01(growth_down / 20)
            + 0.3 * _clamp01(weight_down / 10)
            + 0.3 * _clamp01(point.stuck_loss_pct / 40)
        )
        point.health_score = max(0.0, 100 * (1 - risk))
        point.health_score_delta = (
            point.health_score - previous.health_score if previous is not None else 0.0
        )
        previous = point

    return points


def dashboard_stats(series: Sequence[MonthlyPoint]) -> DashboardStats:
    """Compare the latest month of ``series`` with the month before it."""
    if not series:
        return DashboardStats()

    current = series[-1]
    previous = series[-2] if len(series) >= 2 else None

    avg_weight_diff = None
    if previous is not None and current.avg_weight is not None and previous.avg_weight is not None:
        avg_weight_diff = current.avg_weight - previous.avg_weight

    return DashboardStats(
        total_livestock=current.total_livestock,
        total_livestock_diff=(
            current.total_livestock - previous.total_livestock if previous else 0
        ),
        total_livestock_pct=current.total_livestock_pct if previous else None,
        avg_weight=current.avg_weight,
        avg_weight_diff=avg_weight_diff,
        avg_weight_pct=current.avg_weight_pct if previous else None,
        stuck_loss_count=current.stuck_loss_count,
        stuck_loss_diff=(
            current.stuck_loss_count - previous.stuck_loss_count if previous else 0
        ),
        stuck_loss_pct=current.stuck_loss_pct if current.total_livestock > 0 else None,
        health_score_current=current.health_score,
        health_score_prev=previous.health_score if previous else None,
    )
