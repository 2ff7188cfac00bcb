"""
Daily forecast aggregation.

Turns the 3-hour interval samples of the forecast endpoint into one
summary per future calendar day. Summaries are derived data: they are
recomputed from freshly fetched samples on every call and never stored.
"""

import math
import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from .conditions import describe_condition
from .models import DailySummary, RawSample

logger = logging.getLogger(__name__)

LOCAL_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_FORECAST_DAYS = 5
NOON_HOUR = 12
MS_TO_KMH = 3.6


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def parse_forecast_samples(payload: Optional[Dict]) -> List[RawSample]:
    """Convert a forecast API response into samples, skipping malformed entries."""
    if not payload:
        return []

    samples = []
    for entry in payload.get("list") or []:
        try:
            samples.append(RawSample.from_dict(entry))
        except ValueError as e:
            logger.warning(f"Skipping forecast entry: {e}")

    logger.debug(f"Parsed {len(samples)} forecast samples")
    return samples


def _pick_representative(day_samples: List[Tuple]) -> RawSample:
    """Return the sample closest to noon; the earliest one wins a tie."""
    best_sample, best_distance = None, None
    for local_dt, sample in day_samples:
        distance = abs(local_dt.hour - NOON_HOUR)
        if best_distance is None or distance < best_distance:
            best_sample, best_distance = sample, distance
    return best_sample


def _summarize_day(day: date, day_samples: List[Tuple]) -> DailySummary:
    temps = [sample.temperature for _, sample in day_samples]
    humidities = [sample.humidity for _, sample in day_samples]
    winds = [sample.wind_speed for _, sample in day_samples]

    representative = _pick_representative(day_samples)
    condition = describe_condition(representative.condition_id)

    return DailySummary(
        date=day,
        day_label=day.strftime("%a"),
        condition_text=representative.condition_text,
        condition_icon=condition.icon,
        high_temp=round_half_up(max(temps)),
        low_temp=round_half_up(min(temps)),
        humidity=round_half_up(sum(humidities) / len(humidities)),
        wind_speed_kmh=round_half_up(sum(winds) / len(winds) * MS_TO_KMH),
    )


def aggregate(
    samples: Optional[Iterable[RawSample]],
    reference: Optional[datetime] = None,
) -> List[DailySummary]:
    """Aggregate interval samples into daily summaries.

    Args:
        samples: Forecast samples in the order the API returned them.
            ``None`` or an empty sequence gives an empty result.
        reference: The moment defining "today". Samples from today and
            earlier days are left out.
            Defaults to the current time.

    Returns:
        At most five summaries for the days following ``reference``,
        sorted by date.
    """
    if not samples:
        return []

    if reference is None:
        reference = datetime.now()
    today = reference.date()

    groups = defaultdict(list)
    for sample in samples:
        try:
            local_dt = datetime.strptime(sample.local_time, LOCAL_TIME_FORMAT)
        except (TypeError, ValueError) as e:
            logger.debug(f"Ignoring sample with unusable local time {sample.local_time!r}: {e}")
            continue

        day = local_dt.date()
        if day <= today:
            continue
        groups[day].append((local_dt, sample))

    days = sorted(groups)[:MAX_FORECAST_DAYS]
    summaries = [_summarize_day(day, groups[day]) for day in days]

    logger.debug(f"Aggregated {len(summaries)} daily summaries")
    return summaries


def weekly_overview(summaries: Optional[List[DailySummary]]) -> Optional[Tuple[int, int, int]]:
    """Average high, low and humidity across daily summaries.

    Returns ``None`` when there are no summaries to average.
    """
    if not summaries:
        return None

    count = len(summaries)
    avg_high = round_half_up(sum(day.high_temp for day in summaries) / count)
    avg_low = round_half_up(sum(day.low_temp for day in summaries) / count)
    avg_humidity = round_half_up(sum(day.humidity for day in summaries) / count)
    return avg_high, avg_low, avg_humidity
