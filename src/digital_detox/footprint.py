"""
Daily footprint summary for a habit profile.

Combines the estimator, the equivalence conversions and the profile
classification into one result, with a comparison to global averages.
"""

import logging
from dataclasses import dataclass
from typing import Dict

from .co2_equivalences import Equivalents, convert_co2_to_equivalents
from .estimator import (
    DAYS_PER_YEAR,
    DigitalCarbonEstimator,
    calculate_annual_impact,
    determine_profile_type,
)
from .factors import (
    AVERAGE_CLOUD_STORAGE_GB,
    AVERAGE_EMAILS_PER_DAY,
    AVERAGE_STREAMING_HOURS_PER_DAY,
    REFERENCE_EMAIL_SIZE_KB,
    SCREEN_TIME_G_PER_HOUR,
    ProfileType,
    require_quantity,
)
from .habits import HabitProfile, HabitsLike, as_habit_profile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailyBreakdown:
    """Grams CO2 per day, by activity."""
    emails: float
    streaming: float
    cloud: float
    screen_time: float

    @property
    def total(self) -> float:
        return round(self.emails + self.streaming + self.cloud + self.screen_time, 2)


@dataclass(frozen=True)
class FootprintSummary:
    habits: HabitProfile
    screen_time_hours: float
    daily: DailyBreakdown
    yearly_kg: float
    equivalents: Equivalents
    profile_type: ProfileType
    # percent of the global average, per habit
    comparison_to_average: Dict[str, float]


def summarize_footprint(
    habits: HabitsLike,
    screen_time_hours: float = 6.0,
) -> FootprintSummary:
    """
    Build the daily footprint summary for *habits*.

    Args:
        habits: HabitProfile or mapping of daily habits.
        screen_time_hours: Daily screen time, counted at a flat hourly rate.

    Returns:
        FootprintSummary with a per-activity daily breakdown, the yearly
        total in kg, everyday equivalents of the daily total, the profile
        type and the comparison to global averages.
    """
    profile = as_habit_profile(habits)
    screen_time_hours = require_quantity("screen_time_hours", screen_time_hours)
    estimator = DigitalCarbonEstimator()

    per_email = estimator.email_impact(REFERENCE_EMAIL_SIZE_KB, 1, False)
    daily = DailyBreakdown(
        emails=round(per_email * profile.daily_emails, 2),
        streaming=estimator.streaming_impact(
            profile.daily_streaming_hours, profile.streaming_quality
        ),
        cloud=round(
            estimator.cloud_storage_impact(profile.cloud_storage_gb) / DAYS_PER_YEAR, 2
        ),
        screen_time=round(screen_time_hours * SCREEN_TIME_G_PER_HOUR, 2),
    )

    comparison = {
        "emails": round(profile.daily_emails / AVERAGE_EMAILS_PER_DAY * 100, 1),
        "streaming": round(
            profile.daily_streaming_hours / AVERAGE_STREAMING_HOURS_PER_DAY * 100, 1
        ),
        "cloud": round(profile.cloud_storage_gb / AVERAGE_CLOUD_STORAGE_GB * 100, 1),
    }

    summary = FootprintSummary(
        habits=profile,
        screen_time_hours=screen_time_hours,
        daily=daily,
        yearly_kg=calculate_annual_impact(profile),
        equivalents=convert_co2_to_equivalents(daily.total),
        profile_type=determine_profile_type(profile),
        comparison_to_average=comparison,
    )
    logger.info(
        f"Footprint: {daily.total} g/day, {summary.yearly_kg} kg/year "
        f"({summary.profile_type.value})"
    )
    return summary
