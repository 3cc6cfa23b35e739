"""
Digital Detox — digital carbon footprint estimation.

Estimates the CO₂ impact of emails, cloud storage and video streaming,
converts it into everyday equivalents, and tracks eco-actions through
XP, levels, badges and challenges.
"""

from .errors import InvalidArgumentError, UnknownCategoryError
from .factors import (
    EmailKind,
    ProfileType,
    SavingAction,
    StorageType,
    StreamingQuality,
)
from .habits import HabitProfile, habits_from_onboarding
from .estimator import (
    DigitalCarbonEstimator,
    ImpactBreakdown,
    calculate_annual_impact,
    calculate_co2_saved,
    calculate_mailbox_impact,
    determine_profile_type,
)
from .co2_equivalences import (
    CO2Equivalence,
    Equivalents,
    compute_equivalences,
    convert_co2_to_equivalents,
    format_co2,
)
from .footprint import DailyBreakdown, FootprintSummary, summarize_footprint
from .progression import (
    ActionType,
    NotificationType,
    ProgressTracker,
    level_for_xp,
    random_encouragement,
)
from .report import generate_report

__all__ = [
    "DigitalCarbonEstimator",
    "ImpactBreakdown",
    "HabitProfile",
    "habits_from_onboarding",
    "calculate_annual_impact",
    "calculate_co2_saved",
    "calculate_mailbox_impact",
    "determine_profile_type",
    "convert_co2_to_equivalents",
    "compute_equivalences",
    "format_co2",
    "Equivalents",
    "CO2Equivalence",
    "summarize_footprint",
    "FootprintSummary",
    "DailyBreakdown",
    "ProgressTracker",
    "ActionType",
    "level_for_xp",
    "NotificationType",
    "random_encouragement",
    "generate_report",
    "EmailKind",
    "ProfileType",
    "SavingAction",
    "StorageType",
    "StreamingQuality",
    "InvalidArgumentError",
    "UnknownCategoryError",
]

__version__ = "0.1.0"
