"""
Habit profiles and the input-parsing boundary.

Raw input (JSON-like mappings, onboarding answers) is turned into a
validated HabitProfile here, so the estimation core only ever sees
checked quantities and real enum members.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Tuple, Union

from .errors import InvalidArgumentError
from .factors import StreamingQuality, coerce_category, require_quantity

logger = logging.getLogger(__name__)

# (attribute, accepted keys)
_FIELD_KEYS = (
    ("daily_emails", ("daily_emails", "dailyEmails")),
    ("cloud_storage_gb", ("cloud_storage_gb", "cloudStorageGB")),
    ("daily_streaming_hours", ("daily_streaming_hours", "dailyStreamingHours")),
)
_QUALITY_KEYS = ("streaming_quality", "streamingQuality")

# Onboarding question id -> (attribute, default when unanswered)
_ONBOARDING_DEFAULTS = {
    "daily-emails": ("daily_emails", 50),
    "cloud-storage": ("cloud_storage_gb", 15),
    "streaming-hours": ("daily_streaming_hours", 2),
}


@dataclass(frozen=True)
class HabitProfile:
    """Daily digital habits of one user."""
    daily_emails: float
    cloud_storage_gb: float
    daily_streaming_hours: float
    streaming_quality: StreamingQuality = StreamingQuality.HD

    def __post_init__(self):
        # frozen: assign through object.__setattr__
        object.__setattr__(
            self, "daily_emails", require_quantity("daily_emails", self.daily_emails)
        )
        object.__setattr__(
            self, "cloud_storage_gb",
            require_quantity("cloud_storage_gb", self.cloud_storage_gb),
        )
        object.__setattr__(
            self, "daily_streaming_hours",
            require_quantity("daily_streaming_hours", self.daily_streaming_hours),
        )
        object.__setattr__(
            self, "streaming_quality",
            coerce_category(StreamingQuality, self.streaming_quality),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "HabitProfile":
        """
        Build a profile from a mapping with snake_case or camelCase keys.

        ``streaming_quality`` is optional and defaults to HD.
        """
        values = {}
        for attr, keys in _FIELD_KEYS:
            key = next((k for k in keys if k in data), None)
            if key is None:
                raise InvalidArgumentError(
                    f"Missing habit field '{attr}' (accepted keys: {', '.join(keys)})"
                )
            values[attr] = data[key]

        quality_key = next((k for k in _QUALITY_KEYS if k in data), None)
        if quality_key is not None:
            values["streaming_quality"] = data[quality_key]

        return cls(**values)


HabitsLike = Union[HabitProfile, Mapping[str, Any]]


def as_habit_profile(habits: HabitsLike) -> HabitProfile:
    """Return *habits* as a HabitProfile, parsing mappings."""
    if isinstance(habits, HabitProfile):
        return habits
    if isinstance(habits, Mapping):
        return HabitProfile.from_mapping(habits)
    raise InvalidArgumentError(
        f"Expected a HabitProfile or a mapping, got {type(habits).__name__}"
    )


def habits_from_onboarding(
    answers: Iterable[Tuple[str, Any]],
    streaming_quality: StreamingQuality = StreamingQuality.HD,
) -> HabitProfile:
    """
    Build a profile from onboarding ``(question_id, answer)`` pairs.

    Unanswered (or zero) numeric questions fall back to typical values:
    50 emails/day, 15 GB of cloud storage and 2 hours of streaming.
    Non-numeric questions are ignored.
    """
    values = {attr: default for attr, default in _ONBOARDING_DEFAULTS.values()}
    for question_id, answer in answers:
        if question_id not in _ONBOARDING_DEFAULTS:
            continue
        attr, default = _ONBOARDING_DEFAULTS[question_id]
        if not answer:
            logger.debug(f"No answer for '{question_id}', using {default}")
            continue
        values[attr] = answer

    return HabitProfile(streaming_quality=streaming_quality, **values)
