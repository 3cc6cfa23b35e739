"""
Emission factors, equivalence divisors and habit thresholds.

All tables are read-only mappings keyed by closed enums. Values are
order-of-magnitude figures meant for awareness, not carbon accounting.
"""

import math
from enum import Enum
from types import MappingProxyType
from typing import Type, TypeVar

from .errors import InvalidArgumentError, UnknownCategoryError

E = TypeVar("E", bound=Enum)


class StreamingQuality(str, Enum):
    SD = "SD"
    HD = "HD"
    UHD_4K = "4K"


class StorageType(str, Enum):
    STANDARD = "standard"
    FREQUENT = "frequent"
    ARCHIVE = "archive"


class EmailKind(str, Enum):
    SIMPLE = "simple"
    WITH_ATTACHMENT = "with_attachment"
    NEWSLETTER = "newsletter"
    PROMOTIONAL = "promotional"
    SPAM = "spam"


class SavingAction(str, Enum):
    """Eco-actions whose CO2 savings can be estimated."""
    EMAIL_DELETED = "email_deleted"
    FILE_DELETED = "file_deleted"
    STREAMING_REDUCED = "streaming_reduced"
    NEWSLETTER_UNSUBSCRIBED = "newsletter_unsubscribed"


class ProfileType(str, Enum):
    STREAMER = "Streameur Intense"
    EMAIL_COLLECTOR = "Email Collector"
    CLOUD_ADDICT = "Cloud Addict"
    BALANCED = "Numérique Équilibré"
    ECO_WARRIOR = "Eco-Warrior"


# ── Emission factors ─────────────────────────────────────────────────

# grams CO2 per email
EMAIL_IMPACT_G = MappingProxyType({
    EmailKind.SIMPLE: 4.0,
    EmailKind.WITH_ATTACHMENT: 50.0,
    EmailKind.NEWSLETTER: 10.0,
    EmailKind.PROMOTIONAL: 15.0,
    EmailKind.SPAM: 0.3,
})

# kg CO2 per GB per year
CLOUD_IMPACT_KG_PER_GB_YEAR = MappingProxyType({
    StorageType.STANDARD: 0.5,
    StorageType.FREQUENT: 0.8,
    StorageType.ARCHIVE: 0.2,
})

# grams CO2 per hour
STREAMING_IMPACT_G_PER_HOUR = MappingProxyType({
    StreamingQuality.SD: 4.6,
    StreamingQuality.HD: 36.0,
    StreamingQuality.UHD_4K: 97.0,
})

REFERENCE_EMAIL_SIZE_KB = 25.0
SCREEN_TIME_G_PER_HOUR = 8.0

# ── Equivalence divisors (grams CO2 per unit) ────────────────────────

G_CO2_PER_CAR_KM = 120.0
G_CO2_PER_TREE_YEAR = 22_000.0
G_CO2_PER_PHONE_CHARGE = 8.0
G_CO2_PER_COFFEE_CUP = 37.0
G_CO2_PER_LED_HOUR = 4.5

# ── Profile thresholds ───────────────────────────────────────────────

HIGH_EMAILS_PER_DAY = 100
HIGH_CLOUD_GB = 50
HIGH_STREAMING_HOURS_PER_DAY = 4

# ── Global averages ──────────────────────────────────────────────────

AVERAGE_EMAILS_PER_DAY = 121
AVERAGE_CLOUD_STORAGE_GB = 15
AVERAGE_STREAMING_HOURS_PER_DAY = 3.2

PROFILE_DETAILS = MappingProxyType({
    ProfileType.STREAMER: {
        "icon": "📺",
        "description": "Spends a lot of time watching online video",
    },
    ProfileType.EMAIL_COLLECTOR: {
        "icon": "📧",
        "description": "Mailbox overflowing with unread email",
    },
    ProfileType.CLOUD_ADDICT: {
        "icon": "☁️",
        "description": "Stores everything in the cloud and never sorts it",
    },
    ProfileType.BALANCED: {
        "icon": "⚖️",
        "description": "Already has good digital habits",
    },
    ProfileType.ECO_WARRIOR: {
        "icon": "🌍",
        "description": "Already very aware of their digital footprint",
    },
})


# ── Input checks ─────────────────────────────────────────────────────

def coerce_category(enum_cls: Type[E], value) -> E:
    """Return the *enum_cls* member for *value* (member or raw value)."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(repr(m.value) for m in enum_cls)
        raise UnknownCategoryError(
            f"Unknown {enum_cls.__name__} {value!r} (expected one of {allowed})"
        ) from None


def require_quantity(name: str, value) -> float:
    """Validate a finite, non-negative number and return it as float."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidArgumentError(f"{name} must be finite, got {value!r}")
    if value < 0:
        raise InvalidArgumentError(f"{name} must be >= 0, got {value!r}")
    return float(value)


def require_count(name: str, value, minimum: int = 0) -> int:
    """Validate an integer count >= *minimum* (integral floats accepted)."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidArgumentError(f"{name} must be >= {minimum}, got {value!r}")
    return value
