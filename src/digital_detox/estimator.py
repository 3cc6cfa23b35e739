"""
DigitalCarbonEstimator — digital carbon footprint estimator.

Converts usage quantities (emails, cloud storage, streaming hours) into
CO2-equivalent grams using fixed emission factors. Each estimator keeps
its own running totals; build one per calculation session rather than
sharing it between unrelated calculations.
"""

import math
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .factors import (
    CLOUD_IMPACT_KG_PER_GB_YEAR,
    EMAIL_IMPACT_G,
    HIGH_CLOUD_GB,
    HIGH_EMAILS_PER_DAY,
    HIGH_STREAMING_HOURS_PER_DAY,
    REFERENCE_EMAIL_SIZE_KB,
    STREAMING_IMPACT_G_PER_HOUR,
    EmailKind,
    ProfileType,
    SavingAction,
    StorageType,
    StreamingQuality,
    coerce_category,
    require_count,
    require_quantity,
)
from .errors import InvalidArgumentError
from .habits import HabitsLike, as_habit_profile

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365

# Rough sizes used by the savings estimates
FILE_SIZE_GB = 0.01                   # one deleted file ~ 10 MB
_NEWSLETTER_SIZE_KB = 30.0
_NEWSLETTER_EMAILS_PER_YEAR = 4 * 12  # 4 issues a month for a year


def _accumulate(kind: str, total: float, impact: float) -> float:
    """Return ``total + impact``; overflowing inputs raise before any mutation."""
    new_total = total + impact
    if not math.isfinite(new_total):
        raise InvalidArgumentError(
            f"{kind} impact overflows to infinity; inputs are too large"
        )
    return new_total


@dataclass(frozen=True)
class ImpactBreakdown:
    """Snapshot of the running totals, in grams CO2 (2 decimals)."""
    email: float
    cloud: float
    streaming: float
    total: float


class DigitalCarbonEstimator:
    """
    Accumulating estimator for email, cloud storage and streaming impact.

    Every itemized call returns its own rounded impact and adds the
    unrounded value to the matching running total. Totals are only
    rounded when read.

    Usage::

        estimator = DigitalCarbonEstimator()
        estimator.email_impact(size_kb=120, recipients=3)
        estimator.streaming_impact(2, StreamingQuality.UHD_4K)
        print(estimator.get_detailed_impact())
    """

    def __init__(self):
        self._email_total = 0.0
        self._cloud_total = 0.0
        self._streaming_total = 0.0

    # ── Itemized impacts ──────────────────────────────────────────────

    def email_impact(
        self,
        size_kb: float = 0,
        recipients: int = 1,
        has_attachment: bool = False,
    ) -> float:
        """
        Impact of sending one email.

        Args:
            size_kb: Email size in KB. 0 means "typical size" (no scaling).
                Larger-than-typical emails scale linearly; smaller ones
                never go below the base rate.
            recipients: Number of recipients (>= 1).
            has_attachment: Whether the email carries an attachment.

        Returns:
            Grams CO2, rounded to 2 decimals.
        """
        size_kb = require_quantity("size_kb", size_kb)
        recipients = require_count("recipients", recipients, minimum=1)

        kind = EmailKind.WITH_ATTACHMENT if has_attachment else EmailKind.SIMPLE
        impact = EMAIL_IMPACT_G[kind]
        if size_kb > 0:
            impact *= max(1.0, size_kb / REFERENCE_EMAIL_SIZE_KB)
        impact *= recipients

        self._email_total = _accumulate("email", self._email_total, impact)
        return round(impact, 2)

    def cloud_storage_impact(
        self,
        gigabytes: float,
        storage_type: StorageType = StorageType.STANDARD,
    ) -> float:
        """Yearly impact of keeping *gigabytes* in cloud storage (grams)."""
        gigabytes = require_quantity("gigabytes", gigabytes)
        storage_type = coerce_category(StorageType, storage_type)

        # kg -> g
        impact = gigabytes * CLOUD_IMPACT_KG_PER_GB_YEAR[storage_type] * 1000

        self._cloud_total = _accumulate("cloud", self._cloud_total, impact)
        return round(impact, 2)

    def streaming_impact(
        self,
        hours: float,
        quality: StreamingQuality = StreamingQuality.HD,
    ) -> float:
        """Impact of *hours* of video streaming at *quality* (grams)."""
        hours = require_quantity("hours", hours)
        quality = coerce_category(StreamingQuality, quality)

        impact = hours * STREAMING_IMPACT_G_PER_HOUR[quality]

        self._streaming_total = _accumulate(
            "streaming", self._streaming_total, impact
        )
        return round(impact, 2)

    # ── Aggregates ────────────────────────────────────────────────────

    def calculate_total(self) -> float:
        """Sum of all running totals in grams, rounded once."""
        return round(
            self._email_total + self._cloud_total + self._streaming_total, 2
        )

    def get_detailed_impact(self) -> ImpactBreakdown:
        return ImpactBreakdown(
            email=round(self._email_total, 2),
            cloud=round(self._cloud_total, 2),
            streaming=round(self._streaming_total, 2),
            total=self.calculate_total(),
        )

    def reset(self) -> None:
        """Zero all running totals."""
        self._email_total = 0.0
        self._cloud_total = 0.0
        self._streaming_total = 0.0


# ── Derived calculations ──────────────────────────────────────────────

def calculate_mailbox_impact(
    email_count: float,
    average_size_kb: float = 25,
    attachment_ratio: float = 0.2,
) -> float:
    """
    Impact of a mailbox of *email_count* emails, in grams.

    A share of ``attachment_ratio`` (rounded down) carries an attachment
    and is twice the average size; the rest are plain emails of average
    size. Each email is simulated individually, so this is linear in
    *email_count*.

    A fractional count is turned into whole emails: the attachment share
    is rounded down and the remaining plain emails are rounded up, so
    2.5 emails count as 3.
    """
    email_count = require_quantity("email_count", email_count)
    average_size_kb = require_quantity("average_size_kb", average_size_kb)
    attachment_ratio = require_quantity("attachment_ratio", attachment_ratio)
    if attachment_ratio > 1:
        raise InvalidArgumentError(
            f"attachment_ratio must be within [0, 1], got {attachment_ratio}"
        )

    estimator = DigitalCarbonEstimator()
    with_attachments = math.floor(email_count * attachment_ratio)
    without_attachments = math.ceil(email_count - with_attachments)

    for _ in range(with_attachments):
        estimator.email_impact(average_size_kb * 2, 1, True)
    for _ in range(without_attachments):
        estimator.email_impact(average_size_kb, 1, False)

    logger.debug(
        f"Mailbox of {email_count:g} emails "
        f"({with_attachments} with attachments): "
        f"{estimator.get_detailed_impact().email} g"
    )
    return estimator.get_detailed_impact().email


def calculate_annual_impact(profile: HabitsLike) -> float:
    """
    Yearly footprint of a habit profile, in kilograms CO2.

    Emails and streaming hours are daily figures and get multiplied by
    365; cloud storage is already a yearly rate (standard tier).
    """
    profile = as_habit_profile(profile)
    estimator = DigitalCarbonEstimator()

    email_g = calculate_mailbox_impact(profile.daily_emails * DAYS_PER_YEAR)
    cloud_g = estimator.cloud_storage_impact(profile.cloud_storage_gb)
    streaming_g = estimator.streaming_impact(
        profile.daily_streaming_hours * DAYS_PER_YEAR,
        profile.streaming_quality,
    )

    annual_kg = round((email_g + cloud_g + streaming_g) / 1000, 2)
    logger.debug(
        f"Annual impact: email={email_g} g, cloud={cloud_g} g, "
        f"streaming={streaming_g} g -> {annual_kg} kg"
    )
    return annual_kg


def calculate_co2_saved(
    action: SavingAction,
    quantity: float,
    metadata: Optional[Mapping[str, Any]] = None,
) -> float:
    """
    CO2 avoided by an eco-action, in grams.

    Args:
        action: What the user did.
        quantity: Action-specific amount. Number of files for
            ``file_deleted``, hours for ``streaming_reduced``. Ignored by
            ``email_deleted`` and ``newsletter_unsubscribed``, which
            estimate a single email / a single subscription.
        metadata: Optional ``size`` (KB) for ``email_deleted`` and
            ``quality`` for ``streaming_reduced``.

    Raises:
        UnknownCategoryError: if *action* (or a metadata quality) is not
            recognized.
    """
    action = coerce_category(SavingAction, action)
    quantity = require_quantity("quantity", quantity)
    metadata = metadata or {}
    estimator = DigitalCarbonEstimator()

    if action is SavingAction.EMAIL_DELETED:
        size_kb = metadata.get("size") or REFERENCE_EMAIL_SIZE_KB
        return estimator.email_impact(size_kb, 1, False)

    if action is SavingAction.FILE_DELETED:
        return estimator.cloud_storage_impact(quantity * FILE_SIZE_GB)

    if action is SavingAction.STREAMING_REDUCED:
        quality = metadata.get("quality") or StreamingQuality.HD
        return estimator.streaming_impact(quantity, quality)

    # SavingAction.NEWSLETTER_UNSUBSCRIBED
    per_issue = estimator.email_impact(_NEWSLETTER_SIZE_KB, 1, False)
    return round(per_issue * _NEWSLETTER_EMAILS_PER_YEAR, 2)


def determine_profile_type(habits: HabitsLike) -> ProfileType:
    """
    Classify habits into a profile archetype.

    Each habit is compared to a fixed "high usage" threshold. Streaming
    is checked first, then email, then cloud storage; nobody above any
    threshold is an Eco-Warrior.
    """
    profile = as_habit_profile(habits)

    email_score = int(profile.daily_emails >= HIGH_EMAILS_PER_DAY)
    cloud_score = int(profile.cloud_storage_gb >= HIGH_CLOUD_GB)
    streaming_score = int(
        profile.daily_streaming_hours >= HIGH_STREAMING_HOURS_PER_DAY
    )

    if streaming_score and streaming_score >= max(email_score, cloud_score):
        return ProfileType.STREAMER
    if email_score and email_score >= max(cloud_score, streaming_score):
        return ProfileType.EMAIL_COLLECTOR
    if cloud_score and cloud_score >= max(email_score, streaming_score):
        return ProfileType.CLOUD_ADDICT
    if email_score + cloud_score + streaming_score == 0:
        return ProfileType.ECO_WARRIOR
    return ProfileType.BALANCED
