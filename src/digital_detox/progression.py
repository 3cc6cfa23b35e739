"""
Gamified progression: XP, levels, badges, challenges and streaks.

Static tables (levels, badges, challenge templates, eco-tips, XP rewards,
encouragement messages) ship in ``data/progression.json``. ProgressTracker
holds one user's progress and notifications in memory; it has no
persistence of its own.
"""

import json
import logging
import math
import random
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Deque, Dict, List, Mapping, Optional, Tuple

from .errors import InvalidArgumentError, UnknownCategoryError
from .estimator import FILE_SIZE_GB, DigitalCarbonEstimator, calculate_co2_saved
from .factors import SavingAction, coerce_category, require_count, require_quantity

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).parent / "data"
_RECENT_ACTIONS_LIMIT = 50


class ActionType(str, Enum):
    EMAIL_DELETED = "email_deleted"
    NEWSLETTER_UNSUBSCRIBED = "newsletter_unsubscribed"
    FILE_DELETED = "file_deleted"
    CLOUD_CLEANED = "cloud_cleaned"
    TAB_CLOSED = "tab_closed"
    STREAMING_REDUCED = "streaming_reduced"
    CHALLENGE_COMPLETED = "challenge_completed"
    LEVEL_UP = "level_up"


class ChallengeStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


class NotificationType(str, Enum):
    ACHIEVEMENT = "achievement"
    CHALLENGE = "challenge"
    LEVEL_UP = "level_up"
    STREAK = "streak"


# Actions the user performs directly (as opposed to derived events)
_USER_ACTIONS = (
    ActionType.EMAIL_DELETED,
    ActionType.NEWSLETTER_UNSUBSCRIBED,
    ActionType.FILE_DELETED,
    ActionType.CLOUD_CLEANED,
    ActionType.TAB_CLOSED,
    ActionType.STREAMING_REDUCED,
)

# calculate_co2_saved estimates a single email / subscription for these
_PER_UNIT_SAVINGS = (
    ActionType.EMAIL_DELETED,
    ActionType.NEWSLETTER_UNSUBSCRIBED,
)

# Quantities counted in whole items
_COUNTED_ACTIONS = (
    ActionType.EMAIL_DELETED,
    ActionType.NEWSLETTER_UNSUBSCRIBED,
    ActionType.FILE_DELETED,
    ActionType.TAB_CLOSED,
)


# ── Static tables ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class Level:
    id: int
    name: str
    description: str
    min_xp: int
    max_xp: Optional[int]  # None for the last, open-ended level
    icon: str


@dataclass(frozen=True)
class Badge:
    id: str
    name: str
    description: str
    icon: str
    category: str
    max_progress: float


@dataclass(frozen=True)
class ChallengeTemplate:
    id: str
    title: str
    description: str
    type: str
    category: str
    target: float
    xp_reward: int
    estimated_co2_saved: float
    duration: str


@dataclass(frozen=True)
class EcoTip:
    id: str
    title: str
    description: str
    category: str
    impact: str
    difficulty: str
    estimated_co2_saved: float
    icon: str


@lru_cache(maxsize=None)
def _load_json(filename: str) -> Mapping[str, Any]:
    """Load a JSON data file from the data directory."""
    filepath = _DATA_DIR / filename
    with open(filepath, "r", encoding="utf-8") as f:
        return json.load(f)


def _tables() -> Mapping[str, Any]:
    return _load_json("progression.json")


def xp_rewards() -> Dict[str, int]:
    """XP granted per unit of each action kind, plus streak bonuses."""
    return dict(_tables()["xp_rewards"])


def load_levels() -> Tuple[Level, ...]:
    return tuple(Level(**row) for row in _tables()["levels"])


def load_badges() -> Tuple[Badge, ...]:
    return tuple(Badge(**row) for row in _tables()["badges"])


def load_challenge_templates() -> Tuple[ChallengeTemplate, ...]:
    return tuple(ChallengeTemplate(**row) for row in _tables()["challenge_templates"])


def load_eco_tips(category: Optional[str] = None) -> Tuple[EcoTip, ...]:
    """Eco-tips, optionally restricted to one badge category."""
    tips = tuple(EcoTip(**row) for row in _tables()["eco_tips"])
    if category is None:
        return tips
    return tuple(t for t in tips if t.category == category)


def load_encouragement_messages() -> Tuple[str, ...]:
    return tuple(_tables()["encouragement_messages"])


def random_encouragement(rng: Optional[random.Random] = None) -> str:
    """Pick one encouragement message at random."""
    return (rng or random).choice(load_encouragement_messages())


# ── Levels ────────────────────────────────────────────────────────────

def level_for_xp(xp: int) -> Level:
    """Highest level whose XP floor is reached."""
    xp = require_count("xp", xp)
    reached = [lvl for lvl in load_levels() if xp >= lvl.min_xp]
    return reached[-1]


def next_level(level: Level) -> Optional[Level]:
    return next((lvl for lvl in load_levels() if lvl.id == level.id + 1), None)


def level_progress(xp: int) -> float:
    """Fraction (0-1) of the way through the current level's XP band."""
    level = level_for_xp(xp)
    if level.max_xp is None:
        return 1.0
    span = level.max_xp - level.min_xp
    return round((xp - level.min_xp) / span, 4)


# ── Tracker state ─────────────────────────────────────────────────────

@dataclass
class UserStats:
    total_co2_saved: float = 0.0  # grams
    total_xp: int = 0
    current_level: int = 1
    emails_deleted: int = 0
    newsletters_unsubscribed: int = 0
    files_deleted: int = 0
    cloud_freed_gb: float = 0.0
    streaming_hours_reduced: float = 0.0
    tabs_closed: int = 0
    challenges_completed: int = 0
    current_streak: int = 0
    longest_streak: int = 0


@dataclass(frozen=True)
class UserAction:
    id: str
    type: ActionType
    description: str
    xp_gained: int
    co2_saved: float
    timestamp: datetime
    metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass
class Challenge:
    id: str
    template: ChallengeTemplate
    current_progress: float = 0.0
    status: ChallengeStatus = ChallengeStatus.ACTIVE
    created_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    @property
    def target(self) -> float:
        return self.template.target


@dataclass
class BadgeState:
    badge: Badge
    progress: float = 0.0
    earned_at: Optional[datetime] = None

    @property
    def earned(self) -> bool:
        return self.earned_at is not None


@dataclass
class Notification:
    id: str
    type: NotificationType
    title: str
    message: str
    created_at: datetime = field(default_factory=datetime.now)
    is_read: bool = False


def _require_finite(name: str, value: float) -> float:
    if not math.isfinite(value):
        raise InvalidArgumentError(
            f"{name} overflows to infinity; quantity is too large"
        )
    return value


class ProgressTracker:
    """
    In-memory progression state for a single user.

    Usage::

        tracker = ProgressTracker()
        tracker.record_action("email_deleted", quantity=30)
        challenge = tracker.create_challenge("streaming-diet")
        tracker.update_challenge_progress(challenge.id, 1)
        print(tracker.stats.total_xp, tracker.level.name)
    """

    def __init__(self):
        self.stats = UserStats()
        self._rewards = xp_rewards()
        self._badges: Dict[str, BadgeState] = {
            b.id: BadgeState(b) for b in load_badges()
        }
        self._templates = {t.id: t for t in load_challenge_templates()}
        self._challenges: Dict[str, Challenge] = {}
        self._completed: List[Challenge] = []
        self._recent: Deque[UserAction] = deque(maxlen=_RECENT_ACTIONS_LIMIT)
        self._notifications: List[Notification] = []
        self._last_active: Optional[date] = None

    # ── Properties ────────────────────────────────────────────────────

    @property
    def level(self) -> Level:
        return level_for_xp(self.stats.total_xp)

    @property
    def recent_actions(self) -> List[UserAction]:
        """Most recent actions first, capped at 50."""
        return list(self._recent)

    @property
    def active_challenges(self) -> List[Challenge]:
        return list(self._challenges.values())

    @property
    def completed_challenges(self) -> List[Challenge]:
        return list(self._completed)

    @property
    def badges(self) -> List[BadgeState]:
        return list(self._badges.values())

    @property
    def earned_badges(self) -> List[Badge]:
        return [s.badge for s in self._badges.values() if s.earned]

    @property
    def notifications(self) -> List[Notification]:
        """Newest first."""
        return list(self._notifications)

    @property
    def unread_notifications(self) -> List[Notification]:
        return [n for n in self._notifications if not n.is_read]

    # ── Actions ───────────────────────────────────────────────────────

    def record_action(
        self,
        action: ActionType,
        quantity: float = 1,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> UserAction:
        """
        Record an eco-action and credit its XP and CO2 savings.

        Args:
            action: One of the user-performed action kinds.
            quantity: Emails, newsletters, files, GB cleaned, tabs or
                streaming hours, depending on *action*. Emails,
                newsletters, files and tabs must be whole numbers.
            metadata: Passed through to the CO2 savings estimate
                (``size`` in KB for emails, ``quality`` for streaming).

        Raises:
            InvalidArgumentError: if *quantity* is invalid or so large that
                the XP or CO2 figures overflow. Nothing is recorded.
        """
        action = coerce_category(ActionType, action)
        if action not in _USER_ACTIONS:
            raise UnknownCategoryError(
                f"'{action.value}' is a derived event, not a user action"
            )
        if action in _COUNTED_ACTIONS:
            quantity = require_count("quantity", quantity)
        else:
            quantity = require_quantity("quantity", quantity)
        metadata = dict(metadata or {})

        co2 = _require_finite(
            "co2_saved", self._co2_saved(action, quantity, metadata)
        )
        xp = _require_finite("xp", self._rewards[action.value] * float(quantity))
        xp = int(round(xp))

        s = self.stats
        if action is ActionType.EMAIL_DELETED:
            s.emails_deleted += quantity
        elif action is ActionType.NEWSLETTER_UNSUBSCRIBED:
            s.newsletters_unsubscribed += quantity
        elif action is ActionType.FILE_DELETED:
            s.files_deleted += quantity
            s.cloud_freed_gb += quantity * FILE_SIZE_GB
        elif action is ActionType.CLOUD_CLEANED:
            s.cloud_freed_gb += quantity
        elif action is ActionType.TAB_CLOSED:
            s.tabs_closed += quantity
        else:
            s.streaming_hours_reduced += quantity
        s.total_co2_saved += co2

        recorded = self._log_action(
            action, f"{action.value} x{quantity:g}", xp, co2, metadata
        )
        self.add_xp(xp)
        self._refresh_badges()
        return recorded

    def add_xp(self, amount: int) -> List[Level]:
        """Add XP and return the levels reached on the way (may be empty)."""
        amount = require_count("amount", amount)
        before = self.stats.current_level
        self.stats.total_xp += amount
        reached = self.level
        self.stats.current_level = reached.id

        gained = [lvl for lvl in load_levels() if before < lvl.id <= reached.id]
        for lvl in gained:
            logger.info(f"Level up: {lvl.id} ({lvl.name})")
            self._log_action(
                ActionType.LEVEL_UP, f"Reached level {lvl.id}: {lvl.name}", 0, 0.0
            )
            self.add_notification(
                NotificationType.LEVEL_UP,
                "Level up!",
                f"Congratulations, you reached level {lvl.id}: {lvl.name}",
            )
        return gained

    # ── Challenges ────────────────────────────────────────────────────

    def create_challenge(self, template_id: str) -> Challenge:
        template = self._templates.get(template_id)
        if template is None:
            raise UnknownCategoryError(f"Unknown challenge template '{template_id}'")
        challenge = Challenge(id=str(uuid.uuid4()), template=template)
        self._challenges[challenge.id] = challenge
        logger.debug(f"Challenge created: {template.title} ({challenge.id})")
        return challenge

    def update_challenge_progress(self, challenge_id: str, progress: float) -> Challenge:
        """Set progress (capped at the target); completes the challenge at target."""
        challenge = self._active_challenge(challenge_id)
        progress = require_quantity("progress", progress)
        challenge.current_progress = min(progress, challenge.target)
        if challenge.current_progress >= challenge.target:
            self.complete_challenge(challenge_id)
        return challenge

    def complete_challenge(self, challenge_id: str) -> Challenge:
        challenge = self._active_challenge(challenge_id)
        template = challenge.template

        challenge.status = ChallengeStatus.COMPLETED
        challenge.completed_at = datetime.now()
        del self._challenges[challenge_id]
        self._completed.append(challenge)

        self.stats.challenges_completed += 1
        self.stats.total_co2_saved += template.estimated_co2_saved
        logger.info(f"Challenge completed: {template.title}")

        self._log_action(
            ActionType.CHALLENGE_COMPLETED,
            f"Challenge completed: {template.title}",
            template.xp_reward,
            template.estimated_co2_saved,
        )
        self.add_notification(
            NotificationType.CHALLENGE,
            "Challenge completed!",
            f"{template.title}: +{template.xp_reward} XP",
        )
        self.add_xp(template.xp_reward)
        self._refresh_badges()
        return challenge

    # ── Badges ────────────────────────────────────────────────────────

    def update_badge_progress(self, badge_id: str, progress: float) -> bool:
        """
        Set a badge's progress, capped at its maximum.

        Returns True if this call unlocked the badge.
        """
        state = self._badges.get(badge_id)
        if state is None:
            raise UnknownCategoryError(f"Unknown badge '{badge_id}'")
        progress = require_quantity("progress", progress)
        state.progress = min(progress, state.badge.max_progress)

        if state.progress >= state.badge.max_progress and not state.earned:
            state.earned_at = datetime.now()
            logger.info(f"Badge unlocked: {state.badge.name}")
            self.add_notification(
                NotificationType.ACHIEVEMENT,
                "New badge!",
                f"You unlocked: {state.badge.name}",
            )
            return True
        return False

    # ── Streaks ───────────────────────────────────────────────────────

    def register_activity(self, day: Optional[date] = None) -> int:
        """
        Mark *day* (default: today) as active and return the current streak.

        Consecutive days extend the streak and earn the daily streak bonus;
        every full week earns the weekly bonus. A gap restarts the streak.
        Days before the last recorded one are ignored.
        """
        day = day or date.today()
        last = self._last_active
        s = self.stats

        if last is not None and day <= last:
            if day < last:
                logger.debug(f"Ignoring activity on {day}, already at {last}")
            return s.current_streak

        if last is not None and day - last == timedelta(days=1):
            s.current_streak += 1
            bonus = self._rewards["daily_streak"]
            if s.current_streak % 7 == 0:
                bonus += self._rewards["weekly_streak"]
                self.add_notification(
                    NotificationType.STREAK,
                    "Streak!",
                    f"{s.current_streak} days in a row, keep it up",
                )
            self.add_xp(bonus)
        else:
            s.current_streak = 1

        self._last_active = day
        s.longest_streak = max(s.longest_streak, s.current_streak)
        self._refresh_badges()
        return s.current_streak

    # ── Notifications ─────────────────────────────────────────────────

    def add_notification(
        self, kind: NotificationType, title: str, message: str
    ) -> Notification:
        notification = Notification(
            id=str(uuid.uuid4()),
            type=coerce_category(NotificationType, kind),
            title=title,
            message=message,
        )
        self._notifications.insert(0, notification)
        return notification

    def mark_notification_read(self, notification_id: str) -> Notification:
        notification = next(
            (n for n in self._notifications if n.id == notification_id), None
        )
        if notification is None:
            raise UnknownCategoryError(f"Unknown notification '{notification_id}'")
        notification.is_read = True
        return notification

    def clear_notifications(self) -> None:
        self._notifications.clear()

    # ── Internals ─────────────────────────────────────────────────────

    def _co2_saved(
        self, action: ActionType, quantity: float, metadata: Mapping[str, Any]
    ) -> float:
        if action is ActionType.TAB_CLOSED:
            return 0.0
        if action is ActionType.CLOUD_CLEANED:
            return DigitalCarbonEstimator().cloud_storage_impact(quantity)

        saved = calculate_co2_saved(SavingAction(action.value), quantity, metadata)
        if action in _PER_UNIT_SAVINGS:
            saved = round(saved * quantity, 2)
        return saved

    def _active_challenge(self, challenge_id: str) -> Challenge:
        challenge = self._challenges.get(challenge_id)
        if challenge is None:
            raise UnknownCategoryError(f"No active challenge '{challenge_id}'")
        return challenge

    def _log_action(
        self,
        action: ActionType,
        description: str,
        xp: int,
        co2: float,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> UserAction:
        recorded = UserAction(
            id=str(uuid.uuid4()),
            type=action,
            description=description,
            xp_gained=xp,
            co2_saved=co2,
            timestamp=datetime.now(),
            metadata=dict(metadata or {}),
        )
        self._recent.appendleft(recorded)
        return recorded

    def _badge_metric(self, badge: Badge) -> float:
        s = self.stats
        if badge.category == "emails":
            return s.emails_deleted
        if badge.category == "cloud":
            return s.cloud_freed_gb
        if badge.category == "streaming":
            return s.streaming_hours_reduced
        if badge.category == "eco-warrior":
            return s.total_co2_saved
        if badge.id.startswith("streak-"):
            return s.longest_streak
        return s.challenges_completed

    def _refresh_badges(self) -> None:
        for state in self._badges.values():
            metric = self._badge_metric(state.badge)
            if metric > state.progress:
                self.update_badge_progress(state.badge.id, metric)
