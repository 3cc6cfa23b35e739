"""Tests for progression module (levels, badges, challenges, streaks)."""

import random
from datetime import date, timedelta

from digital_detox.errors import InvalidArgumentError, UnknownCategoryError
from digital_detox.progression import (
    ActionType,
    ChallengeStatus,
    NotificationType,
    ProgressTracker,
    level_for_xp,
    level_progress,
    load_badges,
    load_challenge_templates,
    load_eco_tips,
    load_encouragement_messages,
    load_levels,
    next_level,
    random_encouragement,
    xp_rewards,
)


# ── Static tables ────────────────────────────────────────────────────

class TestTables:
    def test_levels_contiguous(self):
        levels = load_levels()
        assert len(levels) == 6
        for lower, upper in zip(levels, levels[1:]):
            assert lower.max_xp == upper.min_xp
        assert levels[-1].max_xp is None

    def test_badges_loaded(self):
        badges = load_badges()
        assert len(badges) == 13
        assert len({b.id for b in badges}) == 13

    def test_templates_loaded(self):
        ids = {t.id for t in load_challenge_templates()}
        assert "streaming-diet" in ids

    def test_eco_tips_filter(self):
        cloud = load_eco_tips("cloud")
        assert len(cloud) == 2
        assert all(t.category == "cloud" for t in cloud)

    def test_xp_rewards(self):
        assert xp_rewards()["email_deleted"] == 2

    def test_random_encouragement(self):
        messages = load_encouragement_messages()
        assert len(messages) == 7
        assert random_encouragement(random.Random(42)) in messages
        assert random_encouragement() in messages


class TestLevels:
    def test_level_for_xp(self):
        assert level_for_xp(0).id == 1
        assert level_for_xp(99).id == 1
        assert level_for_xp(100).id == 2
        assert level_for_xp(5000).id == 6

    def test_next_level(self):
        assert next_level(level_for_xp(0)).id == 2
        assert next_level(level_for_xp(2500)) is None

    def test_level_progress(self):
        assert level_progress(50) == 0.5
        assert level_progress(150) == 0.25
        assert level_progress(3000) == 1.0

    def test_negative_xp_rejected(self):
        try:
            level_for_xp(-1)
            assert False, "Should raise InvalidArgumentError"
        except InvalidArgumentError:
            pass


# ── Tracker ──────────────────────────────────────────────────────────

class TestRecordAction:
    def test_email_deleted(self):
        tracker = ProgressTracker()
        action = tracker.record_action(ActionType.EMAIL_DELETED, quantity=30)
        assert action.xp_gained == 60
        assert action.co2_saved == 120  # 30 x 4 g
        assert tracker.stats.emails_deleted == 30
        assert tracker.stats.total_xp == 60
        assert tracker.stats.total_co2_saved == 120

    def test_streaming_reduced_with_quality(self):
        tracker = ProgressTracker()
        action = tracker.record_action("streaming_reduced", 2, {"quality": "4K"})
        assert action.co2_saved == 194
        assert tracker.stats.streaming_hours_reduced == 2

    def test_file_deleted_frees_cloud(self):
        tracker = ProgressTracker()
        tracker.record_action("file_deleted", 100)
        assert tracker.stats.files_deleted == 100
        assert tracker.stats.cloud_freed_gb == 1.0
        earned = {b.id for b in tracker.earned_badges}
        assert "cloud-cleaner-bronze" in earned

    def test_tab_closed_saves_nothing(self):
        tracker = ProgressTracker()
        action = tracker.record_action("tab_closed", 3)
        assert action.co2_saved == 0
        assert action.xp_gained == 3

    def test_derived_event_rejected(self):
        tracker = ProgressTracker()
        try:
            tracker.record_action("level_up")
            assert False, "Should raise UnknownCategoryError"
        except UnknownCategoryError:
            pass

    def test_unknown_action_rejected(self):
        tracker = ProgressTracker()
        try:
            tracker.record_action("planted_tree")
            assert False, "Should raise UnknownCategoryError"
        except UnknownCategoryError:
            pass

    def test_fractional_count_rejected(self):
        tracker = ProgressTracker()
        counted = ("email_deleted", "newsletter_unsubscribed", "file_deleted", "tab_closed")
        for action in counted:
            try:
                tracker.record_action(action, 2.5)
                assert False, "Should raise InvalidArgumentError"
            except InvalidArgumentError:
                pass
        assert tracker.stats.total_xp == 0
        assert tracker.recent_actions == []

    def test_integral_float_count_accepted(self):
        tracker = ProgressTracker()
        action = tracker.record_action("email_deleted", 3.0)
        assert tracker.stats.emails_deleted == 3
        assert action.xp_gained == 6
        assert action.co2_saved == 12

    def test_fractional_hours_accepted(self):
        tracker = ProgressTracker()
        action = tracker.record_action("streaming_reduced", 0.5)
        assert action.co2_saved == 18
        assert action.xp_gained == 10

    def test_overflowing_quantity_rejected(self):
        tracker = ProgressTracker()
        for action in ("streaming_reduced", "cloud_cleaned"):
            try:
                tracker.record_action(action, quantity=1e307)
                assert False, "Should raise InvalidArgumentError"
            except InvalidArgumentError:
                pass
        assert tracker.stats.total_xp == 0
        assert tracker.stats.total_co2_saved == 0
        assert tracker.stats.streaming_hours_reduced == 0
        assert tracker.recent_actions == []

    def test_recent_actions_capped(self):
        tracker = ProgressTracker()
        for _ in range(60):
            tracker.record_action("tab_closed")
        recent = tracker.recent_actions
        assert len(recent) == 50
        assert recent[0].timestamp >= recent[-1].timestamp


class TestXP:
    def test_multi_level_jump(self):
        tracker = ProgressTracker()
        gained = tracker.add_xp(650)
        assert [lvl.id for lvl in gained] == [2, 3, 4]
        assert tracker.stats.current_level == 4
        assert tracker.level.id == 4

    def test_no_level_up(self):
        tracker = ProgressTracker()
        assert tracker.add_xp(10) == []
        assert tracker.stats.current_level == 1

    def test_level_up_logged(self):
        tracker = ProgressTracker()
        tracker.add_xp(100)
        assert tracker.recent_actions[0].type is ActionType.LEVEL_UP


class TestChallenges:
    def test_progress_completes_challenge(self):
        tracker = ProgressTracker()
        challenge = tracker.create_challenge("streaming-diet")
        assert challenge.status is ChallengeStatus.ACTIVE

        tracker.update_challenge_progress(challenge.id, 5)
        assert challenge.current_progress == 1  # capped at target
        assert challenge.status is ChallengeStatus.COMPLETED
        assert challenge.completed_at is not None
        assert tracker.active_challenges == []
        assert tracker.completed_challenges == [challenge]
        assert tracker.stats.challenges_completed == 1
        assert tracker.stats.total_xp == 30
        assert tracker.stats.total_co2_saved == 36

    def test_partial_progress(self):
        tracker = ProgressTracker()
        challenge = tracker.create_challenge("daily-email-cleanup")
        tracker.update_challenge_progress(challenge.id, 5)
        assert challenge.status is ChallengeStatus.ACTIVE
        assert tracker.active_challenges == [challenge]

    def test_first_challenge_badge(self):
        tracker = ProgressTracker()
        challenge = tracker.create_challenge("newsletter-unsubscribe")
        tracker.complete_challenge(challenge.id)
        assert "first-challenge" in {b.id for b in tracker.earned_badges}

    def test_unknown_template(self):
        tracker = ProgressTracker()
        try:
            tracker.create_challenge("run-a-marathon")
            assert False, "Should raise UnknownCategoryError"
        except UnknownCategoryError:
            pass

    def test_completed_challenge_is_not_active(self):
        tracker = ProgressTracker()
        challenge = tracker.create_challenge("streaming-diet")
        tracker.complete_challenge(challenge.id)
        try:
            tracker.complete_challenge(challenge.id)
            assert False, "Should raise UnknownCategoryError"
        except UnknownCategoryError:
            pass


class TestBadges:
    def test_manual_progress_capped_and_unlocks(self):
        tracker = ProgressTracker()
        assert tracker.update_badge_progress("streak-7", 3) is False
        assert tracker.update_badge_progress("streak-7", 12) is True
        state = next(s for s in tracker.badges if s.badge.id == "streak-7")
        assert state.progress == 7
        assert state.earned

    def test_unlocks_only_once(self):
        tracker = ProgressTracker()
        tracker.update_badge_progress("first-challenge", 1)
        assert tracker.update_badge_progress("first-challenge", 1) is False

    def test_email_badges_follow_deletions(self):
        tracker = ProgressTracker()
        tracker.record_action("email_deleted", 120)
        earned = {b.id for b in tracker.earned_badges}
        assert "email-cleaner-bronze" in earned
        assert "email-cleaner-silver" not in earned

    def test_unknown_badge(self):
        tracker = ProgressTracker()
        try:
            tracker.update_badge_progress("moon-landing", 1)
            assert False, "Should raise UnknownCategoryError"
        except UnknownCategoryError:
            pass


class TestStreaks:
    def test_consecutive_days(self):
        tracker = ProgressTracker()
        start = date(2024, 3, 1)
        for i in range(3):
            tracker.register_activity(start + timedelta(days=i))
        assert tracker.stats.current_streak == 3
        # two daily bonuses
        assert tracker.stats.total_xp == 50

    def test_gap_resets(self):
        tracker = ProgressTracker()
        tracker.register_activity(date(2024, 3, 1))
        tracker.register_activity(date(2024, 3, 2))
        tracker.register_activity(date(2024, 3, 5))
        assert tracker.stats.current_streak == 1
        assert tracker.stats.longest_streak == 2

    def test_same_day_counted_once(self):
        tracker = ProgressTracker()
        tracker.register_activity(date(2024, 3, 1))
        assert tracker.register_activity(date(2024, 3, 1)) == 1
        assert tracker.stats.total_xp == 0

    def test_week_streak_badge_and_bonus(self):
        tracker = ProgressTracker()
        start = date(2024, 3, 1)
        for i in range(7):
            tracker.register_activity(start + timedelta(days=i))
        # 6 daily bonuses + 1 weekly bonus
        assert tracker.stats.total_xp == 6 * 25 + 100
        assert "streak-7" in {b.id for b in tracker.earned_badges}


class TestNotifications:
    def test_level_up_and_badge_notify(self):
        tracker = ProgressTracker()
        # 100 emails: 200 XP (level 2) and the bronze email badge
        tracker.record_action("email_deleted", 100)
        types = [n.type for n in tracker.notifications]
        assert NotificationType.LEVEL_UP in types
        assert NotificationType.ACHIEVEMENT in types
        assert tracker.notifications[0].type is NotificationType.ACHIEVEMENT

    def test_challenge_notifies(self):
        tracker = ProgressTracker()
        challenge = tracker.create_challenge("streaming-diet")
        tracker.complete_challenge(challenge.id)
        titles = [n.title for n in tracker.notifications]
        assert "Challenge completed!" in titles

    def test_weekly_streak_notifies(self):
        tracker = ProgressTracker()
        start = date(2024, 3, 1)
        for i in range(7):
            tracker.register_activity(start + timedelta(days=i))
        assert NotificationType.STREAK in {n.type for n in tracker.notifications}

    def test_no_notification_without_event(self):
        tracker = ProgressTracker()
        tracker.record_action("tab_closed")
        assert tracker.notifications == []

    def test_mark_read(self):
        tracker = ProgressTracker()
        note = tracker.add_notification("streak", "Streak!", "3 days")
        assert tracker.unread_notifications == [note]
        tracker.mark_notification_read(note.id)
        assert note.is_read
        assert tracker.unread_notifications == []
        assert tracker.notifications == [note]

    def test_clear(self):
        tracker = ProgressTracker()
        tracker.add_notification(NotificationType.LEVEL_UP, "Level up!", "2")
        tracker.clear_notifications()
        assert tracker.notifications == []

    def test_unknown_notification(self):
        tracker = ProgressTracker()
        try:
            tracker.mark_notification_read("nope")
            assert False, "Should raise UnknownCategoryError"
        except UnknownCategoryError:
            pass
