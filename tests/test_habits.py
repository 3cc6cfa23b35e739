"""Tests for habit profiles and input parsing."""

from digital_detox.errors import InvalidArgumentError, UnknownCategoryError
from digital_detox.factors import StreamingQuality
from digital_detox.habits import HabitProfile, as_habit_profile, habits_from_onboarding


class TestHabitProfile:
    def test_defaults_to_hd(self):
        p = HabitProfile(10, 5, 1)
        assert p.streaming_quality is StreamingQuality.HD

    def test_quality_string_coerced(self):
        p = HabitProfile(10, 5, 1, "4K")
        assert p.streaming_quality is StreamingQuality.UHD_4K

    def test_integral_float_emails(self):
        assert HabitProfile(50.0, 0, 0).daily_emails == 50

    def test_fractional_emails_accepted(self):
        assert HabitProfile(12.5, 0, 0).daily_emails == 12.5

    def test_negative_rejected(self):
        try:
            HabitProfile(10, -1, 1)
            assert False, "Should raise InvalidArgumentError"
        except InvalidArgumentError:
            pass

    def test_unknown_quality_rejected(self):
        try:
            HabitProfile(10, 5, 1, "ultra")
            assert False, "Should raise UnknownCategoryError"
        except UnknownCategoryError:
            pass


class TestFromMapping:
    def test_camel_case(self):
        p = HabitProfile.from_mapping({
            "dailyEmails": 50,
            "cloudStorageGB": 15,
            "dailyStreamingHours": 2,
            "streamingQuality": "SD",
        })
        assert p == HabitProfile(50, 15, 2, StreamingQuality.SD)

    def test_snake_case(self):
        p = HabitProfile.from_mapping({
            "daily_emails": 3,
            "cloud_storage_gb": 1.5,
            "daily_streaming_hours": 0.5,
        })
        assert p.cloud_storage_gb == 1.5
        assert p.streaming_quality is StreamingQuality.HD

    def test_missing_field(self):
        try:
            HabitProfile.from_mapping({"dailyEmails": 3, "cloudStorageGB": 1})
            assert False, "Should raise InvalidArgumentError"
        except InvalidArgumentError as e:
            assert "daily_streaming_hours" in str(e)

    def test_as_habit_profile_passthrough(self):
        p = HabitProfile(1, 2, 3)
        assert as_habit_profile(p) is p

    def test_as_habit_profile_rejects_other_types(self):
        try:
            as_habit_profile([1, 2, 3])
            assert False, "Should raise InvalidArgumentError"
        except InvalidArgumentError:
            pass


class TestOnboarding:
    def test_answers_used(self):
        p = habits_from_onboarding([
            ("daily-emails", 120),
            ("cloud-storage", 200),
            ("streaming-hours", 5.5),
            ("eco-awareness", "A little"),
        ])
        assert p == HabitProfile(120, 200, 5.5)

    def test_defaults_for_missing_answers(self):
        p = habits_from_onboarding([("daily-emails", 0)])
        assert p == HabitProfile(50, 15, 2)

    def test_quality_override(self):
        p = habits_from_onboarding([], streaming_quality=StreamingQuality.SD)
        assert p.streaming_quality is StreamingQuality.SD
