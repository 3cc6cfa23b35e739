"""Tests for the daily footprint summary."""

from digital_detox.factors import ProfileType
from digital_detox.footprint import summarize_footprint
from digital_detox.habits import HabitProfile


class TestSummarizeFootprint:
    def test_typical_habits(self):
        summary = summarize_footprint(HabitProfile(50, 15, 2), screen_time_hours=6)
        d = summary.daily
        assert d.emails == 200        # 50 x 4 g
        assert d.streaming == 72      # 2 h x 36 g
        assert d.cloud == 20.55       # 7500 g / 365
        assert d.screen_time == 48    # 6 h x 8 g
        assert d.total == 340.55
        assert summary.yearly_kg == 457.18
        assert summary.profile_type == ProfileType.ECO_WARRIOR

    def test_equivalents_from_daily_total(self):
        summary = summarize_footprint(HabitProfile(0, 0, 0), screen_time_hours=15)
        # 120 g of screen time
        assert summary.daily.total == 120
        assert summary.equivalents.car_kilometers == 1

    def test_comparison_to_average(self):
        summary = summarize_footprint(HabitProfile(121, 30, 1.6))
        assert summary.comparison_to_average == {
            "emails": 100.0,
            "streaming": 50.0,
            "cloud": 200.0,
        }

    def test_accepts_mapping(self):
        summary = summarize_footprint({
            "dailyEmails": 0,
            "cloudStorageGB": 0,
            "dailyStreamingHours": 6,
            "streamingQuality": "4K",
        }, screen_time_hours=0)
        assert summary.daily.streaming == 582
        assert summary.profile_type == ProfileType.STREAMER
