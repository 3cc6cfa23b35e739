"""
try_it.py — hands-on demo for digital-detox.

Estimates the footprint of a typical week of digital habits, plays a few
eco-actions through the progression tracker, and writes an HTML report.
"""

import logging
from datetime import date, timedelta

from digital_detox import (
    DigitalCarbonEstimator,
    HabitProfile,
    ProgressTracker,
    StreamingQuality,
    format_co2,
    generate_report,
    random_encouragement,
    summarize_footprint,
)


# ─── Itemized estimate ─────────────────────────────────────────────────────────

def itemized_week():
    """Accumulate one week of activity in a single estimator."""
    estimator = DigitalCarbonEstimator()
    for _ in range(7):
        for _ in range(40):
            estimator.email_impact(size_kb=30)
        estimator.email_impact(size_kb=2_000, recipients=4, has_attachment=True)
        estimator.streaming_impact(1.5, StreamingQuality.HD)
    estimator.cloud_storage_impact(20)

    detail = estimator.get_detailed_impact()
    print("One week, itemized:")
    print(f"  emails    {format_co2(detail.email)}")
    print(f"  streaming {format_co2(detail.streaming)}")
    print(f"  cloud     {format_co2(detail.cloud)} (yearly rate)")
    print(f"  total     {format_co2(detail.total)}\n")


# ─── Progression ───────────────────────────────────────────────────────────────

def play_a_week():
    tracker = ProgressTracker()
    start = date.today() - timedelta(days=6)
    challenge = tracker.create_challenge("daily-email-cleanup")

    for day in range(7):
        tracker.register_activity(start + timedelta(days=day))
        tracker.record_action("email_deleted", quantity=25)
        tracker.record_action("streaming_reduced", quantity=0.5)

    tracker.record_action("newsletter_unsubscribed", quantity=3)
    tracker.record_action("file_deleted", quantity=150)
    tracker.update_challenge_progress(challenge.id, 20)

    s = tracker.stats
    print(f"Level {tracker.level.id} ({tracker.level.name}), {s.total_xp} XP")
    print(f"CO₂ saved: {format_co2(s.total_co2_saved)}")
    print("Badges: " + ", ".join(b.name for b in tracker.earned_badges))
    for note in tracker.unread_notifications[:3]:
        print(f"  [{note.type.value}] {note.title} {note.message}")
    print(random_encouragement() + "\n")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    itemized_week()
    play_a_week()

    summary = summarize_footprint(
        HabitProfile(daily_emails=80, cloud_storage_gb=45, daily_streaming_hours=3),
        screen_time_hours=7,
    )
    print(f"Profile: {summary.profile_type.value}, {summary.yearly_kg} kg CO₂/year")
    generate_report(summary, auto_open=True)
