"""
HTML report generator for digital-detox.

Builds a Jinja2 context dictionary from a FootprintSummary and renders
the packaged HTML report template.
"""

import os
import webbrowser
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .co2_equivalences import compute_equivalences, format_co2
from .factors import PROFILE_DETAILS

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = Path(__file__).parent / "templates"
_VERSION = "0.1.0"
_DEFAULT_REPORT_DIR = "./detox_reports"
REPORT_DIR_ENV = "DIGITAL_DETOX_REPORT_DIR"

# Above this share of the global average a habit gets flagged
_WARNING_PCT = 150.0


def _fmt_value(v: float) -> str:
    """Format a value nicely (auto-decimal)."""
    if v >= 1000:
        return f"{v:,.0f}"
    elif v >= 10:
        return f"{v:.0f}"
    elif v >= 1:
        return f"{v:.1f}"
    else:
        return f"{v:.2f}"


def _build_breakdown_rows(summary) -> List[Dict[str, Any]]:
    """
    Build the daily breakdown bars for the template.
    Bar widths are relative to the largest activity.
    """
    d = summary.daily
    items = [
        ("📧", "Emails", d.emails),
        ("📺", "Streaming", d.streaming),
        ("☁️", "Cloud storage", d.cloud),
        ("🖥️", "Screen time", d.screen_time),
    ]
    largest = max(v for _, _, v in items) or 1.0

    return [
        {
            "icon": icon,
            "label": label,
            "value_fmt": format_co2(value),
            "width_pct": round(value / largest * 100, 1),
        }
        for icon, label, value in items
    ]


def _build_comparison_rows(summary) -> List[Dict[str, Any]]:
    labels = {
        "emails": "Emails per day",
        "streaming": "Streaming hours per day",
        "cloud": "Cloud storage",
    }
    rows = []
    for key, pct in summary.comparison_to_average.items():
        if pct > _WARNING_PCT:
            bar_class = "bar-high"
        elif pct > 100:
            bar_class = "bar-medium"
        else:
            bar_class = "bar-low"
        rows.append({
            "label": labels[key],
            "pct_fmt": f"{pct:.0f}%",
            "width_pct": min(pct, 200.0) / 2,
            "bar_class": bar_class,
        })
    return rows


def _build_co2_equivalences(summary) -> List[Dict[str, Any]]:
    """Build CO2 equivalence data for template."""
    return [
        {
            "icon": eq.icon,
            "label": eq.label,
            "value_fmt": _fmt_value(eq.value),
            "unit": eq.unit,
            "description": eq.description,
        }
        for eq in compute_equivalences(summary.daily.total)
    ]


def build_report_context(summary) -> Dict[str, Any]:
    """
    Build the full Jinja2 context dictionary from a FootprintSummary.
    """
    s = summary
    profile = PROFILE_DETAILS[s.profile_type]

    warnings = []
    for key, pct in s.comparison_to_average.items():
        if pct > _WARNING_PCT:
            warnings.append(
                f"Your {key} usage is {pct:.0f}% of the global average."
            )

    return {
        "version": _VERSION,
        "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),

        # Habits
        "daily_emails": f"{s.habits.daily_emails:g}",
        "cloud_storage_gb": f"{s.habits.cloud_storage_gb:g}",
        "daily_streaming_hours": f"{s.habits.daily_streaming_hours:g}",
        "streaming_quality": s.habits.streaming_quality.value,
        "screen_time_hours": f"{s.screen_time_hours:g}",

        # Profile
        "profile_type": s.profile_type.value,
        "profile_icon": profile["icon"],
        "profile_description": profile["description"],

        # Footprint
        "daily_total": format_co2(s.daily.total),
        "yearly_total": f"{s.yearly_kg:,.2f} kg",
        "breakdown_rows": _build_breakdown_rows(s),
        "comparison_rows": _build_comparison_rows(s),
        "co2_equivalences": _build_co2_equivalences(s),
        "warnings": warnings,
    }


def generate_report(
    summary,
    output_dir: Optional[str] = None,
    auto_open: bool = False,
) -> str:
    """
    Generate an HTML report from a FootprintSummary.

    Args:
        summary: FootprintSummary dataclass.
        output_dir: Directory to save the report. Defaults to
            ``$DIGITAL_DETOX_REPORT_DIR``, then ``./detox_reports``.
        auto_open: Whether to open the report in a browser.

    Returns:
        Path to the generated HTML file.
    """
    if output_dir is None:
        output_dir = os.environ.get(REPORT_DIR_ENV, _DEFAULT_REPORT_DIR)

    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATE_DIR)),
        autoescape=select_autoescape(["html"]),
    )
    template = env.get_template("report.html")

    html = template.render(**build_report_context(summary))

    out_path = Path(output_dir)
    out_path.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filepath = out_path / f"footprint_report_{timestamp}.html"

    filepath.write_text(html, encoding="utf-8")
    logger.info(f"Report saved to {filepath}")

    if auto_open:
        try:
            webbrowser.open(str(filepath.resolve()))
        except webbrowser.Error as e:
            logger.warning(f"Could not open browser: {e}")

    return str(filepath)
