"""
a11y_audit/reporting package marker.

Every renderer is a pure function of :class:`ReportDataset` returning text.
"""

from a11y_audit.reporting.csv_renderer import render_summary_csv, render_violations_csv
from a11y_audit.reporting.html_renderer import HTMLReportRenderer, render_html
from a11y_audit.reporting.snapshot_renderer import build_report_snapshot, render_snapshot

__all__ = [
    "HTMLReportRenderer",
    "build_report_snapshot",
    "render_html",
    "render_snapshot",
    "render_summary_csv",
    "render_violations_csv",
]
