"""
CSV exports of the aggregated report dataset.

Every field is quoted and embedded double quotes are doubled, so any value
survives a round trip through a standard CSV parser.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from typing import Any

from a11y_audit.domain.summary import ReportDataset
from a11y_audit.reporting.formatting import (
    BROWSER_SEPARATOR,
    browsers_label,
    fix_suggestion,
    format_element_list,
    tags_label,
)

TOTALS_LABEL = "TOTALS"

SUMMARY_FIELDS: list[str] = [
    "Site",
    "Pages Scanned",
    "Total Violations",
    "Critical",
    "Serious",
    "Moderate",
    "Minor",
    "Unique Rules",
    "Browsers",
]

VIOLATION_FIELDS: list[str] = [
    "Site",
    "Page",
    "URL",
    "Browsers",
    "Rule ID",
    "Impact",
    "WCAG Tags",
    "Description",
    "Elements",
    "Fix Suggestion",
]


def _write_csv(fields: list[str], rows: Iterable[dict[str, Any]]) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(
        buf,
        fieldnames=fields,
        extrasaction="ignore",
        restval="",
        quoting=csv.QUOTE_ALL,
        lineterminator="\r\n",
    )
    writer.writeheader()
    for row in rows:
        writer.writerow({k: ("" if v is None else v) for k, v in row.items()})
    return buf.getvalue()


def render_summary_csv(dataset: ReportDataset) -> str:
    """
    One row per site followed by a TOTALS row.
    """

    rows: list[dict[str, Any]] = []
    for site_name, site in dataset.site_summaries.items():
        rows.append(
            {
                "Site": site_name,
                "Pages Scanned": site.page_count,
                "Total Violations": site.total_violations,
                "Critical": site.critical_violations,
                "Serious": site.serious_violations,
                "Moderate": site.moderate_violations,
                "Minor": site.minor_violations,
                "Unique Rules": len(site.unique_rules),
                "Browsers": BROWSER_SEPARATOR.join(site.browsers),
            }
        )

    summary = dataset.summary
    rows.append(
        {
            "Site": TOTALS_LABEL,
            "Pages Scanned": summary.page_count,
            "Total Violations": summary.total_violations,
            "Critical": summary.critical_violations,
            "Serious": summary.serious_violations,
            "Moderate": summary.moderate_violations,
            "Minor": summary.minor_violations,
            "Unique Rules": len(summary.unique_rules),
            "Browsers": BROWSER_SEPARATOR.join(summary.browsers),
        }
    )
    return _write_csv(SUMMARY_FIELDS, rows)


def render_violations_csv(dataset: ReportDataset, *, max_elements: int = 10) -> str:
    """
    One row per deduplicated violation.
    """

    rows = (
        {
            "Site": violation.site_name,
            "Page": violation.page_name,
            "URL": violation.page_url,
            "Browsers": browsers_label(violation),
            "Rule ID": violation.rule_id,
            "Impact": violation.impact,
            "WCAG Tags": tags_label(violation),
            "Description": violation.description,
            "Elements": format_element_list(violation.targets, max_elements),
            "Fix Suggestion": fix_suggestion(violation),
        }
        for violations in dataset.results.values()
        for violation in violations
    )
    return _write_csv(VIOLATION_FIELDS, rows)
