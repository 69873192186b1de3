"""
Structured JSON snapshot of the report dataset, for out-of-process consumers.
"""

from __future__ import annotations

from a11y_audit.domain.scan_result import EnhancedViolation
from a11y_audit.domain.summary import GlobalSummary, ReportDataset, SiteSummary
from a11y_audit.schemas.report_snapshot import (
    NodeSnapshot,
    ReportSnapshot,
    SummarySnapshot,
    ViolationSnapshot,
)


def _violation_snapshot(violation: EnhancedViolation) -> ViolationSnapshot:
    return ViolationSnapshot(
        site_name=violation.site_name,
        page_name=violation.page_name,
        page_url=violation.page_url,
        rule_id=violation.rule_id,
        impact=violation.impact,
        tags=list(violation.tags),
        description=violation.description,
        help=violation.help,
        help_url=violation.help_url,
        browsers=list(violation.browsers),
        nodes=[
            NodeSnapshot(target=node.target, failure_summary=node.failure_summary, html=node.html)
            for node in violation.nodes
        ],
        occurrences=violation.occurrences,
    )


def _summary_snapshot(summary: SiteSummary | GlobalSummary) -> SummarySnapshot:
    browser_totals = summary.browser_totals if isinstance(summary, GlobalSummary) else {}
    site_count = summary.site_count if isinstance(summary, GlobalSummary) else 1
    return SummarySnapshot(
        total_violations=summary.total_violations,
        critical_violations=summary.critical_violations,
        serious_violations=summary.serious_violations,
        moderate_violations=summary.moderate_violations,
        minor_violations=summary.minor_violations,
        unique_rules=sorted(summary.unique_rules),
        unique_pages=sorted(summary.unique_pages),
        unique_rule_count=len(summary.unique_rules),
        unique_page_count=len(summary.unique_pages),
        page_count=summary.page_count,
        wcag_breakdown=dict(summary.wcag_breakdown),
        wcag_breakdown_array=list(summary.wcag_breakdown.items()),
        browsers=list(summary.browsers),
        browser_totals=dict(browser_totals),
        site_count=site_count,
    )


def build_report_snapshot(dataset: ReportDataset) -> ReportSnapshot:
    return ReportSnapshot(
        results={
            site_name: [_violation_snapshot(violation) for violation in violations]
            for site_name, violations in dataset.results.items()
        },
        summary=_summary_snapshot(dataset.summary),
        site_summaries={
            site_name: _summary_snapshot(site) for site_name, site in dataset.site_summaries.items()
        },
        generated_at=dataset.generated_at,
    )


def render_snapshot(dataset: ReportDataset) -> str:
    return build_report_snapshot(dataset).model_dump_json(by_alias=True, indent=2)
