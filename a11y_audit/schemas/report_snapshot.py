"""
a11y_audit/schemas/report_snapshot.py

Serialised contract of the structured report snapshot
(``data/report-data.json``). Field names are camelCase on the wire.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _SnapshotModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class NodeSnapshot(_SnapshotModel):
    target: str
    failure_summary: str | None = None
    html: str | None = None


class ViolationSnapshot(_SnapshotModel):
    site_name: str
    page_name: str
    page_url: str
    rule_id: str
    impact: str
    tags: list[str]
    description: str
    help: str | None = None
    help_url: str | None = None
    browsers: list[str]
    nodes: list[NodeSnapshot]
    occurrences: int


class SummarySnapshot(_SnapshotModel):
    """
    Shared shape for the global summary and every per-site summary.
    """

    total_violations: int
    critical_violations: int
    serious_violations: int
    moderate_violations: int
    minor_violations: int
    unique_rules: list[str]
    unique_pages: list[str]
    unique_rule_count: int
    unique_page_count: int
    page_count: int
    wcag_breakdown: dict[str, int]
    wcag_breakdown_array: list[tuple[str, int]]
    browsers: list[str]
    browser_totals: dict[str, int] = {}
    site_count: int = 1


class ReportSnapshot(_SnapshotModel):
    results: dict[str, list[ViolationSnapshot]]
    summary: SummarySnapshot
    site_summaries: dict[str, SummarySnapshot]
    generated_at: datetime
