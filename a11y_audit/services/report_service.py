"""
a11y_audit/services/report_service.py

Report generation pipeline.

Wires the stages into one synchronous pass, rebuilt from scratch on every
call:

    CrossRunMerger        – read every stored browser result set
    DeduplicationService  – collapse identical violations across browsers
    SummaryService        – per-site and global aggregates
    renderers             – HTML, JSON snapshot, summary CSV, violations CSV

Failure contract
----------------
- Corrupt stored entries are skipped inside the merger.
- Each renderer runs independently: a failure (missing template, unwritable
  path, ...) is logged and recorded in the result; the remaining renderers
  still run. Renderers never mutate the dataset.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from a11y_audit import failure_codes
from a11y_audit.config import ReportSettings, get_report_settings
from a11y_audit.domain.scan_result import ScanResult
from a11y_audit.domain.summary import ReportDataset
from a11y_audit.logging_utils import log_event
from a11y_audit.reporting.csv_renderer import render_summary_csv, render_violations_csv
from a11y_audit.reporting.html_renderer import HTMLReportRenderer
from a11y_audit.reporting.snapshot_renderer import render_snapshot
from a11y_audit.services.dedup_service import DeduplicationService
from a11y_audit.services.merger_service import CrossRunMerger
from a11y_audit.services.summary_service import SummaryService
from a11y_audit.storage.json_file_store import JSONFileResultStore

logger = logging.getLogger(__name__)

SINGLE_BROWSER_REPORT = "report.html"
MULTI_BROWSER_REPORT = "consolidated-multi-browser-accessibility-report.html"
SNAPSHOT_FILE = "report-data.json"
SUMMARY_CSV_FILE = "accessibility-summary.csv"
VIOLATIONS_CSV_FILE = "accessibility-violations.csv"


def report_filename(dataset: ReportDataset) -> str:
    if len(dataset.browsers) > 1:
        return MULTI_BROWSER_REPORT
    return SINGLE_BROWSER_REPORT


@dataclass(frozen=True)
class RendererSpec:
    """
    One output format: where it goes and how it is produced.
    """

    name: str
    filename: Callable[[ReportDataset], str]
    render: Callable[[ReportDataset], str]


def default_renderers(settings: ReportSettings) -> list[RendererSpec]:
    html_renderer = HTMLReportRenderer(
        docs_base_url=settings.docs_base_url,
        preview_elements=settings.html_preview_elements,
    )
    return [
        RendererSpec(name="html", filename=report_filename, render=html_renderer.render),
        RendererSpec(
            name="snapshot",
            filename=lambda _dataset: f"{settings.data_subdir}/{SNAPSHOT_FILE}",
            render=render_snapshot,
        ),
        RendererSpec(
            name="summary_csv",
            filename=lambda _dataset: SUMMARY_CSV_FILE,
            render=render_summary_csv,
        ),
        RendererSpec(
            name="violations_csv",
            filename=lambda _dataset: VIOLATIONS_CSV_FILE,
            render=lambda dataset: render_violations_csv(
                dataset, max_elements=settings.max_listed_elements
            ),
        ),
    ]


@dataclass(frozen=True)
class ReportGenerationResult:
    """
    Outcome of one report generation.
    """

    dataset: ReportDataset
    written: dict[str, Path] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def total_violations(self) -> int:
        return self.dataset.summary.total_violations

    @property
    def succeeded(self) -> bool:
        return bool(self.written)


class ReportService:
    """
    Builds the report dataset and writes every output format.
    """

    def __init__(
        self,
        *,
        settings: ReportSettings | None = None,
        merger: CrossRunMerger | None = None,
        deduplicator: DeduplicationService | None = None,
        summarizer: SummaryService | None = None,
        renderers: Sequence[RendererSpec] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._settings = settings or get_report_settings()
        self._merger = merger or CrossRunMerger(
            JSONFileResultStore(self._settings.browser_results_dir)
        )
        self._deduplicator = deduplicator or DeduplicationService()
        self._summarizer = summarizer or SummaryService()
        self._renderers = list(renderers) if renderers is not None else default_renderers(self._settings)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def build_dataset(self, results: Sequence[ScanResult] | None = None) -> ReportDataset:
        """
        Merge (unless *results* is given), deduplicate and summarise.
        """

        if results is None:
            results = self._merger.load_all()
        per_site = self._deduplicator.dedupe(results)
        site_summaries, global_summary = self._summarizer.summarize(per_site, results)
        return ReportDataset(
            results={site_name: tuple(violations) for site_name, violations in per_site.items()},
            site_summaries=site_summaries,
            summary=global_summary,
            generated_at=self._clock(),
        )

    def generate(self, results: Sequence[ScanResult] | None = None) -> ReportGenerationResult:
        dataset = self.build_dataset(results)
        reports_dir = Path(self._settings.reports_dir)

        written: dict[str, Path] = {}
        failures: dict[str, str] = {}
        for spec in self._renderers:
            try:
                target = reports_dir / spec.filename(dataset)
                content = spec.render(dataset)
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(content, encoding="utf-8")
            except Exception as exc:  # noqa: BLE001
                failures[spec.name] = f"{type(exc).__name__}: {exc}"
                log_event(
                    logger,
                    logging.ERROR,
                    "renderer_failed",
                    code=failure_codes.RENDERER_FAILED,
                    renderer=spec.name,
                    error=failures[spec.name],
                )
                continue
            written[spec.name] = target
            log_event(logger, logging.INFO, "report_written", renderer=spec.name, path=target)

        log_event(
            logger,
            logging.INFO,
            "report_generated",
            sites=len(dataset.site_summaries),
            total_violations=dataset.summary.total_violations,
            written=len(written),
            failed=len(failures),
        )
        return ReportGenerationResult(dataset=dataset, written=written, failures=failures)
