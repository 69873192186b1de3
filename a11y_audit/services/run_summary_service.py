"""
a11y_audit/services/run_summary_service.py

Operational metrics for one audit session: how many violations each
browser surfaced on its own and how long its run took.

Each browser writes only its own entry, so parallel browser runs never
read-modify-write a shared file. The session entry holds the start time.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from a11y_audit.config import ReportSettings, get_report_settings
from a11y_audit.domain.run_summary import BrowserRunStats, RunSummary
from a11y_audit.logging_utils import log_event
from a11y_audit.storage.base import ResultStore
from a11y_audit.storage.json_file_store import JSONFileResultStore

logger = logging.getLogger(__name__)

SESSION_KEY = "_session"
RUN_SUMMARY_SUFFIX = "-run.json"


class RunSummaryService:
    """
    Records and summarises per-browser run statistics.
    """

    def __init__(
        self,
        store: ResultStore | None = None,
        *,
        settings: ReportSettings | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if store is None:
            settings = settings or get_report_settings()
            store = JSONFileResultStore(settings.run_summary_dir, suffix=RUN_SUMMARY_SUFFIX)
        self._store = store
        self._clock = clock

    def start_session(self) -> float:
        """
        Drop statistics of previous sessions and stamp the start time.
        """

        self._store.clear()
        started = self._clock()
        self._store.write(SESSION_KEY, {"startTime": started})
        log_event(logger, logging.INFO, "run_session_started", start_time=started)
        return started

    def record_browser(self, browser: str, violations: int, duration_seconds: float) -> None:
        self._store.write(
            browser,
            {
                "browser": browser,
                "violations": int(violations),
                "durationSeconds": float(duration_seconds),
            },
        )
        log_event(
            logger,
            logging.INFO,
            "browser_run_recorded",
            browser=browser,
            violations=violations,
            duration_seconds=round(duration_seconds, 3),
        )

    def build_summary(self, *, unique_violations: int, report_path: str | None = None) -> RunSummary:
        """
        Combine every recorded browser entry.

        *unique_violations* is the post-deduplication total from the report
        pipeline.
        """

        start_time: float | None = None
        browsers: list[BrowserRunStats] = []
        for key, value in self._store.read_all():
            if key == SESSION_KEY:
                start_time = _as_float(value, "startTime")
                continue
            stats = _parse_stats(key, value)
            if stats is None:
                log_event(logger, logging.WARNING, "browser_run_skipped", key=key)
                continue
            browsers.append(stats)

        counts = [stats.violations for stats in browsers]
        elapsed = self._clock() - start_time if start_time is not None else None
        return RunSummary(
            browsers=browsers,
            total_violations=sum(counts),
            unique_violations=unique_violations,
            legacy_unique_violations=max(counts, default=0),
            elapsed_seconds=elapsed,
            report_path=report_path,
        )

    def end_session(self) -> None:
        self._store.clear()


def _as_float(value: Any, key: str) -> float | None:
    if not isinstance(value, dict):
        return None
    raw = value.get(key)
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return float(raw)
    return None


def _parse_stats(key: str, value: Any) -> BrowserRunStats | None:
    if not isinstance(value, dict):
        return None
    violations = value.get("violations")
    duration = _as_float(value, "durationSeconds")
    if not isinstance(violations, int) or isinstance(violations, bool) or duration is None:
        return None
    return BrowserRunStats(
        browser=str(value.get("browser") or key),
        violations=violations,
        duration_seconds=duration,
    )


def format_duration(seconds: float) -> str:
    """
    ``1h 2m 3s`` style; hours are omitted when zero.
    """

    total = max(0.0, seconds)
    hours = int(total // 3600)
    minutes = int((total % 3600) // 60)
    secs = int(round(total % 60))
    if secs == 60:
        minutes, secs = minutes + 1, 0
    if minutes == 60:
        hours, minutes = hours + 1, 0
    prefix = f"{hours}h " if hours > 0 else ""
    return f"{prefix}{minutes}m {secs}s"


def format_run_summary(summary: RunSummary) -> str:
    lines = ["", "=== Accessibility Test Summary ===", "Browser Results:"]
    for stats in summary.browsers:
        lines.append(
            f"  {stats.browser:<10}: {stats.violations:>5} violations found "
            f"({format_duration(stats.duration_seconds)})"
        )

    lines.extend(
        [
            "",
            "Totals:",
            f"  Total Violations: {summary.total_violations}",
            f"  Unique Violations: {summary.unique_violations}",
            f"  Largest Single-Browser Count (legacy): {summary.legacy_unique_violations}",
        ]
    )
    if summary.elapsed_seconds is not None:
        lines.append(f"  Total Elapsed Time: {format_duration(summary.elapsed_seconds)}")
    if summary.report_path:
        lines.append(f"  Report Location: {summary.report_path}")
    lines.append("===============================")
    return "\n".join(lines)
