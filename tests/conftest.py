"""
Shared fixtures for the audit and reporting tests.

Everything here is in-memory or under ``tmp_path``; no browser, no network.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

import pytest

from a11y_audit.config import ReportSettings
from a11y_audit.domain.scan_result import AffectedNode, ScanResult, ViolationItem
from a11y_audit.services.report_service import ReportService

FIXED_NOW = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


def _violation(
    rule_id: str,
    *targets: str,
    impact: str = "serious",
    tags: Sequence[str] = ("wcag2aa",),
    description: str = "",
    failure_summary: str | None = None,
) -> ViolationItem:
    return ViolationItem(
        rule_id=rule_id,
        impact=impact,
        tags=tuple(tags),
        description=description or f"{rule_id} description",
        nodes=tuple(
            AffectedNode(target=target, failure_summary=failure_summary) for target in targets
        ),
    )


def _result(
    site_name: str = "Main",
    page_url: str = "https://example.test/",
    *violations: ViolationItem,
    browser: str | None = "chromium",
    page_name: str | None = None,
) -> ScanResult:
    return ScanResult(
        site_name=site_name,
        page_name=page_name or page_url.rsplit("/", 1)[-1] or "Home",
        page_url=page_url,
        browser=browser,
        violations=tuple(violations),
    )


@pytest.fixture()
def make_violation() -> Callable[..., ViolationItem]:
    return _violation


@pytest.fixture()
def make_result() -> Callable[..., ScanResult]:
    return _result


@pytest.fixture()
def raw_payload() -> Callable[..., dict[str, Any]]:
    """Factory for engine-shaped payloads with injected page fields."""

    def build(**overrides: Any) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "siteName": "Main",
            "pageName": "Home",
            "url": "https://example.test/",
            "browser": "firefox",
            "timestamp": "2024-05-01T12:00:00.000Z",
            "testEngine": {"name": "axe-core", "version": "4.10.0"},
            "violations": [
                {
                    "id": "image-alt",
                    "impact": "critical",
                    "tags": ["wcag2a", "wcag111", "cat.text-alternatives"],
                    "description": "Ensures <img> elements have alternate text",
                    "help": "Images must have alternate text",
                    "helpUrl": "https://dequeuniversity.com/rules/axe/4.10/image-alt",
                    "nodes": [
                        {
                            "target": ["img.hero"],
                            "failureSummary": "Fix any of the following:\n  Element does not have an alt attribute",
                            "html": '<img class="hero" src="hero.png">',
                        }
                    ],
                }
            ],
            "passes": [],
            "incomplete": [],
            "inapplicable": [],
        }
        payload.update(overrides)
        return payload

    return build


@pytest.fixture()
def report_settings(tmp_path) -> ReportSettings:
    return ReportSettings(
        reports_dir=str(tmp_path / "accessibility-reports"),
        run_summary_dir=str(tmp_path / "test-results"),
    )


@pytest.fixture()
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture()
def build_dataset(report_settings, fixed_clock):
    """Run the real merge-free pipeline (dedup, summary) over given results."""

    def build(results: Sequence[ScanResult]):
        service = ReportService(settings=report_settings, renderers=[], clock=fixed_clock)
        return service.build_dataset(list(results))

    return build
