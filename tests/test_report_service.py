"""
tests/test_report_service.py

End-to-end report generation over a temporary reports directory: stored
browser results in, every report format out.
"""

from __future__ import annotations

import json
import logging

import pytest

from a11y_audit.services.collector_service import ScanResultCollector
from a11y_audit.services.report_service import (
    MULTI_BROWSER_REPORT,
    SINGLE_BROWSER_REPORT,
    RendererSpec,
    ReportService,
    default_renderers,
)
from a11y_audit.storage.json_file_store import JSONFileResultStore


@pytest.fixture()
def collector(report_settings) -> ScanResultCollector:
    return ScanResultCollector(JSONFileResultStore(report_settings.browser_results_dir))


@pytest.fixture()
def service(report_settings, fixed_clock) -> ReportService:
    return ReportService(settings=report_settings, clock=fixed_clock)


def _record_two_browsers(collector, make_result, make_violation) -> None:
    violation = make_violation("image-alt", "img.hero", impact="critical", tags=("wcag2a",))
    collector.record("firefox", [make_result("Main", "https://main.test/", violation)])
    collector.record("chromium", [make_result("Main", "https://main.test/", violation)])


class TestGenerate:
    def test_writes_every_format(self, service, collector, report_settings, make_result, make_violation) -> None:
        _record_two_browsers(collector, make_result, make_violation)

        generation = service.generate()

        assert generation.failures == {}
        assert set(generation.written) == {"html", "snapshot", "summary_csv", "violations_csv"}
        assert generation.written["html"].name == MULTI_BROWSER_REPORT
        assert generation.written["snapshot"] == report_settings.data_dir / "report-data.json"
        assert all(path.exists() for path in generation.written.values())
        assert generation.total_violations == 1

    def test_single_browser_uses_plain_name(self, service, collector, make_result, make_violation) -> None:
        collector.record(
            "firefox",
            [make_result("Main", "https://main.test/", make_violation("region", "body"))],
        )

        generation = service.generate()

        assert generation.written["html"].name == SINGLE_BROWSER_REPORT

    def test_snapshot_matches_dataset(self, service, collector, make_result, make_violation) -> None:
        _record_two_browsers(collector, make_result, make_violation)

        generation = service.generate()
        snapshot = json.loads(generation.written["snapshot"].read_text(encoding="utf-8"))

        assert snapshot["summary"]["totalViolations"] == 1
        assert snapshot["results"]["Main"][0]["browsers"] == ["chromium", "firefox"]

    def test_regeneration_is_stable(self, service, collector, make_result, make_violation) -> None:
        _record_two_browsers(collector, make_result, make_violation)

        first = service.generate()
        contents = {name: path.read_text(encoding="utf-8") for name, path in first.written.items()}
        second = service.generate()

        assert {name: path.read_text(encoding="utf-8") for name, path in second.written.items()} == contents

    def test_empty_store_still_renders(self, service) -> None:
        generation = service.generate()

        assert generation.succeeded
        assert generation.total_violations == 0

    def test_explicit_results_skip_the_store(self, service, make_result, make_violation) -> None:
        generation = service.generate([make_result("Main", "https://main.test/", make_violation("list", "ul"))])

        assert generation.total_violations == 1


class TestRendererFailures:
    def test_failure_is_isolated(self, report_settings, fixed_clock, make_result, make_violation, caplog) -> None:
        def explode(_dataset):
            raise RuntimeError("template exploded")

        renderers = [RendererSpec(name="html", filename=lambda _d: "report.html", render=explode)]
        renderers += [spec for spec in default_renderers(report_settings) if spec.name != "html"]
        service = ReportService(settings=report_settings, renderers=renderers, clock=fixed_clock)

        with caplog.at_level(logging.ERROR):
            generation = service.generate([make_result("Main", "https://main.test/", make_violation("list", "ul"))])

        assert set(generation.failures) == {"html"}
        assert "template exploded" in generation.failures["html"]
        assert set(generation.written) == {"snapshot", "summary_csv", "violations_csv"}
        assert any("renderer_failed" in record.getMessage() for record in caplog.records)

    def test_all_renderers_failing_is_reported(self, report_settings, fixed_clock) -> None:
        def explode(_dataset):
            raise ValueError("nope")

        service = ReportService(
            settings=report_settings,
            renderers=[
                RendererSpec(name="a", filename=lambda _d: "a.txt", render=explode),
                RendererSpec(name="b", filename=lambda _d: "b.txt", render=explode),
            ],
            clock=fixed_clock,
        )

        generation = service.generate([])

        assert not generation.succeeded
        assert set(generation.failures) == {"a", "b"}
