"""
tests/test_cli.py

Pytest tests for the command line entry point. Settings are pointed at
``tmp_path`` through environment variables.
"""

from __future__ import annotations

import json
import os

import pytest

from a11y_audit.cli import EXIT_CONFIG_ERROR, EXIT_OK, main
from a11y_audit.config import get_report_settings
from a11y_audit.services.collector_service import ScanResultCollector
from a11y_audit.services.run_summary_service import RunSummaryService
from a11y_audit.storage.json_file_store import JSONFileResultStore


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    monkeypatch.setattr(os, "environ", os.environ.copy())
    monkeypatch.setenv("A11Y_REPORTS_DIR", str(tmp_path / "reports"))
    monkeypatch.setenv("A11Y_RUN_SUMMARY_DIR", str(tmp_path / "test-results"))
    for key in ("SITE", "SINGLE_PAGE_PATH", "SITE_NAMES", "ENV"):
        monkeypatch.delenv(key, raising=False)
    get_report_settings.cache_clear()
    yield
    get_report_settings.cache_clear()


def test_report_writes_files_and_prints_total(tmp_path, capsys, make_result, make_violation) -> None:
    collector = ScanResultCollector(JSONFileResultStore(get_report_settings().browser_results_dir))
    collector.record("firefox", [make_result("Main", "https://main.test/", make_violation("region", "body"))])

    exit_code = main(["report"])

    out = capsys.readouterr().out
    assert exit_code == EXIT_OK
    assert "Total violations: 1" in out
    assert (tmp_path / "reports" / "report.html").exists()
    assert (tmp_path / "reports" / "accessibility-violations.csv").exists()


def test_summary_uses_deduplicated_total(capsys, make_result, make_violation) -> None:
    violation = make_violation("region", "body")
    collector = ScanResultCollector(JSONFileResultStore(get_report_settings().browser_results_dir))
    collector.record("firefox", [make_result("Main", "https://main.test/", violation)])
    collector.record("chromium", [make_result("Main", "https://main.test/", violation)])
    run_summary = RunSummaryService()
    run_summary.record_browser("firefox", 1, 10.0)
    run_summary.record_browser("chromium", 1, 12.0)

    exit_code = main(["summary"])

    out = capsys.readouterr().out
    assert exit_code == EXIT_OK
    assert "Total Violations: 2" in out
    assert "Unique Violations: 1" in out
    assert "consolidated-multi-browser-accessibility-report.html" in out


def test_check_config_missing_env_file(tmp_path, capsys) -> None:
    exit_code = main(["check-config", "--env", "nowhere", "--env-dir", str(tmp_path)])

    assert exit_code == EXIT_CONFIG_ERROR
    assert "not found" in capsys.readouterr().out


def test_check_config_path_without_site(tmp_path, capsys) -> None:
    exit_code = main(["check-config", "--path", "/about", "--env-dir", str(tmp_path)])

    assert exit_code == EXIT_CONFIG_ERROR


def test_check_config_resolves_sites(tmp_path, capsys) -> None:
    (tmp_path / ".env.qa").write_text(
        "SITE_NAMES=Main\nMAIN_BASE_URL=https://main.test\nMAIN_PATHS_CSV_FILE=main.csv\n",
        encoding="utf-8",
    )

    exit_code = main(["check-config", "--env-dir", str(tmp_path)])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == EXIT_OK
    assert payload["environment"] == "qa"
    assert [site["name"] for site in payload["sites"]] == ["Main"]
    assert "password" not in json.dumps(payload)


def test_session_start_then_summary_reports_elapsed_and_clears(tmp_path, capsys) -> None:
    RunSummaryService().record_browser("webkit", 7, 4.0)

    assert main(["session-start"]) == EXIT_OK
    RunSummaryService().record_browser("firefox", 3, 65.0)

    exit_code = main(["summary", "--unique", "3"])

    out = capsys.readouterr().out
    assert exit_code == EXIT_OK
    assert "Run session started at" in out
    assert "Total Elapsed Time:" in out
    assert "firefox" in out
    assert "webkit" not in out
    assert list((tmp_path / "test-results").glob("*-run.json")) == []


def test_summary_after_closed_session_has_no_browsers(capsys) -> None:
    main(["session-start"])
    RunSummaryService().record_browser("chromium", 2, 5.0)
    main(["summary", "--unique", "2"])
    capsys.readouterr()

    main(["summary", "--unique", "0"])

    out = capsys.readouterr().out
    assert "chromium" not in out
    assert "Total Elapsed Time:" not in out
