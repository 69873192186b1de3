"""
a11y_audit/cli.py

Command line entry point.

    session-start  begin a run session and discard stale browser statistics
    report         merge stored browser results and write every report format
    summary        print the end-of-session run summary and close the session
    check-config   validate audit options and resolve the configured sites
"""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Sequence
from datetime import datetime, timezone

from a11y_audit.config import (
    ConfigurationError,
    audit_options_from_namespace,
    build_audit_option_parser,
    get_report_settings,
    get_sites_configuration,
    load_environment_config,
)
from a11y_audit.logging_utils import configure_logging, log_event
from a11y_audit.services.report_service import ReportService, report_filename
from a11y_audit.services.run_summary_service import RunSummaryService, format_run_summary

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_REPORT_FAILED = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Accessibility audit reporting.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("session-start", help="Start a run session before the browser audits.")
    subparsers.add_parser("report", help="Generate the consolidated report from stored results.")

    summary = subparsers.add_parser("summary", help="Print the run summary for this session.")
    summary.add_argument(
        "--unique",
        type=int,
        default=None,
        help="Deduplicated violation total; computed from stored results when omitted.",
    )

    check = subparsers.add_parser("check-config", help="Validate options and site configuration.")
    build_audit_option_parser(check)
    check.add_argument(
        "--env-dir",
        default="env",
        help="Directory holding .env.<environment> files.",
    )
    return parser


def run_session_start() -> int:
    started = RunSummaryService().start_session()
    print(f"Run session started at {datetime.fromtimestamp(started, tz=timezone.utc).isoformat()}")
    return EXIT_OK


def run_report() -> int:
    generation = ReportService().generate()
    for name, path in generation.written.items():
        print(f"{name}: {path}")
    for name, error in generation.failures.items():
        print(f"{name}: FAILED ({error})")
    print(f"Total violations: {generation.total_violations}")

    if generation.failures and not generation.succeeded:
        return EXIT_REPORT_FAILED
    return EXIT_OK


def run_summary(unique: int | None) -> int:
    settings = get_report_settings()
    report_service = ReportService(settings=settings)
    dataset = report_service.build_dataset()
    if unique is None:
        unique = dataset.summary.total_violations

    run_summary_service = RunSummaryService(settings=settings)
    summary = run_summary_service.build_summary(
        unique_violations=unique,
        report_path=f"{settings.reports_dir}/{report_filename(dataset)}",
    )
    print(format_run_summary(summary))
    run_summary_service.end_session()
    return EXIT_OK


def run_check_config(args: argparse.Namespace) -> int:
    try:
        options = audit_options_from_namespace(args)
        env_path = load_environment_config(options.environment, env_dir=args.env_dir)
        sites = get_sites_configuration(
            options.site,
            bypass_login_all=options.bypass_login_all,
            bypass_login_sites=options.bypass_login_sites,
        )
    except ConfigurationError as exc:
        log_event(logger, logging.ERROR, "configuration_invalid", error=str(exc))
        print(f"Configuration error: {exc}")
        return EXIT_CONFIG_ERROR

    payload = {
        "environment": options.environment,
        "env_file": str(env_path),
        "rulesets": list(options.rulesets),
        "single_page": options.path,
        "sites": [
            {
                "name": site.name,
                "base_url": site.base_url,
                "paths_csv_file": site.paths_csv_file,
                "requires_login": site.requires_login,
            }
            for site in sites
        ],
    }
    print(json.dumps(payload, indent=2))
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    configure_logging()
    args = build_parser().parse_args(argv)

    if args.command == "session-start":
        return run_session_start()
    if args.command == "report":
        return run_report()
    if args.command == "summary":
        return run_summary(args.unique)
    return run_check_config(args)


if __name__ == "__main__":
    raise SystemExit(main())
