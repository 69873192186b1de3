"""
a11y_audit/audit/runner.py

Audits every configured site in one browser.

Failure handling
----------------
- A page that fails to load or audit is logged and skipped; the remaining
  pages still run.
- A site that cannot be authenticated, or whose page list cannot be read,
  is recorded as a :class:`SiteAuditError` and the next site is attempted.
- Results gathered so far are always persisted. Site errors are raised
  together as :class:`SiteAuditErrors` once every site was attempted.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from typing import Any
from urllib.parse import urljoin

from a11y_audit import failure_codes
from a11y_audit.audit.pages import PageInfo, PageListError, read_pages_from_csv
from a11y_audit.audit.protocols import PageAuditor, SiteAuthenticator
from a11y_audit.config import AuditOptions, Site, get_login_selectors
from a11y_audit.domain.run_summary import AuditRunResult, SiteAuditError
from a11y_audit.domain.scan_result import ScanResult
from a11y_audit.logging_utils import log_event
from a11y_audit.services.collector_service import ScanResultCollector
from a11y_audit.services.run_summary_service import RunSummaryService
from a11y_audit.validators.scan_result_validator import ScanResultValidator

logger = logging.getLogger(__name__)


class SiteAuditErrors(RuntimeError):
    """
    Raised after a run when one or more sites could not be audited.

    ``result`` carries everything that was audited and persisted anyway.
    """

    def __init__(self, errors: Sequence[SiteAuditError], result: AuditRunResult) -> None:
        self.errors = tuple(errors)
        self.result = result
        details = "; ".join(f"{error.site_name}: {error.message}" for error in self.errors)
        super().__init__(f"Errors occurred while testing sites: {details}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": str(self),
            "errors": [
                {"site": error.site_name, "code": error.code, "message": error.message}
                for error in self.errors
            ],
        }


class AccessibilityAuditRunner:
    """
    Runs the audit engine over each site's pages for one browser.
    """

    def __init__(
        self,
        *,
        options: AuditOptions,
        sites: Sequence[Site],
        auditor: PageAuditor,
        collector: ScanResultCollector,
        authenticator: SiteAuthenticator | None = None,
        validator: ScanResultValidator | None = None,
        run_summary: RunSummaryService | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._options = options
        self._sites = list(sites)
        self._auditor = auditor
        self._collector = collector
        self._authenticator = authenticator
        self._validator = validator or ScanResultValidator()
        self._run_summary = run_summary
        self._clock = clock

    def run(self, browser: str) -> AuditRunResult:
        started = self._clock()
        results: list[ScanResult] = []
        errors: list[SiteAuditError] = []
        failed_pages = 0

        for site in self._sites:
            if self._options.path and site.name != self._options.site:
                continue

            log_event(logger, logging.INFO, "site_audit_started", site=site.name, browser=browser)

            if site.requires_login and not self._options.bypasses_login(site.name):
                try:
                    self._authenticate(site)
                except Exception as exc:  # noqa: BLE001
                    errors.append(
                        self._site_error(site, failure_codes.SITE_AUTHENTICATION_FAILED, exc)
                    )
                    continue

            try:
                pages = self._pages_for(site)
            except PageListError as exc:
                errors.append(self._site_error(site, failure_codes.PAGE_LIST_UNREADABLE, exc))
                continue

            for page in pages:
                result = self._audit_page(site, page, browser)
                if result is None:
                    failed_pages += 1
                    continue
                results.append(result)

        recorded = self._collector.record(browser, results)
        run_result = AuditRunResult(
            browser=browser,
            results=recorded,
            total_violations=sum(len(result.violations) for result in recorded),
            duration_seconds=max(0.0, self._clock() - started),
            failed_pages=failed_pages,
            errors=errors,
        )
        if self._run_summary is not None:
            self._run_summary.record_browser(
                browser, run_result.total_violations, run_result.duration_seconds
            )
        log_event(
            logger,
            logging.INFO,
            "browser_audit_completed",
            browser=browser,
            pages=len(recorded),
            failed_pages=failed_pages,
            violations=run_result.total_violations,
            site_errors=len(errors),
        )

        if errors:
            raise SiteAuditErrors(errors, run_result)
        return run_result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _authenticate(self, site: Site) -> None:
        if self._authenticator is None:
            raise RuntimeError("site requires login but no authenticator is configured")
        self._authenticator.authenticate(site, get_login_selectors(site.name))
        log_event(logger, logging.INFO, "site_authenticated", site=site.name)

    def _pages_for(self, site: Site) -> list[PageInfo]:
        if self._options.path:
            return [PageInfo(name=self._options.path, path=self._options.path)]
        return read_pages_from_csv(site.paths_csv_file)

    def _audit_page(self, site: Site, page: PageInfo, browser: str) -> ScanResult | None:
        url = urljoin(site.base_url, page.path)
        try:
            payload = dict(self._auditor.audit(url, tags=self._options.rulesets))
            payload.update(pageName=page.name, siteName=site.name, url=url, browser=browser)
            return self._validator.parse(payload, source=url)
        except Exception as exc:  # noqa: BLE001
            log_event(
                logger,
                logging.WARNING,
                "page_audit_failed",
                code=failure_codes.PAGE_AUDIT_FAILED,
                site=site.name,
                page=page.name,
                url=url,
                browser=browser,
                error=f"{type(exc).__name__}: {exc}",
            )
            return None

    @staticmethod
    def _site_error(site: Site, code: str, exc: Exception) -> SiteAuditError:
        error = SiteAuditError(site_name=site.name, code=code, message=str(exc))
        log_event(
            logger,
            logging.ERROR,
            "site_audit_failed",
            code=code,
            site=site.name,
            error=error.message,
        )
        return error
