"""
a11y_audit/services/collector_service.py

Persists one browser's scan results so that independent browser runs,
which share no memory, can be merged later.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence

from a11y_audit.domain.scan_result import ScanResult
from a11y_audit.logging_utils import log_event
from a11y_audit.storage.base import ResultStore

logger = logging.getLogger(__name__)


class ScanResultCollector:
    """
    Tags results with their browser and writes them under that browser's key.

    Every call overwrites the browser's previous entry; nothing is merged at
    write time. Write failures propagate to the caller.
    """

    def __init__(self, store: ResultStore) -> None:
        self._store = store

    def record(self, browser: str, results: Sequence[ScanResult]) -> list[ScanResult]:
        """
        Persist *results* for *browser* and return the tagged results.
        """

        if not browser or not browser.strip():
            raise ValueError("browser must be a non-empty identifier")
        browser = browser.strip()

        tagged = [dataclasses.replace(result, browser=browser) for result in results]
        self._store.write(browser, [result.to_payload() for result in tagged])

        log_event(
            logger,
            logging.INFO,
            "scan_results_recorded",
            browser=browser,
            results=len(tagged),
            violations=sum(len(result.violations) for result in tagged),
        )
        return tagged
