"""
a11y_audit/services/merger_service.py

Reads every persisted per-browser result set back into one list.

Tolerates partial failure: a corrupt entry or a malformed record is logged
and skipped, never aborting the merge of the remaining browsers. Called while
other browsers are still running, it returns whatever subset exists.
"""

from __future__ import annotations

import logging

from a11y_audit import failure_codes
from a11y_audit.domain.scan_result import ScanResult
from a11y_audit.logging_utils import log_event
from a11y_audit.storage.base import ResultStore
from a11y_audit.validators.scan_result_validator import ScanResultValidator

logger = logging.getLogger(__name__)


class CrossRunMerger:
    """
    Combines stored results of all browser runs.
    """

    def __init__(self, store: ResultStore, validator: ScanResultValidator | None = None) -> None:
        self._store = store
        self._validator = validator or ScanResultValidator()

    def load_all(self) -> list[ScanResult]:
        merged: list[ScanResult] = []
        for key, payload in self._store.read_all():
            if not isinstance(payload, list):
                log_event(
                    logger,
                    logging.WARNING,
                    "result_entry_skipped",
                    code=failure_codes.RESULT_FILE_CORRUPT,
                    key=key,
                    error=f"expected a list of results, got {type(payload).__name__}",
                )
                continue

            loaded = 0
            for index, record in enumerate(payload):
                result, issues = self._validator.validate_payload(record, source=key)
                if result is None:
                    log_event(
                        logger,
                        logging.WARNING,
                        "scan_result_skipped",
                        code=failure_codes.MALFORMED_SCAN_RESULT,
                        key=key,
                        index=index,
                        errors=[issue.message for issue in issues],
                    )
                    continue
                merged.append(result)
                loaded += 1

            log_event(logger, logging.DEBUG, "result_entry_loaded", key=key, results=loaded)

        log_event(logger, logging.INFO, "scan_results_merged", results=len(merged))
        return merged
