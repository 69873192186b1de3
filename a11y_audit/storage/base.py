"""
Storage layer interfaces for per-browser result persistence.

Each browser run owns exactly one key and overwrites it on every write;
readers enumerate whatever keys exist at call time. Writers never read, so
no locking is needed between independent browser processes.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Any

from a11y_audit import failure_codes
from a11y_audit.logging_utils import log_event

logger = logging.getLogger(__name__)


class ResultStoreWriteError(RuntimeError):
    """
    Raised when a value cannot be persisted.
    """


class ResultStoreReadError(RuntimeError):
    """
    Raised when one stored value is unreadable or corrupt.
    """

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"{key}: {message}")
        self.key = key


class ResultStore(ABC):
    """
    Key/value store keyed by browser identifier.
    """

    @abstractmethod
    def write(self, key: str, value: Any) -> None:
        """
        Persist *value* under *key*, replacing any previous value.
        """

    @abstractmethod
    def keys(self) -> list[str]:
        """
        Return every stored key in a stable order.
        """

    @abstractmethod
    def read(self, key: str) -> Any:
        """
        Return the value stored under *key*.

        Raises :class:`ResultStoreReadError` when the value is corrupt.
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """
        Remove *key* if present.
        """

    def read_all(self) -> Iterator[tuple[str, Any]]:
        """
        Yield ``(key, value)`` for every readable entry.

        Corrupt entries are logged and skipped so one bad entry never
        blanks the others.
        """

        for key in self.keys():
            try:
                value = self.read(key)
            except ResultStoreReadError as exc:
                log_event(
                    logger,
                    logging.WARNING,
                    "result_entry_skipped",
                    code=failure_codes.RESULT_FILE_CORRUPT,
                    key=key,
                    error=str(exc),
                )
                continue
            yield key, value

    def clear(self) -> None:
        for key in self.keys():
            self.delete(key)
