"""
Storage layer exports.
"""

from a11y_audit.storage.base import ResultStore, ResultStoreReadError, ResultStoreWriteError
from a11y_audit.storage.json_file_store import JSONFileResultStore

__all__ = ["JSONFileResultStore", "ResultStore", "ResultStoreReadError", "ResultStoreWriteError"]
