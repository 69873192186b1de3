"""
JSON-file implementation of the per-browser result store.

Layout: ``<directory>/<key><suffix>``, e.g. ``browser-results/firefox-results.json``.
"""

from __future__ import annotations

import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any

from a11y_audit.storage.base import ResultStore, ResultStoreReadError, ResultStoreWriteError

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_key(key: str) -> str:
    """
    Produce a flat, filesystem-safe key. Keeps only A-Z a-z 0-9 . _ -
    """

    cleaned = _UNSAFE_KEY_CHARS.sub("_", key.strip())
    if not cleaned:
        raise ValueError("Store key must contain at least one safe character.")
    return cleaned


class JSONFileResultStore(ResultStore):
    """
    Persist one JSON document per key inside *directory*.
    """

    def __init__(self, directory: str | Path, *, suffix: str = "-results.json") -> None:
        self._directory = Path(directory)
        self._suffix = suffix

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        return self._directory / f"{sanitize_key(key)}{self._suffix}"

    def write(self, key: str, value: Any) -> None:
        target = self.path_for(key)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            serialised = json.dumps(value, ensure_ascii=False, indent=2)
            # Replace atomically so a concurrent reader never sees half a file.
            fd, tmp_name = tempfile.mkstemp(
                dir=self._directory, prefix=f".{target.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(serialised)
                os.replace(tmp_name, target)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as exc:
            raise ResultStoreWriteError(f"Failed to write results for {key!r} to {target}: {exc}") from exc

    def keys(self) -> list[str]:
        if not self._directory.is_dir():
            return []
        return sorted(
            path.name[: -len(self._suffix)]
            for path in self._directory.glob(f"*{self._suffix}")
            if path.is_file() and not path.name.startswith(".")
        )

    def read(self, key: str) -> Any:
        path = self.path_for(key)
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ResultStoreReadError(key, f"unreadable file {path}: {exc}") from exc

    def delete(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)
