"""Shared file helpers for the JSON-backed repositories.

Each collection lives in its own ``<name>.json`` file holding a JSON
list (or object).  Writes go through a temp file and ``os.replace`` so a
crash never leaves a half-written file; read-modify-write sequences
that must not interleave run under an exclusive ``flock`` on a sibling
lock file.
"""

from __future__ import annotations

import fcntl
import json
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from storeadmin.domain.exceptions import UpstreamError


class JsonFile:

    def __init__(self, file_path: Path, empty: Any = None) -> None:
        self._file_path = file_path
        self._empty = [] if empty is None else empty
        self._ensure_file()

    @property
    def path(self) -> Path:
        return self._file_path

    def load(self) -> Any:
        try:
            return json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise UpstreamError(f"Cannot read {self._file_path.name}: {exc}") from exc

    def persist(self, data: Any) -> None:
        fd, temp_path = tempfile.mkstemp(
            dir=self._file_path.parent, prefix=f".{self._file_path.stem}_", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
                f.write("\n")
            os.replace(temp_path, self._file_path)
        except OSError as exc:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise UpstreamError(f"Cannot write {self._file_path.name}: {exc}") from exc

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Exclusive lock for read-modify-write sequences on this file."""
        lock_path = self._file_path.with_name(f".{self._file_path.name}.lock")
        with open(lock_path, "w") as lock_file:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def upsert(self, record: dict, key: str = "id") -> None:
        """Replace the record with the same *key*, or append it."""
        with self.locked():
            records = self.load()
            for i, raw in enumerate(records):
                if raw[key] == record[key]:
                    records[i] = record
                    break
            else:
                records.append(record)
            self.persist(records)

    def remove(self, predicate) -> int:
        """Drop every record matching *predicate*; return how many went."""
        with self.locked():
            records = self.load()
            kept = [raw for raw in records if not predicate(raw)]
            self.persist(kept)
        return len(records) - len(kept)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(json.dumps(self._empty), encoding="utf-8")


def parse_timestamp(value: str) -> datetime:
    """Read an ISO-8601 timestamp; values stored without an offset are UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
