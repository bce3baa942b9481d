"""Bounded result history persisted as a single JSON document.

Every save rewrites the whole file through a temporary sibling and an
atomic rename, so the file on disk is always a complete JSON array that
mirrors the in-memory history.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path

from .gatus import Result
from .logger import log

DEFAULT_RESULTS_TO_KEEP = 20


class PersistenceError(Exception):
    pass


class CorruptStoreError(PersistenceError):
    pass


class ResultStore:
    def __init__(self, path: Path, capacity: int, results: list[Result] | None = None) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._path = Path(path)
        self._capacity = capacity
        self._results: tuple[Result, ...] = tuple((results or [])[-capacity:])
        # _write_lock orders saves and their disk writes; _lock guards only
        # the published tuple.
        self._write_lock = threading.Lock()
        self._lock = threading.Lock()

    @classmethod
    def load_or_init(cls, path: str | os.PathLike[str], capacity: int = DEFAULT_RESULTS_TO_KEEP) -> ResultStore:
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch(exist_ok=True)
        except OSError as exc:
            raise PersistenceError(f"failed to open data file {path}: {exc}") from exc

        results = read_results(path)
        if len(results) > capacity:
            log("store.truncated", path=str(path), stored=len(results), capacity=capacity)
        store = cls(path, capacity, results)
        log("store.loaded", path=str(path), results=len(store), capacity=capacity)
        return store

    @property
    def path(self) -> Path:
        return self._path

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)

    def save_result(self, result: Result) -> None:
        with self._write_lock:
            with self._lock:
                current = self._results
            updated = current + (result,)
            if len(updated) > self._capacity:
                updated = updated[1:]
            try:
                self._write(updated)
            except PersistenceError:
                # A failed disk write still advances memory; the next
                # successful save brings the file back in sync.
                self._publish(updated)
                raise
            self._publish(updated)

    def _publish(self, results: tuple[Result, ...]) -> None:
        with self._lock:
            self._results = results

    def get_results(self) -> list[Result]:
        with self._lock:
            return list(self._results)

    def _write(self, results: tuple[Result, ...]) -> None:
        payload = json.dumps([r.as_dict() for r in results], indent=2)
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=str(self._path.parent), prefix=f".{self._path.name}.", suffix=".tmp"
            )
        except OSError as exc:
            raise PersistenceError(f"failed to create temp file for {self._path}: {exc}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload + "\n")
                fh.flush()
                os.fsync(fh.fileno())
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, self._path)
        except OSError as exc:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise PersistenceError(f"failed to write data file {self._path}: {exc}") from exc


def read_results(path: str | os.PathLike[str]) -> list[Result]:
    """Decode a store file; an empty file holds no results."""
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise PersistenceError(f"failed to read data file {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise CorruptStoreError(f"data file {path} is not UTF-8 text: {exc}") from exc
    if not raw.strip():
        return []
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise CorruptStoreError(f"data file {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise CorruptStoreError(f"data file {path} does not contain a result array")
    try:
        return [Result.from_dict(item) for item in data]
    except ValueError as exc:
        raise CorruptStoreError(f"data file {path} holds an invalid result: {exc}") from exc
