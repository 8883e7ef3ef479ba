"""
JSON File Storage Implementation

DESIGN DECISION: A single pretty-printed JSON document holds the whole
collection because:
1. The ledger is a single-user tool with a small data set
2. The file is human readable and trivially backed up
3. No database setup required

TRADEOFFS:
- Every mutation rewrites the whole file
- Only threads inside one process are serialized (see locked());
  two processes writing the same file still race, last writer wins

Writes go to a temp file in the same directory and are moved into place
with os.replace, so a crash mid-write never leaves a truncated document.
"""

import contextlib
import json
import os
import stat
import tempfile
import threading
from pathlib import Path
from typing import Iterator, Optional, Union
from uuid import UUID

import structlog
from pydantic import TypeAdapter, ValidationError

from src.config import get_settings
from src.models.audit import AuditEvent
from src.models.expense import ExpenseEntry
from src.services.storage.interface import (
    AuditStorageInterface,
    CorruptStoreError,
    ExpenseStorageInterface,
    StorageError,
    StorageWriteError,
)


_COLLECTION = TypeAdapter(list[ExpenseEntry])

# One lock per resolved data file, shared by every storage object in the
# process that points at it.
_PATH_LOCKS: dict[str, threading.Lock] = {}
_PATH_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = str(path.resolve())
    with _PATH_LOCKS_GUARD:
        return _PATH_LOCKS.setdefault(key, threading.Lock())


class JsonFileExpenseStorage(ExpenseStorageInterface):
    """
    Stores the expense collection as a JSON array in one file.

    Missing file = empty ledger (first run). Unparseable content is
    replaced by an empty ledger and reported through `last_recovery`,
    unless strict mode is on, in which case CorruptStoreError is raised.
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        indent: Optional[int] = None,
        strict: Optional[bool] = None,
    ):
        """
        Initialize storage.

        Args:
            path: Data file location. Defaults to the configured data_file.
            indent: JSON indentation. Defaults to the configured json_indent.
            strict: Refuse to recover from corruption. Defaults to the
                    configured strict_load.
        """
        if path is None or indent is None or strict is None:
            settings = get_settings().storage
            path = settings.data_file if path is None else path
            indent = settings.json_indent if indent is None else indent
            strict = settings.strict_load if strict is None else strict

        self._path = Path(path)
        self._indent = indent
        self._strict = strict
        self._lock = _lock_for(self._path)
        self._logger = structlog.get_logger("ledger.storage")
        self.last_recovery: Optional[str] = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def location(self) -> str:
        return str(self._path)

    def load(self) -> list[ExpenseEntry]:
        self.last_recovery = None

        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Could not read {self._path}: {e}") from e

        if not raw.strip():
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            return self._recover(f"invalid JSON: {e}")

        if not isinstance(data, list):
            return self._recover(
                f"expected a JSON array, found {type(data).__name__}"
            )

        try:
            return _COLLECTION.validate_python(data)
        except ValidationError as e:
            return self._recover(
                f"array does not hold valid entries ({e.error_count()} errors)"
            )

    def _recover(self, reason: str) -> list[ExpenseEntry]:
        if self._strict:
            raise CorruptStoreError(f"{self._path}: {reason}")

        self._logger.warning(
            "store_recovered_as_empty",
            path=str(self._path),
            reason=reason,
        )
        self.last_recovery = reason
        return []

    def save(self, entries: list[ExpenseEntry]) -> None:
        payload = json.dumps(
            _COLLECTION.dump_python(list(entries), mode="json"),
            indent=self._indent or None,
            ensure_ascii=False,
        )

        tmp_path: Optional[str] = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.write("\n")
                fh.flush()
                os.fsync(fh.fileno())
            os.chmod(tmp_path, self._file_mode())
            os.replace(tmp_path, self._path)
        except OSError as e:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_path)
            raise StorageWriteError(f"Could not write {self._path}: {e}") from e

        self._logger.debug(
            "store_saved",
            path=str(self._path),
            entry_count=len(entries),
        )

    def _file_mode(self) -> int:
        # mkstemp creates 0600; keep the existing mode or the umask default
        try:
            return stat.S_IMODE(os.stat(self._path).st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    @contextlib.contextmanager
    def locked(self) -> Iterator[None]:
        with self._lock:
            yield


class JsonLinesAuditStorage(AuditStorageInterface):
    """
    Append-only audit log, one JSON object per line.

    Lines that fail to parse are skipped on read; the file is never
    rewritten.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        self._lock = threading.Lock()
        self._logger = structlog.get_logger("ledger.storage")

    def append_event(self, event: AuditEvent) -> bool:
        line = event.to_json_line()
        with self._lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")
        return True

    def _read_events(self) -> list[AuditEvent]:
        try:
            lines = self._path.read_text(encoding="utf-8").splitlines()
        except FileNotFoundError:
            return []

        events = []
        for number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                events.append(AuditEvent.model_validate_json(line))
            except ValidationError as e:
                self._logger.warning(
                    "audit_line_skipped",
                    path=str(self._path),
                    line=number,
                    error=str(e),
                )
        return events

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [
            event for event in self._read_events()
            if event.correlation_id == correlation_id
        ]

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        events = self._read_events()
        events.reverse()
        return events[:limit]
