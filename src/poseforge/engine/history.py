"""Undo/redo snapshot stacks and the labeled recording log."""

from __future__ import annotations

import logging
from collections import deque
from typing import Any

from poseforge.models.history import HistorySnapshot, LogEntry

logger = logging.getLogger(__name__)

UNDO_LIMIT = 50
LOG_DISPLAY_LIMIT = 100


class HistoryStore:
    """Bounded undo/redo of full-state snapshots plus an append-only log.

    The store only moves snapshots around; deciding *when* undo is allowed
    (not while playing or transitioning) is the caller's job.
    """

    def __init__(self, limit: int = UNDO_LIMIT, display_limit: int = LOG_DISPLAY_LIMIT) -> None:
        self.limit = limit
        self.display_limit = display_limit
        self._undo: deque[HistorySnapshot] = deque(maxlen=limit)
        self._redo: deque[HistorySnapshot] = deque(maxlen=limit)
        self._log: list[LogEntry] = []

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def save(self, snapshot: HistorySnapshot) -> None:
        """Push *snapshot* as an undo point.  Any new edit invalidates redo."""
        self._undo.append(snapshot)
        self._redo.clear()

    def undo(self, current: HistorySnapshot) -> HistorySnapshot | None:
        """Pop the latest undo point, parking *current* on the redo stack."""
        if not self._undo:
            return None
        previous = self._undo.pop()
        self._redo.appendleft(current)
        return previous

    def redo(self, current: HistorySnapshot) -> HistorySnapshot | None:
        """Mirror of :meth:`undo`."""
        if not self._redo:
            return None
        following = self._redo.popleft()
        self._undo.append(current)
        return following

    # ------------------------------------------------------------------
    # Recording log
    # ------------------------------------------------------------------

    @property
    def log(self) -> list[LogEntry]:
        return list(self._log)

    def record(self, entry: LogEntry) -> LogEntry:
        self._log.append(entry)
        return entry

    def recent(self, limit: int | None = None) -> list[LogEntry]:
        """The tail of the log shown to the operator."""
        count = self.display_limit if limit is None else limit
        return self._log[-count:] if count > 0 else []

    def entry(self, index: int) -> LogEntry | None:
        if 0 <= index < len(self._log):
            return self._log[index]
        return None

    def delete_entry(self, index: int) -> LogEntry | None:
        if not 0 <= index < len(self._log):
            return None
        removed = self._log.pop(index)
        logger.debug("Removed log entry %d (%s)", index, removed.label)
        return removed

    def clear_log(self) -> None:
        self._log.clear()

    def export_records(self) -> list[dict[str, Any]]:
        """The log as ordered ``{timestamp, label, pose?, proportions?}`` dicts."""
        return [entry.model_dump(mode="json", exclude_none=True) for entry in self._log]
