"""buffer.py - Per-severity message queues for one SmartLogger.

SeverityQueues is the in-memory store that holds LogRecords between flushes.
Every record is queued regardless of the logger's threshold: when something
severe enough happens, the debug-level breadcrumbs that led up to it must
still be available. ``drain()`` then decides what the flush window writes.

Design decisions:
    - One ``collections.deque`` per severity keeps enqueue O(1) and lets
      ``drain()`` pick whole severities without filtering record by record.
    - A monotonic sequence number is stamped on each record under the same
      lock as the append, so records from different queues can be merged
      back into true enqueue order even when timestamps alias.
    - ``drain()`` combines select, sort and clear in one locked call; records
      queued while a flushed batch is being written belong to the next window.
"""

import threading
from collections import deque
from typing import List, Optional, Tuple

from .severity import SEVERITY_NAMES


class LogRecord:
    """An immutable record waiting to be written.

    Attributes:
        sequence (int): Position in the logger's enqueue order. Unique within
            one logger and used as the sort key at flush time.
        timestamp (str): Creation time, already formatted.
        severity (int): Severity rank, 0 (emergency) to 7 (debug).
        label (str): Upper-case severity name, e.g. ``"ERROR"``.
        message (str): Message text, or ``"Type: message"`` for exceptions.
        location (str): Source location as ``"file(line)"``.
        trace (str | None): Formatted traceback when the message came from
            a raised exception.
        data (str | None): Serialized auxiliary data; None when no data was
            supplied.
        context (str | None): Enclosing function of the call site, if known.
    """

    __slots__ = (
        "sequence",
        "timestamp",
        "severity",
        "label",
        "message",
        "location",
        "trace",
        "data",
        "context",
    )

    def __init__(
        self,
        sequence: int,
        timestamp: str,
        severity: int,
        message: str,
        location: str = "()",
        trace: Optional[str] = None,
        data: Optional[str] = None,
        context: Optional[str] = None,
    ) -> None:
        setter = super().__setattr__
        setter("sequence", sequence)
        setter("timestamp", timestamp)
        setter("severity", severity)
        setter("label", SEVERITY_NAMES[severity].upper())
        setter("message", message)
        setter("location", location)
        setter("trace", trace)
        setter("data", data)
        setter("context", context)

    def __setattr__(self, name, value):
        raise AttributeError(f"LogRecord is immutable; cannot set {name!r}")

    def __delattr__(self, name):
        raise AttributeError(f"LogRecord is immutable; cannot delete {name!r}")

    def row(self) -> Tuple[str, str, str, str, str, str]:
        """Return the six log-file columns in their fixed order."""
        return (
            self.timestamp,
            self.label,
            self.message,
            self.location,
            self.trace or "",
            self.data or "",
        )

    def __repr__(self) -> str:  # pragma: no cover
        return f"LogRecord(#{self.sequence}, {self.label}, {self.message!r})"


class SeverityQueues:
    """Eight FIFO queues, one per severity, plus the smart-logging flag.

    Thread-safety note:
        ``push()`` and ``drain()`` run under one ``threading.Lock`` so the
        sequence increment and the append are atomic together. A logger may
        therefore be shared by several threads.

    Example:
        >>> queues = SeverityQueues()
        >>> queues.push(6, "2024-01-01", "started")
        >>> queues.push(7, "2024-01-01", "detail")
        >>> [r.message for r in queues.drain(threshold=6)]
        ['started']
        >>> len(queues)
        0
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._queues: List[deque] = [deque() for _ in SEVERITY_NAMES]
        self._next_sequence = 0
        self._verbose = False

    @property
    def verbose(self) -> bool:
        """True once the current window has been escalated."""
        return self._verbose

    def push(
        self,
        severity: int,
        timestamp: str,
        message: str,
        *,
        location: str = "()",
        trace: Optional[str] = None,
        data: Optional[str] = None,
        context: Optional[str] = None,
        escalate: bool = False,
    ) -> LogRecord:
        """Queue a new record under the next sequence number.

        Args:
            severity: Severity rank of the record (0-7).
            timestamp: Pre-formatted creation time.
            message: Message text.
            location: ``"file(line)"`` of the call site.
            trace: Formatted traceback, if any.
            data: Serialized auxiliary data, if any.
            context: Enclosing function label, if any.
            escalate: Mark the current window verbose.

        Returns:
            The queued LogRecord.
        """
        with self._lock:
            record = LogRecord(
                self._next_sequence,
                timestamp,
                severity,
                message,
                location=location,
                trace=trace,
                data=data,
                context=context,
            )
            self._next_sequence += 1
            self._queues[severity].append(record)
            if escalate:
                self._verbose = True
            return record

    def drain(self, threshold: int) -> List[LogRecord]:
        """Select the window's records, then empty every queue.

        If the window was escalated, every queued record is returned.
        Otherwise only records with a rank at or below ``threshold`` are;
        the rest are discarded. The verbose flag is cleared either way.

        Returns:
            The selected records in sequence (enqueue) order.
        """
        with self._lock:
            if self._verbose:
                selected = self._queues
            else:
                selected = self._queues[: threshold + 1]
            records = sorted(
                (r for queue in selected for r in queue),
                key=lambda r: r.sequence,
            )
            for queue in self._queues:
                queue.clear()
            self._verbose = False
            return records

    def snapshot(self) -> List[LogRecord]:
        """Return every queued record in sequence order without clearing.

        Intended for testing and debugging only.
        """
        with self._lock:
            return sorted(
                (r for queue in self._queues for r in queue),
                key=lambda r: r.sequence,
            )

    def __len__(self) -> int:
        """Return the number of queued records across all severities."""
        return sum(len(queue) for queue in self._queues)
