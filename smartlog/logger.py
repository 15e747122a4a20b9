"""logger.py - SmartLogger, the buffering and flushing core of SmartLog.

A SmartLogger owns one log directory. Severity methods only queue records in
memory; nothing touches the file system until ``flush()`` or ``close()``.

Smart logging:
    Every record is queued, whatever its severity. At flush time the logger
    normally writes only records at or above ``severity_threshold`` and drops
    the rest. If any record in the flush window was at or above
    ``smart_severity_threshold``, the window is *verbose* and every queued
    record is written, debug breadcrumbs included, in the order they were
    logged. The flag is scoped to the window: it is cleared by each flush.

File system discipline:
    Directory creation, choosing the active file (rotation), deleting old
    files (retention) and appending rows all happen under the directory's
    InterProcessMutex. Rotation and retention run once, at construction.
    A logger configured with ``OFF`` never touches the file system.

Typical usage:
    from smartlog import SmartLogger

    with SmartLogger("/var/log/app") as log:
        log.info("job started")
        log.debug("fetched 42 records")     # dropped, unless...
        log.error("database timeout")       # ...this escalates the window
"""

import csv
import logging
import os
import threading
import time
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from .buffer import SeverityQueues
from .config import LoggerConfig
from .context import (
    CallSite,
    describe_exception,
    exception_site,
    find_caller,
    format_caller_stack,
    format_trace,
)
from .errors import (
    ConfigurationError,
    ConstructionError,
    LockError,
    LogPermissionError,
    WriteError,
)
from .exporter import CsvExporter, RecordExporter
from .files import LogFileManager
from .mutex import InterProcessMutex
from .severity import (
    NO_DATA,
    Severity,
    SeverityLike,
    data_to_string,
    to_label,
    to_ordinal,
)

logger = logging.getLogger(__name__)

OVERRIDE_KEYS = frozenset({"file", "line", "function", "data", "trace"})


class SmartLogger:
    """Buffers severity-tagged records and flushes them to rotating CSV files.

    Lifecycle:
        Construction prepares the directory, lock file and active log file,
        or raises ConstructionError. The logger is then active until
        ``close()``, which flushes once and releases its handles. After that
        every operation is a no-op.

    Thread-safety:
        Records are queued under a lock, and flush/close are serialized, so
        one instance may be shared by several threads. Separate instances,
        in this or other processes, coordinate through the directory mutex.

    Attributes:
        _config (LoggerConfig): Immutable settings.
        _queues (SeverityQueues): Pending records and the verbose flag.
        _files (LogFileManager | None): File naming and retention; None when OFF.
        _mutex (InterProcessMutex | None): Directory lock; None when OFF.
        _file: Open handle of the active log file; None when OFF or closed.

    Example:
        >>> log = SmartLogger("/tmp/app-logs", LoggerConfig(severity_threshold="debug"))
        >>> log.info("hello", {"user": 1})
        >>> log.close()
    """

    def __init__(
        self,
        directory: str,
        config: Optional[LoggerConfig] = None,
        *,
        exporter: Optional[RecordExporter] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Prepare the log directory and open the active log file.

        Args:
            directory: Where log files are written. Created if missing.
                Trailing separators are removed.
            config: Logger settings. Defaults to ``LoggerConfig()``.
            exporter: Row writer for flushed records. Defaults to
                ``CsvExporter()``.
            clock: Returns epoch seconds. Drives timestamps, the day in the
                log file name and the retention cutoff.

        Raises:
            ConstructionError: If the directory is missing, or the
                directory, lock file or log file cannot be prepared.
            LogPermissionError: If an existing log or lock file is not
                writable.
        """
        if directory is None:
            raise ConstructionError("Log directory is required")
        directory = os.fspath(directory)
        self._directory = directory.rstrip("\\/") or directory[:1]
        self._config = config if config is not None else LoggerConfig()
        self._exporter = exporter if exporter is not None else CsvExporter()
        self._clock = clock
        self._queues = SeverityQueues()
        self._state_lock = threading.RLock()
        self._closed = False
        self._files = None
        self._mutex = None
        self._file = None
        self._path = None

        if self._config.disabled:
            return

        try:
            self._prepare()
        except ConstructionError:
            self._release_handles()
            raise
        except (OSError, LockError) as exc:
            self._release_handles()
            raise ConstructionError(
                f"Could not prepare log directory {self._directory}: {exc}"
            ) from exc

    # ---------------------------------------------------------------------- #
    # Properties
    # ---------------------------------------------------------------------- #

    @property
    def directory(self) -> str:
        return self._directory

    @property
    def config(self) -> LoggerConfig:
        return self._config

    @property
    def path(self) -> Optional[str]:
        """Active log file, or None for a logger configured OFF."""
        return self._path

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def verbose(self) -> bool:
        """True if the current flush window has been escalated."""
        return self._queues.verbose

    @property
    def pending(self) -> int:
        """Number of records queued since the last flush."""
        return len(self._queues)

    # ---------------------------------------------------------------------- #
    # Logging
    # ---------------------------------------------------------------------- #

    def log(
        self,
        message: Any,
        severity: SeverityLike,
        data: Any = NO_DATA,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Queue one record.

        Never touches the file system and never blocks on the directory
        lock. A record at or above ``smart_severity_threshold`` marks the
        current flush window verbose.

        Args:
            message: Message text, or an exception. For an exception the text
                becomes ``"Type: message"``, the location is where it was
                raised and its traceback fills the trace column. An exception
                that was never raised gets the caller's stack instead.
            severity: Severity name, name prefix or rank.
            data: Auxiliary payload. ``None`` is a real value; leave the
                default ``NO_DATA`` for "no data".
            overrides: Optional ``file``, ``line``, ``function``, ``trace``
                and ``data`` values. ``data`` here wins over the argument.

        Raises:
            UnknownSeverity: If ``severity`` cannot be resolved.
            ConfigurationError: If ``overrides`` has an unknown key.
        """
        if self._closed or self._config.disabled:
            return

        rank = to_ordinal(severity)
        to_label(rank)

        overrides = dict(overrides or {})
        unknown = set(overrides) - OVERRIDE_KEYS
        if unknown:
            raise ConfigurationError(f"Unknown log overrides: {sorted(unknown)}")
        if "data" in overrides:
            data = overrides["data"]

        site = None
        trace = overrides.get("trace")
        if isinstance(message, BaseException):
            exc = message
            message = describe_exception(exc)
            site = exception_site(exc)
            if trace is None:
                trace = format_trace(exc)
            if trace is None:
                trace = format_caller_stack()
        elif not isinstance(message, str):
            message = str(message)

        if site is None:
            if overrides.get("file") is not None:
                site = CallSite(
                    overrides["file"], overrides.get("line"), overrides.get("function")
                )
            else:
                site = find_caller()

        self._queues.push(
            rank,
            self._timestamp(),
            message,
            location=site.location,
            trace=trace,
            data=data_to_string(data),
            context=site.function,
            escalate=rank <= self._config.smart_severity_threshold,
        )

    def emergency(self, message, data=NO_DATA, overrides=None) -> None:
        """System is unusable."""
        self.log(message, Severity.EMERGENCY, data, overrides)

    def alert(self, message, data=NO_DATA, overrides=None) -> None:
        """Action must be taken immediately."""
        self.log(message, Severity.ALERT, data, overrides)

    def critical(self, message, data=NO_DATA, overrides=None) -> None:
        self.log(message, Severity.CRITICAL, data, overrides)

    def error(self, message, data=NO_DATA, overrides=None) -> None:
        self.log(message, Severity.ERROR, data, overrides)

    def warning(self, message, data=NO_DATA, overrides=None) -> None:
        self.log(message, Severity.WARNING, data, overrides)

    def notice(self, message, data=NO_DATA, overrides=None) -> None:
        """Normal but significant condition."""
        self.log(message, Severity.NOTICE, data, overrides)

    def info(self, message, data=NO_DATA, overrides=None) -> None:
        self.log(message, Severity.INFORMATIONAL, data, overrides)

    informational = info

    def debug(self, message, data=NO_DATA, overrides=None) -> None:
        self.log(message, Severity.DEBUG, data, overrides)

    # ---------------------------------------------------------------------- #
    # Flush and teardown
    # ---------------------------------------------------------------------- #

    def flush(self) -> None:
        """Write the current flush window to the active log file.

        The window's records are detached from the queues first, so the
        queues are empty and the verbose flag is cleared whatever happens
        next. A batch that fails to write is lost, not retried.

        Raises:
            LockError: If the directory lock could not be taken.
            WriteError: If writing the rows failed. Raised after the lock has
                been released.
        """
        with self._state_lock:
            if self._file is None:
                return
            records = self._queues.drain(self._config.severity_threshold)
            if not records:
                return

            with self._mutex:
                try:
                    self._exporter.export(records, self._file)
                    self._file.flush()
                except (OSError, csv.Error) as exc:
                    raise WriteError(
                        f"Could not write {len(records)} records to {self._path}: {exc}"
                    ) from exc
        logger.debug("Flushed %d records to %s", len(records), self._path)

    def close(self) -> None:
        """Flush once, then release the log file and lock file.

        Closing an already closed logger does nothing. Handles are released
        even if the final flush fails; the failure still propagates.
        """
        with self._state_lock:
            if self._closed:
                return
            self._closed = True
            try:
                self.flush()
            finally:
                self._release_handles()

    def __enter__(self) -> "SmartLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "active"
        return f"<SmartLogger {self._directory!r} {state}>"

    # ---------------------------------------------------------------------- #
    # Private helpers
    # ---------------------------------------------------------------------- #

    def _prepare(self) -> None:
        config = self._config
        self._files = LogFileManager(
            self._directory,
            max_file_size=config.max_file_size,
            max_days=config.max_days,
            permission=config.default_permission,
        )
        self._files.ensure_directory()

        self._mutex = InterProcessMutex(self._directory, config.default_permission)
        lock_path = self._mutex.path
        if os.path.exists(lock_path) and not os.access(lock_path, os.W_OK):
            raise LogPermissionError(
                f"Please check permissions on lock file: {lock_path}"
            )

        with self._mutex:
            now = self._clock()
            self._path = self._files.resolve_active_file(now)
            self._file = self._files.open(self._path)
            self._files.delete_expired(now, keep=self._path)

    def _release_handles(self) -> None:
        handle, self._file = self._file, None
        try:
            if handle is not None:
                handle.close()
        finally:
            if self._mutex is not None:
                self._mutex.close()

    def _timestamp(self) -> str:
        return datetime.fromtimestamp(self._clock()).strftime(self._config.date_format)
