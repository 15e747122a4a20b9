"""handler.py - Forward standard ``logging`` records into a SmartLogger.

SmartLogHandler lets code that already logs through the standard library
feed a SmartLogger without changes: attach the handler, and every record is
queued with its severity mapped onto the RFC 5424 scale. The SmartLogger
still decides what gets written at flush time, so an ERROR from a library
escalates the window and brings its DEBUG breadcrumbs along.

Typical usage:
    import logging
    from smartlog import SmartLogger, SmartLogHandler

    target = SmartLogger("/var/log/app")
    logging.getLogger().addHandler(SmartLogHandler(target))

    log = logging.getLogger(__name__)
    log.debug("querying balance")      # queued
    log.error("insufficient funds")    # queued, window escalated
    target.flush()                     # both rows written
"""

import logging

from .context import format_trace
from .logger import SmartLogger
from .severity import Severity

_PACKAGE_LOGGER = __name__.split(".")[0]


def _is_external(record: logging.LogRecord) -> bool:
    """Filter out records from smartlog's own loggers."""
    name = record.name
    return name != _PACKAGE_LOGGER and not name.startswith(_PACKAGE_LOGGER + ".")


def severity_for_level(levelno: int) -> Severity:
    """Map a ``logging`` level number onto the severity scale.

    Levels between the standard ones are bucketed down, so a custom level 25
    is treated as INFO.

    Example:
        >>> severity_for_level(logging.ERROR)
        <Severity.ERROR: 3>
        >>> severity_for_level(25)
        <Severity.INFORMATIONAL: 6>
    """
    if levelno >= logging.CRITICAL:
        return Severity.CRITICAL
    if levelno >= logging.ERROR:
        return Severity.ERROR
    if levelno >= logging.WARNING:
        return Severity.WARNING
    if levelno >= logging.INFO:
        return Severity.INFORMATIONAL
    return Severity.DEBUG


class SmartLogHandler(logging.Handler):
    """A logging.Handler that queues every record on a SmartLogger.

    The record's own pathname, line number and function name are used as the
    call site. With ``exc_info`` the message is prefixed by the exception
    class name and the traceback fills the trace column. Records emitted by
    SmartLog's own internal loggers are dropped by a filter, before
    ``handle()`` takes the handler lock.

    Thread-safety:
        ``logging.Handler`` serializes ``emit()`` with its own lock, and the
        SmartLogger queues records under its own lock as well.

    Attributes:
        _target (SmartLogger): Logger that receives the records.
    """

    def __init__(self, target: SmartLogger, level: int = logging.NOTSET) -> None:
        """Initialise the handler.

        Args:
            target: SmartLogger receiving the records.
            level: Minimum ``logging`` level handled. Defaults to NOTSET so
                the SmartLogger's own thresholds decide.
        """
        super().__init__(level)
        self._target = target
        # Filters run before handle() takes the handler lock.
        self.addFilter(_is_external)

    @property
    def target(self) -> SmartLogger:
        return self._target

    def emit(self, record: logging.LogRecord) -> None:
        """Queue ``record`` on the target SmartLogger.

        Args:
            record: The LogRecord produced by the logging framework.
        """
        try:
            message = record.getMessage()
            overrides = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }
            if record.exc_info and record.exc_info[1] is not None:
                exc = record.exc_info[1]
                message = f"{type(exc).__name__}: {message}"
                overrides["trace"] = format_trace(exc)
            self._target.log(
                message,
                severity_for_level(record.levelno),
                overrides=overrides,
            )
        except Exception:
            self.handleError(record)

    def flush(self) -> None:
        """Flush the target SmartLogger."""
        self.acquire()
        try:
            self._target.flush()
        finally:
            self.release()
