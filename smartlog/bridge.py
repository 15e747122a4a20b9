"""bridge.py - Log warnings, unhandled exceptions and process exit.

ErrorBridge subscribes a registry logger to the interpreter's error
notifications and turns each one into an ordinary ``log()`` call. The
SmartLogger itself knows nothing about these hooks.

Notifications and their severities:

    =================================  =============================
    Notification                       Severity
    =================================  =============================
    MemoryError, SystemError,          emergency
    RecursionError (unhandled)
    other Exception (unhandled)        alert
    DeprecationWarning and friends     notice
    other Warning                      warning
    anything else that was captured    warning, "Unknown error type"
    interpreter exit                   registry flushed
    =================================  =============================

Unhandled exceptions are caught through ``sys.excepthook`` and
``threading.excepthook``; warnings through ``warnings.showwarning``; exit
through ``atexit``. Locations always come from the event itself.

Typical usage:
    from smartlog import LoggerRegistry
    from smartlog.bridge import install

    loggers = LoggerRegistry()
    loggers.configure({"default": ["/var/log/app"]})
    install(loggers, "default")
"""

import atexit
import logging
import sys
import threading
import warnings
from typing import Optional, Tuple, Type

from .registry import LoggerRegistry
from .severity import NO_DATA, Severity

logger = logging.getLogger(__name__)

FATAL_EXCEPTIONS = (MemoryError, SystemError, RecursionError)

NOTICE_WARNINGS = (
    DeprecationWarning,
    PendingDeprecationWarning,
    ImportWarning,
    ResourceWarning,
)


def severity_for_exception(exc_type: type) -> Optional[Severity]:
    """Return the severity of an unhandled exception class, or None if unknown."""
    if issubclass(exc_type, FATAL_EXCEPTIONS):
        return Severity.EMERGENCY
    if issubclass(exc_type, Warning):
        return severity_for_warning(exc_type)
    if issubclass(exc_type, Exception):
        return Severity.ALERT
    return None


def severity_for_warning(category: type) -> Optional[Severity]:
    """Return the severity of a warning category, or None if unknown."""
    if issubclass(category, NOTICE_WARNINGS):
        return Severity.NOTICE
    if issubclass(category, Warning):
        return Severity.WARNING
    return None


class ErrorBridge:
    """Forwards interpreter error notifications to a registry logger.

    Attributes:
        _registry (LoggerRegistry): Where the target logger is looked up,
            at notification time.
        _logger_name (str): Name of the target logger.
        _capture (tuple): Exception classes / warning categories to forward.
        _display (bool): Also run the previously installed hooks, which
            print to stderr.
    """

    def __init__(
        self,
        registry: LoggerRegistry,
        logger_name: str = "default",
        capture: Tuple[Type[BaseException], ...] = (Exception,),
        display: bool = False,
    ) -> None:
        """Initialise the bridge without installing it.

        Args:
            registry: Registry holding the target logger.
            logger_name: Name of the target logger.
            capture: Only notifications whose exception class or warning
                category subclasses one of these are logged. Defaults to
                ``(Exception,)``, which includes every ``Warning``.
            display: If True, the previous hooks still run, so exceptions
                and warnings are printed as usual. If False they are only
                logged.
        """
        self._registry = registry
        self._logger_name = logger_name
        self._capture = tuple(capture)
        self._display = display
        self._installed = False
        self._previous_excepthook = None
        self._previous_threading_excepthook = None
        self._previous_showwarning = None

    @property
    def installed(self) -> bool:
        return self._installed

    def install(self) -> "ErrorBridge":
        """Subscribe to the interpreter hooks. Installing twice is a no-op."""
        if self._installed:
            return self
        self._previous_excepthook = sys.excepthook
        self._previous_threading_excepthook = threading.excepthook
        self._previous_showwarning = warnings.showwarning
        sys.excepthook = self._excepthook
        threading.excepthook = self._threading_excepthook
        warnings.showwarning = self._showwarning
        atexit.register(self._at_exit)
        self._installed = True
        return self

    def uninstall(self) -> None:
        """Restore the hooks that were active before ``install()``."""
        if not self._installed:
            return
        sys.excepthook = self._previous_excepthook
        threading.excepthook = self._previous_threading_excepthook
        warnings.showwarning = self._previous_showwarning
        atexit.unregister(self._at_exit)
        self._installed = False

    # ---------------------------------------------------------------------- #
    # Hooks
    # ---------------------------------------------------------------------- #

    def _excepthook(self, exc_type, exc_value, exc_tb) -> None:
        handled = self._log_exception(exc_type, exc_value, exc_tb)
        if self._display or not handled:
            self._previous_excepthook(exc_type, exc_value, exc_tb)

    def _threading_excepthook(self, args) -> None:
        handled = self._log_exception(args.exc_type, args.exc_value, args.exc_traceback)
        if self._display or not handled:
            self._previous_threading_excepthook(args)

    def _showwarning(self, message, category, filename, lineno, file=None, line=None):
        handled = False
        if self._captures(category):
            severity = severity_for_warning(category)
            overrides = {"file": filename, "line": lineno}
            if severity is None:
                handled = self._forward(
                    f"Unknown error type ({category.__name__})",
                    Severity.WARNING,
                    overrides,
                )
            else:
                handled = self._forward(str(message), severity, overrides)
        if self._display or not handled:
            self._previous_showwarning(message, category, filename, lineno, file, line)

    def _at_exit(self) -> None:
        try:
            self._registry.flush()
        except Exception:
            logger.exception("Flushing loggers at exit failed")

    # ---------------------------------------------------------------------- #
    # Private helpers
    # ---------------------------------------------------------------------- #

    def _captures(self, cls: type) -> bool:
        return isinstance(cls, type) and issubclass(cls, self._capture)

    def _log_exception(self, exc_type, exc_value, exc_tb) -> bool:
        if not self._captures(exc_type):
            return False
        if exc_value is None:
            exc_value = exc_type()
        if exc_value.__traceback__ is None and exc_tb is not None:
            exc_value = exc_value.with_traceback(exc_tb)

        severity = severity_for_exception(exc_type)
        if severity is None:
            return self._forward(
                f"Unknown error type ({exc_type.__name__})",
                Severity.WARNING,
                {"file": __file__, "line": sys._getframe().f_lineno},
                data=str(exc_value),
            )
        return self._forward(exc_value, severity)

    def _forward(self, message, severity, overrides=None, data=NO_DATA) -> bool:
        target = self._registry.get(self._logger_name)
        if target is None:
            logger.error(
                "Cannot log %s: no logger named %r", severity.name, self._logger_name
            )
            return False
        try:
            target.log(message, severity, data, overrides)
        except Exception:
            logger.exception("Logging to %r failed", self._logger_name)
            return False
        return True


def install(
    registry: LoggerRegistry,
    logger_name: str = "default",
    capture: Tuple[Type[BaseException], ...] = (Exception,),
    display: bool = False,
) -> ErrorBridge:
    """Create an ErrorBridge and install it. See ErrorBridge for arguments."""
    return ErrorBridge(registry, logger_name, capture, display).install()
