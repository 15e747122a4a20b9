"""smartlog/__init__.py - Public API for the SmartLog package.

SmartLog is a buffered, file-based logger for single-process applications.
Records are queued in memory per severity and written as CSV rows to
rotating, date-named files when the application flushes. "Smart logging"
keeps quiet logs quiet: normally only records at or above a threshold are
written, but once something severe happens the whole flush window is
written, debug breadcrumbs included, in the order it was logged.

Quick start:
    from smartlog import LoggerRegistry

    # 1. Create loggers once, at the application entry point
    loggers = LoggerRegistry()
    loggers.configure({
        "default": ["/var/log/app"],
        "paypal": ["/var/log/app/paypal", {"severityThreshold": "error"}],
    })

    # 2. Log through any of the eight RFC 5424 severities
    log = loggers.get("default")
    log.info("job started")
    log.debug("fetched 42 records", {"batch": 7})
    log.error("database timeout")       # escalates: everything gets written

    # 3. Flush on demand, and close on shutdown
    log.flush()
    loggers.close()

    # 4. Optionally log unhandled exceptions and warnings
    from smartlog.bridge import install
    install(loggers, "default")

Exported names:
    SmartLogger:     One logger bound to one log directory.
    LoggerRegistry:  Named loggers, built in bulk from configuration entries.
    LoggerConfig:    Per-logger settings.
    SmartLogHandler: ``logging.Handler`` feeding standard logging into a logger.
    ErrorBridge:     Logs unhandled exceptions, warnings and exit.
    trace:           Decorator recording function entry/return breadcrumbs.
    Severity, OFF, NO_DATA: Severity scale, disable sentinel, no-data marker.
"""

from .bridge import ErrorBridge
from .config import LoggerConfig
from .errors import (
    ConfigurationError,
    ConstructionError,
    LockError,
    LogPermissionError,
    SmartLogError,
    UnknownSeverity,
    WriteError,
)
from .exporter import CsvExporter, RecordExporter
from .handler import SmartLogHandler
from .instrument import trace
from .logger import SmartLogger
from .registry import LoggerRegistry
from .severity import NO_DATA, OFF, Severity, to_label, to_ordinal

__all__ = [
    "SmartLogger",
    "LoggerRegistry",
    "LoggerConfig",
    "SmartLogHandler",
    "ErrorBridge",
    "trace",
    "RecordExporter",
    "CsvExporter",
    "Severity",
    "OFF",
    "NO_DATA",
    "to_ordinal",
    "to_label",
    "SmartLogError",
    "ConfigurationError",
    "UnknownSeverity",
    "ConstructionError",
    "LogPermissionError",
    "LockError",
    "WriteError",
]
__version__ = "0.1.0"
