"""errors.py - Exception hierarchy for SmartLog.

Every error raised on purpose by the package derives from SmartLogError, so
applications can catch the whole family with one clause while still being
able to tell configuration mistakes from I/O failures:

    SmartLogError
    ├── ConfigurationError (also ValueError)
    │   └── UnknownSeverity
    ├── ConstructionError
    │   └── LogPermissionError (also PermissionError)
    ├── LockError
    └── WriteError

Underlying OS errors are always chained (``raise ... from exc``) so the
original errno and filename stay available on ``__cause__``.
"""


class SmartLogError(Exception):
    """Base class for all SmartLog errors."""


class ConfigurationError(SmartLogError, ValueError):
    """A logger configuration entry or override is invalid."""


class UnknownSeverity(ConfigurationError):
    """A severity name or ordinal could not be resolved."""


class ConstructionError(SmartLogError):
    """A logger could not prepare its directory, lock file or log file.

    A logger whose construction failed is never registered or used.
    """


class LogPermissionError(ConstructionError, PermissionError):
    """An existing log or lock file is not writable by this process."""


class LockError(SmartLogError):
    """The inter-process lock file could not be opened or locked."""


class WriteError(SmartLogError):
    """Writing a flushed batch to the log file failed.

    The batch is lost; it is not retried on the next flush.
    """
