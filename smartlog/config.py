"""config.py - Per-logger configuration and bulk-entry parsing.

A LoggerConfig is fixed for the lifetime of the logger built from it; there
is no hot reload. Registry entries are written as a directory followed by
override mappings, mirroring how applications usually declare loggers::

    {
        "default": ["/var/log/app"],
        "payments": ["/var/log/app/payments", {"severityThreshold": "error"}],
    }

Override keys may be camelCase or snake_case.
"""

import re
from dataclasses import dataclass, fields
from typing import Any, Mapping, Tuple

from .errors import ConfigurationError
from .severity import OFF, Severity, to_ordinal

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass(frozen=True)
class LoggerConfig:
    """Settings for one SmartLogger.

    Attributes:
        severity_threshold: Records at or above this severity (numerically
            less than or equal) are written. ``OFF`` disables the logger.
        smart_severity_threshold: A record at or above this severity makes
            the current flush window write every queued record.
        max_file_size: Size in bytes past which a new log file is started.
        date_format: ``strftime`` format of the timestamp column; ``%f``
            gives microseconds.
        default_permission: Mode for created directories and files.
        max_days: Log files dated more than this many days ago are deleted.
    """

    severity_threshold: Any = Severity.INFORMATIONAL
    smart_severity_threshold: Any = Severity.NOTICE
    max_file_size: int = 100_000_000
    date_format: str = "%Y-%m-%d %H:%M:%S.%f"
    default_permission: int = 0o777
    max_days: int = 7

    def __post_init__(self):
        for name in ("severity_threshold", "smart_severity_threshold"):
            rank = to_ordinal(getattr(self, name))
            if rank != OFF and rank not in Severity._value2member_map_:
                raise ConfigurationError(f"{name} out of range: {rank}")
            object.__setattr__(self, name, rank)

        for name in ("max_file_size", "default_permission", "max_days"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise ConfigurationError(f"{name} must be >= 0, got {value}")

        if not isinstance(self.date_format, str):
            raise ConfigurationError(
                f"date_format must be a string, got {self.date_format!r}"
            )

    @property
    def disabled(self) -> bool:
        return self.severity_threshold == OFF

    @classmethod
    def from_overrides(cls, overrides: Mapping[str, Any]) -> "LoggerConfig":
        """Build a config from user-facing override keys.

        Raises:
            ConfigurationError: If a key does not name a setting.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in overrides.items():
            name = normalize_key(key)
            if name not in known:
                raise ConfigurationError(f"Unknown configuration key: {key!r}")
            kwargs[name] = value
        return cls(**kwargs)


def normalize_key(key: str) -> str:
    """Map ``severityThreshold`` / ``_severity_threshold`` to ``severity_threshold``."""
    if not isinstance(key, str):
        raise ConfigurationError(f"Configuration keys must be strings, got {key!r}")
    return _CAMEL_BOUNDARY.sub("_", key.lstrip("_")).lower()


def parse_entry(name: str, entry: Any) -> Tuple[str, LoggerConfig]:
    """Split one registry entry into its directory and config.

    ``entry`` is either a directory string or a sequence whose first element
    is the directory and whose remaining elements are override mappings,
    merged left to right.
    """
    if isinstance(entry, str):
        return entry, LoggerConfig()
    if not isinstance(entry, (list, tuple)) or not entry:
        raise ConfigurationError(
            f"Logger {name!r}: expected [directory, {{overrides}}], got {entry!r}"
        )

    directory, *extras = entry
    overrides = {}
    for extra in extras:
        if not isinstance(extra, Mapping):
            raise ConfigurationError(
                f"Logger {name!r}: overrides must be mappings, got {extra!r}"
            )
        overrides.update(extra)
    return directory, LoggerConfig.from_overrides(overrides)
