"""registry.py - Named collection of SmartLoggers owned by the application.

The registry is an ordinary object: the application's entry point creates
one, configures it, passes it to whatever needs a logger, and closes it on
shutdown. There is no hidden module-level instance.

Typical usage:
    from smartlog import LoggerRegistry

    loggers = LoggerRegistry()
    loggers.configure({
        "default": ["/var/log/app"],
        "paypal": ["/var/log/app/paypal", {
            "severityThreshold": "error",
            "smartSeverityThreshold": "critical",
        }],
    })
    loggers.get("paypal").error("charge declined")
    loggers.close()
"""

import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional

from .config import parse_entry
from .logger import SmartLogger

logger = logging.getLogger(__name__)


class LoggerRegistry:
    """Creates SmartLoggers in bulk and hands them out by name.

    Example:
        >>> registry = LoggerRegistry()
        >>> registry.configure({"default": ["/tmp/app-logs"]})
        >>> registry.get().info("ready")
        >>> registry.get("missing") is None
        True
    """

    def __init__(self, **logger_options: Any) -> None:
        """Initialise an empty registry.

        Args:
            **logger_options: Extra keyword arguments passed to every
                SmartLogger this registry builds (``exporter``, ``clock``).
        """
        self._loggers: Dict[str, SmartLogger] = {}
        self._logger_options = logger_options

    def configure(self, entries: Mapping[str, Any]) -> None:
        """Build one logger per entry and register them all, or none.

        Each value is ``[directory, {overrides}, ...]`` or a bare directory
        string. If any entry is invalid or any logger fails to construct, the
        loggers already built by this call are closed and the error
        propagates; the registry is left exactly as it was. A name that is
        already registered is replaced and its old logger closed.

        Raises:
            ConfigurationError: If an entry is malformed or uses an unknown
                key.
            ConstructionError: If a logger cannot prepare its directory.
        """
        built: Dict[str, SmartLogger] = {}
        try:
            for name, entry in entries.items():
                directory, config = parse_entry(name, entry)
                built[name] = SmartLogger(directory, config, **self._logger_options)
        except Exception:
            for partial in built.values():
                partial.close()
            raise

        for name, new in built.items():
            old = self._loggers.get(name)
            self._loggers[name] = new
            if old is not None:
                old.close()
        logger.debug("Configured loggers: %s", ", ".join(built))

    def get(self, name: str = "default") -> Optional[SmartLogger]:
        """Return the logger registered as ``name``, or None."""
        return self._loggers.get(name)

    def names(self) -> List[str]:
        return list(self._loggers)

    def flush(self) -> None:
        """Flush every registered logger."""
        for instance in self._loggers.values():
            instance.flush()

    def close(self) -> None:
        """Close every registered logger.

        Every logger is closed even if one fails; the first failure is
        re-raised afterwards.
        """
        first_error = None
        for name, instance in self._loggers.items():
            try:
                instance.close()
            except Exception as exc:
                logger.error("Closing logger %r failed: %s", name, exc)
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error

    def __contains__(self, name: object) -> bool:
        return name in self._loggers

    def __len__(self) -> int:
        return len(self._loggers)

    def __iter__(self) -> Iterator[str]:
        return iter(self._loggers)

    def __enter__(self) -> "LoggerRegistry":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
