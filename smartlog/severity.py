"""severity.py - RFC 5424 severity scale and the "no data" sentinel.

Severities are ranked 0 (most severe) to 7 (most verbose). A logger is
configured with two ranks: ``severity_threshold`` (records at or above it
are normally written) and ``smart_severity_threshold`` (a record at or above
it escalates the whole flush window to full verbosity).

``OFF`` sits outside the scale. As a threshold it disables the logger
entirely, file system side effects included.

User-supplied names are matched by case-insensitive prefix in rank order,
so ``"info"`` and ``"err"`` work, and ``"e"`` resolves to EMERGENCY because
it is scanned before ERROR.
"""

from enum import IntEnum
from typing import Optional, Union

from .errors import UnknownSeverity


class Severity(IntEnum):
    """Severity ranks, most severe first."""

    EMERGENCY = 0
    ALERT = 1
    CRITICAL = 2
    ERROR = 3
    WARNING = 4
    NOTICE = 5
    INFORMATIONAL = 6
    DEBUG = 7


OFF = -1

SEVERITY_NAMES = tuple(s.name.lower() for s in Severity)

SeverityLike = Union[int, str]


class _NoData:
    """Type of the NO_DATA sentinel."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_DATA"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_NoData, ())


# Marks "no auxiliary data supplied". None is a real payload and is written.
NO_DATA = _NoData()


def to_ordinal(value: SeverityLike) -> int:
    """Resolve a severity name or ordinal to its integer rank.

    Integers (``Severity`` members and ``OFF`` included) are returned
    unchanged. Strings are lower-cased and matched as a prefix of the
    severity names, scanning from EMERGENCY to DEBUG; the first hit wins.
    The exact string ``"off"`` resolves to ``OFF``.

    Args:
        value: A severity name, name prefix or integer rank.

    Returns:
        The integer rank.

    Raises:
        UnknownSeverity: If ``value`` is an empty or unmatched string, or
            neither a string nor an integer.

    Example:
        >>> to_ordinal("err")
        3
        >>> to_ordinal("E")
        0
    """
    if isinstance(value, bool):
        raise UnknownSeverity(f"Unknown severity: {value!r}")
    if isinstance(value, int):
        return int(value)
    if not isinstance(value, str):
        raise UnknownSeverity(f"Unknown severity: {value!r}")

    name = value.lower()
    if name == "off":
        return OFF
    if name:
        for rank, candidate in enumerate(SEVERITY_NAMES):
            if candidate.startswith(name):
                return rank
    raise UnknownSeverity(f"Unknown severity: {value}")


def to_label(ordinal: int) -> str:
    """Return the lower-case severity name for ``ordinal``.

    Raises:
        UnknownSeverity: If ``ordinal`` is not a rank between 0 and 7.
    """
    if isinstance(ordinal, bool) or not isinstance(ordinal, int):
        raise UnknownSeverity(f"Unknown severity: {ordinal!r}")
    if not 0 <= ordinal < len(SEVERITY_NAMES):
        raise UnknownSeverity(f"Unknown severity: {ordinal}")
    return SEVERITY_NAMES[ordinal]


def data_to_string(data) -> Optional[str]:
    """Serialize an auxiliary data payload for the log file.

    ``NO_DATA`` yields None (an empty column). Anything else, None
    included, is rendered with ``repr`` so the type stays visible.
    """
    if data is NO_DATA:
        return None
    return repr(data)
