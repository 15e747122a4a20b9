"""context.py - Call-site resolution for log records.

Each record carries the location that produced it, written as
``"file(line)"``. Callers may pass a pre-resolved location explicitly (the
error bridge and the stdlib handler always do); otherwise the public
severity methods resolve it here, once, at the call boundary:

    find_caller:     Walks outward from the current frame to the first frame
                     whose code does not live in the smartlog package.
    exception_site:  Uses the innermost traceback frame of a raised
                     exception, i.e. where it was raised.
    format_trace:    Renders an exception's traceback for the trace column.
    format_caller_stack:
                     Renders the caller's stack for exceptions that were
                     never raised.
"""

import os
import sys
import traceback
from typing import NamedTuple, Optional

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


class CallSite(NamedTuple):
    """Where a record was produced.

    Attributes:
        file: Source file path, or None if unknown.
        line: Line number, or None if unknown.
        function: Enclosing function name, or None if unknown.
    """

    file: Optional[str] = None
    line: Optional[int] = None
    function: Optional[str] = None

    @property
    def location(self) -> str:
        """Return the ``"file(line)"`` column value."""
        file = "" if self.file is None else self.file
        line = "" if self.line is None else self.line
        return f"{file}({line})"


def _is_internal(filename: str) -> bool:
    return os.path.dirname(os.path.abspath(filename)) == _PACKAGE_DIR


def find_caller() -> CallSite:
    """Return the call site of the nearest frame outside this package.

    Example:
        >>> site = find_caller()
        >>> site.function
        '<module>'
    """
    frame = sys._getframe(1)
    while frame is not None and _is_internal(frame.f_code.co_filename):
        frame = frame.f_back
    if frame is None:
        return CallSite()
    return CallSite(frame.f_code.co_filename, frame.f_lineno, frame.f_code.co_name)


def exception_site(exc: BaseException) -> Optional[CallSite]:
    """Return the frame where ``exc`` was raised, or None if never raised."""
    tb = exc.__traceback__
    if tb is None:
        return None
    while tb.tb_next is not None:
        tb = tb.tb_next
    code = tb.tb_frame.f_code
    return CallSite(code.co_filename, tb.tb_lineno, code.co_name)


def format_trace(exc: BaseException) -> Optional[str]:
    """Return the formatted traceback of ``exc`` without its message line."""
    if exc.__traceback__ is None:
        return None
    return "".join(traceback.format_tb(exc.__traceback__)).rstrip("\n")


def format_caller_stack() -> Optional[str]:
    """Return the current stack, up to the nearest frame outside this package.

    Used as the trace of an exception that was logged without ever being
    raised, so it has no traceback of its own.
    """
    frame = sys._getframe(1)
    while frame is not None and _is_internal(frame.f_code.co_filename):
        frame = frame.f_back
    if frame is None:
        return None
    return "".join(traceback.format_stack(frame)).rstrip("\n")


def describe_exception(exc: BaseException) -> str:
    """Return ``"TypeName: message"`` for ``exc``."""
    return f"{type(exc).__name__}: {exc}"
