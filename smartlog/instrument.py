"""instrument.py - Optional @trace decorator for function-level breadcrumbs.

``@trace(logger)`` records what a function was called with and what it
returned, at debug severity by default:

    ``>> qualname(arg=value, ...)``  on entry
    ``<< repr(result)``              on normal return

and logs an escaping exception at error severity before re-raising it.
Because SmartLogger buffers every severity, the debug breadcrumbs cost only
memory under normal operation and are written only when the flush window
escalates, which is exactly when they are needed to explain a failure.

Usage:
    from smartlog import SmartLogger, trace

    log = SmartLogger("/var/log/app")

    @trace(log)
    def process_payment(user_id: int, amount: float) -> Receipt:
        ...
"""

import inspect
from functools import wraps
from typing import Callable

from .logger import SmartLogger
from .severity import SeverityLike


def trace(
    logger: SmartLogger,
    severity: SeverityLike = "debug",
    error_severity: SeverityLike = "error",
) -> Callable[[Callable], Callable]:
    """Return a decorator that logs entry, return and exceptions of a function.

    Args:
        logger: SmartLogger receiving the breadcrumbs.
        severity: Severity of the ``>>`` and ``<<`` records.
        error_severity: Severity of the record logged when the function
            raises. The exception object itself is logged, so its traceback
            fills the trace column.

    Returns:
        A decorator preserving the wrapped function's name and docstring.

    Raises:
        Any exception raised by the wrapped function is re-raised unchanged.

    Example:
        >>> @trace(log)
        ... def divide(a, b):
        ...     return a / b
        >>> divide(10, 2)   # queues ">> divide(a=10, b=2)" and "<< 5.0"
        5.0
    """

    def decorator(func: Callable) -> Callable:
        code = func.__code__
        site = {
            "file": code.co_filename,
            "line": code.co_firstlineno,
            "function": func.__qualname__,
        }

        @wraps(func)
        def wrapper(*args, **kwargs):
            # Bound argument names even for positional calls; falls back to
            # "..." where the signature cannot be bound.
            try:
                bound = inspect.signature(func).bind(*args, **kwargs)
                bound.apply_defaults()
                arg_str = ", ".join(f"{k}={v!r}" for k, v in bound.arguments.items())
            except (TypeError, ValueError):
                arg_str = "..."

            logger.log(f">> {func.__qualname__}({arg_str})", severity, overrides=site)
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                logger.log(exc, error_severity)
                raise
            logger.log(f"<< {result!r}", severity, overrides=site)
            return result

        return wrapper

    return decorator
