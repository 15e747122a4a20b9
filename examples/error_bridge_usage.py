"""examples/error_bridge_usage.py - Route warnings and crashes into a log.

A LoggerRegistry holds two named loggers. The ErrorBridge sends warnings and
unhandled exceptions to the "default" logger and flushes every logger when
the interpreter exits, so the crash below is on disk even though nothing
calls close().

Run:
    python examples/error_bridge_usage.py
"""

import tempfile
import warnings

from smartlog import LoggerRegistry
from smartlog.bridge import install

base = tempfile.mkdtemp(prefix="smartlog-bridge-")

loggers = LoggerRegistry()
loggers.configure(
    {
        "default": [base],
        "paypal": [
            f"{base}/paypal",
            {"severityThreshold": "error", "smartSeverityThreshold": "critical"},
        ],
    }
)
install(loggers, "default", display=True)

if __name__ == "__main__":
    print(f"Logs in {base}")
    loggers.get("paypal").warning("dropped: below the paypal threshold")
    warnings.warn("legacy config format", DeprecationWarning)
    raise RuntimeError("unhandled crash")
