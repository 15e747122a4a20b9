"""examples/basic_usage.py - SmartLog integration demo.

Demonstrates two flush windows:
    Window A: info and debug only. Debug breadcrumbs are dropped.
    Window B: an error escalates the window. Every queued record is written,
              debug breadcrumbs included, in the order they were logged.

Run:
    python examples/basic_usage.py
"""

import logging
import tempfile

from smartlog import SmartLogger, trace

# ---------------------------------------------------------------------------
# Internal diagnostics (rotation, flush counts) go through standard logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

log_dir = tempfile.mkdtemp(prefix="smartlog-demo-")
log = SmartLogger(log_dir)


@trace(log)
def get_balance(user_id: int) -> int:
    """Simulate a DB balance query."""
    log.debug("Querying balance from DB", {"user_id": user_id})
    return 3_000


def pay(user_id: int, amount: int) -> None:
    log.info(f"Payment attempt: user_id={user_id}, amount={amount}")
    balance = get_balance(user_id)

    if balance < amount:
        log.error(
            "Insufficient funds",
            {"balance": balance, "requested": amount},
        )
        return

    log.info("Payment successful")


if __name__ == "__main__":
    pay(user_id=101, amount=1_000)   # Window A
    log.flush()

    pay(user_id=202, amount=5_000)   # Window B
    log.close()

    with open(log.path, encoding="utf-8") as f:
        print(f.read())
