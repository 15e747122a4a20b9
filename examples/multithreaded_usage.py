"""examples/multithreaded_usage.py - Shared directory, many writers.

Several threads share one SmartLogger, and a second SmartLogger instance
points at the same directory. Rows never interleave mid-batch: each flush
appends its whole window while holding the directory's lock file.

Run:
    python examples/multithreaded_usage.py
"""

import csv
import tempfile
import threading
import time

from smartlog import LoggerConfig, SmartLogger

log_dir = tempfile.mkdtemp(prefix="smartlog-threads-")
config = LoggerConfig(severity_threshold="debug")

shared = SmartLogger(log_dir, config)
second = SmartLogger(log_dir, config)


def place_order(log: SmartLogger, order_id: int, qty: int) -> None:
    log.info(f"Order received: order_id={order_id}, qty={qty}")
    time.sleep(0.01)  # simulate DB latency
    if qty > 5:
        log.error(f"Insufficient stock: order_id={order_id}")
    log.flush()


def main() -> None:
    threads = [
        threading.Thread(
            target=place_order,
            args=(shared if i % 2 else second, i, i),
            name=f"worker-{i}",
        )
        for i in range(10)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    shared.close()
    second.close()

    with open(shared.path, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    print(f"{len(rows)} rows in {shared.path}")
    for row in rows:
        print(row[1].ljust(13), row[2])


if __name__ == "__main__":
    main()
