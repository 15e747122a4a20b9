"""examples/custom_exporter_usage.py - Implement and plug in a custom exporter.

Shows how to subclass RecordExporter to change how a flushed window is
written. The exporter still appends to the active log file under the
directory lock; only the row format changes. Here each record becomes one
JSON object per line.

Run:
    python examples/custom_exporter_usage.py
"""

import json
import tempfile
from typing import List, TextIO

from smartlog import LoggerConfig, SmartLogger
from smartlog.buffer import LogRecord
from smartlog.exporter import RecordExporter


class JsonLinesExporter(RecordExporter):
    """Writes each record as a JSON object on its own line.

    Example:
        >>> log = SmartLogger("/tmp/app-logs", exporter=JsonLinesExporter())
        >>> log.error("timeout", {"db": "orders"})
        >>> log.close()
    """

    def export(self, records: List[LogRecord], stream: TextIO) -> None:
        for record in records:
            payload = {
                "timestamp": record.timestamp,
                "severity": record.label,
                "message": record.message,
                "location": record.location,
                "trace": record.trace,
                "data": record.data,
            }
            stream.write(json.dumps(payload, ensure_ascii=False) + "\n")


if __name__ == "__main__":
    log = SmartLogger(
        tempfile.mkdtemp(prefix="smartlog-json-"),
        LoggerConfig(severity_threshold="debug"),
        exporter=JsonLinesExporter(),
    )
    log.info("job started")
    try:
        {}["missing"]
    except KeyError as exc:
        log.error(exc)
    log.close()

    with open(log.path, encoding="utf-8") as f:
        print(f.read())
