"""exporter.py - Pluggable row serialization for flushed records.

A SmartLogger hands every flushed batch to a RecordExporter together with
the open log file. The exporter only formats and writes; locking, ordering
and error translation stay in the logger. CsvExporter is the default and
produces the standard log file layout:

    timestamp, SEVERITY, message, file(line), trace, data

Swap the exporter to change the row format without touching anything else::

    from smartlog import SmartLogger
    from smartlog.exporter import CsvExporter

    log = SmartLogger("/var/log/app", exporter=CsvExporter(delimiter=";"))
"""

import csv
from abc import ABC, abstractmethod
from typing import List, TextIO

from .buffer import LogRecord


class RecordExporter(ABC):
    """Abstract base class for row writers.

    Any custom exporter must subclass this and implement ``export()``.

    Example:
        >>> class TabExporter(RecordExporter):
        ...     def export(self, records, stream):
        ...         for record in records:
        ...             stream.write("\\t".join(record.row()) + "\\n")
    """

    @abstractmethod
    def export(self, records: List[LogRecord], stream: TextIO) -> None:
        """Write ``records`` to ``stream``.

        Called by SmartLogger while the directory mutex is held. Records are
        already selected and in enqueue order. Exceptions propagate to the
        logger, which reports them as WriteError after releasing the lock.

        Args:
            records: Ordered list of LogRecord objects. Never empty.
            stream: The open log file, in text append mode.
        """


class CsvExporter(RecordExporter):
    """Write one CSV row per record with the ``csv`` module.

    Fields containing the delimiter, the quote character or a line break are
    quoted, so multi-line messages and tracebacks stay in one row.

    Attributes:
        _dialect_options (dict): Keyword arguments for ``csv.writer``.
    """

    def __init__(self, delimiter: str = ",", quotechar: str = '"') -> None:
        """Initialise the CSV exporter.

        Args:
            delimiter: Field separator. Defaults to a comma.
            quotechar: Character used to quote fields. Defaults to ``"``.
        """
        self._dialect_options = {
            "delimiter": delimiter,
            "quotechar": quotechar,
            "lineterminator": "\n",
        }

    def export(self, records: List[LogRecord], stream: TextIO) -> None:
        writer = csv.writer(stream, **self._dialect_options)
        writer.writerows(record.row() for record in records)
