"""test_exporter.py - Unit tests for RecordExporter and CsvExporter.

Covers:
    - RecordExporter cannot be instantiated without export()
    - CsvExporter writes one row per record in column order
    - Fields with delimiters, quotes and newlines are quoted
    - Custom delimiter
"""

import csv
import io

import pytest

from smartlog.buffer import LogRecord
from smartlog.exporter import CsvExporter, RecordExporter
from smartlog.severity import Severity


def _record(message="msg", **kwargs) -> LogRecord:
    return LogRecord(0, "2024-01-15 12:00:00", Severity.ERROR, message, **kwargs)


class TestRecordExporter:
    def test_abstract_base_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            RecordExporter()


class TestCsvExporter:
    def test_writes_one_row_per_record(self):
        stream = io.StringIO()
        CsvExporter().export(
            [_record("a", location="x.py(1)"), _record("b", data="None")], stream
        )
        assert stream.getvalue() == (
            "2024-01-15 12:00:00,ERROR,a,x.py(1),,\n"
            "2024-01-15 12:00:00,ERROR,b,(),,None\n"
        )

    def test_special_characters_are_quoted(self):
        stream = io.StringIO()
        message = 'comma, "quote"\nnewline'
        CsvExporter().export([_record(message)], stream)

        stream.seek(0)
        rows = list(csv.reader(stream))
        assert rows[0][2] == message
        assert '"comma, ""quote""' in stream.getvalue()

    def test_custom_delimiter(self):
        stream = io.StringIO()
        CsvExporter(delimiter=";").export([_record("a")], stream)
        assert stream.getvalue().startswith("2024-01-15 12:00:00;ERROR;a;")
