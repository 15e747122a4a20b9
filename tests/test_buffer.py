"""test_buffer.py - Unit tests for LogRecord and SeverityQueues.

Covers:
    - LogRecord field storage, label derivation and immutability
    - LogRecord.row() column order and empty optional columns
    - SeverityQueues push assigns strictly increasing sequence numbers
    - drain() without escalation keeps only at-or-above-threshold records
    - drain() with escalation keeps everything in enqueue order
    - drain() empties all queues and clears the verbose flag
    - Concurrent pushes never share a sequence number
"""

import threading

import pytest

from smartlog.buffer import LogRecord, SeverityQueues
from smartlog.severity import Severity


# ---------------------------------------------------------------------------
# LogRecord
# ---------------------------------------------------------------------------


class TestLogRecord:
    def test_log_record_stores_fields(self):
        """LogRecord stores every field it is given."""
        record = LogRecord(
            4,
            "2024-01-15 12:00:00.000000",
            Severity.ERROR,
            "boom",
            location="app.py(12)",
            trace="  File ...",
            data="{'a': 1}",
            context="handle",
        )

        assert record.sequence == 4
        assert record.timestamp == "2024-01-15 12:00:00.000000"
        assert record.severity == Severity.ERROR
        assert record.message == "boom"
        assert record.location == "app.py(12)"
        assert record.trace == "  File ..."
        assert record.data == "{'a': 1}"
        assert record.context == "handle"

    def test_log_record_label_is_upper_case_name(self):
        record = LogRecord(0, "t", Severity.INFORMATIONAL, "m")
        assert record.label == "INFORMATIONAL"

    def test_log_record_is_immutable(self):
        """Attributes cannot be re-bound or added after construction."""
        record = LogRecord(0, "t", Severity.DEBUG, "m")
        with pytest.raises(AttributeError):
            record.message = "changed"
        with pytest.raises(AttributeError):
            record.unexpected = "should fail"  # type: ignore[attr-defined]

    def test_log_record_row_column_order(self):
        record = LogRecord(
            0, "ts", Severity.WARNING, "msg", location="f.py(3)", trace="tb", data="1"
        )
        assert record.row() == ("ts", "WARNING", "msg", "f.py(3)", "tb", "1")

    def test_log_record_row_empty_optional_columns(self):
        record = LogRecord(0, "ts", Severity.NOTICE, "msg")
        assert record.row() == ("ts", "NOTICE", "msg", "()", "", "")


# ---------------------------------------------------------------------------
# SeverityQueues: push
# ---------------------------------------------------------------------------


class TestSeverityQueuesPush:
    def test_queues_initial_length_is_zero(self):
        assert len(SeverityQueues()) == 0

    def test_push_increments_length(self):
        queues = SeverityQueues()
        queues.push(Severity.DEBUG, "t", "a")
        queues.push(Severity.ERROR, "t", "b")
        assert len(queues) == 2

    def test_push_assigns_increasing_sequence_numbers(self):
        queues = SeverityQueues()
        first = queues.push(Severity.DEBUG, "t", "a")
        second = queues.push(Severity.ALERT, "t", "b")
        third = queues.push(Severity.DEBUG, "t", "c")
        assert first.sequence < second.sequence < third.sequence

    def test_push_escalate_sets_verbose(self):
        queues = SeverityQueues()
        queues.push(Severity.DEBUG, "t", "a")
        assert not queues.verbose
        queues.push(Severity.ERROR, "t", "b", escalate=True)
        assert queues.verbose

    def test_concurrent_pushes_have_unique_sequences(self):
        """Sequence increment and append are atomic across threads."""
        queues = SeverityQueues()

        def worker():
            for i in range(500):
                queues.push(i % 8, "t", "m")

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        sequences = [r.sequence for r in queues.snapshot()]
        assert len(sequences) == 2000
        assert len(set(sequences)) == 2000


# ---------------------------------------------------------------------------
# SeverityQueues: drain
# ---------------------------------------------------------------------------


class TestSeverityQueuesDrain:
    def test_drain_without_escalation_keeps_threshold_and_above(self):
        queues = SeverityQueues()
        queues.push(Severity.DEBUG, "t", "debug")
        queues.push(Severity.INFORMATIONAL, "t", "info")
        queues.push(Severity.WARNING, "t", "warning")

        records = queues.drain(threshold=Severity.INFORMATIONAL)
        assert [r.message for r in records] == ["info", "warning"]

    def test_drain_with_escalation_keeps_everything_in_enqueue_order(self):
        queues = SeverityQueues()
        queues.push(Severity.DEBUG, "t", "one")
        queues.push(Severity.ERROR, "t", "two", escalate=True)
        queues.push(Severity.DEBUG, "t", "three")
        queues.push(Severity.INFORMATIONAL, "t", "four")

        records = queues.drain(threshold=Severity.WARNING)
        assert [r.message for r in records] == ["one", "two", "three", "four"]

    def test_drain_orders_across_severities_by_sequence(self):
        """Records are merged back into enqueue order, not severity order."""
        queues = SeverityQueues()
        queues.push(Severity.INFORMATIONAL, "t", "a")
        queues.push(Severity.EMERGENCY, "t", "b")
        queues.push(Severity.WARNING, "t", "c")

        records = queues.drain(threshold=Severity.DEBUG)
        assert [r.message for r in records] == ["a", "b", "c"]

    def test_drain_empties_queues_and_clears_verbose(self):
        queues = SeverityQueues()
        queues.push(Severity.DEBUG, "t", "a")
        queues.push(Severity.ALERT, "t", "b", escalate=True)

        queues.drain(threshold=Severity.INFORMATIONAL)

        assert len(queues) == 0
        assert not queues.verbose

    def test_drain_discards_unselected_records(self):
        """Below-threshold records are gone after a non-verbose drain."""
        queues = SeverityQueues()
        queues.push(Severity.DEBUG, "t", "dropped")
        assert queues.drain(threshold=Severity.INFORMATIONAL) == []
        assert queues.drain(threshold=Severity.DEBUG) == []

    def test_drain_on_empty_queues_returns_empty_list(self):
        assert SeverityQueues().drain(threshold=Severity.DEBUG) == []
