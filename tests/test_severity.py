"""test_severity.py - Unit tests for the severity scale and NO_DATA.

Covers:
    - to_ordinal() passes integers through unchanged
    - to_ordinal() prefix matching, case-insensitive, scan-order tie break
    - to_ordinal() rejects unknown, empty and non-string input
    - to_label() for every rank, and rejection of OFF / out-of-range
    - NO_DATA is a singleton distinct from None and empty values
    - data_to_string() keeps None as a real payload
"""

import pytest

from smartlog.errors import ConfigurationError, UnknownSeverity
from smartlog.severity import (
    NO_DATA,
    OFF,
    SEVERITY_NAMES,
    Severity,
    data_to_string,
    to_label,
    to_ordinal,
)


# ---------------------------------------------------------------------------
# to_ordinal()
# ---------------------------------------------------------------------------


class TestToOrdinal:
    def test_to_ordinal_returns_integers_unchanged(self):
        """Integer ranks, OFF included, are passed through as is."""
        assert to_ordinal(3) == 3
        assert to_ordinal(OFF) == OFF
        assert to_ordinal(Severity.DEBUG) == 7

    def test_to_ordinal_full_names(self):
        """Every full severity name resolves to its own rank."""
        for rank, name in enumerate(SEVERITY_NAMES):
            assert to_ordinal(name) == rank

    def test_to_ordinal_prefix_err_resolves_to_error(self):
        """'err' is a prefix of 'error' only."""
        assert to_ordinal("err") == Severity.ERROR

    def test_to_ordinal_prefix_info_resolves_to_informational(self):
        assert to_ordinal("info") == Severity.INFORMATIONAL

    def test_to_ordinal_is_case_insensitive(self):
        assert to_ordinal("WARN") == Severity.WARNING
        assert to_ordinal("Debug") == Severity.DEBUG

    def test_to_ordinal_ambiguous_prefix_takes_first_in_scan_order(self):
        """'e' matches emergency and error; emergency is scanned first."""
        assert to_ordinal("e") == Severity.EMERGENCY

    def test_to_ordinal_c_resolves_to_critical(self):
        assert to_ordinal("c") == Severity.CRITICAL

    def test_to_ordinal_off_string_resolves_to_off(self):
        assert to_ordinal("off") == OFF
        assert to_ordinal("OFF") == OFF

    def test_to_ordinal_unknown_string_raises(self):
        with pytest.raises(UnknownSeverity):
            to_ordinal("bogus")

    def test_to_ordinal_empty_string_raises(self):
        with pytest.raises(UnknownSeverity):
            to_ordinal("")

    def test_to_ordinal_rejects_other_types(self):
        with pytest.raises(UnknownSeverity):
            to_ordinal(None)
        with pytest.raises(UnknownSeverity):
            to_ordinal(True)

    def test_unknown_severity_is_a_configuration_error(self):
        """UnknownSeverity can be caught as a ConfigurationError or ValueError."""
        with pytest.raises(ConfigurationError):
            to_ordinal("nope")
        with pytest.raises(ValueError):
            to_ordinal("nope")


# ---------------------------------------------------------------------------
# to_label()
# ---------------------------------------------------------------------------


class TestToLabel:
    def test_to_label_every_rank(self):
        assert [to_label(i) for i in range(8)] == [
            "emergency",
            "alert",
            "critical",
            "error",
            "warning",
            "notice",
            "informational",
            "debug",
        ]

    def test_to_label_rejects_off(self):
        with pytest.raises(UnknownSeverity):
            to_label(OFF)

    def test_to_label_rejects_out_of_range(self):
        with pytest.raises(UnknownSeverity):
            to_label(8)


# ---------------------------------------------------------------------------
# NO_DATA and data_to_string()
# ---------------------------------------------------------------------------


class TestNoData:
    def test_no_data_is_distinct_from_none_and_empty(self):
        assert NO_DATA is not None
        assert NO_DATA != ""
        assert NO_DATA != []

    def test_no_data_repr(self):
        assert repr(NO_DATA) == "NO_DATA"

    def test_data_to_string_no_data_is_none(self):
        assert data_to_string(NO_DATA) is None

    def test_data_to_string_none_is_serialized(self):
        """None is a valid payload and must be written, not omitted."""
        assert data_to_string(None) == "None"

    def test_data_to_string_empty_values_are_serialized(self):
        assert data_to_string("") == "''"
        assert data_to_string([]) == "[]"

    def test_data_to_string_uses_repr(self):
        assert data_to_string({"balance": 200}) == "{'balance': 200}"
