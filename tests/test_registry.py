"""test_registry.py - Unit tests for LoggerRegistry.

Covers:
    - configure() builds one logger per entry with its overrides
    - get() returns None for unknown names and defaults to "default"
    - configure() is all-or-nothing on invalid entries and failed construction
    - Re-configuring a name closes the old logger
    - flush() / close() fan out to every logger; close() is idempotent
    - Loggers configured OFF are registered without touching the file system
"""

import os
from datetime import datetime

import pytest

from smartlog.errors import ConfigurationError, ConstructionError
from smartlog.logger import SmartLogger
from smartlog.registry import LoggerRegistry
from smartlog.severity import Severity

NOW = datetime(2024, 1, 15, 12, 0, 0).timestamp()


def _registry() -> LoggerRegistry:
    return LoggerRegistry(clock=lambda: NOW)


class TestConfigure:
    def test_configure_builds_named_loggers(self, tmp_path):
        registry = _registry()
        registry.configure(
            {
                "default": [str(tmp_path / "default")],
                "paypal": [
                    str(tmp_path / "paypal"),
                    {"severityThreshold": "error", "smartSeverityThreshold": "critical"},
                ],
            }
        )

        assert sorted(registry.names()) == ["default", "paypal"]
        assert len(registry) == 2
        assert "paypal" in registry
        paypal = registry.get("paypal")
        assert isinstance(paypal, SmartLogger)
        assert paypal.config.severity_threshold == Severity.ERROR
        assert paypal.config.smart_severity_threshold == Severity.CRITICAL
        registry.close()

    def test_get_defaults_to_default(self, tmp_path):
        registry = _registry()
        registry.configure({"default": str(tmp_path)})
        assert registry.get() is registry.get("default")
        registry.close()

    def test_get_unknown_name_returns_none(self):
        assert _registry().get("missing") is None

    def test_unknown_key_registers_nothing(self, tmp_path):
        registry = _registry()
        with pytest.raises(ConfigurationError):
            registry.configure(
                {
                    "good": [str(tmp_path / "good")],
                    "bad": [str(tmp_path / "bad"), {"colour": "blue"}],
                }
            )
        assert len(registry) == 0

    def test_construction_failure_registers_nothing(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not directory")
        registry = _registry()

        with pytest.raises(ConstructionError):
            registry.configure(
                {
                    "first": [str(tmp_path / "first")],
                    "second": [str(blocker / "logs")],
                }
            )

        assert registry.get("first") is None
        assert len(registry) == 0

    def test_failed_batch_keeps_previous_loggers(self, tmp_path):
        registry = _registry()
        registry.configure({"default": [str(tmp_path / "a")]})
        original = registry.get()

        with pytest.raises(ConfigurationError):
            registry.configure({"default": [str(tmp_path / "b"), {"maxDays": "x"}]})

        assert registry.get() is original
        assert not original.closed
        registry.close()

    def test_reconfigure_replaces_and_closes_old_logger(self, tmp_path):
        registry = _registry()
        registry.configure({"default": [str(tmp_path / "a")]})
        old = registry.get()
        old.info("flushed by replacement")

        registry.configure({"default": [str(tmp_path / "b")]})

        assert old.closed
        assert registry.get() is not old
        assert os.path.getsize(old.path) > 0
        registry.close()

    def test_off_logger_is_registered_without_files(self, tmp_path):
        registry = _registry()
        registry.configure({"quiet": [str(tmp_path / "quiet"), {"severityThreshold": "off"}]})
        registry.get("quiet").emergency("ignored")
        registry.close()
        assert not (tmp_path / "quiet").exists()


class TestFlushAndClose:
    def test_flush_writes_every_logger(self, tmp_path):
        registry = _registry()
        registry.configure({"a": [str(tmp_path / "a")], "b": [str(tmp_path / "b")]})
        registry.get("a").info("to a")
        registry.get("b").info("to b")

        registry.flush()

        for name in ("a", "b"):
            assert os.path.getsize(registry.get(name).path) > 0
        registry.close()

    def test_close_closes_every_logger_and_is_idempotent(self, tmp_path):
        registry = _registry()
        registry.configure({"a": [str(tmp_path / "a")], "b": [str(tmp_path / "b")]})
        registry.close()
        registry.close()
        assert all(registry.get(name).closed for name in registry)

    def test_context_manager_closes(self, tmp_path):
        with _registry() as registry:
            registry.configure({"default": [str(tmp_path)]})
            log = registry.get()
        assert log.closed
