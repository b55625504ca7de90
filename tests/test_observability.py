"""Tests for optional Logfire initialization."""

import logging

from betledger.config import Settings
from betledger.observability import initialize_logfire


def test_skipped_without_token(isolated_settings) -> None:
    assert initialize_logfire(Settings(logfire_token="")) is False


def test_configures_and_bridges_logging(isolated_settings, monkeypatch) -> None:
    calls = []
    monkeypatch.setattr(
        "betledger.observability.logfire.configure", lambda **kwargs: calls.append(kwargs)
    )
    monkeypatch.setattr("betledger.observability.logfire.LogfireLoggingHandler", logging.NullHandler)
    root_logger = logging.getLogger()
    handlers_before = list(root_logger.handlers)

    try:
        assert initialize_logfire(Settings(logfire_token="token")) is True
        assert calls[0]["service_name"] == "betledger"
        assert any(isinstance(h, logging.NullHandler) for h in root_logger.handlers)
    finally:
        root_logger.handlers = handlers_before


def test_configure_failure_does_not_raise(isolated_settings, monkeypatch) -> None:
    def broken(**kwargs):
        raise RuntimeError("no network")

    monkeypatch.setattr("betledger.observability.logfire.configure", broken)

    assert initialize_logfire(Settings(logfire_token="token")) is False
