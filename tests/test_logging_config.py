import logging

from delve.logging_config import configure_logging


def test_env_level_wins(monkeypatch):
    monkeypatch.setenv("DELVE_LOG_LEVEL", "debug")
    configure_logging(logging.WARNING)
    assert logging.getLogger().level == logging.DEBUG


def test_default_level_and_single_handler(monkeypatch):
    monkeypatch.delenv("DELVE_LOG_LEVEL", raising=False)
    configure_logging(logging.WARNING)
    configure_logging(logging.WARNING)
    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
