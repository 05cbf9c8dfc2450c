"""Tests for repository settings."""

import logging

import pytest
from pydantic import ValidationError

from chronicle.config import RepositorySettings


def test_defaults(monkeypatch):
    monkeypatch.delenv("CHRONICLE_LOG_LEVEL", raising=False)
    monkeypatch.delenv("CHRONICLE_ISOLATE_OBSERVERS", raising=False)

    settings = RepositorySettings()

    assert settings.log_level == "INFO"
    assert settings.level == logging.INFO
    assert settings.isolate_observers is False


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("CHRONICLE_LOG_LEVEL", "debug")
    monkeypatch.setenv("CHRONICLE_ISOLATE_OBSERVERS", "true")

    settings = RepositorySettings()

    assert settings.log_level == "DEBUG"
    assert settings.level == logging.DEBUG
    assert settings.isolate_observers is True


def test_rejects_unknown_level():
    with pytest.raises(ValidationError):
        RepositorySettings(log_level="chatty")
