"""Tests for configuration validation."""

import pytest

from questlog.core.config import Constants, Settings


def test_defaults_use_documented_storage_keys(monkeypatch) -> None:
    """Test the collection keys default to the persisted key names."""
    for name in ("TASKS_STORAGE_KEY", "PARTNERS_STORAGE_KEY", "TASK_LISTS_STORAGE_KEY", "SKIN"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.tasks_storage_key == "@tasks"
    assert settings.partners_storage_key == "@partners"
    assert settings.task_lists_storage_key == "@task_lists"
    assert settings.skin == "task"


def test_settings_read_environment(monkeypatch) -> None:
    """Test settings pick up environment variables case-insensitively."""
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("skin", "quest")

    settings = Settings(_env_file=None)

    assert settings.storage_backend == "memory"
    assert settings.skin == "quest"


def test_require_credential_with_valid_value() -> None:
    """Test require_credential returns value when credential is set."""
    settings = Settings(redis_url="redis://localhost:6379")

    result = settings.require_credential("redis_url", "Redis")

    assert result == "redis://localhost:6379"


def test_require_credential_with_none_raises_error() -> None:
    """Test require_credential raises ValueError when credential is None."""
    settings = Settings(redis_url=None)

    with pytest.raises(ValueError, match="Redis credential not configured"):
        settings.require_credential("redis_url", "Redis")


def test_require_credential_with_empty_string_raises_error() -> None:
    """Test require_credential raises ValueError when credential is empty."""
    settings = Settings(redis_url="")

    with pytest.raises(ValueError, match="REDIS_URL"):
        settings.require_credential("redis_url", "Redis")


def test_quest_rewards_cover_every_difficulty() -> None:
    """Test every quest difficulty has a base and a per-step reward."""
    assert set(Constants.DIFFICULTY_XP) == set(Constants.SUB_QUEST_XP)
    assert Constants.DIFFICULTY_XP["legendary"] > Constants.DIFFICULTY_XP["easy"]
