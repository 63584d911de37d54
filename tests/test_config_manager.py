"""Unit tests for configuration management."""

from pathlib import Path

import pytest

from planroom.config import (
    ConfigError,
    ConfigManager,
    PlanroomConfig,
    flatten_for_env,
    parse_env_overrides,
    resolve_with_precedence,
)


def _fresh_manager(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, **kwargs) -> ConfigManager:
    monkeypatch.setenv("HOME", str(tmp_path))
    return ConfigManager(**kwargs)


def test_ensure_exists_creates_default_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    path = manager.ensure_exists()

    assert path == tmp_path / ".planroom" / "config.yaml"
    text = path.read_text(encoding="utf-8")
    assert "planroom configuration" in text
    assert "Last updated:" in text
    assert "file_list_limit: 100" in text

    config = manager.load(include_env=False)
    assert isinstance(config, PlanroomConfig)
    assert config.browser.sheet_list_limit == 500


def test_resolve_with_precedence_respects_order(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env = {"PLANROOM__BROWSER__FILE_LIST_LIMIT": "25", "PLANROOM__LOGGING__LEVEL": "info"}
    manager = _fresh_manager(tmp_path, monkeypatch, env=env)
    manager.save({"browser": {"file_list_limit": 10, "default_view_mode": "grid"}})

    config = manager.load(cli_overrides={"browser.file_list_limit": 5})

    assert config.browser.default_view_mode == "grid"
    assert config.logging.level == "INFO"
    # CLI overrides take precedence over environment
    assert config.browser.file_list_limit == 5
    assert manager.load().browser.file_list_limit == 25
    assert manager.load(include_env=False).browser.file_list_limit == 10


def test_invalid_yaml_raises_config_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    manager.config_path.write_text("- not-a-mapping", encoding="utf-8")

    with pytest.raises(ConfigError):
        manager.load(include_env=False)


def test_unknown_keys_and_bad_values_are_rejected() -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(defaults=PlanroomConfig(), file_overrides={"browser": {"zoom": 2}})
    with pytest.raises(ConfigError):
        resolve_with_precedence(defaults=PlanroomConfig(), cli_overrides={"logging.level": "LOUD"})
    with pytest.raises(ConfigError):
        resolve_with_precedence(
            defaults=PlanroomConfig(), cli_overrides={"browser.file_list_limit": 0}
        )


def test_set_value_validates_before_writing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    updated = manager.set_value("browser.sheet_list_limit", "42")
    assert updated.browser.sheet_list_limit == 42

    before = manager.read_text()
    with pytest.raises(ConfigError):
        manager.set_value("browser.default_view_mode", "cards")
    with pytest.raises(ConfigError):
        manager.set_value("browser.sheet_list_limit.deeper", "1")
    assert manager.read_text() == before


def test_env_round_trip() -> None:
    config = PlanroomConfig.model_validate({"cli": {"default_project": "tower-a"}})

    flat = flatten_for_env(config)

    assert flat["PLANROOM__CLI__DEFAULT_PROJECT"] == "tower-a"
    assert flat["PLANROOM__BROWSER__FILE_LIST_LIMIT"] == "100"
    parsed = parse_env_overrides({**flat, "UNRELATED": "x"})
    assert resolve_with_precedence(defaults=PlanroomConfig(), env_overrides=parsed) == config
