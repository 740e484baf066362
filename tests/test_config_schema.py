import json
import os

import pytest

from autoaccept.config_schema import (
    PRIORITY_SLOTS,
    ChampSelectConfig,
    ConfigValidationError,
    ControllerSettings,
    load_settings,
    save_settings,
)


ENV_VARS = ["AUTOACCEPT_LOG_LEVEL", "AUTOACCEPT_LOG_FILE", "TELEGRAM_BOT_TOKEN", "TELEGRAM_CHAT_ID"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # setenv first so monkeypatch unsets anything load_dotenv writes
    for var in ENV_VARS:
        monkeypatch.setenv(var, "placeholder")
        monkeypatch.delenv(var)


# ==================== CHAMP SELECT CONFIG ====================

def test_defaults() -> None:
    config = ChampSelectConfig()
    assert not config.champ_select_enabled
    assert config.pick_priority == ("Jinx", "Ashe", "Caitlyn")
    assert config.ban_priority == ("Yasuo", "Zed", "Master Yi")
    assert len(config.pick_priority) == PRIORITY_SLOTS


def test_from_dict_accepts_snake_and_camel_case() -> None:
    snake = ChampSelectConfig.from_dict({
        "auto_pick_enabled": True,
        "auto_ban_enabled": False,
        "pick_priority": ["Ahri", "Lux", "Zoe"],
        "ban_priority": ["Zed", "", "Yone"],
    })
    camel = ChampSelectConfig.from_dict({
        "autoPickEnabled": True,
        "autoBanEnabled": False,
        "pickPriority": ["Ahri", "Lux", "Zoe"],
        "banPriority": ["Zed", "", "Yone"],
    })
    assert snake == camel
    assert snake.ban_priority == ("Zed", "", "Yone")


@pytest.mark.parametrize("data", [
    [],
    {"auto_pick_enabled": True, "auto_ban_enabled": True, "pick_priority": ["A", "B", "C"]},
    {"auto_pick_enabled": "yes", "auto_ban_enabled": True,
     "pick_priority": ["A", "B", "C"], "ban_priority": ["D", "E", "F"]},
    {"auto_pick_enabled": True, "auto_ban_enabled": True,
     "pick_priority": ["A", "B", "C", "D"], "ban_priority": ["D", "E", "F"]},
    {"auto_pick_enabled": True, "auto_ban_enabled": True,
     "pick_priority": ["A", "B", 3], "ban_priority": ["D", "E", "F"]},
    {"auto_pick_enabled": True, "auto_ban_enabled": True,
     "pick_priority": "A,B,C", "ban_priority": ["D", "E", "F"]},
])
def test_from_dict_rejects_malformed(data) -> None:
    with pytest.raises(ConfigValidationError):
        ChampSelectConfig.from_dict(data)


def test_duplicates_are_accepted_on_load() -> None:
    config = ChampSelectConfig.from_dict({
        "auto_pick_enabled": True,
        "auto_ban_enabled": False,
        "pick_priority": ["Jinx", "Jinx", "Jinx"],
        "ban_priority": ["Zed", "Zed", "Yasuo"],
    })
    assert config.pick_priority == ("Jinx", "Jinx", "Jinx")


def test_with_slot_is_positional_replacement() -> None:
    config = ChampSelectConfig()
    updated = config.with_slot("ban_priority", 1, "Teemo")

    assert updated.ban_priority == ("Yasuo", "Teemo", "Master Yi")
    assert config.ban_priority == ("Yasuo", "Zed", "Master Yi")
    with pytest.raises(IndexError):
        config.with_slot("ban_priority", 3, "Teemo")


def test_to_params_uses_command_parameter_names() -> None:
    params = ChampSelectConfig(auto_ban_enabled=True).to_params()
    assert params == {
        "autoPickEnabled": False,
        "autoBanEnabled": True,
        "pickPriority": ["Jinx", "Ashe", "Caitlyn"],
        "banPriority": ["Yasuo", "Zed", "Master Yi"],
    }


# ==================== CONTROLLER SETTINGS ====================

def test_missing_settings_file_gives_defaults(tmp_path) -> None:
    settings = load_settings(str(tmp_path / "settings.json"))

    assert settings.log_level == "INFO"
    assert settings.log_file.endswith("autoaccept.log")
    assert not settings.telegram_enabled
    assert settings.notify_severities == ("success", "error")


def test_settings_are_sanitized(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({
        "log_level": "verbose",
        "telegram_token": " 'abc' ",
        "telegram_chat_id": "42\n",
        "notify_severities": ["ERROR", "debug", "info"],
    }), encoding="utf-8")

    settings = load_settings(str(path))

    assert settings.log_level == "INFO"
    assert settings.telegram_token == "abc"
    assert settings.telegram_chat_id == "42"
    assert settings.telegram_enabled
    assert settings.notify_severities == ("error", "info")


def test_broken_settings_file_gives_defaults(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    assert load_settings(str(path)).log_level == "INFO"


def test_environment_overrides_file(tmp_path, monkeypatch) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"log_level": "WARNING"}), encoding="utf-8")
    monkeypatch.setenv("AUTOACCEPT_LOG_LEVEL", "debug")

    assert load_settings(str(path)).log_level == "DEBUG"


def test_dotenv_beside_settings_is_read(tmp_path) -> None:
    (tmp_path / ".env").write_text("TELEGRAM_BOT_TOKEN=from-dotenv\nTELEGRAM_CHAT_ID=7\n", encoding="utf-8")

    settings = load_settings(str(tmp_path / "settings.json"))

    assert settings.telegram_token == "from-dotenv"
    assert settings.telegram_chat_id == "7"


def test_save_then_load(tmp_path) -> None:
    path = str(tmp_path / "settings.json")
    settings = ControllerSettings(
        log_level="warning",
        log_file=str(tmp_path / "diag.log"),
        telegram_token="t",
        telegram_chat_id="c",
        notify_severities=("error",),
    )

    assert save_settings(settings, path) is True
    assert [p for p in os.listdir(tmp_path) if p.endswith(".tmp")] == []

    loaded = load_settings(path)
    assert loaded == settings
    assert loaded.log_level == "WARNING"


def test_save_failure_returns_false(tmp_path) -> None:
    target = tmp_path / "missing-dir" / "settings.json"
    assert save_settings(ControllerSettings(), str(target)) is False
