"""
Lolytics Auto Accept - Configuration Schema & Validation

Two configurations live here:
- ChampSelectConfig: pick/ban priorities persisted by the engine, fixed shape
- ControllerSettings: this process's own settings (logging, Telegram),
  loaded from JSON with .env / environment overrides and saved atomically
"""
import os
import json
import tempfile
import logging
from dataclasses import dataclass, field, asdict, replace
from typing import Any, Dict, Optional, Tuple

from dotenv import load_dotenv


# ==================== CONSTANTS ====================
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SETTINGS_FILE = os.path.join(BASE_DIR, "settings.json")

PRIORITY_SLOTS = 3
UNSET_SLOT = ""

DEFAULT_PICK_PRIORITY = ("Jinx", "Ashe", "Caitlyn")
DEFAULT_BAN_PRIORITY = ("Yasuo", "Zed", "Master Yi")

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_SEVERITIES = ("info", "success", "error")


class ConfigValidationError(ValueError):
    """Configuration data does not have the expected shape"""


# ==================== CHAMP SELECT CONFIG ====================
@dataclass(frozen=True)
class ChampSelectConfig:
    """
    Champion select automation settings.

    Priority lists are fixed-length tuples; edits replace a slot in place.
    An empty string marks an unset slot. Duplicates within a list are
    allowed: the engine walks the list in order and simply retries.
    """
    auto_pick_enabled: bool = False
    auto_ban_enabled: bool = False
    pick_priority: Tuple[str, ...] = DEFAULT_PICK_PRIORITY
    ban_priority: Tuple[str, ...] = DEFAULT_BAN_PRIORITY

    @property
    def champ_select_enabled(self) -> bool:
        return self.auto_pick_enabled or self.auto_ban_enabled

    def with_slot(self, list_name: str, index: int, champion: str) -> "ChampSelectConfig":
        """Return a copy with one priority slot replaced"""
        current = getattr(self, list_name)
        if not 0 <= index < len(current):
            raise IndexError(f"{list_name} slot {index} out of range 0..{len(current) - 1}")
        updated = current[:index] + (champion,) + current[index + 1:]
        return replace(self, **{list_name: updated})

    def to_params(self) -> Dict[str, Any]:
        """Parameters for the update_champ_select_config command"""
        return {
            "autoPickEnabled": self.auto_pick_enabled,
            "autoBanEnabled": self.auto_ban_enabled,
            "pickPriority": list(self.pick_priority),
            "banPriority": list(self.ban_priority),
        }

    @classmethod
    def from_dict(cls, data: Any, slots: int = PRIORITY_SLOTS) -> "ChampSelectConfig":
        """
        Build from the engine's payload (snake_case or camelCase keys).

        Raises:
            ConfigValidationError: missing keys, wrong types or list lengths
        """
        if not isinstance(data, dict):
            raise ConfigValidationError(f"expected an object, got {type(data).__name__}")

        def pick(snake: str, camel: str):
            if snake in data:
                return data[snake]
            if camel in data:
                return data[camel]
            raise ConfigValidationError(f"missing field '{snake}'")

        auto_pick = pick("auto_pick_enabled", "autoPickEnabled")
        auto_ban = pick("auto_ban_enabled", "autoBanEnabled")
        if not isinstance(auto_pick, bool) or not isinstance(auto_ban, bool):
            raise ConfigValidationError("auto_pick_enabled/auto_ban_enabled must be booleans")

        return cls(
            auto_pick_enabled=auto_pick,
            auto_ban_enabled=auto_ban,
            pick_priority=_validate_priority("pick_priority", pick("pick_priority", "pickPriority"), slots),
            ban_priority=_validate_priority("ban_priority", pick("ban_priority", "banPriority"), slots),
        )


def _validate_priority(name: str, value: Any, slots: int) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        raise ConfigValidationError(f"{name} must be a list")
    if len(value) != slots:
        raise ConfigValidationError(f"{name} must have {slots} entries, got {len(value)}")
    if not all(isinstance(v, str) for v in value):
        raise ConfigValidationError(f"{name} entries must be strings")
    return tuple(value)


# ==================== CONTROLLER SETTINGS ====================
@dataclass
class ControllerSettings:
    """Settings owned by this process (not by the engine)"""

    # Logging level for the diagnostic log
    log_level: str = "INFO"

    # Diagnostic log file; empty means BASE_DIR/autoaccept.log
    log_file: str = ""

    # Telegram mirror of the activity log (disabled unless both are set)
    telegram_token: str = ""
    telegram_chat_id: str = ""

    # Activity log severities forwarded to Telegram
    notify_severities: Tuple[str, ...] = field(default_factory=lambda: ("success", "error"))

    @property
    def telegram_enabled(self) -> bool:
        return bool(self.telegram_token and self.telegram_chat_id)

    def validate(self) -> "ControllerSettings":
        """
        Sanitize values in place.
        Returns self for chaining.
        """
        if str(self.log_level).upper() not in VALID_LOG_LEVELS:
            self.log_level = "INFO"
        else:
            self.log_level = str(self.log_level).upper()

        if not self.log_file:
            self.log_file = os.path.join(BASE_DIR, "autoaccept.log")

        self.telegram_token = _clean(self.telegram_token)
        self.telegram_chat_id = _clean(self.telegram_chat_id)

        severities = tuple(
            str(s).lower() for s in (self.notify_severities or ())
            if str(s).lower() in VALID_SEVERITIES
        )
        self.notify_severities = severities
        return self

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["notify_severities"] = list(self.notify_severities)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ControllerSettings":
        settings = cls()
        if "log_level" in data:
            settings.log_level = str(data["log_level"])
        if "log_file" in data:
            settings.log_file = str(data["log_file"] or "")
        if "telegram_token" in data:
            settings.telegram_token = str(data["telegram_token"] or "")
        if "telegram_chat_id" in data:
            settings.telegram_chat_id = str(data["telegram_chat_id"] or "")
        if isinstance(data.get("notify_severities"), (list, tuple)):
            settings.notify_severities = tuple(data["notify_severities"])
        return settings.validate()


def _clean(value: Optional[str]) -> str:
    """Strip quotes and newlines that creep into .env values"""
    if not value:
        return ""
    return str(value).strip().replace('"', '').replace("'", "").replace('\n', '').replace('\r', '')


def _apply_env_overrides(settings: ControllerSettings) -> ControllerSettings:
    overrides = {
        "log_level": os.getenv("AUTOACCEPT_LOG_LEVEL"),
        "log_file": os.getenv("AUTOACCEPT_LOG_FILE"),
        "telegram_token": os.getenv("TELEGRAM_BOT_TOKEN"),
        "telegram_chat_id": os.getenv("TELEGRAM_CHAT_ID"),
    }
    for key, value in overrides.items():
        if value:
            setattr(settings, key, value)
    return settings.validate()


def load_settings(path: Optional[str] = None) -> ControllerSettings:
    """
    Load settings from JSON, then apply .env / environment overrides.
    A missing or broken file yields defaults.
    """
    path = path or SETTINGS_FILE
    load_dotenv(os.path.join(os.path.dirname(os.path.abspath(path)), '.env'))

    settings = ControllerSettings()
    if os.path.exists(path):
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("settings root must be an object")
            settings = ControllerSettings.from_dict(data)
            logging.debug(f"Loaded settings from {path}")
        except Exception as e:
            logging.warning(f"Failed to load {path}: {e}")
            settings = ControllerSettings()

    return _apply_env_overrides(settings)


def save_settings(settings: ControllerSettings, path: Optional[str] = None) -> bool:
    """
    Save settings with atomic write (write temp -> rename)
    Returns True on success
    """
    path = path or SETTINGS_FILE
    tmp_path = None
    try:
        settings.validate()

        dir_path = os.path.dirname(os.path.abspath(path))
        with tempfile.NamedTemporaryFile(
            mode='w',
            dir=dir_path,
            suffix='.tmp',
            delete=False,
            encoding='utf-8'
        ) as tmp_file:
            json.dump(settings.to_dict(), tmp_file, indent=2)
            tmp_path = tmp_file.name

        os.replace(tmp_path, path)
        logging.debug(f"Settings saved to {path}")
        return True

    except Exception as e:
        logging.error(f"Failed to save settings: {e}")
        if tmp_path and os.path.exists(tmp_path):
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        return False
