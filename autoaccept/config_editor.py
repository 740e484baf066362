"""
Lolytics Auto Accept - Champion Select Config Editor
Loads the engine's pick/ban configuration, edits it as a local draft and
commits the draft on explicit save.

- The authoritative config changes only on load or a successful save
- Closing the edit surface discards the draft
- The champion catalog is advisory: it never blocks editing or saving
"""
import logging
from dataclasses import replace
from enum import Enum
from typing import Optional, Tuple

from autoaccept.activity_log import ActivityLog
from autoaccept.bridge import Command, CommandBridge, CommandError
from autoaccept.busy_guard import BusyGuard
from autoaccept.config_schema import ChampSelectConfig, ConfigValidationError
from autoaccept.state_manager import StateManager


class PriorityList(Enum):
    """Which ordered list an edit targets"""
    PICK = "pick_priority"
    BAN = "ban_priority"


class ChampSelectConfigEditor:
    """Draft/commit editing of ChampSelectConfig"""

    def __init__(self, bridge: CommandBridge, state: StateManager, activity_log: ActivityLog):
        self._bridge = bridge
        self._state = state
        self._log = activity_log
        self.guard = BusyGuard("saving")

    # ==================== LOADING ====================

    async def load(self) -> ChampSelectConfig:
        """
        Fetch the persisted config and make it authoritative.
        Falls back to built-in defaults; failures are diagnostic only.
        """
        try:
            data = await self._bridge.invoke(Command.GET_CHAMP_SELECT_CONFIG)
            config = ChampSelectConfig.from_dict(data)
        except (CommandError, ConfigValidationError) as e:
            logging.warning(f"Failed to load champion select config, using defaults: {e}")
            config = ChampSelectConfig()

        self._state.set_champ_select_config(config)
        return config

    async def load_catalog(self) -> Tuple[str, ...]:
        """Fetch the champion catalog. Best effort: keeps the old one on failure."""
        try:
            champions = await self._bridge.invoke(Command.GET_ALL_CHAMPIONS)
        except CommandError as e:
            logging.warning(f"Failed to load champion catalog: {e}")
            return self._state.champion_catalog

        if not isinstance(champions, (list, tuple)):
            logging.warning(f"Unexpected champion catalog payload: {type(champions).__name__}")
            return self._state.champion_catalog

        catalog = tuple(str(c) for c in champions)
        self._state.set_champion_catalog(catalog)
        logging.debug(f"Loaded {len(catalog)} champions")
        return catalog

    # ==================== EDIT SURFACE ====================

    @property
    def is_open(self) -> bool:
        return self._state.config_draft is not None

    @property
    def draft(self) -> Optional[ChampSelectConfig]:
        return self._state.config_draft

    def options(self) -> Tuple[str, ...]:
        """Selectable champions for a slot; the unset slot is always offered"""
        return ("",) + tuple(c for c in self._state.champion_catalog if c)

    def open(self) -> ChampSelectConfig:
        """Open the edit surface, seeding the draft from the authoritative config"""
        if self._state.config_draft is None:
            self._state.set_config_draft(self._state.champ_select_config)
        return self._state.config_draft

    def close(self):
        """Close without saving; an in-flight save is not affected"""
        if self._state.config_draft is not None:
            self._state.set_config_draft(None)

    def update_priority(self, priority_list: PriorityList, index: int, champion: str) -> bool:
        """
        Replace one slot of the draft.
        Returns False (draft untouched) if the surface is closed or index is out of range.
        """
        draft = self._state.config_draft
        if draft is None:
            logging.debug("update_priority ignored: editor closed")
            return False
        try:
            updated = draft.with_slot(priority_list.value, index, champion or "")
        except IndexError as e:
            logging.warning(f"Rejected priority edit: {e}")
            return False
        self._state.set_config_draft(updated)
        return True

    def set_auto_pick(self, enabled: bool) -> bool:
        return self._set_flag("auto_pick_enabled", enabled)

    def set_auto_ban(self, enabled: bool) -> bool:
        return self._set_flag("auto_ban_enabled", enabled)

    def _set_flag(self, name: str, enabled: bool) -> bool:
        draft = self._state.config_draft
        if draft is None:
            return False
        self._state.set_config_draft(replace(draft, **{name: bool(enabled)}))
        return True

    # ==================== SAVE ====================

    async def save(self) -> bool:
        """
        Send the whole draft in one command.
        Success: draft becomes authoritative and the surface closes, unless
        the surface now holds a different draft.
        Failure: draft kept, surface stays open, one error entry.
        Returns False if nothing was dispatched.
        """
        draft = self._state.config_draft
        if draft is None:
            return False
        if not self.guard.try_acquire():
            return False

        try:
            try:
                result = await self._bridge.invoke(
                    Command.UPDATE_CHAMP_SELECT_CONFIG, draft.to_params()
                )
            except CommandError as e:
                self._log.error(f"Failed to save champion select configuration: {e}")
                return True

            self._state.set_champ_select_config(draft)
            # A session reopened while the save was in flight stays open
            if self._state.config_draft is draft:
                self.close()
            self._log.success(str(result))
        finally:
            self.guard.release()
        return True

