"""
Lolytics Auto Accept - State Manager
Explicit state holder owned by the controller

Key responsibilities:
- Hold connection / monitoring state, the authoritative champion select
  config, the champion catalog and the editor draft
- Publish every change to listeners for presentation layers
- Single event loop thread: no locks, mutations run to completion
"""
import logging
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, List, Mapping, Optional, Tuple

from autoaccept.config_schema import ChampSelectConfig


Listener = Callable[[str, Any], None]

DEFAULT_CONNECTION_STATUS = "Checking League Client..."
DISABLED_STATUS = "Disabled"


class ConnectionState(Enum):
    """Connection to the League Client, as reported by the engine"""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    FAILED = "failed"


class MonitoringState(Enum):
    """Auto-accept monitoring session"""
    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"


class ListenerHandle:
    """Release handle returned by StateManager.add_listener"""

    def __init__(self, owner: "StateManager", callback: Listener):
        self._owner = owner
        self._callback = callback
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self):
        if self._released:
            return
        self._released = True
        self._owner.remove_listener(self._callback)


class StateManager:
    """State holder with change notification"""

    def __init__(self):
        self._listeners: List[Listener] = []

        self._connection = ConnectionState.DISCONNECTED
        self._connection_status = DEFAULT_CONNECTION_STATUS
        self._monitoring = MonitoringState.STOPPED
        self._monitoring_status = DISABLED_STATUS
        self._config = ChampSelectConfig()
        self._catalog: Tuple[str, ...] = ()
        self._draft: Optional[ChampSelectConfig] = None

    # ==================== CONNECTION ====================

    @property
    def connection(self) -> ConnectionState:
        return self._connection

    @property
    def connection_status(self) -> str:
        return self._connection_status

    @property
    def is_connected(self) -> bool:
        return self._connection == ConnectionState.CONNECTED

    def set_connection(self, state: ConnectionState, status: Optional[str] = None):
        """Set connection state and, optionally, its status text"""
        self._connection = state
        if status is not None:
            self._connection_status = status
        self._notify_change("connection", state)
        if status is not None:
            self._notify_change("connection_status", status)

    # ==================== MONITORING ====================

    @property
    def monitoring(self) -> MonitoringState:
        return self._monitoring

    @property
    def monitoring_status(self) -> str:
        return self._monitoring_status

    @property
    def is_monitoring(self) -> bool:
        return self._monitoring == MonitoringState.RUNNING

    def set_monitoring(self, state: MonitoringState, status: Optional[str] = None):
        """Set monitoring state and, optionally, its status text"""
        self._monitoring = state
        if status is not None:
            self._monitoring_status = status
        self._notify_change("monitoring", state)
        if status is not None:
            self._notify_change("monitoring_status", status)

    # ==================== CHAMP SELECT CONFIG ====================

    @property
    def champ_select_config(self) -> ChampSelectConfig:
        return self._config

    def set_champ_select_config(self, config: ChampSelectConfig):
        self._config = config
        self._notify_change("champ_select_config", config)

    @property
    def champion_catalog(self) -> Tuple[str, ...]:
        return self._catalog

    def set_champion_catalog(self, champions: Tuple[str, ...]):
        self._catalog = tuple(champions)
        self._notify_change("champion_catalog", self._catalog)

    @property
    def config_draft(self) -> Optional[ChampSelectConfig]:
        return self._draft

    def set_config_draft(self, draft: Optional[ChampSelectConfig]):
        self._draft = draft
        self._notify_change("config_draft", draft)

    # ==================== SNAPSHOT ====================

    def snapshot(self) -> Mapping[str, Any]:
        """Read-only view of the whole state"""
        return MappingProxyType({
            "connection": self._connection,
            "connection_status": self._connection_status,
            "monitoring": self._monitoring,
            "monitoring_status": self._monitoring_status,
            "champ_select_config": self._config,
            "champion_catalog": self._catalog,
            "config_draft": self._draft,
        })

    # ==================== STATE LISTENERS ====================

    def add_listener(self, callback: Listener) -> ListenerHandle:
        """Add state change listener"""
        if callback not in self._listeners:
            self._listeners.append(callback)
        return ListenerHandle(self, callback)

    def remove_listener(self, callback: Listener):
        """Remove state change listener"""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def clear_listeners(self):
        self._listeners.clear()

    def _notify_change(self, key: str, value: Any):
        """Notify listeners of state change"""
        for listener in list(self._listeners):
            try:
                listener(key, value)
            except Exception as e:
                logging.debug(f"State listener error on {key}: {e}")
