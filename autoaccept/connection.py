"""
Lolytics Auto Accept - Connection Controller
Owns the connection lifecycle to the League Client (through the engine)
"""
import logging
from typing import Awaitable, Callable, Optional

from autoaccept.activity_log import ActivityLog
from autoaccept.bridge import Command, CommandBridge, CommandError
from autoaccept.busy_guard import BusyGuard
from autoaccept.state_manager import ConnectionState, StateManager


CONNECTION_FAILED_STATUS = "Connection failed"
DISCONNECTED_STATUS = "League Client disconnected"


class ConnectionController:
    """
    connect() is shared by the automatic (app-ready) and manual triggers;
    both go through the same busy guard.
    """

    def __init__(
        self,
        bridge: CommandBridge,
        state: StateManager,
        activity_log: ActivityLog,
        on_connected: Optional[Callable[[], Awaitable[None]]] = None,
    ):
        self._bridge = bridge
        self._state = state
        self._log = activity_log
        self._on_connected = on_connected
        self.guard = BusyGuard("connecting")

    @property
    def busy(self) -> bool:
        return self.guard.held

    async def connect(self) -> bool:
        """
        Ask the engine to connect.
        Returns False without dispatching if a connect is already in flight.
        """
        if not self.guard.try_acquire():
            return False

        try:
            self._state.set_connection(ConnectionState.CONNECTING)
            try:
                result = await self._bridge.invoke(Command.CONNECT_TO_LEAGUE)
            except CommandError as e:
                self._state.set_connection(ConnectionState.FAILED, CONNECTION_FAILED_STATUS)
                self._log.error(f"Connection failed: {e}")
                return True

            message = str(result)
            self._state.set_connection(ConnectionState.CONNECTED, message)
            self._log.success(message)
        finally:
            self.guard.release()

        if self._on_connected is not None:
            try:
                await self._on_connected()
            except Exception as e:
                logging.warning(f"Post-connect step failed: {e}")
        return True

    def handle_disconnected(self, message: str):
        """league-disconnected: force Disconnected whatever the current state"""
        self._state.set_connection(ConnectionState.DISCONNECTED, DISCONNECTED_STATUS)
        self._log.error(f"⚠️ {message}")
