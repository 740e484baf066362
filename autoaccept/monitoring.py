"""
Lolytics Auto Accept - Monitoring Controller
Starts, stops and reconciles the engine's auto-accept session
"""
import logging

from autoaccept.activity_log import ActivityLog
from autoaccept.bridge import Command, CommandBridge, CommandError
from autoaccept.busy_guard import BusyGuard
from autoaccept.state_manager import DISABLED_STATUS, MonitoringState, StateManager


STARTING_STATUS = "Starting..."
MATCHES_ONLY_STATUS = "Monitoring for matches..."
FULL_SCOPE_STATUS = "Monitoring for matches, picks and bans..."


class MonitoringController:
    """Toggle and startup reconciliation of the monitoring session"""

    def __init__(self, bridge: CommandBridge, state: StateManager, activity_log: ActivityLog):
        self._bridge = bridge
        self._state = state
        self._log = activity_log
        self.guard = BusyGuard("toggling")

    @property
    def busy(self) -> bool:
        return self.guard.held

    @property
    def can_toggle(self) -> bool:
        """Whether the UI trigger should be enabled"""
        if self.guard.held:
            return False
        return self._state.is_monitoring or self._state.is_connected

    def running_status(self) -> str:
        """Status text for a running session, scoped by the current config"""
        if self._state.champ_select_config.champ_select_enabled:
            return FULL_SCOPE_STATUS
        return MATCHES_ONLY_STATUS

    async def toggle(self) -> bool:
        """
        Start when stopped, stop when running.
        Returns False if nothing was dispatched (busy, or not connected).
        """
        if not self._state.is_monitoring and not self._state.is_connected:
            logging.debug("Monitoring start ignored: not connected")
            return False
        if not self.guard.try_acquire():
            return False

        try:
            if self._state.is_monitoring:
                await self._stop()
            else:
                await self._start()
        finally:
            self.guard.release()
        return True

    async def _start(self):
        self._state.set_monitoring(MonitoringState.STARTING, STARTING_STATUS)
        try:
            result = await self._bridge.invoke(Command.START_AUTO_ACCEPT)
        except CommandError as e:
            self._state.set_monitoring(MonitoringState.STOPPED, DISABLED_STATUS)
            self._log.error(f"Auto-accept start failed: {e}")
            return

        self._state.set_monitoring(MonitoringState.RUNNING, self.running_status())
        self._log.success(str(result))

    async def _stop(self):
        try:
            result = await self._bridge.invoke(Command.STOP_AUTO_ACCEPT)
        except CommandError as e:
            self._log.error(f"Auto-accept stop failed: {e}")
            return

        self._state.set_monitoring(MonitoringState.STOPPED, DISABLED_STATUS)
        self._log.info(str(result))

    async def reconcile(self) -> bool:
        """
        Adopt an engine session that is already running.
        Best effort: failures only reach the diagnostic log.
        """
        try:
            running = await self._bridge.invoke(Command.IS_AUTO_ACCEPT_RUNNING)
        except CommandError as e:
            logging.warning(f"Failed to check auto-accept status: {e}")
            return False

        if running is True and self._state.monitoring == MonitoringState.STOPPED:
            self._state.set_monitoring(MonitoringState.RUNNING, self.running_status())
            logging.info("Auto-accept session already running, adopted")
            return True
        return False
