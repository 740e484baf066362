"""
Lolytics Auto Accept - Manual Accept
One-shot ready-check accept triggered by the user
"""
from autoaccept.activity_log import ActivityLog
from autoaccept.bridge import Command, CommandBridge, CommandError
from autoaccept.busy_guard import BusyGuard


class ManualAccept:
    def __init__(self, bridge: CommandBridge, activity_log: ActivityLog):
        self._bridge = bridge
        self._log = activity_log
        self.guard = BusyGuard("manual-accepting")

    @property
    def busy(self) -> bool:
        return self.guard.held

    async def accept(self) -> bool:
        """Returns False without dispatching if an accept is in flight"""
        if not self.guard.try_acquire():
            return False
        try:
            result = await self._bridge.invoke(Command.MANUAL_ACCEPT)
        except CommandError as e:
            self._log.error(f"Manual accept failed: {e}")
        else:
            self._log.success(str(result))
        finally:
            self.guard.release()
        return True
