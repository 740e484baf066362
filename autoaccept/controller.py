"""
Lolytics Auto Accept - Automation Controller
Composition root of the client-side controller

Startup flow:
1. Register every engine channel (handles kept for teardown)
2. Load the persisted champion select config
3. Adopt an already-running monitoring session
4. app-ready -> automatic connect; connect success -> catalog fetch

Use as `async with AutomationController(...) as controller:` so teardown
always runs.
"""
import asyncio
import logging
from contextlib import ExitStack
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Set

from autoaccept.activity_log import ActivityLog, Severity
from autoaccept.bridge import CommandBridge, Transport
from autoaccept.config_editor import ChampSelectConfigEditor
from autoaccept.config_schema import ControllerSettings
from autoaccept.connection import ConnectionController
from autoaccept.events import Channel, EventSubscriber
from autoaccept.manual_accept import ManualAccept
from autoaccept.monitoring import MonitoringController
from autoaccept.notifier import NotificationManager
from autoaccept.state_manager import StateManager


STARTUP_MESSAGE = 'Application started. Click "Connect to League" to begin.'
APP_READY_MESSAGE = "Application ready. Checking for League Client..."

# Channels whose only effect is an activity log entry: (severity, icon)
LOGGED_CHANNELS = {
    Channel.MATCH_ACCEPTED: (Severity.SUCCESS, "🎉"),
    Channel.MATCH_ACCEPT_FAILED: (Severity.ERROR, "❌"),
    Channel.CHAMPION_PICKED: (Severity.SUCCESS, "🎉"),
    Channel.CHAMPION_BANNED: (Severity.SUCCESS, "🎉"),
    Channel.CHAMPION_PICK_FAILED: (Severity.ERROR, "❌"),
    Channel.CHAMPION_BAN_FAILED: (Severity.ERROR, "❌"),
}


class AutomationController:
    """Owns the state holder, the activity log and every sub-controller"""

    def __init__(
        self,
        bridge: CommandBridge,
        events: Optional[EventSubscriber] = None,
        state: Optional[StateManager] = None,
        activity_log: Optional[ActivityLog] = None,
        notifier: Optional[NotificationManager] = None,
    ):
        self.bridge = bridge
        self.events = events or EventSubscriber()
        self.state = state or StateManager()
        self.activity_log = activity_log or ActivityLog()
        self.notifier = notifier

        self.editor = ChampSelectConfigEditor(bridge, self.state, self.activity_log)
        self.connection = ConnectionController(
            bridge, self.state, self.activity_log,
            on_connected=self.editor.load_catalog,
        )
        self.monitoring = MonitoringController(bridge, self.state, self.activity_log)
        self.manual_accept = ManualAccept(bridge, self.activity_log)

        self._cleanup: Optional[ExitStack] = None
        self._tasks: Set[asyncio.Task] = set()

    @classmethod
    def from_transport(
        cls,
        transport: Transport,
        settings: Optional[ControllerSettings] = None,
    ) -> "AutomationController":
        """Build a controller around an engine transport"""
        notifier = None
        if settings is not None and settings.telegram_enabled:
            notifier = NotificationManager.from_settings(settings)
        return cls(CommandBridge(transport), notifier=notifier)

    # ==================== LIFECYCLE ====================

    @property
    def started(self) -> bool:
        return self._cleanup is not None

    async def start(self):
        """Register channels, then run the startup queries"""
        if self._cleanup is not None:
            return

        stack = ExitStack()
        for channel, handler in self._channel_handlers().items():
            subscription = self.events.subscribe(channel, handler)
            stack.callback(subscription.release)
        if self.notifier is not None:
            self.notifier.attach(self.activity_log)
            stack.callback(self.notifier.detach)
        self._cleanup = stack
        self.activity_log.info(STARTUP_MESSAGE)

        self.events.start()
        await self.editor.load()
        await self.monitoring.reconcile()
        logging.info("Controller started")

    async def shutdown(self):
        """Release every subscription once and stop event delivery"""
        stack, self._cleanup = self._cleanup, None
        try:
            # Dispatched commands are never cancelled; let them land first
            while self._tasks:
                await asyncio.gather(*list(self._tasks), return_exceptions=True)
            if stack is not None:
                stack.close()
        finally:
            await self.events.close()
            self.state.clear_listeners()
            logging.info("Controller stopped")

    async def __aenter__(self) -> "AutomationController":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.shutdown()

    # ==================== EVENT HANDLERS ====================

    def _channel_handlers(self) -> Dict[Channel, Callable[[Any], None]]:
        handlers: Dict[Channel, Callable[[Any], None]] = {
            channel: self._make_log_handler(severity, icon)
            for channel, (severity, icon) in LOGGED_CHANNELS.items()
        }
        handlers[Channel.LEAGUE_DISCONNECTED] = self.connection.handle_disconnected
        handlers[Channel.APP_READY] = self._on_app_ready
        return handlers

    def _make_log_handler(self, severity: Severity, icon: str) -> Callable[[Any], None]:
        def handler(payload: Any):
            self.activity_log.add(f"{icon} {payload}", severity)
        return handler

    def _on_app_ready(self, _payload: Any = None):
        self.activity_log.info(APP_READY_MESSAGE)
        self.spawn(self.connection.connect())

    # ==================== UI TRIGGERS ====================

    def spawn(self, coro: Awaitable) -> asyncio.Task:
        """Schedule a controller operation on the loop"""
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task):
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logging.error(f"Controller task failed: {task.exception()}")

    def trigger_connect(self) -> Optional[asyncio.Task]:
        if self.connection.busy:
            return None
        return self.spawn(self.connection.connect())

    def trigger_toggle(self) -> Optional[asyncio.Task]:
        if not self.monitoring.can_toggle:
            return None
        return self.spawn(self.monitoring.toggle())

    def trigger_manual_accept(self) -> Optional[asyncio.Task]:
        if not self.can_manual_accept:
            return None
        return self.spawn(self.manual_accept.accept())

    def trigger_save(self) -> Optional[asyncio.Task]:
        if not self.editor.is_open or self.editor.guard.held:
            return None
        return self.spawn(self.editor.save())

    @property
    def can_manual_accept(self) -> bool:
        return self.state.is_connected and not self.manual_accept.busy

    async def wait_idle(self):
        """Wait for scheduled operations and queued events to settle"""
        while True:
            if self.events.running:
                await self.events.drain()
            if not self._tasks:
                return
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ==================== VIEW ====================

    def view(self) -> Mapping[str, Any]:
        """Everything a presentation layer needs to render one frame"""
        view = dict(self.state.snapshot())
        view.update({
            "connecting": self.connection.busy,
            "toggling": self.monitoring.busy,
            "manual_accepting": self.manual_accept.busy,
            "saving": self.editor.guard.held,
            "can_toggle": self.monitoring.can_toggle,
            "can_manual_accept": self.can_manual_accept,
            "champion_options": self.editor.options(),
            "log": self.activity_log.entries(),
        })
        return view
