"""
Lolytics Auto Accept - Event Subscriber
Delivers engine notifications to registered handlers

- One asyncio.Queue, one dispatcher task: emissions are handled strictly in
  emission order and handlers never interleave with each other
- Handlers are plain callables taking the payload; they run to completion
- Every subscription is an explicit handle; release() is idempotent
"""
import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Union


Handler = Callable[[Any], None]


class Channel(str, Enum):
    """Event channels emitted by the engine"""
    MATCH_ACCEPTED = "match-accepted"
    MATCH_ACCEPT_FAILED = "match-accept-failed"
    CHAMPION_PICKED = "champion-picked"
    CHAMPION_BANNED = "champion-banned"
    CHAMPION_PICK_FAILED = "champion-pick-failed"
    CHAMPION_BAN_FAILED = "champion-ban-failed"
    LEAGUE_DISCONNECTED = "league-disconnected"
    APP_READY = "app-ready"


def _channel_key(channel: Union[Channel, str]) -> str:
    return channel.value if isinstance(channel, Channel) else str(channel)


class Subscription:
    """Handle for one registered handler"""

    def __init__(self, owner: "EventSubscriber", channel: str, handler: Handler):
        self._owner = owner
        self.channel = channel
        self.handler = handler
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self):
        """Unregister the handler. Repeated calls are no-ops."""
        if self._released:
            return
        self._released = True
        self._owner._detach(self)

    def __repr__(self) -> str:
        state = "released" if self._released else "active"
        return f"<Subscription {self.channel} {state}>"


class EventSubscriber:
    """
    Registers handlers against named channels and dispatches emissions
    through a single ordered queue on the running event loop.
    """

    def __init__(self):
        self._handlers: Dict[str, List[Subscription]] = {}
        self._queue: Optional[asyncio.Queue] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._dispatcher: Optional[asyncio.Task] = None
        self._pending: List[Tuple[str, Any]] = []
        self._closed = False

    # ==================== SUBSCRIPTIONS ====================

    def subscribe(self, channel: Union[Channel, str], handler: Handler) -> Subscription:
        """Register handler for channel and return its release handle"""
        key = _channel_key(channel)
        subscription = Subscription(self, key, handler)
        self._handlers.setdefault(key, []).append(subscription)
        return subscription

    def handler_count(self, channel: Union[Channel, str]) -> int:
        return len(self._handlers.get(_channel_key(channel), []))

    def _detach(self, subscription: Subscription):
        handlers = self._handlers.get(subscription.channel, [])
        if subscription in handlers:
            handlers.remove(subscription)
        if not handlers:
            self._handlers.pop(subscription.channel, None)

    # ==================== EMISSION ====================

    def emit(self, channel: Union[Channel, str], payload: Any = None):
        """Queue an emission. Must be called on the loop thread."""
        item = (_channel_key(channel), payload)
        if self._closed:
            logging.debug(f"EventSubscriber closed, dropped '{item[0]}'")
            return
        if self._queue is None:
            # Not started yet: keep emission order until the queue exists
            self._pending.append(item)
            return
        self._queue.put_nowait(item)

    def emit_threadsafe(self, channel: Union[Channel, str], payload: Any = None):
        """Queue an emission from a thread other than the loop thread"""
        if self._loop is None:
            raise RuntimeError("EventSubscriber is not running")
        self._loop.call_soon_threadsafe(self.emit, channel, payload)

    # ==================== DISPATCH ====================

    @property
    def running(self) -> bool:
        return self._dispatcher is not None and not self._dispatcher.done()

    def start(self):
        """Start the dispatcher task on the running loop"""
        if self.running:
            return
        self._closed = False
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        for item in self._pending:
            self._queue.put_nowait(item)
        self._pending.clear()
        self._dispatcher = self._loop.create_task(self._dispatch_loop())

    async def drain(self):
        """Wait until every queued emission has been handled"""
        if not self.running:
            raise RuntimeError("EventSubscriber is not running")
        await self._queue.join()

    async def close(self):
        """Stop the dispatcher. Undelivered emissions are dropped."""
        self._closed = True
        self._pending.clear()
        if self._dispatcher is None:
            return
        self._dispatcher.cancel()
        try:
            await self._dispatcher
        except asyncio.CancelledError:
            pass
        self._dispatcher = None
        self._queue = None
        self._loop = None

    async def _dispatch_loop(self):
        while True:
            channel, payload = await self._queue.get()
            try:
                self._deliver(channel, payload)
            finally:
                self._queue.task_done()

    def _deliver(self, channel: str, payload: Any):
        subscriptions = list(self._handlers.get(channel, []))
        if not subscriptions:
            logging.debug(f"No handler for event '{channel}', dropped")
            return

        for subscription in subscriptions:
            if subscription.released:
                continue
            try:
                subscription.handler(payload)
            except Exception as e:
                logging.error(f"Event handler error on '{channel}': {e}")
