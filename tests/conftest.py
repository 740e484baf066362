import asyncio
from typing import Any, Dict, List, Tuple

import pytest

from autoaccept.activity_log import ActivityLog
from autoaccept.bridge import CommandBridge, CommandError
from autoaccept.state_manager import StateManager


CONNECTED_MESSAGE = "Connected to League Client. Summoner: Tester"

DEFAULT_RESULTS: Dict[str, Any] = {
    "connect_to_league": CONNECTED_MESSAGE,
    "start_auto_accept": "Auto-accept started successfully",
    "stop_auto_accept": "Auto-accept stopped successfully",
    "manual_accept": "Match accepted successfully!",
    "is_auto_accept_running": False,
    "get_all_champions": ["Ashe", "Caitlyn", "Jinx", "Zed"],
    "get_champ_select_config": {
        "auto_pick_enabled": False,
        "auto_ban_enabled": False,
        "pick_priority": ["Jinx", "Ashe", "Caitlyn"],
        "ban_priority": ["Yasuo", "Zed", "Master Yi"],
    },
    "update_champ_select_config": "Configuration updated successfully",
}


class FakeEngine:
    """Scripted engine transport that records every dispatched command"""

    def __init__(self):
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.results: Dict[str, Any] = dict(DEFAULT_RESULTS)
        self._held: Dict[str, List[asyncio.Future]] = {}

    def respond(self, name: str, value: Any):
        self.results[name] = value

    def fail(self, name: str, detail: str):
        self.results[name] = CommandError(name, detail)

    def hold(self, name: str) -> asyncio.Future:
        """Make the next `name` call wait on the returned future"""
        future = asyncio.get_running_loop().create_future()
        self._held.setdefault(name, []).append(future)
        return future

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)

    def names(self) -> List[str]:
        return [call for call, _ in self.calls]

    async def __call__(self, name: str, params: Dict[str, Any]) -> Any:
        self.calls.append((name, params))
        held = self._held.get(name)
        if held:
            return await held.pop(0)
        result = self.results.get(name)
        if isinstance(result, Exception):
            raise result
        return result


async def settle(rounds: int = 5):
    """Let scheduled tasks run up to their next suspension point"""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def bridge(engine: FakeEngine) -> CommandBridge:
    return CommandBridge(engine)


@pytest.fixture
def state() -> StateManager:
    return StateManager()


@pytest.fixture
def activity_log() -> ActivityLog:
    return ActivityLog()
