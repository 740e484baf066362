"""
Lolytics Auto Accept - Command Bridge
Sends named commands to the automation engine and resolves each with a
single result or a CommandError.

The bridge performs no deduplication, queueing or retry. Callers gate
re-entrancy themselves (see BusyGuard).
"""
import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional


# (name, params) -> result, raising on failure
Transport = Callable[[str, Dict[str, Any]], Awaitable[Any]]


class Command(str, Enum):
    """Commands understood by the engine"""
    CONNECT_TO_LEAGUE = "connect_to_league"
    START_AUTO_ACCEPT = "start_auto_accept"
    STOP_AUTO_ACCEPT = "stop_auto_accept"
    MANUAL_ACCEPT = "manual_accept"
    IS_AUTO_ACCEPT_RUNNING = "is_auto_accept_running"
    GET_ALL_CHAMPIONS = "get_all_champions"
    GET_CHAMP_SELECT_CONFIG = "get_champ_select_config"
    UPDATE_CHAMP_SELECT_CONFIG = "update_champ_select_config"


class CommandError(Exception):
    """A command failed. `detail` carries the engine-provided text."""

    def __init__(self, command: str, detail: str):
        super().__init__(detail)
        self.command = command
        self.detail = detail

    def __str__(self) -> str:
        return self.detail


class CommandBridge:
    """Thin async bridge over an engine transport"""

    def __init__(self, transport: Transport):
        self._transport = transport
        self._dispatched = 0

    @property
    def dispatched(self) -> int:
        """Number of commands handed to the transport so far"""
        return self._dispatched

    async def invoke(self, name: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Dispatch one command and wait for its outcome.

        Raises:
            CommandError: the engine rejected the command or the transport failed
        """
        name = name.value if isinstance(name, Command) else str(name)
        self._dispatched += 1
        logging.debug(f"[Bridge] -> {name} {params or {}}")

        try:
            result = await self._transport(name, dict(params or {}))
        except asyncio.CancelledError:
            raise
        except CommandError as e:
            logging.debug(f"[Bridge] <- {name} failed: {e.detail}")
            raise
        except Exception as e:
            logging.debug(f"[Bridge] <- {name} transport error: {e}")
            raise CommandError(name, str(e) or e.__class__.__name__) from e

        logging.debug(f"[Bridge] <- {name} ok")
        return result
