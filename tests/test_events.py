import asyncio
import threading

import pytest

from autoaccept.events import Channel, EventSubscriber

from tests.conftest import settle


def test_emissions_are_delivered_in_order() -> None:
    async def scenario():
        events = EventSubscriber()
        seen = []
        events.subscribe(Channel.MATCH_ACCEPTED, lambda p: seen.append(("accepted", p)))
        events.subscribe("match-accept-failed", lambda p: seen.append(("failed", p)))
        events.start()

        events.emit(Channel.MATCH_ACCEPTED, "one")
        events.emit(Channel.MATCH_ACCEPT_FAILED, "two")
        events.emit("match-accepted", "three")
        await events.drain()
        await events.close()
        return seen

    assert asyncio.run(scenario()) == [
        ("accepted", "one"),
        ("failed", "two"),
        ("accepted", "three"),
    ]


def test_handlers_fire_once_per_emission_in_subscription_order() -> None:
    async def scenario():
        events = EventSubscriber()
        seen = []
        events.subscribe(Channel.CHAMPION_PICKED, lambda p: seen.append(f"first:{p}"))
        events.subscribe(Channel.CHAMPION_PICKED, lambda p: seen.append(f"second:{p}"))
        events.start()
        events.emit(Channel.CHAMPION_PICKED, "Picked Jinx")
        await events.drain()
        await events.close()
        return seen

    assert asyncio.run(scenario()) == ["first:Picked Jinx", "second:Picked Jinx"]


def test_handler_runs_to_completion_before_next_emission() -> None:
    async def scenario():
        events = EventSubscriber()
        trace = []

        def handler(payload):
            trace.append(f"begin {payload}")
            trace.append(f"end {payload}")

        events.subscribe(Channel.CHAMPION_BANNED, handler)
        events.start()
        for name in ("Yasuo", "Zed"):
            events.emit(Channel.CHAMPION_BANNED, name)
        await events.drain()
        await events.close()
        return trace

    assert asyncio.run(scenario()) == ["begin Yasuo", "end Yasuo", "begin Zed", "end Zed"]


def test_release_is_idempotent_and_stops_delivery() -> None:
    async def scenario():
        events = EventSubscriber()
        seen = []
        first = events.subscribe(Channel.LEAGUE_DISCONNECTED, seen.append)
        second = events.subscribe(Channel.MATCH_ACCEPTED, seen.append)
        events.start()

        second.release()
        first.release()
        first.release()
        second.release()

        events.emit(Channel.LEAGUE_DISCONNECTED, "League Client not found")
        await events.drain()
        await events.close()
        return events, first, second, seen

    events, first, second, seen = asyncio.run(scenario())
    assert seen == []
    assert first.released and second.released
    assert events.handler_count(Channel.LEAGUE_DISCONNECTED) == 0
    assert events.handler_count(Channel.MATCH_ACCEPTED) == 0


def test_failing_handler_does_not_block_others() -> None:
    async def scenario():
        events = EventSubscriber()
        seen = []

        def broken(_payload):
            raise RuntimeError("handler crashed")

        events.subscribe(Channel.MATCH_ACCEPTED, broken)
        events.subscribe(Channel.MATCH_ACCEPTED, seen.append)
        events.start()
        events.emit(Channel.MATCH_ACCEPTED, "first")
        events.emit(Channel.MATCH_ACCEPTED, "second")
        await events.drain()
        await events.close()
        return seen

    assert asyncio.run(scenario()) == ["first", "second"]


def test_emissions_before_start_are_kept_in_order() -> None:
    async def scenario():
        events = EventSubscriber()
        seen = []
        events.subscribe(Channel.APP_READY, lambda p: seen.append("ready"))
        events.subscribe(Channel.MATCH_ACCEPTED, seen.append)
        events.emit(Channel.APP_READY)
        events.emit(Channel.MATCH_ACCEPTED, "accepted")
        events.start()
        await events.drain()
        await events.close()
        return seen

    assert asyncio.run(scenario()) == ["ready", "accepted"]


def test_emit_threadsafe_hands_over_to_loop() -> None:
    async def scenario():
        events = EventSubscriber()
        seen = []
        events.subscribe(Channel.MATCH_ACCEPTED, seen.append)
        events.start()

        worker = threading.Thread(
            target=events.emit_threadsafe,
            args=(Channel.MATCH_ACCEPTED, "from engine thread"),
        )
        worker.start()
        worker.join()
        await settle()
        await events.drain()
        await events.close()
        return seen

    assert asyncio.run(scenario()) == ["from engine thread"]


def test_emit_threadsafe_requires_running_subscriber() -> None:
    events = EventSubscriber()
    with pytest.raises(RuntimeError):
        events.emit_threadsafe(Channel.MATCH_ACCEPTED, "too early")


def test_unhandled_channel_is_dropped() -> None:
    async def scenario():
        events = EventSubscriber()
        events.start()
        events.emit("unknown-channel", "payload")
        await events.drain()
        running = events.running
        await events.close()
        return running, events.running

    assert asyncio.run(scenario()) == (True, False)


def test_drain_requires_running_dispatcher() -> None:
    async def scenario():
        events = EventSubscriber()
        with pytest.raises(RuntimeError):
            await events.drain()

    asyncio.run(scenario())


def test_emissions_after_close_are_dropped() -> None:
    async def scenario():
        events = EventSubscriber()
        seen = []
        events.subscribe(Channel.MATCH_ACCEPTED, seen.append)
        events.start()
        await events.close()

        events.emit(Channel.MATCH_ACCEPTED, "stale")
        events.start()
        events.emit(Channel.MATCH_ACCEPTED, "fresh")
        await events.drain()
        await events.close()
        return seen

    assert asyncio.run(scenario()) == ["fresh"]
