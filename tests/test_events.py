"""Tests for the event bus."""

import asyncio

from dialogue_engine.engine.events import EventBus, InventoryUpdated, NpcInteraction
from dialogue_engine.model.types import InventorySnapshot


class TestSubscribePublish:
    def test_basic_publish(self):
        bus = EventBus()
        received = []
        bus.subscribe(NpcInteraction, received.append)
        asyncio.run(bus.publish(NpcInteraction(npc_id="fisher")))
        assert received == [NpcInteraction(npc_id="fisher")]

    def test_async_handler_is_awaited(self):
        bus = EventBus()
        received = []

        async def handler(event):
            await asyncio.sleep(0)
            received.append(event.npc_id)

        bus.subscribe(NpcInteraction, handler)
        asyncio.run(bus.publish(NpcInteraction(npc_id="fisher")))
        assert received == ["fisher"]

    def test_dispatch_by_type(self):
        bus = EventBus()
        received = []
        bus.subscribe(InventoryUpdated, received.append)
        asyncio.run(bus.publish(NpcInteraction(npc_id="fisher")))
        assert received == []

    def test_handlers_run_in_order(self):
        bus = EventBus()
        results = []
        bus.subscribe(NpcInteraction, lambda e: results.append("a"))
        bus.subscribe(NpcInteraction, lambda e: results.append("b"))
        asyncio.run(bus.publish(NpcInteraction(npc_id="x")))
        assert results == ["a", "b"]

    def test_no_handlers(self):
        bus = EventBus()
        asyncio.run(bus.publish(InventoryUpdated(InventorySnapshot())))

    def test_failing_handler_does_not_stop_others(self):
        bus = EventBus()
        results = []

        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe(NpcInteraction, broken)
        bus.subscribe(NpcInteraction, lambda e: results.append("ok"))
        asyncio.run(bus.publish(NpcInteraction(npc_id="x")))
        assert results == ["ok"]


class TestSubscription:
    def test_cancel(self):
        bus = EventBus()
        received = []
        subscription = bus.subscribe(NpcInteraction, received.append)
        subscription.cancel()
        asyncio.run(bus.publish(NpcInteraction(npc_id="x")))
        assert received == []
        assert bus.listener_count(NpcInteraction) == 0

    def test_cancel_is_idempotent(self):
        bus = EventBus()
        subscription = bus.subscribe(NpcInteraction, lambda e: None)
        subscription.cancel()
        subscription.cancel()
        assert subscription.active is False

    def test_context_manager(self):
        bus = EventBus()
        with bus.subscribe(NpcInteraction, lambda e: None):
            assert bus.listener_count(NpcInteraction) == 1
        assert bus.listener_count(NpcInteraction) == 0

    def test_unsubscribe_unknown_handler(self):
        bus = EventBus()
        bus.unsubscribe(NpcInteraction, lambda e: None)
