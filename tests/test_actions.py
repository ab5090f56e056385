"""Tests for the action executor."""

import asyncio

from dialogue_engine.engine.actions import ActionExecutor, grant_amount
from dialogue_engine.engine.inventory import InventoryCache, MemoryInventoryService
from dialogue_engine.model.types import GiveItemAction, InventorySlot, InventorySnapshot, UnknownAction


class NoInventory:
    def __init__(self):
        self.writes = 0

    async def get_inventory(self):
        return None

    def write_slots(self, slots):
        self.writes += 1


def executor_for(service):
    broadcasts = []

    async def broadcast(snapshot):
        broadcasts.append(snapshot)

    cache = InventoryCache(service)
    return ActionExecutor(cache, service, broadcast), cache, broadcasts


class TestGrantAmount:
    def test_defaults_to_one(self):
        assert grant_amount(None) == 1

    def test_floors_fractions(self):
        assert grant_amount(2.7) == 2

    def test_non_finite(self):
        assert grant_amount(float("nan")) == 1
        assert grant_amount(float("inf")) == 1

    def test_never_below_one(self):
        assert grant_amount(0) == 1
        assert grant_amount(-4) == 1


class TestGiveItem:
    def test_grants_into_first_empty_slot(self):
        service = MemoryInventoryService(items={"rock": 1}, total_slots=3)
        executor, cache, broadcasts = executor_for(service)

        granted = asyncio.run(executor.give_item(GiveItemAction("fish", amount=3)))

        assert granted is True
        assert service.to_dict()["slots"][1] == {"itemId": "fish", "count": 3}
        assert service.writes == 1
        assert len(broadcasts) == 2
        assert cache.snapshot.slots[1] == InventorySlot("fish", 3)

    def test_skips_when_held_and_if_missing(self):
        service = MemoryInventoryService(items={"fish": 1})
        executor, _, broadcasts = executor_for(service)

        granted = asyncio.run(executor.give_item(GiveItemAction("fish")))

        assert granted is False
        assert service.writes == 0
        assert len(broadcasts) == 1

    def test_starts_new_stack_when_not_if_missing(self):
        service = MemoryInventoryService(items={"fish": 1}, total_slots=3)
        executor, _, _ = executor_for(service)

        asyncio.run(executor.give_item(GiveItemAction("fish", amount=2, if_missing=False)))

        slots = service.to_dict()["slots"]
        assert slots[0] == {"itemId": "fish", "count": 1}
        assert slots[1] == {"itemId": "fish", "count": 2}

    def test_full_inventory_drops_grant(self):
        service = MemoryInventoryService(items={"rock": 1}, total_slots=1)
        executor, _, broadcasts = executor_for(service)

        granted = asyncio.run(executor.give_item(GiveItemAction("fish")))

        assert granted is False
        assert service.writes == 0
        assert len(broadcasts) == 1

    def test_zero_count_slot_is_reused(self):
        service = MemoryInventoryService(total_slots=0)
        service.write_slots([InventorySlot("old", 0)])
        executor, _, _ = executor_for(service)

        asyncio.run(executor.give_item(GiveItemAction("fish")))

        assert service.to_dict()["slots"] == [{"itemId": "fish", "count": 1}]

    def test_missing_snapshot_cannot_grant(self):
        service = NoInventory()
        executor, _, broadcasts = executor_for(service)

        granted = asyncio.run(executor.give_item(GiveItemAction("fish")))

        assert granted is False
        assert service.writes == 0
        assert broadcasts == []

    def test_uses_cached_snapshot(self):
        service = MemoryInventoryService(total_slots=2)
        executor, cache, _ = executor_for(service)
        cache.replace(InventorySnapshot(slots=[InventorySlot("fish", 1), InventorySlot()]))

        granted = asyncio.run(executor.give_item(GiveItemAction("fish")))

        assert granted is False


class TestExecute:
    def test_ignores_unknown_actions(self):
        service = MemoryInventoryService(total_slots=2)
        executor, _, _ = executor_for(service)

        asyncio.run(executor.execute([UnknownAction(type="heal"), GiveItemAction("fish")]))

        assert service.count("fish") == 1
        assert service.writes == 1

    def test_later_grants_see_earlier_ones(self):
        service = MemoryInventoryService(total_slots=3)
        executor, _, _ = executor_for(service)

        asyncio.run(executor.execute([GiveItemAction("fish"), GiveItemAction("fish")]))

        assert service.count("fish") == 1


class TestInventoryCache:
    def test_failed_fetch_yields_no_snapshot(self):
        class Unavailable(MemoryInventoryService):
            async def get_inventory(self):
                raise ConnectionError("down")

        service = Unavailable()
        executor, cache, broadcasts = executor_for(service)

        granted = asyncio.run(executor.give_item(GiveItemAction("fish")))

        assert granted is False
        assert cache.snapshot is None
        assert broadcasts == []
