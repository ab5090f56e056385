"""
Execution of deferred dialogue actions against the inventory
"""

import logging
import math
from typing import Awaitable, Callable, List

from dialogue_engine.model.types import DialogueAction, GiveItemAction, InventorySlot, InventorySnapshot

from .conditions import holds_in_slot
from .inventory import InventoryCache
from .ports import InventoryService

logger = logging.getLogger(__name__)

Broadcast = Callable[[InventorySnapshot], Awaitable[None]]


def grant_amount(amount) -> int:
    """Whole units to place; always at least one"""
    if amount is None or not math.isfinite(amount):
        return 1
    return max(1, math.floor(amount))


class ActionExecutor:
    """Applies queued actions in order; unsupported types are skipped"""

    def __init__(self, inventory: InventoryCache, service: InventoryService, broadcast: Broadcast):
        self.inventory = inventory
        self.service = service
        self.broadcast = broadcast

    async def execute(self, actions: List[DialogueAction]) -> None:
        for action in actions:
            if isinstance(action, GiveItemAction):
                await self.give_item(action)
            else:
                logger.debug("ignoring unsupported action %r", action)

    async def give_item(self, action: GiveItemAction) -> bool:
        """Grant ``action.item_id`` into the first empty slot.

        Returns True when a slot was filled. A new stack is always started;
        existing partial stacks of the same item are never topped up.
        """
        snapshot = await self.inventory.get()
        if snapshot is None:
            logger.debug("no inventory snapshot, cannot grant %s", action.item_id)
            return False

        await self.broadcast(snapshot)

        if action.if_missing and holds_in_slot(snapshot, action.item_id):
            logger.debug("player already holds %s, grant skipped", action.item_id)
            return False

        slots = [InventorySlot(item_id=slot.item_id, count=slot.count) for slot in snapshot.slots]
        empty = next((slot for slot in slots if slot.is_empty()), None)
        if empty is None:
            logger.debug("inventory full, %s dropped", action.item_id)
            return False

        empty.item_id = action.item_id
        empty.count = grant_amount(action.amount)

        self.service.write_slots(slots)
        updated = snapshot.with_slots(slots)
        self.inventory.replace(updated)
        await self.broadcast(updated)
        return True
