"""
Inventory snapshot caching and an in-process inventory service
"""

import copy
import logging
from typing import Any, Dict, List, Optional

from dialogue_engine.model.types import InventorySlot, InventorySnapshot

from .ports import InventoryService

logger = logging.getLogger(__name__)

DEFAULT_INVENTORY_SLOTS = 10


class InventoryCache:
    """Holds the last known snapshot and fetches one only while it is empty"""

    def __init__(self, service: InventoryService):
        self._service = service
        self._snapshot: Optional[InventorySnapshot] = None

    @property
    def snapshot(self) -> Optional[InventorySnapshot]:
        return self._snapshot

    async def get(self) -> Optional[InventorySnapshot]:
        if self._snapshot is None:
            try:
                self._snapshot = await self._service.get_inventory()
            except Exception:
                logger.exception("inventory fetch failed")
                return None
            if self._snapshot is None:
                logger.debug("inventory service returned no snapshot")
        return self._snapshot

    def replace(self, snapshot: Optional[InventorySnapshot]) -> None:
        self._snapshot = snapshot


class MemoryInventoryService:
    """Inventory kept in process memory.

    Every read returns an independent copy so callers can never mutate the
    stored state except through write_slots.
    """

    def __init__(
        self,
        items: Optional[Dict[str, int]] = None,
        total_slots: int = DEFAULT_INVENTORY_SLOTS,
        extra: Optional[Dict[str, Any]] = None,
    ):
        slots = [InventorySlot(item_id=item_id, count=count) for item_id, count in (items or {}).items()]
        slots.extend(InventorySlot() for _ in range(max(0, total_slots - len(slots))))
        self._snapshot = InventorySnapshot(slots=slots, extra=dict(extra or {}))
        self.writes = 0

    async def get_inventory(self) -> Optional[InventorySnapshot]:
        return copy.deepcopy(self._snapshot)

    def write_slots(self, slots: List[InventorySlot]) -> None:
        self._snapshot = self._snapshot.with_slots(copy.deepcopy(slots))
        self.writes += 1

    def equip(self, key: str, item_id: Optional[str]) -> None:
        self._snapshot.extra[key] = item_id

    def count(self, item_id: str) -> int:
        return sum(slot.count for slot in self._snapshot.slots if slot.item_id == item_id)

    def to_dict(self) -> Dict[str, Any]:
        return self._snapshot.to_dict()
