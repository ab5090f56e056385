"""
Evaluation of fork and branch checks against an inventory snapshot
"""

from typing import Optional

from dialogue_engine.model.types import DialogueCheck, HasItemCheck, InventorySnapshot

EQUIPPED_MARKER = "equipped"


def holds_in_slot(snapshot: Optional[InventorySnapshot], item_id: str) -> bool:
    """True when some slot carries at least one ``item_id``"""
    if snapshot is None:
        return False
    return any(slot.holds(item_id) for slot in snapshot.slots)


def has_equipped(snapshot: Optional[InventorySnapshot], item_id: str) -> bool:
    """True when any key mentioning "equipped" names ``item_id``"""
    if snapshot is None:
        return False
    for key, value in snapshot.extra.items():
        if EQUIPPED_MARKER in key.lower() and isinstance(value, str) and value == item_id:
            return True
    return False


class ConditionEvaluator:
    """Evaluates one check; unrecognised check types fail closed"""

    def evaluate(self, check: DialogueCheck, snapshot: Optional[InventorySnapshot]) -> bool:
        if isinstance(check, HasItemCheck):
            has_item = self.has_item(snapshot, check.item_id)
            return not has_item if check.negate else has_item
        return False

    def has_item(self, snapshot: Optional[InventorySnapshot], item_id: str) -> bool:
        if snapshot is None:
            return False
        return has_equipped(snapshot, item_id) or holds_in_slot(snapshot, item_id)
