"""
Dialogue interpretation engine: resolution, playback and actions
"""

from .actions import ActionExecutor
from .conditions import ConditionEvaluator
from .events import EventBus, InventoryUpdated, NpcInteraction, Subscription
from .inventory import InventoryCache, MemoryInventoryService
from .manager import DialogueManager
from .resolver import DialogueResolver, Resolution
from .session import DialogueSession

__all__ = [
    "DialogueManager",
    "DialogueResolver",
    "Resolution",
    "ConditionEvaluator",
    "ActionExecutor",
    "DialogueSession",
    "EventBus",
    "Subscription",
    "NpcInteraction",
    "InventoryUpdated",
    "InventoryCache",
    "MemoryInventoryService",
]
