"""
Dialogue Engine - branching NPC conversations with inventory checks and item grants
"""

__version__ = "0.1.0"

from .engine import DialogueManager, EventBus, NpcInteraction
from .model import DialogueLoader
from .repository import DialogueRepository

__all__ = ["DialogueManager", "DialogueLoader", "DialogueRepository", "EventBus", "NpcInteraction"]
