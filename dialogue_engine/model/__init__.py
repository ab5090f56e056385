"""
Dialogue document model
"""

from .clone import clone_actions, clone_lines
from .loader import DialogueLoader
from .types import (
    DialogueAction,
    DialogueCheck,
    DialogueDocument,
    DialogueLine,
    DialogueOption,
    Fork,
    GiveItemAction,
    HasItemCheck,
    InventorySlot,
    InventorySnapshot,
    OptionBranch,
    Position,
    RenderLine,
    RenderOption,
    UnknownAction,
    UnknownCheck,
)

__all__ = [
    "DialogueLoader",
    "clone_lines",
    "clone_actions",
    "DialogueDocument",
    "DialogueLine",
    "DialogueOption",
    "OptionBranch",
    "Fork",
    "DialogueCheck",
    "DialogueAction",
    "HasItemCheck",
    "UnknownCheck",
    "GiveItemAction",
    "UnknownAction",
    "RenderLine",
    "RenderOption",
    "Position",
    "InventorySlot",
    "InventorySnapshot",
]
