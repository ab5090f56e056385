"""
Interfaces of the collaborators the dialogue engine talks to
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol

from dialogue_engine.model.types import DialogueDocument, InventorySlot, InventorySnapshot, Position, RenderLine


class DialogueSource(Protocol):
    async def get_dialogue(self, npc_id: str) -> Optional[DialogueDocument]:
        ...


class Translator(Protocol):
    def translate(self, key: str, params: Optional[Dict[str, Any]] = None, fallback: Optional[str] = None) -> str:
        ...


class InventoryService(Protocol):
    async def get_inventory(self) -> Optional[InventorySnapshot]:
        ...

    def write_slots(self, slots: List[InventorySlot]) -> None:
        """Persist a full slot list; the engine does not wait for the result"""
        ...


class ConversationView(Protocol):
    """Scene, UI and audio hooks used while a conversation is on screen"""

    def enter_conversation_mode(self, focus_point: Optional[Position] = None) -> None:
        ...

    def exit_conversation_mode(self) -> None:
        ...

    def set_interaction_cooldown(self, ms: int) -> None:
        ...

    def render_line(self, line: RenderLine) -> None:
        ...

    def on_advance_requested(self, callback: Callable[[], Awaitable[None]]) -> None:
        ...

    def on_option_selected(self, callback: Callable[[str], Awaitable[None]]) -> None:
        ...

    def play_advance_cue(self) -> None:
        ...

    def play_end_cue(self) -> None:
        ...


class PositionLookup(Protocol):
    def get_player_position(self) -> Optional[Position]:
        ...

    def get_npc_position(self, npc_id: str) -> Optional[Position]:
        ...
