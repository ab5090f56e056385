"""
Runtime state of the conversation currently on screen
"""

from dataclasses import dataclass, field
from typing import List, Optional

from dialogue_engine.model.types import DialogueAction, DialogueLine


@dataclass
class DialogueSession:
    npc_id: Optional[str] = None
    npc_name: Optional[str] = None
    lines: List[DialogueLine] = field(default_factory=list)  # Working copy, private to this session
    current_index: int = 0
    pending_actions: List[DialogueAction] = field(default_factory=list)
    active: bool = False
    has_shown_line: bool = False

    def current_line(self) -> Optional[DialogueLine]:
        if 0 <= self.current_index < len(self.lines):
            return self.lines[self.current_index]
        return None

    def is_last_line(self) -> bool:
        return self.current_index >= len(self.lines) - 1

    def reset(self) -> None:
        self.npc_id = None
        self.npc_name = None
        self.lines = []
        self.current_index = 0
        self.pending_actions = []
        self.active = False
        self.has_shown_line = False
