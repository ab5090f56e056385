"""
Dialogue document dataclasses and runtime render/inventory types
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Union

SPEAKERS = ("npc", "player")
EMOTIONS = ("angry", "disgust", "fear", "happy", "sad", "surprise")


@dataclass(frozen=True)
class HasItemCheck:
    """Passes when the inventory holds (or has equipped) an item"""

    item_id: str
    negate: bool = False

    type: ClassVar[str] = "hasItem"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type, "itemId": self.item_id}
        if self.negate:
            data["negate"] = True
        return data


@dataclass(frozen=True)
class UnknownCheck:
    """A check type this engine does not understand (always fails)"""

    type: str
    data: Dict[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.data)


@dataclass(frozen=True)
class GiveItemAction:
    """Deferred grant of an item into the first empty inventory slot"""

    item_id: str
    amount: Optional[float] = None
    if_missing: bool = True  # Skip the grant when the item is already held

    type: ClassVar[str] = "giveItem"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type, "itemId": self.item_id}
        if self.amount is not None:
            data["amount"] = self.amount
        if not self.if_missing:
            data["ifMissing"] = False
        return data


@dataclass(frozen=True)
class UnknownAction:
    """An action type this engine does not understand (ignored at runtime)"""

    type: str
    data: Dict[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.data)


DialogueCheck = Union[HasItemCheck, UnknownCheck]
DialogueAction = Union[GiveItemAction, UnknownAction]


@dataclass
class DialogueLine:
    """One displayable beat of a conversation"""

    speaker: str  # "npc" or "player"
    text: str = ""
    text_key: Optional[str] = None
    emotion: Optional[str] = None
    name: Optional[str] = None
    name_key: Optional[str] = None
    options: Optional[List["DialogueOption"]] = None
    hide_speaker_visuals: Optional[bool] = None

    def has_options(self) -> bool:
        return bool(self.options)

    def effective_hide_speaker_visuals(self) -> bool:
        """Explicit override wins, otherwise hide visuals while options are shown"""
        if self.hide_speaker_visuals is not None:
            return self.hide_speaker_visuals
        return self.has_options()

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"speaker": self.speaker, "text": self.text}
        if self.text_key is not None:
            data["textKey"] = self.text_key
        if self.emotion is not None:
            data["emotion"] = self.emotion
        if self.name is not None:
            data["name"] = self.name
        if self.name_key is not None:
            data["nameKey"] = self.name_key
        if self.options is not None:
            data["options"] = [option.to_dict() for option in self.options]
        if self.hide_speaker_visuals is not None:
            data["hideSpeakerVisuals"] = self.hide_speaker_visuals
        return data


@dataclass
class OptionBranch:
    """Conditional continuation of an option; first branch whose checks pass wins"""

    checks: List[DialogueCheck] = field(default_factory=list)
    lines: Optional[List[DialogueLine]] = None  # None falls back to the option's lines
    actions: Optional[List[DialogueAction]] = None  # None falls back to the option's actions

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"checks": [check.to_dict() for check in self.checks]}
        if self.lines is not None:
            data["lines"] = [line.to_dict() for line in self.lines]
        if self.actions is not None:
            data["actions"] = [action.to_dict() for action in self.actions]
        return data


@dataclass
class DialogueOption:
    """A player-selectable reply attached to a line"""

    id: str
    text: str = ""
    text_key: Optional[str] = None
    lines: Optional[List[DialogueLine]] = None
    actions: Optional[List[DialogueAction]] = None
    branches: Optional[List[OptionBranch]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "text": self.text}
        if self.text_key is not None:
            data["textKey"] = self.text_key
        if self.lines is not None:
            data["lines"] = [line.to_dict() for line in self.lines]
        if self.actions is not None:
            data["actions"] = [action.to_dict() for action in self.actions]
        if self.branches is not None:
            data["branches"] = [branch.to_dict() for branch in self.branches]
        return data


@dataclass
class Fork:
    """Top-level conditional variant of a dialogue document"""

    checks: List[DialogueCheck] = field(default_factory=list)
    lines: List[DialogueLine] = field(default_factory=list)
    actions: Optional[List[DialogueAction]] = None  # None falls back to the document's actions

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "checks": [check.to_dict() for check in self.checks],
            "lines": [line.to_dict() for line in self.lines],
        }
        if self.actions is not None:
            data["actions"] = [action.to_dict() for action in self.actions]
        return data


@dataclass
class DialogueDocument:
    """Root conversation asset for one NPC"""

    id: str
    lines: Optional[List[DialogueLine]] = None
    forks: Optional[List[Fork]] = None
    actions: Optional[List[DialogueAction]] = None

    def has_any_lines(self) -> bool:
        """True when the base path or any fork has something to show"""
        if self.lines:
            return True
        return any(fork.lines for fork in self.forks or [])

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id}
        if self.lines is not None:
            data["lines"] = [line.to_dict() for line in self.lines]
        if self.forks is not None:
            data["forks"] = [fork.to_dict() for fork in self.forks]
        if self.actions is not None:
            data["actions"] = [action.to_dict() for action in self.actions]
        return data


@dataclass
class RenderOption:
    id: str
    text: str


@dataclass
class RenderLine:
    """A fully localized line, ready for the conversation view"""

    speaker: str
    name: str
    text: str
    emotion: str
    npc_id: Optional[str] = None
    options: Optional[List[RenderOption]] = None
    hide_speaker_visuals: bool = False


@dataclass
class Position:
    x: float
    y: float
    name: Optional[str] = None


@dataclass
class InventorySlot:
    item_id: Optional[str] = None
    count: int = 0

    def is_empty(self) -> bool:
        return not self.item_id or self.count <= 0

    def holds(self, item_id: str) -> bool:
        return self.item_id == item_id and self.count > 0

    def to_dict(self) -> Dict[str, Any]:
        return {"itemId": self.item_id, "count": self.count}


@dataclass
class InventorySnapshot:
    """Point-in-time view of the player's inventory.

    ``extra`` carries every top-level key other than ``slots`` (for example
    ``equippedRodId``) so equipment can be matched without knowing the
    exact key names.
    """

    slots: List[InventorySlot] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> Optional["InventorySnapshot"]:
        """Build a snapshot from a wire payload; None when it carries no slots list"""
        if not isinstance(data, dict) or not isinstance(data.get("slots"), list):
            return None

        slots = []
        for raw in data["slots"]:
            if not isinstance(raw, dict):
                slots.append(InventorySlot())
                continue
            try:
                count = int(raw.get("count") or 0)
            except (TypeError, ValueError):
                count = 0
            slots.append(InventorySlot(item_id=raw.get("itemId") or None, count=count))

        extra = {key: value for key, value in data.items() if key != "slots"}
        return cls(slots=slots, extra=extra)

    def with_slots(self, slots: List[InventorySlot]) -> "InventorySnapshot":
        return InventorySnapshot(slots=slots, extra=dict(self.extra))

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data["slots"] = [slot.to_dict() for slot in self.slots]
        return data
