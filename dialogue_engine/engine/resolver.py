"""
Selection of the active variant of a dialogue or of a selected option
"""

from dataclasses import dataclass, field
from typing import List, Optional

from dialogue_engine.model.types import DialogueAction, DialogueCheck, DialogueDocument, DialogueLine, DialogueOption

from .conditions import ConditionEvaluator
from .inventory import InventoryCache


@dataclass
class Resolution:
    """Lines to play and actions to queue for one resolved level of the tree"""

    lines: List[DialogueLine] = field(default_factory=list)
    actions: List[DialogueAction] = field(default_factory=list)


class DialogueResolver:
    """Walks forks (document level) and branches (option level).

    The first entry whose checks all pass wins; an entry without checks
    always passes. Nothing passed in is mutated, and the inventory is only
    fetched when a check actually needs it.
    """

    def __init__(self, inventory: InventoryCache, evaluator: Optional[ConditionEvaluator] = None):
        self.inventory = inventory
        self.evaluator = evaluator or ConditionEvaluator()

    async def passes(self, checks: List[DialogueCheck]) -> bool:
        for check in checks:
            snapshot = await self.inventory.get()
            if not self.evaluator.evaluate(check, snapshot):
                return False
        return True

    async def resolve(self, document: DialogueDocument) -> Resolution:
        for fork in document.forks or []:
            if await self.passes(fork.checks):
                actions = fork.actions if fork.actions is not None else document.actions
                return Resolution(lines=list(fork.lines or []), actions=list(actions or []))

        return Resolution(lines=list(document.lines or []), actions=list(document.actions or []))

    async def resolve_option(self, option: DialogueOption) -> Resolution:
        for branch in option.branches or []:
            if await self.passes(branch.checks):
                lines = branch.lines if branch.lines is not None else option.lines
                actions = branch.actions if branch.actions is not None else option.actions
                return Resolution(lines=list(lines or []), actions=list(actions or []))

        return Resolution(lines=list(option.lines or []), actions=list(option.actions or []))
