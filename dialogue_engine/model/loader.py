"""
Loader for JSON dialogue documents
"""

import json
import math
from pathlib import Path
from typing import Any, Dict, List, Optional

from .types import (
    EMOTIONS,
    SPEAKERS,
    DialogueAction,
    DialogueCheck,
    DialogueDocument,
    DialogueLine,
    DialogueOption,
    Fork,
    GiveItemAction,
    HasItemCheck,
    OptionBranch,
    UnknownAction,
    UnknownCheck,
)


class DialogueLoader:
    """Builds DialogueDocument objects from parsed JSON.

    Problems never raise: they are collected into ``errors`` and ``warnings``
    with a JSON-path style location (``forks[0].lines[2]``) and the loader
    keeps whatever it can still make sense of.
    """

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def parse_file(self, file_path: Path) -> Optional[DialogueDocument]:
        """Load a document from disk; the file stem is the default id"""
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self.errors.append(f"{file_path.name}: cannot read dialogue ({e})")
            return None

        return self.parse_dict(data, default_id=file_path.stem)

    def parse_text(self, content: str, default_id: str = "") -> Optional[DialogueDocument]:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            self.errors.append(f"Invalid JSON: {e}")
            return None

        return self.parse_dict(data, default_id=default_id)

    def parse_dict(self, data: Any, default_id: str = "") -> Optional[DialogueDocument]:
        if not isinstance(data, dict):
            self.errors.append("Dialogue document must be a JSON object")
            return None

        dialogue_id = data.get("id") or default_id
        if not isinstance(dialogue_id, str):
            self.warnings.append(f"Document id {dialogue_id!r} is not a string")
            dialogue_id = str(dialogue_id)

        document = DialogueDocument(id=dialogue_id)
        if "lines" in data:
            document.lines = self._parse_lines(data["lines"], "lines")
        if "forks" in data:
            document.forks = self._parse_forks(data["forks"], "forks")
        if "actions" in data:
            document.actions = self._parse_actions(data["actions"], "actions")

        return document

    def _as_list(self, value: Any, path: str) -> List[Any]:
        if value is None:
            return []
        if not isinstance(value, list):
            self.warnings.append(f"{path}: expected a list, got {type(value).__name__}")
            return []
        return value

    def _parse_lines(self, raw_lines: Any, path: str) -> List[DialogueLine]:
        lines = []
        for i, raw in enumerate(self._as_list(raw_lines, path)):
            line = self._parse_line(raw, f"{path}[{i}]")
            if line is not None:
                lines.append(line)
        return lines

    def _parse_line(self, raw: Any, path: str) -> Optional[DialogueLine]:
        if not isinstance(raw, dict):
            self.warnings.append(f"{path}: skipping non-object line")
            return None

        speaker = raw.get("speaker", "npc")
        if speaker not in SPEAKERS:
            self.errors.append(f"{path}: unknown speaker '{speaker}' (expected one of {', '.join(SPEAKERS)})")

        emotion = raw.get("emotion")
        if emotion is not None and emotion not in EMOTIONS:
            self.warnings.append(f"{path}: unknown emotion '{emotion}'")

        line = DialogueLine(
            speaker=speaker,
            text=str(raw.get("text", "")),
            text_key=raw.get("textKey"),
            emotion=emotion,
            name=raw.get("name"),
            name_key=raw.get("nameKey"),
            hide_speaker_visuals=raw.get("hideSpeakerVisuals"),
        )
        if "options" in raw:
            line.options = self._parse_options(raw["options"], f"{path}.options")
        return line

    def _parse_options(self, raw_options: Any, path: str) -> List[DialogueOption]:
        options = []
        for i, raw in enumerate(self._as_list(raw_options, path)):
            option_path = f"{path}[{i}]"
            if not isinstance(raw, dict):
                self.warnings.append(f"{option_path}: skipping non-object option")
                continue
            if not raw.get("id"):
                self.errors.append(f"{option_path}: option has no id and can never be selected")
                continue

            option = DialogueOption(
                id=str(raw["id"]),
                text=str(raw.get("text", "")),
                text_key=raw.get("textKey"),
            )
            if "lines" in raw:
                option.lines = self._parse_lines(raw["lines"], f"{option_path}.lines")
            if "actions" in raw:
                option.actions = self._parse_actions(raw["actions"], f"{option_path}.actions")
            if "branches" in raw:
                option.branches = self._parse_branches(raw["branches"], f"{option_path}.branches")
            options.append(option)
        return options

    def _parse_forks(self, raw_forks: Any, path: str) -> List[Fork]:
        forks = []
        for i, raw in enumerate(self._as_list(raw_forks, path)):
            fork_path = f"{path}[{i}]"
            if not isinstance(raw, dict):
                self.warnings.append(f"{fork_path}: skipping non-object fork")
                continue
            fork = Fork(
                checks=self._parse_checks(raw.get("checks"), f"{fork_path}.checks"),
                lines=self._parse_lines(raw.get("lines"), f"{fork_path}.lines"),
            )
            if "actions" in raw:
                fork.actions = self._parse_actions(raw["actions"], f"{fork_path}.actions")
            forks.append(fork)
        return forks

    def _parse_branches(self, raw_branches: Any, path: str) -> List[OptionBranch]:
        branches = []
        for i, raw in enumerate(self._as_list(raw_branches, path)):
            branch_path = f"{path}[{i}]"
            if not isinstance(raw, dict):
                self.warnings.append(f"{branch_path}: skipping non-object branch")
                continue
            branch = OptionBranch(checks=self._parse_checks(raw.get("checks"), f"{branch_path}.checks"))
            if "lines" in raw:
                branch.lines = self._parse_lines(raw["lines"], f"{branch_path}.lines")
            if "actions" in raw:
                branch.actions = self._parse_actions(raw["actions"], f"{branch_path}.actions")
            branches.append(branch)
        return branches

    def _parse_checks(self, raw_checks: Any, path: str) -> List[DialogueCheck]:
        checks: List[DialogueCheck] = []
        for i, raw in enumerate(self._as_list(raw_checks, path)):
            check_path = f"{path}[{i}]"
            if not isinstance(raw, dict):
                self.warnings.append(f"{check_path}: skipping non-object check")
                continue

            check_type = raw.get("type")
            if check_type == HasItemCheck.type:
                item_id = raw.get("itemId")
                if not item_id:
                    self.errors.append(f"{check_path}: hasItem check has no itemId")
                checks.append(HasItemCheck(item_id=str(item_id or ""), negate=bool(raw.get("negate", False))))
            else:
                self.warnings.append(f"{check_path}: unknown check type '{check_type}' always fails")
                checks.append(UnknownCheck(type=str(check_type), data=dict(raw)))
        return checks

    def _parse_actions(self, raw_actions: Any, path: str) -> List[DialogueAction]:
        actions: List[DialogueAction] = []
        for i, raw in enumerate(self._as_list(raw_actions, path)):
            action_path = f"{path}[{i}]"
            if not isinstance(raw, dict):
                self.warnings.append(f"{action_path}: skipping non-object action")
                continue

            action_type = raw.get("type")
            if action_type == GiveItemAction.type:
                item_id = raw.get("itemId")
                if not item_id:
                    self.errors.append(f"{action_path}: giveItem action has no itemId")
                actions.append(
                    GiveItemAction(
                        item_id=str(item_id or ""),
                        amount=self._parse_amount(raw.get("amount"), action_path),
                        if_missing=raw.get("ifMissing") is not False,
                    )
                )
            else:
                self.warnings.append(f"{action_path}: unknown action type '{action_type}' is ignored")
                actions.append(UnknownAction(type=str(action_type), data=dict(raw)))
        return actions

    def _parse_amount(self, raw: Any, path: str) -> Optional[float]:
        if raw is None:
            return None
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            self.warnings.append(f"{path}: amount {raw!r} is not a number, granting 1")
            return None
        if not math.isfinite(raw):
            self.warnings.append(f"{path}: amount {raw!r} is not finite, granting 1")
            return None
        return raw

    def get_stats(self, document: DialogueDocument) -> Dict[str, Any]:
        """Count the structural pieces of a document"""
        stats = {"lines": 0, "forks": len(document.forks or []), "options": 0, "branches": 0, "checks": 0, "actions": 0}
        items = set()

        def visit_actions(actions):
            for action in actions or []:
                stats["actions"] += 1
                if isinstance(action, GiveItemAction):
                    items.add(action.item_id)

        def visit_checks(checks):
            for check in checks:
                stats["checks"] += 1
                if isinstance(check, HasItemCheck):
                    items.add(check.item_id)

        def visit_lines(lines):
            for line in lines or []:
                stats["lines"] += 1
                for option in line.options or []:
                    stats["options"] += 1
                    visit_lines(option.lines)
                    visit_actions(option.actions)
                    for branch in option.branches or []:
                        stats["branches"] += 1
                        visit_checks(branch.checks)
                        visit_lines(branch.lines)
                        visit_actions(branch.actions)

        visit_lines(document.lines)
        visit_actions(document.actions)
        for fork in document.forks or []:
            visit_checks(fork.checks)
            visit_lines(fork.lines)
            visit_actions(fork.actions)

        stats["items"] = sorted(item for item in items if item)
        stats["errors"] = len(self.errors)
        stats["warnings"] = len(self.warnings)
        return stats
