"""
Deep-copy builders for the mutable dialogue types.

A session mutates its working line list (option answers are rewritten and
follow-up lines spliced in), so it must never share objects with a cached
source document. Checks and actions are frozen and can be shared.
"""

from dataclasses import replace
from typing import List, Optional

from .types import DialogueAction, DialogueLine, DialogueOption, OptionBranch


def clone_actions(actions: Optional[List[DialogueAction]]) -> List[DialogueAction]:
    return list(actions or [])


def clone_branch(branch: OptionBranch) -> OptionBranch:
    return OptionBranch(
        checks=list(branch.checks),
        lines=clone_lines(branch.lines) if branch.lines is not None else None,
        actions=list(branch.actions) if branch.actions is not None else None,
    )


def clone_option(option: DialogueOption) -> DialogueOption:
    return replace(
        option,
        lines=clone_lines(option.lines) if option.lines is not None else None,
        actions=list(option.actions) if option.actions is not None else None,
        branches=[clone_branch(b) for b in option.branches] if option.branches is not None else None,
    )


def clone_line(line: DialogueLine) -> DialogueLine:
    return replace(
        line,
        options=[clone_option(o) for o in line.options] if line.options is not None else None,
    )


def clone_lines(lines: Optional[List[DialogueLine]]) -> List[DialogueLine]:
    return [clone_line(line) for line in lines or []]
