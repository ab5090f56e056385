"""Shared test fixtures."""

import asyncio
from pathlib import Path
from types import SimpleNamespace

import pytest

from dialogue_engine.engine.events import EventBus
from dialogue_engine.engine.inventory import MemoryInventoryService
from dialogue_engine.engine.manager import DialogueManager
from dialogue_engine.model.loader import DialogueLoader


RESOURCES = Path(__file__).resolve().parent.parent / "resources"
DIALOGUES = RESOURCES / "dialogue"
LOCALES = RESOURCES / "locales"


class RecordingView:
    """ConversationView that records every call in order"""

    def __init__(self):
        self.events = []
        self.rendered = []
        self.advance_callback = None
        self.option_callback = None

    def enter_conversation_mode(self, focus_point=None):
        self.events.append(("enter", focus_point))

    def exit_conversation_mode(self):
        self.events.append(("exit",))

    def set_interaction_cooldown(self, ms):
        self.events.append(("cooldown", ms))

    def render_line(self, line):
        self.events.append(("render", line.text))
        self.rendered.append(line)

    def on_advance_requested(self, callback):
        self.advance_callback = callback

    def on_option_selected(self, callback):
        self.option_callback = callback

    def play_advance_cue(self):
        self.events.append(("advance_cue",))

    def play_end_cue(self):
        self.events.append(("end_cue",))

    def count(self, name):
        return sum(1 for event in self.events if event[0] == name)


class FakeRepository:
    """Serves documents from a dict and yields to the loop like real I/O"""

    def __init__(self, documents=None):
        self.documents = documents or {}
        self.calls = 0

    async def get_dialogue(self, npc_id):
        self.calls += 1
        await asyncio.sleep(0)
        return self.documents.get(npc_id)


def load_document(data):
    loader = DialogueLoader()
    document = loader.parse_dict(data)
    assert document is not None, loader.errors
    return document


@pytest.fixture()
def make_engine():
    """Build a DialogueManager wired to recording collaborators"""

    def build(documents, items=None, extra=None, total_slots=10, **kwargs):
        parsed = {npc_id: load_document(data) for npc_id, data in documents.items()}
        bus = EventBus()
        view = RecordingView()
        repository = FakeRepository(parsed)
        inventory = MemoryInventoryService(items=items, total_slots=total_slots, extra=extra)
        manager = DialogueManager(bus=bus, repository=repository, inventory_service=inventory, view=view, **kwargs)
        return SimpleNamespace(
            manager=manager,
            bus=bus,
            view=view,
            repository=repository,
            inventory=inventory,
            documents=parsed,
        )

    return build


@pytest.fixture()
def fisher_document():
    """The bundled fisher dialogue"""
    loader = DialogueLoader()
    document = loader.parse_file(DIALOGUES / "fisher.json")
    assert document is not None, loader.errors
    return document
