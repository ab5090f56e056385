"""
Conversation playback and lifecycle for NPC dialogue
"""

import logging
import math
from dataclasses import replace
from typing import List, Optional

from dialogue_engine.model.clone import clone_actions, clone_lines
from dialogue_engine.model.types import DialogueLine, InventorySnapshot, Position, RenderLine, RenderOption
from dialogue_engine.settings import EngineSettings

from .actions import ActionExecutor
from .conditions import ConditionEvaluator
from .events import EventBus, InventoryUpdated, NpcInteraction, Subscription
from .inventory import InventoryCache
from .ports import ConversationView, DialogueSource, InventoryService, PositionLookup, Translator
from .resolver import DialogueResolver
from .session import DialogueSession

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class _PassthroughTranslator:
    def translate(self, key, params=None, fallback=None):
        return fallback if fallback is not None else key


class DialogueManager:
    """Runs at most one conversation at a time.

    Subscribes to NpcInteraction (starts a conversation) and InventoryUpdated
    (refreshes the cached snapshot) on construction; destroy() releases both.
    start/advance/select_option must be called serially by the input layer.
    """

    def __init__(
        self,
        bus: EventBus,
        repository: DialogueSource,
        inventory_service: InventoryService,
        view: ConversationView,
        translator: Optional[Translator] = None,
        positions: Optional[PositionLookup] = None,
        settings: Optional[EngineSettings] = None,
    ):
        self.bus = bus
        self.repository = repository
        self.view = view
        self.translator = translator or _PassthroughTranslator()
        self.positions = positions
        self.settings = settings or EngineSettings()

        self.inventory = InventoryCache(inventory_service)
        self.resolver = DialogueResolver(self.inventory, ConditionEvaluator())
        self.executor = ActionExecutor(self.inventory, inventory_service, self._broadcast_inventory)

        self.session = DialogueSession()
        self._starting = False

        self._subscriptions: List[Subscription] = [
            bus.subscribe(NpcInteraction, self._on_npc_interaction),
            bus.subscribe(InventoryUpdated, self._on_inventory_updated),
        ]
        view.on_advance_requested(self.advance)
        view.on_option_selected(self.select_option)

    @property
    def is_active(self) -> bool:
        return self.session.active

    def destroy(self) -> None:
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions = []

    def __enter__(self) -> "DialogueManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.destroy()

    # Event handlers

    async def _on_npc_interaction(self, event: NpcInteraction) -> None:
        if not event.npc_id:
            return
        await self.start(event.npc_id, event.npc_name)

    def _on_inventory_updated(self, event: InventoryUpdated) -> None:
        self.inventory.replace(event.snapshot)

    async def _broadcast_inventory(self, snapshot: InventorySnapshot) -> None:
        await self.bus.publish(InventoryUpdated(snapshot))

    # Playback

    async def start(self, npc_id: str, npc_name: Optional[str] = None) -> None:
        if self.session.active or self._starting:
            logger.debug("conversation already running, ignoring start for %s", npc_id)
            return

        self._starting = True
        try:
            document = await self.repository.get_dialogue(npc_id)
            if document is None:
                return

            resolved = await self.resolver.resolve(document)
            if not resolved.lines:
                logger.debug("dialogue %s resolved to no lines", npc_id)
                return

            session = self.session
            session.lines = clone_lines(resolved.lines)
            session.pending_actions = clone_actions(resolved.actions)
            session.current_index = 0
            session.active = True
            session.npc_id = npc_id
            session.npc_name = npc_name
            session.has_shown_line = False
        finally:
            self._starting = False

        self.view.enter_conversation_mode(self._focus_point())
        self.render_current_line()

    async def advance(self) -> None:
        session = self.session
        if not session.active:
            return
        if not session.lines:
            self._teardown()
            return

        if not session.is_last_line():
            session.current_index += 1
            self.render_current_line()
            return

        self.view.play_end_cue()
        try:
            await self.executor.execute(session.pending_actions)
        finally:
            self._teardown()

    async def select_option(self, option_id: str) -> None:
        session = self.session
        if not session.active:
            return
        line = session.current_line()
        if line is None or not line.options:
            return

        selected = next((option for option in line.options if option.id == option_id), None)
        if selected is None:
            return

        session.lines[session.current_index] = replace(
            line,
            text=self._localize(selected.text_key, selected.text),
            text_key=None,
            options=None,
            hide_speaker_visuals=False,
        )

        resolved = await self.resolver.resolve_option(selected)
        if resolved.lines:
            at = session.current_index + 1
            session.lines[at:at] = clone_lines(resolved.lines)
        if resolved.actions:
            session.pending_actions.extend(resolved.actions)

        self.render_current_line()

    def render_current_line(self) -> None:
        session = self.session
        line = session.current_line()
        if line is None:
            return

        render_line = self.build_render_line(line)
        if session.has_shown_line:
            self.view.play_advance_cue()
        session.has_shown_line = True
        self.view.render_line(render_line)

    def build_render_line(self, line: DialogueLine) -> RenderLine:
        npc_id = self.session.npc_id
        options = None
        if line.options is not None:
            options = [
                RenderOption(id=option.id, text=self._localize(option.text_key, option.text)) for option in line.options
            ]

        return RenderLine(
            speaker=line.speaker,
            name=self._speaker_name(line),
            text=self._localize(line.text_key, line.text),
            emotion=line.emotion or self.settings.default_emotion,
            npc_id=npc_id if line.speaker == "npc" else None,
            options=options,
            hide_speaker_visuals=line.effective_hide_speaker_visuals(),
        )

    def _localize(self, key: Optional[str], text: str) -> str:
        if key:
            return self.translator.translate(key, None, text)
        return text

    def _speaker_name(self, line: DialogueLine) -> str:
        if line.speaker == "npc":
            default_name = self._npc_name()
        else:
            default_name = self.translator.translate("dialogue.playerName", None, self.settings.player_name)

        if line.name_key:
            return self.translator.translate(line.name_key, None, line.name or default_name)
        return line.name or default_name

    def _npc_name(self) -> str:
        npc_id = self.session.npc_id
        npc_info = self.positions.get_npc_position(npc_id) if self.positions and npc_id else None
        fallback = self.session.npc_name or (npc_info.name if npc_info else None)
        if not fallback:
            fallback = self.translator.translate("dialogue.unknownSpeaker", None, self.settings.unknown_speaker_name)
        if npc_id:
            return self.translator.translate(f"npc.{npc_id}.name", None, fallback)
        return fallback

    def _focus_point(self) -> Optional[Position]:
        if self.positions is None:
            return None
        player = self.positions.get_player_position()
        npc = self.positions.get_npc_position(self.session.npc_id) if self.session.npc_id else None
        if player and npc:
            return Position(x=_round_half_up((player.x + npc.x) / 2), y=_round_half_up((player.y + npc.y) / 2))
        return npc or player

    def _teardown(self) -> None:
        self.view.exit_conversation_mode()
        self.view.set_interaction_cooldown(self.settings.interaction_cooldown_ms)
        self.session.reset()
