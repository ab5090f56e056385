"""
Interactive Dialogue Player - talk to an NPC in the terminal using the real engine
"""

import asyncio
import shutil
import textwrap
from pathlib import Path
from typing import Awaitable, Callable, Dict, List, Optional

from dialogue_engine.engine.events import EventBus, NpcInteraction
from dialogue_engine.engine.inventory import MemoryInventoryService
from dialogue_engine.engine.manager import DialogueManager
from dialogue_engine.locale import LocaleManager
from dialogue_engine.model.types import Position, RenderLine
from dialogue_engine.repository import DialogueRepository
from dialogue_engine.settings import EngineSettings


# ANSI color codes for terminal output
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    ITALIC = "\033[3m"

    RED = "\033[31m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"

    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"
    BRIGHT_BLUE = "\033[94m"
    BRIGHT_MAGENTA = "\033[95m"
    BRIGHT_CYAN = "\033[96m"


class TerminalView:
    """Conversation view that prints lines as boxes on stdout"""

    def __init__(self, output: Callable[[str], None] = print):
        self.output = output
        self.current: Optional[RenderLine] = None
        self.in_conversation = False
        self.cooldown_ms = 0
        self._advance: Optional[Callable[[], Awaitable[None]]] = None
        self._select: Optional[Callable[[str], Awaitable[None]]] = None

        try:
            self.term_width = shutil.get_terminal_size().columns
        except OSError:
            self.term_width = 80

    # ConversationView

    def enter_conversation_mode(self, focus_point: Optional[Position] = None) -> None:
        self.in_conversation = True
        self.output(f"\n{Colors.BRIGHT_CYAN}{'=' * 60}{Colors.RESET}")

    def exit_conversation_mode(self) -> None:
        self.in_conversation = False
        self.current = None

    def set_interaction_cooldown(self, ms: int) -> None:
        self.cooldown_ms = ms

    def render_line(self, line: RenderLine) -> None:
        self.current = line
        color = Colors.BRIGHT_CYAN if line.speaker == "npc" else Colors.BRIGHT_GREEN
        self.output(self.format_dialogue_box(line.text, line.name, color))
        if line.options:
            self.output(f"\n{Colors.DIM}{'─' * 50}{Colors.RESET}")
            for i, option in enumerate(line.options, 1):
                self.output(f"  {Colors.BRIGHT_YELLOW}[{i}]{Colors.RESET} {Colors.YELLOW}{option.text}{Colors.RESET}")

    def on_advance_requested(self, callback: Callable[[], Awaitable[None]]) -> None:
        self._advance = callback

    def on_option_selected(self, callback: Callable[[str], Awaitable[None]]) -> None:
        self._select = callback

    def play_advance_cue(self) -> None:
        pass

    def play_end_cue(self) -> None:
        self.output(f"\n{Colors.BRIGHT_CYAN}{'=' * 60}{Colors.RESET}")

    # Input forwarding

    async def request_advance(self) -> None:
        if self._advance is not None:
            await self._advance()

    async def request_option(self, option_id: str) -> None:
        if self._select is not None:
            await self._select(option_id)

    def format_dialogue_box(self, text: str, speaker: str, color: str, max_width: int = 60) -> str:
        """Format dialogue text in a box"""
        actual_max = max(20, min(max_width, self.term_width - 8))

        lines = []
        for paragraph in text.split("\n"):
            if paragraph:
                lines.extend(textwrap.wrap(paragraph, width=actual_max))
            else:
                lines.append("")

        box_width = max(len(line) for line in lines) if lines else 20
        box_width = max(box_width, len(speaker) + 2)

        result = [f"\n  {color}╭─ {speaker} {'─' * (box_width - len(speaker) - 1)}╮{Colors.RESET}"]
        for line in lines:
            result.append(f"  {color}│{Colors.RESET} {line.ljust(box_width)} {color}│{Colors.RESET}")
        result.append(f"  {color}╰{'─' * (box_width + 2)}╯{Colors.RESET}")
        return "\n".join(result)


class DialoguePlayer:
    """Interactive player wiring the engine to a TerminalView"""

    def __init__(
        self,
        dialogues_root: Path,
        items: Optional[Dict[str, int]] = None,
        equipped: Optional[Dict[str, str]] = None,
        locales: Optional[LocaleManager] = None,
        settings: Optional[EngineSettings] = None,
        input_func: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
    ):
        self.input_func = input_func
        self.output = output
        self.bus = EventBus()
        self.inventory = MemoryInventoryService(items=items, extra=equipped)
        self.view = TerminalView(output=output)
        self.manager = DialogueManager(
            bus=self.bus,
            repository=DialogueRepository(dialogues_root),
            inventory_service=self.inventory,
            view=self.view,
            translator=locales,
            settings=settings,
        )

    def play(self, npc_id: str, npc_name: Optional[str] = None) -> bool:
        """Run one conversation; returns False when the NPC has nothing to say"""
        return asyncio.run(self.run(npc_id, npc_name))

    async def run(self, npc_id: str, npc_name: Optional[str] = None) -> bool:
        with self.manager:
            await self.bus.publish(NpcInteraction(npc_id=npc_id, npc_name=npc_name))
            if not self.manager.is_active:
                self.output(f"{Colors.RED}❌ '{npc_id}' has nothing to say.{Colors.RESET}")
                return False

            while self.manager.is_active:
                if not await self._handle_input():
                    self.output(f"\n{Colors.BRIGHT_YELLOW}👋 Conversation abandoned.{Colors.RESET}")
                    break

            self.show_state()
        return True

    async def _handle_input(self) -> bool:
        line = self.view.current
        options = line.options if line else None
        prompt = f"\n{Colors.BRIGHT_MAGENTA}>{Colors.RESET} " if options else f"{Colors.DIM}[Enter]{Colors.RESET} "

        try:
            user_input = self.input_func(prompt).strip().lower()
        except (EOFError, KeyboardInterrupt):
            return False

        if user_input in ["quit", "exit", "q"]:
            return False
        if user_input == "state":
            self.show_state()
            return True

        if not options:
            await self.view.request_advance()
            return True

        try:
            choice_num = int(user_input)
        except ValueError:
            self.output(f"{Colors.RED}❌ Please enter a valid number or command.{Colors.RESET}")
            return True

        if 1 <= choice_num <= len(options):
            await self.view.request_option(options[choice_num - 1].id)
        else:
            self.output(f"{Colors.RED}❌ Invalid choice. Please enter a number from the list.{Colors.RESET}")
        return True

    def show_state(self):
        """Display the current inventory"""
        snapshot = self.inventory.to_dict()
        held: List[str] = [f"{slot['itemId']} x{slot['count']}" for slot in snapshot["slots"] if slot["itemId"]]
        self.output(f"\n{Colors.BRIGHT_BLUE}🎒 Inventory:{Colors.RESET} {', '.join(held) if held else '(empty)'}")
        equipped = {key: value for key, value in snapshot.items() if "equipped" in key.lower() and value}
        for key, value in equipped.items():
            self.output(f"  {Colors.CYAN}•{Colors.RESET} {key}: {value}")
