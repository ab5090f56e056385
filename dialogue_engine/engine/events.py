"""
Typed publish/subscribe bus connecting the dialogue engine to the game
"""

import inspect
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Type

from dialogue_engine.model.types import InventorySnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NpcInteraction:
    """The player asked to talk to an NPC"""

    npc_id: str
    npc_name: Optional[str] = None


@dataclass(frozen=True)
class InventoryUpdated:
    """A full inventory snapshot was broadcast"""

    snapshot: InventorySnapshot


EventHandler = Callable[[Any], Any]


class Subscription:
    """Handle returned by EventBus.subscribe; cancel() is idempotent"""

    def __init__(self, bus: "EventBus", event_type: Type, handler: EventHandler):
        self._bus = bus
        self.event_type = event_type
        self.handler = handler
        self.active = True

    def cancel(self) -> None:
        if self.active:
            self._bus.unsubscribe(self.event_type, self.handler)
            self.active = False

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel()


class EventBus:
    """Dispatches events to handlers registered for their exact type.

    Handlers may be plain callables or coroutine functions; ``publish``
    awaits whatever a handler returns when it is awaitable, one handler at a
    time, in subscription order.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type, List[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: Type, handler: EventHandler) -> Subscription:
        self._handlers[event_type].append(handler)
        logger.debug("subscribed %s -> %s", event_type.__name__, getattr(handler, "__qualname__", handler))
        return Subscription(self, event_type, handler)

    def unsubscribe(self, event_type: Type, handler: EventHandler) -> None:
        try:
            self._handlers[event_type].remove(handler)
        except ValueError:
            logger.warning("handler not registered for %s", event_type.__name__)

    def listener_count(self, event_type: Type) -> int:
        return len(self._handlers.get(event_type, []))

    async def publish(self, event: Any) -> None:
        handlers = list(self._handlers.get(type(event), []))
        if not handlers:
            logger.debug("no subscribers for %s", type(event).__name__)
            return

        for handler in handlers:
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("event handler %r failed for %s", handler, type(event).__name__)
