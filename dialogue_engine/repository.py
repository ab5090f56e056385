"""
File-backed dialogue repository
"""

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional

from dialogue_engine.model.loader import DialogueLoader
from dialogue_engine.model.types import DialogueDocument

logger = logging.getLogger(__name__)

SAFE_ID = re.compile(r"^[A-Za-z0-9_\-]+$")


class DialogueRepository:
    """Loads ``<root>/<npc_id>.json`` on first request and caches the result.

    Cached documents are shared between sessions and must be treated as
    read-only by callers.
    """

    def __init__(self, root: Path):
        self.root = Path(root)
        self._cache: Dict[str, DialogueDocument] = {}

    def path_for(self, npc_id: str) -> Optional[Path]:
        if not npc_id or not SAFE_ID.match(npc_id):
            return None
        return self.root / f"{npc_id}.json"

    async def get_dialogue(self, npc_id: str) -> Optional[DialogueDocument]:
        # Local files are read synchronously; callers start conversations serially.
        return self.load(npc_id)

    def load(self, npc_id: str) -> Optional[DialogueDocument]:
        if npc_id in self._cache:
            return self._cache[npc_id]

        path = self.path_for(npc_id)
        if path is None:
            logger.warning("Rejected dialogue id %r", npc_id)
            return None
        if not path.exists():
            logger.warning("Missing dialogue: %s", npc_id)
            return None

        loader = DialogueLoader()
        document = loader.parse_file(path)
        if document is None:
            logger.warning("Failed to load dialogue %s: %s", npc_id, "; ".join(loader.errors))
            return None
        for warning in loader.warnings:
            logger.debug("%s: %s", npc_id, warning)

        if not document.has_any_lines():
            logger.warning("Empty dialogue: %s", npc_id)
            return None

        self._cache[npc_id] = document
        return document

    def available_ids(self) -> List[str]:
        if not self.root.exists():
            return []
        return sorted(path.stem for path in self.root.glob("*.json") if SAFE_ID.match(path.stem))
