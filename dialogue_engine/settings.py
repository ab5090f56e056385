"""
Engine configuration
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional


@dataclass
class LocaleCfg:
    locale: str = "en"
    fallback_locale: str = "en"
    root: Optional[Path] = None  # Directory of <locale>.json files


@dataclass
class EngineSettings:
    interaction_cooldown_ms: int = 250  # Blocks re-triggering an NPC right after a conversation
    default_emotion: str = "happy"
    unknown_speaker_name: str = "???"
    player_name: str = "You"
    dialogues_root: Path = Path("resources") / "dialogue"
    locale: LocaleCfg = field(default_factory=LocaleCfg)


def _get(d: dict, path: str, default: Any):
    cur = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def load_settings(path: Optional[Path] = None) -> EngineSettings:
    """Read settings from a JSON file; missing keys keep their defaults"""
    data = {}
    if path is not None:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f) or {}

    defaults = EngineSettings()
    locale_root = _get(data, "locale.root", None)
    return EngineSettings(
        interaction_cooldown_ms=int(_get(data, "interaction_cooldown_ms", defaults.interaction_cooldown_ms)),
        default_emotion=_get(data, "default_emotion", defaults.default_emotion),
        unknown_speaker_name=_get(data, "unknown_speaker_name", defaults.unknown_speaker_name),
        player_name=_get(data, "player_name", defaults.player_name),
        dialogues_root=Path(_get(data, "dialogues_root", defaults.dialogues_root)),
        locale=LocaleCfg(
            locale=_get(data, "locale.locale", defaults.locale.locale),
            fallback_locale=_get(data, "locale.fallback_locale", defaults.locale.fallback_locale),
            root=Path(locale_root) if locale_root else None,
        ),
    )
