"""
Localized string lookup for dialogue names and text
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class LocaleManager:
    """Resolves dotted keys such as ``npc.fisher.name``.

    Lookup order: current locale, fallback locale, the caller's fallback,
    then the key itself. ``{name}`` placeholders are filled from params.
    """

    def __init__(self, locales: Optional[Dict[str, dict]] = None, locale: str = "en", fallback_locale: str = "en"):
        self.locales: Dict[str, dict] = dict(locales or {})
        self.current_locale = locale
        self.fallback_locale = fallback_locale

    @classmethod
    def load_directory(cls, path: Path, locale: str = "en", fallback_locale: str = "en") -> "LocaleManager":
        locales = {}
        for locale_file in sorted(Path(path).glob("*.json")):
            try:
                with open(locale_file, "r", encoding="utf-8") as f:
                    locales[locale_file.stem] = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning("skipping locale file %s: %s", locale_file, e)
        return cls(locales, locale=locale, fallback_locale=fallback_locale)

    def set_locale(self, locale: str) -> None:
        self.current_locale = locale

    def _lookup(self, locale: str, key: str) -> Any:
        cursor: Any = self.locales.get(locale)
        if cursor is None:
            return None

        for segment in key.split("."):
            if not isinstance(cursor, dict) or segment not in cursor:
                return None
            cursor = cursor[segment]
        return cursor

    def t(self, key: str, params: Optional[Dict[str, Any]] = None, fallback: Optional[str] = None) -> str:
        raw = self._lookup(self.current_locale, key)
        if raw is None:
            raw = self._lookup(self.fallback_locale, key)
        if raw is None:
            raw = fallback if fallback is not None else key
        if not isinstance(raw, str):
            return fallback if fallback is not None else key

        if not params:
            return raw

        for param_key, value in params.items():
            raw = re.sub(r"\{" + re.escape(str(param_key)) + r"\}", lambda _m: str(value), raw)
        return raw

    translate = t
