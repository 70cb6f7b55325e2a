"""Indonesian/English message catalogue for user-facing API errors."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

_LOCALES_DIR = Path(__file__).resolve().parent.parent / "locales"

SUPPORTED_LANGUAGES = ("id", "en")
DEFAULT_LANGUAGE = "id"


class _KeepMissing(dict):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def normalize_language(lang: str | None) -> str:
    """``"en-US"`` → ``"en"``; unsupported or empty tags → Indonesian."""
    primary = (lang or "").strip().lower().split("-")[0]
    return primary if primary in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


@lru_cache(maxsize=None)
def _catalogue(lang: str) -> dict[str, str]:
    path = _LOCALES_DIR / lang / "messages.json"
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        logger.warning("Locale file not found: %s", path)
        return {}


def translate(lang: str | None, key: str, **params: object) -> str:
    """Message *key* in *lang*, falling back to Indonesian and then to the key.

    ``{placeholder}`` fields are filled from *params*; unknown placeholders
    are left as written.
    """
    text = _catalogue(normalize_language(lang)).get(key)
    if text is None:
        text = _catalogue(DEFAULT_LANGUAGE).get(key, key)
    return text.format_map(_KeepMissing(params)) if params else text
