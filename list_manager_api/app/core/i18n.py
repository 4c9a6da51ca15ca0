"""
Localized user-facing messages.

All text returned to API clients goes through a ``Localizer``.
Language packs are flat JSON files in ``app/i18n`` mapping a dotted
message key (``lists.invalidName``) to its text.  Keys missing from the
selected pack fall back to English, and unknown keys are returned
verbatim so that a missing translation never breaks a response.

Messages may contain ``{param}`` placeholders filled by ``ts``.  A
parameter value that is itself written as ``{some.key}`` is resolved
as a message key first, which lets callers say "List not found" as::

    i18n.ts("globals.messages.notFound", name="{globals.terms.list}")
"""

import json
import logging
import re
from pathlib import Path
from typing import Dict, Optional


I18N_DIR = Path(__file__).resolve().parent.parent / "i18n"
DEFAULT_LANGUAGE = "en"

_KEY_REF = re.compile(r"^\{([a-zA-Z0-9_.]+)\}$")


def load_language_pack(lang: str, directory: Optional[Path] = None) -> Dict[str, str]:
    """Read ``<lang>.json`` from ``directory`` (defaults to the bundled packs)."""
    path = (directory or I18N_DIR) / f"{lang}.json"
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Language pack {path} must be a JSON object")
    return {str(k): str(v) for k, v in data.items()}


class Localizer:
    """Resolves message keys to text in a single language."""

    def __init__(self, lang: str = DEFAULT_LANGUAGE, directory: Optional[Path] = None) -> None:
        logger = logging.getLogger(__name__)
        self.lang = lang
        self._messages: Dict[str, str] = load_language_pack(DEFAULT_LANGUAGE, directory)
        if lang != DEFAULT_LANGUAGE:
            try:
                self._messages.update(load_language_pack(lang, directory))
            except FileNotFoundError:
                logger.warning("Language pack '%s' not found, using '%s'", lang, DEFAULT_LANGUAGE)
                self.lang = DEFAULT_LANGUAGE

    def t(self, key: str) -> str:
        """Return the text for ``key`` or the key itself when unknown."""
        return self._messages.get(key, key)

    def ts(self, key: str, **params: str) -> str:
        """Return the text for ``key`` with ``{param}`` placeholders substituted."""
        text = self.t(key)
        for name, value in params.items():
            value = str(value)
            ref = _KEY_REF.match(value)
            if ref:
                value = self.t(ref.group(1))
            text = text.replace("{" + name + "}", value)
        return text
