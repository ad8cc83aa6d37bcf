"""Localized user-facing strings.

A ``Messages`` instance is created once at startup and handed to whatever
needs text; there is no module level lookup table.
"""

from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Set

import structlog
import yaml

logger = structlog.get_logger(__name__)

BUNDLE_DIR = Path(__file__).resolve().parent.parent / "messages"
DEFAULT_LOCALE = "en"


class MsgKey(str, Enum):
    OPEN_FILE = "OPEN_FILE"
    OPEN_FOLDER = "OPEN_FOLDER"
    OPEN_RECENT = "OPEN_RECENT"
    PASTE_SNIPPET = "PASTE_SNIPPET"
    RUN_SNIPPET = "RUN_SNIPPET"
    COMMANDS = "COMMANDS"
    NO_MATCHES = "NO_MATCHES"
    RECENT_DOCUMENTS = "RECENT_DOCUMENTS"
    NO_RECENT_DOCUMENTS = "NO_RECENT_DOCUMENTS"
    NO_FOLDER_SELECTED = "NO_FOLDER_SELECTED"
    SERVERS = "SERVERS"
    NO_CONNECTIONS = "NO_CONNECTIONS"
    SAVE = "SAVE"
    HELP = "HELP"
    EXIT = "EXIT"
    SET_MODE = "SET_MODE"
    USE_SERVER = "USE_SERVER"
    LIST_TABLES = "LIST_TABLES"
    QUERY_SENT = "QUERY_SENT"


class MissingMessageError(KeyError):
    """No text exists for a key in the active bundle or the default one."""


def _load_bundle(locale: str, bundle_dir: Path) -> Dict[str, str]:
    path = bundle_dir / f"{locale}.yaml"
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    return {str(k): str(v) for k, v in data.items()}


class Messages:
    """Lookup of text by ``MsgKey`` for one locale, falling back to English."""

    def __init__(self, locale: str = DEFAULT_LOCALE, bundle_dir: Optional[Path] = None):
        self.bundle_dir = Path(bundle_dir) if bundle_dir else BUNDLE_DIR
        self.locale = locale
        self._default = _load_bundle(DEFAULT_LOCALE, self.bundle_dir)
        self._texts = self._default if locale == DEFAULT_LOCALE else _load_bundle(locale, self.bundle_dir)
        if not self._texts and locale != DEFAULT_LOCALE:
            logger.warning("messages.locale.missing", locale=locale)

    def get(self, key: MsgKey) -> str:
        name = key.value if isinstance(key, MsgKey) else str(key)
        text = self._texts.get(name) or self._default.get(name)
        if not text:
            raise MissingMessageError(name)
        return text

    def missing_keys(self) -> Set[str]:
        """Keys with no usable text in the active bundle."""
        return {k.value for k in MsgKey if not str(self._texts.get(k.value, "")).strip()}

    def extra_keys(self) -> Set[str]:
        """Bundle entries that no ``MsgKey`` refers to."""
        return set(self._texts) - {k.value for k in MsgKey}
