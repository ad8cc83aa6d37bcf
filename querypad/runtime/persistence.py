"""Key/value persistence used for recent documents and similar small state."""

from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

import structlog
import toml

logger = structlog.get_logger(__name__)

PATH_SPLIT = ";"


class PersistenceKey(str, Enum):
    """Keys querypad stores values under."""
    RECENT_DOCS = "recent_docs"
    LAST_OPENED_FOLDER = "last_opened_folder"


Key = Union[PersistenceKey, str]


class PersistenceGateway(Protocol):
    """The narrow contract the core depends on."""

    def get(self, key: Key, default: str) -> str:
        """Return the value stored for ``key`` or ``default``."""
        ...

    def put(self, key: Key, value: str) -> None:
        """Associate ``value`` with ``key``."""
        ...


def _key_name(key: Key) -> str:
    return key.value if isinstance(key, PersistenceKey) else str(key)


class MemoryPersistence:
    """In-process store, for tests and throwaway sessions."""

    def __init__(self, values: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(values or {})

    def get(self, key: Key, default: str) -> str:
        return self._values.get(_key_name(key), default)

    def put(self, key: Key, value: str) -> None:
        self._values[_key_name(key)] = value

    def as_dict(self) -> Dict[str, str]:
        return dict(self._values)


class TomlPersistence:
    """Flat table of strings in a TOML file, rewritten on every put.

    A missing or unreadable file reads as empty rather than failing.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()
        self._values: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as handle:
                data = toml.load(handle)
        except (OSError, toml.TomlDecodeError) as exc:
            logger.warning("persistence.load.failed", path=str(self.path), error=str(exc))
            return {}
        return {str(k): str(v) for k, v in data.items() if not isinstance(v, dict)}

    def get(self, key: Key, default: str) -> str:
        return self._values.get(_key_name(key), default)

    def put(self, key: Key, value: str) -> None:
        self._values[_key_name(key)] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as handle:
            toml.dump(self._values, handle)
