"""Runtime components for querypad."""

from .catalog import CatalogLoadError, CatalogRegistry, load_catalog
from .config import QueryPadConfig, create_default_config, ensure_config_dir, load_config
from .messages import Messages, MissingMessageError, MsgKey
from .persistence import MemoryPersistence, PersistenceGateway, PersistenceKey, TomlPersistence
from .platform import PlatformIntegration, detect_platform
from .recent import RecencyCache, RecentDocumentPersister, parse_paths
from .session import DocumentHost, Workspace

__all__ = [
    "CatalogLoadError",
    "CatalogRegistry",
    "load_catalog",
    "QueryPadConfig",
    "create_default_config",
    "ensure_config_dir",
    "load_config",
    "Messages",
    "MissingMessageError",
    "MsgKey",
    "MemoryPersistence",
    "PersistenceGateway",
    "PersistenceKey",
    "TomlPersistence",
    "PlatformIntegration",
    "detect_platform",
    "RecencyCache",
    "RecentDocumentPersister",
    "parse_paths",
    "DocumentHost",
    "Workspace",
]
