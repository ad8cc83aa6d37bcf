"""Configuration management for querypad.

Handles loading and merging configuration from:
1. Global config file (~/.querypad/config.toml)
2. Local project config file (./querypad.toml)
3. Environment variables
"""

import os
from pathlib import Path
from typing import Any, Dict

import toml
from pydantic import BaseModel, Field

CONFIG_DIR = Path.home() / ".querypad"


class RecentConfig(BaseModel):
    """Recently used documents."""
    capacity: int = Field(default=9, ge=1)


class PaletteConfig(BaseModel):
    """Command palette behaviour."""
    result_limit: int = Field(default=100, ge=1)


class PathsConfig(BaseModel):
    """Files querypad reads and writes."""
    state_file: str = "~/.querypad/state.toml"
    catalog_file: str = "~/.querypad/catalog.yaml"
    snippets_file: str = "~/.querypad/snippets.yaml"
    history_file: str = "~/.querypad/history"

    def resolve(self, name: str) -> Path:
        return Path(getattr(self, name)).expanduser()


class QueryPadConfig(BaseModel):
    """Main querypad configuration."""
    recent: RecentConfig = Field(default_factory=RecentConfig)
    palette: PaletteConfig = Field(default_factory=PaletteConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)

    locale: str = "en"
    default_mode: str = "sql"
    verbose: bool = False


def get_config_path(local: bool = False) -> Path:
    """Get the path to the configuration file."""
    if local:
        return Path("./querypad.toml")
    else:
        return CONFIG_DIR / "config.toml"


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config() -> QueryPadConfig:
    """Load configuration from files and environment variables."""
    config_data: Dict[str, Any] = {}

    # Load global config
    global_config_path = get_config_path(local=False)
    if global_config_path.exists():
        with open(global_config_path, "r") as f:
            _merge(config_data, toml.load(f))

    # Load local config (overrides global)
    local_config_path = get_config_path(local=True)
    if local_config_path.exists():
        with open(local_config_path, "r") as f:
            _merge(config_data, toml.load(f))

    # Override with environment variables
    if "QUERYPAD_STATE_FILE" in os.environ:
        config_data.setdefault("paths", {})["state_file"] = os.environ["QUERYPAD_STATE_FILE"]

    if "QUERYPAD_LOCALE" in os.environ:
        config_data["locale"] = os.environ["QUERYPAD_LOCALE"]

    return QueryPadConfig(**config_data)


def ensure_config_dir() -> None:
    """Ensure the querypad configuration directory exists."""
    CONFIG_DIR.mkdir(exist_ok=True)


def create_default_config() -> Path:
    """Create a default configuration file, leaving an existing one alone."""
    config_path = get_config_path(local=False)
    ensure_config_dir()

    if not config_path.exists():
        default_config = QueryPadConfig().model_dump()
        with open(config_path, "w") as f:
            toml.dump(default_config, f)
    return config_path
