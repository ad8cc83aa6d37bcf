from pathlib import Path

import pytest
import toml

from querypad.runtime import config as config_module
from querypad.runtime.config import QueryPadConfig, create_default_config, load_config


@pytest.fixture
def config_home(monkeypatch, tmp_path: Path) -> Path:
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setattr(config_module, "CONFIG_DIR", home / ".querypad")
    monkeypatch.chdir(work)
    monkeypatch.delenv("QUERYPAD_STATE_FILE", raising=False)
    monkeypatch.delenv("QUERYPAD_LOCALE", raising=False)
    return home / ".querypad"


def test_defaults_without_files(config_home: Path) -> None:
    config = load_config()

    assert config.recent.capacity == 9
    assert config.palette.result_limit == 100
    assert config.locale == "en"
    assert config.default_mode == "sql"


def test_local_file_overrides_global(config_home: Path) -> None:
    config_home.mkdir()
    (config_home / "config.toml").write_text(
        "locale = 'de'\n[recent]\ncapacity = 4\n[palette]\nresult_limit = 20\n"
    )
    Path("querypad.toml").write_text("[recent]\ncapacity = 6\n")

    config = load_config()

    assert config.recent.capacity == 6
    assert config.palette.result_limit == 20
    assert config.locale == "de"


def test_environment_overrides_files(config_home: Path, monkeypatch) -> None:
    Path("querypad.toml").write_text("locale = 'de'\n")
    monkeypatch.setenv("QUERYPAD_LOCALE", "fr")
    monkeypatch.setenv("QUERYPAD_STATE_FILE", "/tmp/state.toml")

    config = load_config()

    assert config.locale == "fr"
    assert config.paths.resolve("state_file") == Path("/tmp/state.toml")


def test_create_default_config_keeps_existing(config_home: Path) -> None:
    path = create_default_config()

    assert path == config_home / "config.toml"
    assert toml.load(path)["recent"]["capacity"] == 9

    path.write_text("locale = 'de'\n")
    create_default_config()
    assert path.read_text() == "locale = 'de'\n"


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        QueryPadConfig(recent={"capacity": 0})
