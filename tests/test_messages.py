from pathlib import Path

import pytest

from querypad.runtime.messages import Messages, MissingMessageError, MsgKey


def test_default_bundle_covers_every_key() -> None:
    messages = Messages()

    assert messages.missing_keys() == set()
    assert messages.extra_keys() == set()
    assert messages.get(MsgKey.NO_MATCHES) == "No matches found"
    assert messages.get(MsgKey.OPEN_FILE) == "Open File"


def test_unknown_locale_falls_back_to_english() -> None:
    messages = Messages("xx")

    assert messages.get(MsgKey.RUN_SNIPPET) == "Run Snip"


def test_partial_locale_falls_back_per_key(tmp_path: Path) -> None:
    (tmp_path / "en.yaml").write_text("OPEN_FILE: Open File\nSAVE: Save\n")
    (tmp_path / "de.yaml").write_text("OPEN_FILE: Datei öffnen\nUNUSED: x\n", encoding="utf-8")

    messages = Messages("de", bundle_dir=tmp_path)

    assert messages.get(MsgKey.OPEN_FILE) == "Datei öffnen"
    assert messages.get(MsgKey.SAVE) == "Save"
    assert "SAVE" in messages.missing_keys()
    assert messages.extra_keys() == {"UNUSED"}


def test_missing_text_raises(tmp_path: Path) -> None:
    (tmp_path / "en.yaml").write_text("SAVE: Save\n")

    messages = Messages(bundle_dir=tmp_path)

    with pytest.raises(MissingMessageError):
        messages.get(MsgKey.HELP)
