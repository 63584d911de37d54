"""Persisted UI state tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from planroom.state import (
    EXPANDED_FOLDERS_KEY,
    VIEW_MODE_KEY,
    ExpandedFolders,
    JsonFileKeyValueStore,
    MemoryKeyValueStore,
    UIStateError,
    ViewModePreference,
)


def test_expanded_folders_load_at_init_and_save_on_change(tmp_path: Path) -> None:
    store = JsonFileKeyValueStore(tmp_path / "ui.json")
    first = ExpandedFolders(store, "p1")

    assert first.toggle("/a") is True
    first.reveal("/a/b/c")

    second = ExpandedFolders(JsonFileKeyValueStore(tmp_path / "ui.json"), "p1")
    assert second.paths == {"/a", "/a/b"}

    data = json.loads((tmp_path / "ui.json").read_text(encoding="utf-8"))
    assert data[f"{EXPANDED_FOLDERS_KEY}-p1"] == ["/a", "/a/b"]


def test_expanded_folders_are_per_project() -> None:
    store = MemoryKeyValueStore()
    ExpandedFolders(store, "p1").toggle("/a")

    assert ExpandedFolders(store, "p2").paths == frozenset()


def test_reveal_never_collapses_siblings() -> None:
    expanded = ExpandedFolders(MemoryKeyValueStore(), "p1")
    expanded.toggle("/b")

    expanded.reveal("/a/x")

    assert expanded.paths == {"/a", "/b"}
    assert expanded.expand(["/a"]) is False


def test_malformed_expanded_state_is_ignored() -> None:
    store = MemoryKeyValueStore({f"{EXPANDED_FOLDERS_KEY}-p1": "not-a-list"})

    assert ExpandedFolders(store, "p1").paths == frozenset()


def test_view_mode_defaults_and_validates() -> None:
    store = MemoryKeyValueStore()
    preference = ViewModePreference(store, default="grid")

    assert preference.get() == "grid"
    preference.set("list")
    assert store.get(VIEW_MODE_KEY) == "list"
    with pytest.raises(ValueError):
        preference.set("cards")


def test_corrupt_state_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "ui.json"
    path.write_text("{nope", encoding="utf-8")

    with pytest.raises(UIStateError):
        JsonFileKeyValueStore(path).get("anything")
