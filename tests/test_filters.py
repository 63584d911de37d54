"""Listing filter tests: scope, category, search, and item composition."""

from __future__ import annotations

from tests.helpers import make_file

from planroom.files import (
    DrawingSet,
    DrawingSetItem,
    DrawingSheet,
    FileItem,
    FolderItem,
    SheetItem,
    build_folder_tree,
    category_counts,
    document_items,
    visible_files,
    visible_sheets,
)
from planroom.navigation import ROOT, DrawingSetView, FolderView

FILES = [
    make_file("root-1", None, name="Schedule.xlsx", category="other"),
    make_file("root-2", "", name="Permit.pdf", category="permits", description="City permit"),
    make_file("a-1", "/a", name="Contract.pdf", category="contracts", tags=["Signed"]),
    make_file("ab-1", "/a/b", name="Subcontract.pdf", category="contracts"),
    make_file("a-2", "a/", name="Photo.jpg", category="photos"),
]


def _ids(records) -> list[str]:
    return [record.id for record in records]


def test_folder_scope_never_includes_descendants() -> None:
    assert _ids(visible_files(FILES, FolderView(path="/a"))) == ["a-1", "a-2"]
    assert _ids(visible_files(FILES, FolderView(path="/a/b"))) == ["ab-1"]


def test_root_scope_keeps_unfiled_files_only() -> None:
    assert _ids(visible_files(FILES, ROOT)) == ["root-1", "root-2"]


def test_category_and_search_narrow_in_order() -> None:
    view = FolderView(path="/a")

    assert _ids(visible_files(FILES, view, category="photos")) == ["a-2"]
    assert _ids(visible_files(FILES, view, search="signed")) == ["a-1"]
    assert _ids(visible_files(FILES, view, category="photos", search="signed")) == []
    assert _ids(visible_files(FILES, ROOT, search="CITY")) == ["root-2"]


def test_drawing_set_view_lists_no_files() -> None:
    assert visible_files(FILES, DrawingSetView(id="set-1")) == []


def test_folders_hidden_when_searching_at_root() -> None:
    tree = build_folder_tree(["/a", "/a/b", "/z"], FILES)

    browsing = document_items(tree, FILES, ROOT)
    searching = document_items(tree, FILES, ROOT, search="schedule")

    assert [type(item) for item in browsing[:2]] == [FolderItem, FolderItem]
    assert [item.path for item in browsing if isinstance(item, FolderItem)] == ["/a", "/z"]
    assert searching == [FileItem(record=FILES[0])]


def test_folders_stay_visible_when_searching_inside_folder() -> None:
    tree = build_folder_tree([], FILES)

    items = document_items(tree, FILES, FolderView(path="/a"), search="photo")

    assert items[0] == FolderItem(path="/a/b", name="b", item_count=1)
    assert [item.record.id for item in items if isinstance(item, FileItem)] == ["a-2"]


def test_drawings_category_lists_sets_and_set_view_lists_sheets() -> None:
    sets = [
        DrawingSet(id="s-1", title="Architectural"),
        DrawingSet(id="s-2", title="Structural"),
    ]
    sheets = [
        DrawingSheet(id="2", drawing_set_id="s-1", sheet_number="A-102", sort_order=2),
        DrawingSheet(id="1", drawing_set_id="s-1", sheet_number="A-101", sheet_title="Plan", sort_order=1),
    ]

    listed = document_items((), FILES, ROOT, "drawings", "struct", drawing_sets=sets)
    opened = document_items((), FILES, DrawingSetView(id="s-1"), "drawings", sheets=sheets)

    assert listed == [DrawingSetItem(drawing_set=sets[1])]
    assert opened == [SheetItem(sheet=sheets[1]), SheetItem(sheet=sheets[0])]
    assert [sheet.id for sheet in visible_sheets(sheets, "plan")] == ["1"]


def test_category_counts_buckets_untagged_files_as_other() -> None:
    counts = category_counts([make_file("1", None), make_file("2", None, category="photos")])

    assert counts == {"all": 2, "other": 1, "photos": 1}
