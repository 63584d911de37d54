"""Folder tree construction tests."""

from __future__ import annotations

from tests.helpers import make_file

from planroom.files import build_folder_tree, child_folders, find_folder, folder_options
from planroom.files.tree import iter_folders


def test_contracts_tree_counts_exact_paths() -> None:
    """A nested folder's files are not summed into its parent."""
    files = [make_file("1", "/contracts"), make_file("2", "/contracts/subs")]

    tree = build_folder_tree(["/contracts", "/contracts/subs"], files)

    assert len(tree) == 1
    contracts = tree[0]
    assert (contracts.name, contracts.path, contracts.item_count) == ("contracts", "/contracts", 1)
    assert len(contracts.children) == 1
    subs = contracts.children[0]
    assert (subs.name, subs.path, subs.item_count) == ("subs", "/contracts/subs", 1)


def test_files_imply_folders_and_intermediate_prefixes() -> None:
    files = [make_file("1", "photos/2024/june/"), make_file("2", None)]

    tree = build_folder_tree([], files)

    paths = [node.path for node in iter_folders(tree)]
    assert paths == ["/photos", "/photos/2024", "/photos/2024/june"]
    assert find_folder(tree, "/photos").item_count == 0
    assert find_folder(tree, "/photos/2024/june").item_count == 1


def test_declared_folders_are_deduplicated_and_empty() -> None:
    tree = build_folder_tree(["/b", "b/", "//b", "/a", "/B"], [])

    assert [node.path for node in tree] == ["/B", "/a", "/b"]
    assert all(node.item_count == 0 for node in tree)


def test_every_distinct_path_has_one_node() -> None:
    declared = ["/x/y", "/x", "/z"]
    files = [make_file("1", "/x/y/z"), make_file("2", "/x/y/z"), make_file("3", "/q")]

    tree = build_folder_tree(declared, files)

    paths = [node.path for node in iter_folders(tree)]
    assert len(paths) == len(set(paths))
    assert set(paths) == {"/q", "/x", "/x/y", "/x/y/z", "/z"}
    assert find_folder(tree, "/x/y/z").item_count == 2


def test_child_folders_of_root_and_nested_path() -> None:
    tree = build_folder_tree(["/contracts/2024", "/permits"], [])

    assert [node.name for node in child_folders(tree, "")] == ["contracts", "permits"]
    assert [node.path for node in child_folders(tree, "/contracts")] == ["/contracts/2024"]
    assert child_folders(tree, "/missing") == ()


def test_folder_options_merge_sources() -> None:
    options = folder_options(["/submittals"], [make_file("1", "/photos/"), make_file("2", None)])

    assert options == ["/photos", "/submittals"]
