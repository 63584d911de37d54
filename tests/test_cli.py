"""CLI tests driving the click group against a temporary HOME."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from click.testing import CliRunner

from planroom.cli import cli
from planroom.state import JsonFileKeyValueStore


def _env_with_home(tmp_path: Path) -> dict[str, Any]:
    env = {key: value for key, value in os.environ.items() if not key.startswith("PLANROOM__")}
    env["HOME"] = str(tmp_path)
    return env


def _invoke(runner: CliRunner, env: dict[str, Any], *args: str):
    return runner.invoke(cli, ["-p", "tower", *args], env=env)


def _seed(runner: CliRunner, env: dict[str, Any]) -> None:
    for args in (
        ["add", "Schedule.xlsx", "--id", "f1"],
        ["add", "Contract.pdf", "--id", "f2", "--folder", "contracts", "--category", "contracts"],
        ["add", "Change order.pdf", "--id", "f3", "--folder", "/contracts/2024/"],
    ):
        result = _invoke(runner, env, *args)
        assert result.exit_code == 0, result.output


def test_ls_root_json_lists_folders_and_unfiled_files(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    _seed(runner, env)

    result = _invoke(runner, env, "ls", "--json")

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["view"] == "root"
    assert [(item["type"], item.get("path") or item.get("id")) for item in payload["items"]] == [
        ("folder", "/contracts"),
        ("file", "f1"),
    ]


def test_ls_folder_is_not_recursive(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    _seed(runner, env)

    result = _invoke(runner, env, "ls", "--path", "/contracts", "--json")

    payload = json.loads(result.output)
    files = [item["id"] for item in payload["items"] if item["type"] == "file"]
    folders = [item["path"] for item in payload["items"] if item["type"] == "folder"]
    assert files == ["f2"]
    assert folders == ["/contracts/2024"]


def test_tree_and_navigation_expand_ancestors(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    _seed(runner, env)

    tree_result = _invoke(runner, env, "tree", "--json")
    _invoke(runner, env, "ls", "--path", "/contracts/2024")

    folders = json.loads(tree_result.output)["folders"]
    assert folders[0]["path"] == "/contracts"
    assert folders[0]["item_count"] == 1
    assert folders[0]["children"][0]["item_count"] == 1
    ui_state = JsonFileKeyValueStore(tmp_path / ".planroom" / "ui-state.json")
    assert ui_state.get("documents-expanded-folders-tower") == ["/contracts"]


def test_mkdir_rejects_root_and_creates_folder(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    rejected = _invoke(runner, env, "mkdir", "/")
    created = _invoke(runner, env, "mkdir", "rfis//open")

    assert rejected.exit_code == 1
    assert "Enter a folder path like /contracts" in rejected.output
    assert created.exit_code == 0
    assert "Created folder /rfis/open" in created.output


def test_mv_moves_files_and_creates_target(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    _seed(runner, env)

    result = _invoke(runner, env, "mv", "f1", "f3", "--to", "/archive")

    assert result.exit_code == 0, result.output
    assert "Moved 2 files to /archive" in result.output
    listing = json.loads(_invoke(runner, env, "ls", "--path", "/archive", "--json").output)
    assert sorted(item["id"] for item in listing["items"]) == ["f1", "f3"]


def test_mv_reports_partial_failure(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    _seed(runner, env)

    result = _invoke(runner, env, "mv", "f1", "ghost", "--to", "/")

    assert result.exit_code == 1
    assert "Moved 1 of 2 files to Root; 1 failed" in result.output


def test_rm_and_rename(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    _seed(runner, env)

    renamed = _invoke(runner, env, "rename", "f1", "Master schedule.xlsx")
    deleted = _invoke(runner, env, "rm", "f2")

    assert "File renamed" in renamed.output
    assert "Deleted 1 file" in deleted.output
    payload = json.loads(_invoke(runner, env, "ls", "--search", "master", "--json").output)
    assert [item["file_name"] for item in payload["items"]] == ["Master schedule.xlsx"]


def test_sets_add_and_list_sheets(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    added = _invoke(
        runner, env, "sets", "add", "Architectural", "--id", "cd", "--sheet", "A-101:Floor plan", "--sheet", "A-102"
    )
    listed = _invoke(runner, env, "sets", "--json")
    sheets = _invoke(runner, env, "ls", "--set", "cd", "--json")

    assert added.exit_code == 0, added.output
    assert json.loads(listed.output)["drawing_sets"][0]["sheet_count"] == 2
    payload = json.loads(sheets.output)
    assert payload["view"] == "set:cd"
    assert payload["category"] == "drawings"
    assert [item["sheet_number"] for item in payload["items"]] == ["A-101", "A-102"]


def test_ls_searches_sheets_inside_set(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    _invoke(runner, env, "sets", "add", "Arch", "--id", "s1", "--sheet", "A-101:Floor plan", "--sheet", "A-201:Elevations")

    result = _invoke(runner, env, "ls", "--set", "s1", "--search", "floor", "--json")

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["search"] == "floor"
    assert [item["sheet_number"] for item in payload["items"]] == ["A-101"]


def test_config_view_and_set(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    view = runner.invoke(cli, ["config", "view"], env=env)
    updated = runner.invoke(cli, ["config", "set", "cli.default_project", "--value", "tower"], env=env)
    unchanged = runner.invoke(cli, ["config", "set", "cli.default_project", "--value", "tower"], env=env)
    invalid = runner.invoke(cli, ["config", "set", "browser.file_list_limit", "--value", "zero"], env=env)

    assert view.exit_code == 0
    assert "browser:" in view.output
    assert updated.exit_code == 0
    assert "Updated cli.default_project" in updated.output
    assert "No changes applied" in unchanged.output
    assert invalid.exit_code != 0

    listing = runner.invoke(cli, ["ls", "--json"], env=env)
    assert json.loads(listing.output)["items"] == []
