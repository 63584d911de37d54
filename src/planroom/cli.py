"""Command line interface for browsing and organizing project documents."""

from __future__ import annotations

import asyncio
import difflib
import logging
import uuid
from dataclasses import dataclass
from typing import Any, NoReturn, Optional

import click
import yaml
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table
from rich.tree import Tree

from planroom.browser import DocumentBrowser, Notification, Notifier
from planroom.config import ConfigError, ConfigManager, PlanroomConfig, flatten_for_env
from planroom.files import FILE_CATEGORIES, DrawingSet, DrawingSheet, FileRecord, FolderNode
from planroom.files.filters import DocumentItem, DrawingSetItem, FileItem, FolderItem, SheetItem
from planroom.navigation import (
    PATH_PARAM,
    SET_PARAM,
    MemoryLocation,
    view_from_query,
    view_key,
    view_to_query,
)
from planroom.navigation.models import ROOT, NavigationView
from planroom.state import JsonFileKeyValueStore, UIStateError
from planroom.storage import LocalProjectStore, StorageError

console = Console()

_NOTIFICATION_STYLES = {"success": "green", "error": "red", "info": "cyan"}


@dataclass(slots=True)
class CLIContext:
    """Settings and storage shared by every command of one invocation."""

    config: PlanroomConfig
    project_id: str
    store: LocalProjectStore

    def browser(
        self,
        *,
        view: NavigationView = ROOT,
        quiet: bool = False,
        json_output: bool = False,
    ) -> DocumentBrowser:
        """Create a browser positioned at ``view`` that prints its notifications."""

        def _sink(notification: Notification) -> None:
            if json_output:
                return
            if quiet and notification.level != "error":
                return
            style = _NOTIFICATION_STYLES[notification.level]
            console.print(f"[{style}]{notification.message}[/{style}]")

        try:
            return DocumentBrowser(
                self.store,
                self.project_id,
                location=MemoryLocation(view_to_query(view)),
                ui_store=JsonFileKeyValueStore(self.config.storage.ui_state_path),
                notifier=Notifier(_sink),
                settings=self.config.browser,
            )
        except UIStateError as exc:
            _handle_cli_error(str(exc), code="ui_state_error", json_output=json_output, original=exc)


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    original: Exception | None = None,
) -> NoReturn:
    """Emit a standardized error and terminate the command.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output.
        click.ClickException: For non-JSON flows.
    """

    if json_output:
        console.print_json(data={"error": {"code": code, "message": message}})
        raise SystemExit(1)
    raise click.ClickException(message) from original


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("planroom").setLevel(level)


def _context(ctx: click.Context) -> CLIContext:
    obj = ctx.find_object(CLIContext)
    if obj is None:
        raise click.ClickException("CLI context was not initialized.")
    return obj


def _run(coro: Any, *, json_output: bool = False) -> Any:
    """Drive ``coro`` to completion, converting storage failures into CLI errors."""

    try:
        return asyncio.run(coro)
    except StorageError as exc:
        _handle_cli_error(str(exc), code="storage_error", json_output=json_output, original=exc)
    except UIStateError as exc:
        _handle_cli_error(str(exc), code="ui_state_error", json_output=json_output, original=exc)


def _record_payload(record: FileRecord) -> dict[str, Any]:
    return record.model_dump(mode="json")


def _item_payload(item: DocumentItem) -> dict[str, Any]:
    match item:
        case FolderItem(path=path, name=name, item_count=count):
            return {"type": "folder", "name": name, "path": path, "item_count": count}
        case FileItem(record=record):
            return {"type": "file", **_record_payload(record)}
        case DrawingSetItem(drawing_set=drawing_set):
            return {"type": "drawing_set", **drawing_set.model_dump(mode="json")}
        case SheetItem(sheet=sheet):
            return {"type": "sheet", **sheet.model_dump(mode="json")}
    raise TypeError(f"Unsupported item: {item!r}")


def _item_row(item: DocumentItem) -> tuple[str, str, str, str]:
    match item:
        case FolderItem(path=path, name=name, item_count=count):
            return ("folder", name, path, f"{count} item(s)")
        case FileItem(record=record):
            return ("file", record.file_name, record.id, record.category or "")
        case DrawingSetItem(drawing_set=drawing_set):
            sheets = "" if drawing_set.sheet_count is None else f"{drawing_set.sheet_count} sheet(s)"
            return ("set", drawing_set.title, drawing_set.id, f"{drawing_set.status} {sheets}".strip())
        case SheetItem(sheet=sheet):
            return ("sheet", sheet.sheet_number, sheet.id, sheet.sheet_title or "")
    raise TypeError(f"Unsupported item: {item!r}")


def _add_tree_nodes(parent: Tree, nodes: tuple[FolderNode, ...]) -> None:
    for node in nodes:
        branch = parent.add(f"{node.name} [dim]({node.item_count})[/dim]")
        _add_tree_nodes(branch, node.children)


def _tree_payload(nodes: tuple[FolderNode, ...]) -> list[dict[str, Any]]:
    return [
        {
            "name": node.name,
            "path": node.path,
            "item_count": node.item_count,
            "children": _tree_payload(node.children),
        }
        for node in nodes
    ]


def _parse_sheet(raw: str, set_id: str, order: int) -> DrawingSheet:
    number, _, title = raw.partition(":")
    if not number.strip():
        raise click.BadParameter(f"Sheet '{raw}' must look like NUMBER[:TITLE].", param_hint="--sheet")
    return DrawingSheet(
        id=uuid.uuid4().hex,
        drawing_set_id=set_id,
        sheet_number=number.strip(),
        sheet_title=title.strip() or None,
        sort_order=order,
    )


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="planroom")
@click.option("-p", "--project", "project_id", type=str, help="Project to operate on.")
@click.pass_context
def cli(ctx: click.Context, project_id: Optional[str]) -> None:
    """Browse, filter, and organize construction project documents."""

    if ctx.invoked_subcommand == "config":
        return
    try:
        config = ConfigManager().load()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    _configure_logging(config.logging.level)
    ctx.obj = CLIContext(
        config=config,
        project_id=project_id or config.cli.default_project,
        store=LocalProjectStore(config.storage.store_path),
    )


@cli.command()
@click.option("--json", "json_output", is_flag=True, help="Emit the folder tree as JSON.")
@click.pass_context
def tree(ctx: click.Context, json_output: bool) -> None:
    """Show the project's virtual folder tree with per-folder file counts."""

    state = _context(ctx)
    browser = state.browser(json_output=json_output)
    if not _run(browser.load(), json_output=json_output):
        _handle_cli_error("Failed to load project documents.", code="load_failed", json_output=json_output)

    nodes = browser.folder_tree
    if json_output:
        console.print_json(data={"project": state.project_id, "folders": _tree_payload(nodes)})
        return
    root = Tree(f"[bold]{state.project_id}[/bold]")
    _add_tree_nodes(root, nodes)
    console.print(root)


@cli.command()
@click.option("--path", "folder", type=str, help="Folder to list, such as /contracts/2024.")
@click.option("--set", "set_id", type=str, help="Drawing set whose sheets should be listed.")
@click.option(
    "--category",
    type=click.Choice(["all", "drawings", *FILE_CATEGORIES]),
    help="Restrict files to a category.",
)
@click.option("--search", type=str, help="Free-text search across names, descriptions, and tags.")
@click.option("--json", "json_output", is_flag=True, help="Emit listing as JSON.")
@click.pass_context
def ls(
    ctx: click.Context,
    folder: Optional[str],
    set_id: Optional[str],
    category: Optional[str],
    search: Optional[str],
    json_output: bool,
) -> None:
    """List the folders and files (or drawing sets and sheets) in one view."""

    state = _context(ctx)
    view = view_from_query({PATH_PARAM: folder or "", SET_PARAM: set_id or ""})
    browser = state.browser(view=view, json_output=json_output)

    async def _list() -> bool:
        loaded = await browser.load()
        if category:
            browser.navigation.set_category(category)
        if search:
            browser.navigation.set_search(search)
        if category or search:
            loaded = await browser.refresh()
        return loaded

    if not _run(_list(), json_output=json_output):
        _handle_cli_error("Failed to load project documents.", code="load_failed", json_output=json_output)

    items = browser.items()
    location = view_key(browser.view)
    if json_output:
        console.print_json(
            data={
                "view": location,
                "category": browser.navigation.state.category,
                "search": browser.navigation.state.search,
                "items": [_item_payload(item) for item in items],
            }
        )
        return

    table = Table(title=location, show_lines=False)
    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("Name", overflow="fold")
    table.add_column("Path / ID", overflow="fold")
    table.add_column("Details")
    for item in items:
        table.add_row(*_item_row(item))
    console.print(table)
    if not items:
        console.print("[yellow]No documents match this view.[/yellow]")


@cli.command()
@click.argument("name")
@click.option("--folder", type=str, help="Folder path to tag the file with.")
@click.option("--category", type=click.Choice(FILE_CATEGORIES), help="File category.")
@click.option("--description", type=str, help="Searchable description.")
@click.option("--tag", "tags", multiple=True, help="Searchable tag (repeatable).")
@click.option("--id", "file_id", type=str, help="Explicit file identifier.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def add(
    ctx: click.Context,
    name: str,
    folder: Optional[str],
    category: Optional[str],
    description: Optional[str],
    tags: tuple[str, ...],
    file_id: Optional[str],
    quiet: bool,
) -> None:
    """Register a file record named NAME in the project."""

    state = _context(ctx)
    if not name.strip():
        raise click.BadParameter("File name is required", param_hint="NAME")
    record = FileRecord(
        id=file_id or uuid.uuid4().hex,
        file_name=name.strip(),
        folder_path=folder,
        category=category,
        description=description,
        tags=list(tags),
    )

    async def _add() -> None:
        await state.store.ensure_project(state.project_id)
        await state.store.add_files(state.project_id, [record])

    _run(_add())
    if not (quiet or state.config.cli.quiet_default):
        console.print(f"[green]Added {record.file_name} ({record.id}).[/green]")


@cli.command()
@click.argument("path")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def mkdir(ctx: click.Context, path: str, quiet: bool) -> None:
    """Create the folder PATH, such as /contracts/2024."""

    state = _context(ctx)
    browser = state.browser(quiet=quiet or state.config.cli.quiet_default)

    async def _mkdir() -> Optional[str]:
        await browser.load()
        return await browser.create_folder(path)

    if _run(_mkdir()) is None:
        ctx.exit(1)


@cli.command()
@click.argument("file_ids", nargs=-1, required=True)
@click.option("--to", "target", required=True, help="Destination folder; '/' moves to the root.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def mv(ctx: click.Context, file_ids: tuple[str, ...], target: str, quiet: bool) -> None:
    """Move FILE_IDS into the folder given by --to, creating it if needed."""

    state = _context(ctx)
    browser = state.browser(quiet=quiet or state.config.cli.quiet_default)

    async def _move() -> bool:
        await browser.load()
        return await browser.drag.move_files(list(file_ids), target)

    if not _run(_move()):
        ctx.exit(1)


@cli.command()
@click.argument("file_ids", nargs=-1, required=True)
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def rm(ctx: click.Context, file_ids: tuple[str, ...], quiet: bool) -> None:
    """Delete FILE_IDS from the project."""

    state = _context(ctx)
    browser = state.browser(quiet=quiet or state.config.cli.quiet_default)

    async def _delete() -> list[str]:
        await browser.load()
        return await browser.delete_files(list(file_ids))

    deleted = _run(_delete())
    if not deleted or len(deleted) != len(set(file_ids)):
        ctx.exit(1)


@cli.command()
@click.argument("file_id")
@click.argument("new_name")
@click.pass_context
def rename(ctx: click.Context, file_id: str, new_name: str) -> None:
    """Rename the file FILE_ID to NEW_NAME."""

    state = _context(ctx)
    browser = state.browser(quiet=state.config.cli.quiet_default)

    async def _rename() -> bool:
        await browser.load()
        return await browser.rename_file(file_id, new_name)

    if not _run(_rename()):
        ctx.exit(1)


@cli.command()
@click.argument("file_id")
@click.option("--clients/--no-clients", default=False, help="Expose the file on the client portal.")
@click.option("--subs/--no-subs", default=False, help="Expose the file on the subcontractor portal.")
@click.pass_context
def share(ctx: click.Context, file_id: str, clients: bool, subs: bool) -> None:
    """Set portal sharing flags for FILE_ID."""

    state = _context(ctx)
    browser = state.browser(quiet=state.config.cli.quiet_default)

    async def _share() -> bool:
        await browser.load()
        return await browser.update_sharing(file_id, clients=clients, subs=subs)

    if not _run(_share()):
        ctx.exit(1)


@cli.group(invoke_without_command=True)
@click.option("--json", "json_output", is_flag=True, help="Emit drawing sets as JSON.")
@click.pass_context
def sets(ctx: click.Context, json_output: bool) -> None:
    """List drawing sets; use `sets add` to register one."""

    if ctx.invoked_subcommand is not None:
        return
    state = _context(ctx)
    drawing_sets: list[DrawingSet] = _run(
        state.store.list_drawing_sets(state.project_id), json_output=json_output
    )
    if json_output:
        console.print_json(data={"drawing_sets": [item.model_dump(mode="json") for item in drawing_sets]})
        return
    if not drawing_sets:
        console.print("[yellow]No drawing sets found.[/yellow]")
        return
    table = Table(title="Drawing sets")
    table.add_column("ID", style="cyan", overflow="fold")
    table.add_column("Title")
    table.add_column("Status")
    table.add_column("Sheets", justify="right")
    for item in drawing_sets:
        table.add_row(item.id, item.title, item.status, str(item.sheet_count or 0))
    console.print(table)


@sets.command("add")
@click.argument("title")
@click.option("--sheet", "sheet_specs", multiple=True, help="Sheet as NUMBER[:TITLE] (repeatable).")
@click.option("--id", "set_id", type=str, help="Explicit drawing set identifier.")
@click.pass_context
def sets_add(ctx: click.Context, title: str, sheet_specs: tuple[str, ...], set_id: Optional[str]) -> None:
    """Register a drawing set titled TITLE with its sheets."""

    state = _context(ctx)
    identifier = set_id or uuid.uuid4().hex
    sheets = [_parse_sheet(raw, identifier, order) for order, raw in enumerate(sheet_specs)]
    drawing_set = DrawingSet(id=identifier, title=title, sheet_count=len(sheets))
    _run(state.store.add_drawing_set(state.project_id, drawing_set, sheets))
    if not state.config.cli.quiet_default:
        console.print(f"[green]Added drawing set {title} ({identifier}) with {len(sheets)} sheet(s).[/green]")


@cli.group()
def config() -> None:
    """Manage planroom configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
@click.option("--env", "as_env", is_flag=True, help="Show settings as PLANROOM__ variables.")
def config_view(no_env: bool, as_env: bool) -> None:
    """Display the effective configuration after applying precedence rules."""

    manager = ConfigManager()
    try:
        manager.ensure_exists()
        settings = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if as_env:
        for key, value in flatten_for_env(settings).items():
            console.print(f"{key}={value}", markup=False, highlight=False)
        return
    yaml_text = yaml.safe_dump(settings.model_dump(mode="json"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY."""

    manager = ConfigManager()
    try:
        manager.ensure_exists()
        before = manager.read_text().splitlines()
        manager.set_value(key, value)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    after = manager.read_text().splitlines()

    # The timestamp line always changes; compare the remaining lines only.
    before = [line for line in before if not line.startswith("# Last updated")]
    after = [line for line in after if not line.startswith("# Last updated")]
    if before == after:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return
    diff = difflib.unified_diff(
        before, after, fromfile="config.yaml (before)", tofile="config.yaml (after)", lineterm=""
    )
    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {key}.[/green]")


def main() -> None:
    """Invoke the click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
