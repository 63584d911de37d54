"""Invoke tasks for developing planroom.

Every task shells out to `uv` so the virtual environment declared in
pyproject.toml is the one that runs tests, linters, and the CLI.
"""

from __future__ import annotations

import shlex
import shutil
from collections.abc import Sequence
from pathlib import Path

from invoke import Collection, Context, task

PROJECT_ROOT = Path(__file__).parent
DIST_DIR = PROJECT_ROOT / "dist"

DEMO_FILES: tuple[tuple[str, str, str], ...] = (
    ("Prime contract.pdf", "/contracts", "contracts"),
    ("Change order 01.pdf", "/contracts/change-orders", "contracts"),
    ("Building permit.pdf", "/permits", "permits"),
    ("Site walk.jpg", "/photos/2024", "photos"),
    ("Schedule.xlsx", "", "other"),
)


def _run_uv(ctx: Context, args: Sequence[str], *, echo: bool = True, warn: bool = False) -> None:
    """Run ``uv`` with ``args``.

    Args:
        ctx: Invoke execution context.
        args: Arguments appended after the `uv` executable.
        echo: Whether to echo the command before running it.
        warn: Keep going when the command exits non-zero.
    """
    ctx.run(shlex.join(("uv", *args)), echo=echo, pty=True, warn=warn)


@task
def sync(ctx: Context, dev: bool = True) -> None:
    """Synchronize the virtual environment, including the dev extra by default."""
    args = ["sync"]
    if dev:
        args.extend(["--extra", "dev"])
    _run_uv(ctx, args)


@task(help={"clean": "Remove existing artifacts from dist/ before building."})
def build(ctx: Context, clean: bool = False) -> None:
    """Build source and wheel distributions in `dist/`."""
    if clean and DIST_DIR.exists():
        shutil.rmtree(DIST_DIR)
    _run_uv(ctx, ["build"])


@task(
    help={
        "k": "pytest -k expression for test selection.",
        "path": "Path or module to test (defaults to tests/).",
        "options": "Additional CLI flags forwarded verbatim to pytest.",
    }
)
def tests(ctx: Context, k: str = "", path: str = "tests", options: str = "") -> None:
    """Run the pytest suite."""
    args: list[str] = ["run", "pytest"]
    if k:
        args.extend(["-k", k])
    if options:
        args.extend(shlex.split(options))
    args.append(path)
    _run_uv(ctx, args)


@task(help={"fix": "Apply auto-fixes where possible (ruff --fix)."})
def lint(ctx: Context, fix: bool = False) -> None:
    """Check formatting and lint rules with Ruff."""
    _run_uv(ctx, ["run", "ruff", "format", "--check", "src", "tests"])
    args = ["run", "ruff", "check", "src", "tests"]
    if fix:
        args.append("--fix")
    _run_uv(ctx, args)


@task
def mypy(ctx: Context) -> None:
    """Type-check the package."""
    _run_uv(ctx, ["run", "mypy", "src/planroom"])


@task(help={"project": "Project id to populate."})
def demo(ctx: Context, project: str = "demo") -> None:
    """Populate a demo project through the CLI and print its folder tree.

    Records are written to the store configured in ~/.planroom/config.yaml.
    """
    for name, folder, category in DEMO_FILES:
        args = ["run", "planroom", "-p", project, "add", name, "--category", category, "--quiet"]
        if folder:
            args.extend(["--folder", folder])
        _run_uv(ctx, args, echo=False)
    _run_uv(ctx, ["run", "planroom", "-p", project, "mkdir", "/submittals"], warn=True)
    _run_uv(ctx, ["run", "planroom", "-p", project, "tree"])


@task
def ci(ctx: Context) -> None:
    """Run lint, type checks, and tests in the order CI does."""
    ctx.invoke(lint)
    ctx.invoke(mypy)
    ctx.invoke(tests)


namespace = Collection(sync, build, tests, lint, mypy, demo, ci)
