from __future__ import annotations

import os
from pathlib import Path
from typing import TypeVar

import typer

from breezy import __version__
from breezy.cli.inputs import (
    load_template_config,
    read_input,
    resolve_branch,
    resolve_commit_sha,
    resolve_directory,
    resolve_repository,
    resolve_token,
)
from breezy.core.result import Err, Result
from breezy.output.console import ConsoleProtocol, RichConsole, Style
from breezy.output.errors import draft_error_exit_code, print_draft_error
from breezy.platform.github import GitHubClient, github_http_client
from breezy.release.errors import DraftError
from breezy.release.version import parse_languages, resolve_version
from breezy.services.draft import DraftRequest, DraftService


app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    rich_markup_mode="rich",
)


T = TypeVar("T")


def _unwrap(result: Result[T, DraftError], console: ConsoleProtocol) -> T:
    if isinstance(result, Err):
        print_draft_error(result.error, console)
        raise typer.Exit(code=draft_error_exit_code(result.error))
    return result.value


def _home() -> Path | None:
    home = os.environ.get("HOME")
    return Path(home) if home else None


def _pick(option: str | None, name: str) -> str | None:
    if option is not None:
        return option
    return read_input(name, os.environ)


def _languages(option: str | None, config_language: str) -> tuple[str, ...]:
    raw = _pick(option, "language") or ""
    if not raw.strip():
        raw = config_language
    return tuple(parse_languages(raw))


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True, help="Show version and exit."
    ),
) -> None:
    """Keep one draft GitHub release per branch up to date."""


@app.command()
def run(
    language: str | None = typer.Option(
        None, "--language", help="Manifest archetypes to read, e.g. 'rust' or 'node,rust'."
    ),
    tag_prefix: str | None = typer.Option(None, "--tag-prefix", help="Prefix for the default tag."),
    token: str | None = typer.Option(None, "--token", help="GitHub token."),
    config_file: str | None = typer.Option(None, "--config-file", help="Path to breezy.yml."),
    directory: str | None = typer.Option(
        None, "--directory", help="Project directory inside the repository."
    ),
    branch: str | None = typer.Option(None, "--branch", help="Branch (default: from CI env)."),
    root: Path = typer.Option(Path("."), "--root", help="Repository checkout root."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the draft without writing it."),
) -> None:
    """Create or update the draft release for the current branch."""
    console = RichConsole()
    errors = RichConsole(stderr=True)
    env = os.environ
    cwd = root.resolve()

    if branch is not None and branch.strip():
        branch_name = branch.strip()
    else:
        branch_name = _unwrap(resolve_branch(env), errors)
    scoped_dir = _unwrap(resolve_directory(_pick(directory, "directory")), errors)
    prefix = _pick(tag_prefix, "tag-prefix")
    config = _unwrap(
        load_template_config(
            _pick(config_file, "config-file"),
            cwd=cwd,
            home=_home(),
            tag_prefix="v" if prefix is None else prefix,
        ),
        errors,
    )
    github_token = _unwrap(resolve_token(token, env), errors)
    owner, repo = _unwrap(resolve_repository(env), errors)

    service = DraftService(
        client=GitHubClient(http=github_http_client(github_token), owner=owner, repo=repo),
        console=console,
    )
    request = DraftRequest(
        root=cwd,
        branch=branch_name,
        config=config,
        languages=_languages(language, config.language),
        directory=scoped_dir,
        commit_sha=resolve_commit_sha(env),
        dry_run=dry_run,
    )
    outcome = _unwrap(service.run(request), errors)
    console.print(
        f"{outcome.action}: {request.scope} @ {outcome.version} "
        f"({outcome.pull_request_count} pull requests)",
        Style.DIM,
    )


@app.command("version")
def show_version(
    language: str | None = typer.Option(None, "--language", help="Manifest archetypes to read."),
    directory: str | None = typer.Option(None, "--directory", help="Project directory."),
    root: Path = typer.Option(Path("."), "--root", help="Repository checkout root."),
) -> None:
    """Print the version read from the project manifest."""
    errors = RichConsole(stderr=True)
    scoped_dir = _unwrap(resolve_directory(_pick(directory, "directory")), errors)
    base = root.resolve()
    version_root = base / scoped_dir if scoped_dir else base

    config_language = ""
    if language is None and read_input("language", os.environ) is None:
        # Only consult the config file for the language when no input is set.
        loaded = load_template_config(
            read_input("config-file", os.environ), cwd=base, home=_home(), tag_prefix="v"
        )
        config_language = _unwrap(loaded, errors).language

    resolved = resolve_version(root=version_root, languages=_languages(language, config_language))
    typer.echo(_unwrap(resolved, errors))


def main() -> None:
    app()


__all__ = ["app", "main"]
