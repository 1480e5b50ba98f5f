"""Typer-based CLI for git-multi-push."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import typer
from rich.console import Console

from . import __version__, interactive, render
from .config import enabled_platforms, load_settings, resolve_repo_root
from .endpoints import default_registry
from .exceptions import GitCommandError, MultiPushError
from .git import GitDriver
from .interactive import Choice
from .models import PushOptions, WorkingCopyConfig
from .service import MultiPushService

app = typer.Typer(help="Push the current branch to GitHub, Gitee, GitLab and GitCode in one go")
console = Console()

_COMMIT = "commit"
_SKIP = "skip"
_EXIT = "exit"
_CANCEL = "cancel"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"git-multi-push {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    repo: Path | None = typer.Option(
        None,
        "--repo",
        help="Path to the git working copy to operate on.",
        exists=False,
        dir_okay=True,
        file_okay=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show additional debug information."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the git-multi-push version and exit.",
    ),
) -> None:
    _ = version  # handled via callback
    configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["repo_override"] = repo
    ctx.obj["verbose"] = verbose
    if ctx.invoked_subcommand is None:
        _overview(ctx)


@app.command(help="Push a branch to every configured platform")
def push(
    ctx: typer.Context,
    branch: str | None = typer.Argument(None, help="Branch to push. Defaults to the current branch."),
    force: bool = typer.Option(False, "--force", "-f", help="Force push."),
    tags: bool = typer.Option(False, "--tags", "-t", help="Push tags as well."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompts."),
) -> None:
    service = _build_service(ctx)
    options = PushOptions(branch=branch, force=force, tags=tags)
    with _handle_errors():
        service.ensure_repository()
        if not _handle_pending_changes(service, assume_yes=yes):
            return
        config = service.load_config()
        if config is None:
            render.warning("No configuration found, starting setup…")
            config = _run_init(service)
        render.show_reconcile_actions(service.sync_remotes(config))
        platforms = enabled_platforms(config)
        if not platforms:
            _fail("No platforms are enabled; nothing to push. Run `git-multi-push config` to enable one.")
        target = service.branch(options)
        if not yes and not interactive.confirm(f"Push {target} to {', '.join(platforms)}?", default=True):
            render.info("Push cancelled.")
            return
        console.print(f"\nPushing [bold]{target}[/bold]…\n")
        report = service.push(
            config,
            options,
            on_result=lambda result: render.show_push_result(result, service.registry),
        )
        render.show_report(report)
        if not report.ok:
            raise typer.Exit(1)


@app.command("init", help="Configure the platforms this repository pushes to")
def init_command(ctx: typer.Context) -> None:
    service = _build_service(ctx)
    with _handle_errors():
        service.ensure_repository()
        _run_init(service)


@app.command("config", help="Reconfigure platforms and accounts")
def config_command(ctx: typer.Context) -> None:
    init_command(ctx)


@app.command(help="Show configured platforms and their remotes")
def status(ctx: typer.Context) -> None:
    service = _build_service(ctx)
    with _handle_errors():
        service.ensure_repository()
        config = service.load_config()
        if config is None:
            _fail("No configuration found. Run `git-multi-push init` first.")
        console.print(f"Repository: [bold]{config.repository}[/bold]")
        render.show_status(service.branch(PushOptions()), service.status(config))


app.command("st", hidden=True, help="Alias for status")(status)


def _build_service(ctx: typer.Context) -> MultiPushService:
    try:
        root = resolve_repo_root(ctx.obj.get("repo_override"))
    except MultiPushError as err:
        _fail(str(err))
    return MultiPushService(
        driver=GitDriver(root),
        registry=default_registry(),
        settings=load_settings(),
        root=root,
    )


def _run_init(service: MultiPushService) -> WorkingCopyConfig:
    discovery = service.discover()
    existing = service.load_config()
    fallback = service.fallback_account()
    if fallback:
        render.info(f"Git user name: [bold]{fallback}[/bold]")
    if discovery.from_remotes:
        render.success(f"Repository detected from remotes: [bold]{discovery.repository_guess}[/bold]")
    selections = interactive.collect_init_selections(
        service.registry,
        discovery,
        existing,
        fallback_account=fallback,
        default_platforms=service.settings.default_platforms,
    )
    config, ignored = service.initialize(selections, existing=existing, discovery=discovery)
    render.success(f"Configuration saved to {service.config_path.name}")
    if ignored == "added":
        render.success(f"Added {service.config_path.name} to .gitignore")
    elif ignored == "error":
        render.warning(f"Add {service.config_path.name} to .gitignore manually")
    render.show_config_summary(config, service.registry)
    render.show_usage_hints()
    return config


def _handle_pending_changes(service: MultiPushService, *, assume_yes: bool) -> bool:
    """Offer to commit uncommitted changes. Returns False when the push should stop."""

    changes = service.pending_changes()
    if changes is None:
        return True
    render.warning(f"Uncommitted changes: {changes.describe()}")
    if assume_yes:
        render.info("Pushing committed work only.")
        return True
    action = interactive.select(
        "What should happen to them?",
        [
            Choice(value=_COMMIT, name="Commit everything now"),
            Choice(value=_SKIP, name="Skip and push what is already committed"),
            Choice(value=_EXIT, name="Exit and commit with another tool"),
            Choice(value=_CANCEL, name="Cancel the push"),
        ],
    )
    if action == _COMMIT:
        message = interactive.text_input("Commit message")
        service.commit_all(message)
        render.success("Changes committed")
        return True
    if action == _SKIP:
        render.info("Skipping uncommitted changes.")
        return True
    if action == _EXIT:
        render.info("Commit your changes, then run `git-multi-push push` again.")
        return False
    render.info("Push cancelled.")
    return False


def _overview(ctx: typer.Context) -> None:
    service = _build_service(ctx)
    console.print("[bold]git-multi-push[/bold] - push to several hosting platforms at once\n")
    with _handle_errors():
        service.ensure_repository()
        if service.load_config() is None:
            render.warning("Not configured yet. Run `git-multi-push init`.")
        else:
            render.success("Configured. Run `git-multi-push push` to push.")
    console.print("\nSee `git-multi-push --help` for all commands.")


@contextmanager
def _handle_errors() -> Iterator[None]:
    """Turn domain errors and Ctrl-C into a message and an exit code."""

    try:
        yield
    except KeyboardInterrupt:
        typer.secho("\nOperation cancelled.", err=True, fg=typer.colors.YELLOW)
        raise typer.Exit(130)
    except GitCommandError as err:
        _fail(f"{err}\n{err.diagnostic}")
    except MultiPushError as err:
        _fail(str(err))


def _fail(message: str, code: int = 1) -> None:
    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code)


if __name__ == "__main__":
    app()
