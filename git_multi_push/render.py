"""Rich UI helpers for terminal output."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from .endpoints import EndpointRegistry
from .models import PlatformStatus, PushReport, PushResult, ReconcileAction, WorkingCopyConfig
from .report import summarize

console = Console()
err_console = Console(stderr=True)


def info(message: str) -> None:
    console.print(f"[blue]ℹ[/blue] {message}")


def success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def warning(message: str) -> None:
    console.print(f"[yellow]⚠[/yellow] {message}")


def error(message: str) -> None:
    err_console.print(f"[red]✗[/red] {message}", style="red", highlight=False)


def show_config_summary(config: WorkingCopyConfig, registry: EndpointRegistry) -> None:
    table = Table(title=f"Repository: {config.repository}", show_header=True, header_style="bold")
    table.add_column("Platform")
    table.add_column("Account", style="cyan")
    table.add_column("Enabled", justify="center")
    table.add_column("URL")
    for key, cfg in config.platforms.items():
        table.add_row(
            registry.get(key).label,
            cfg.account,
            "[green]yes[/green]" if cfg.enabled else "[dim]no[/dim]",
            cfg.url,
        )
    console.print(table)


def show_usage_hints() -> None:
    console.print("\n[bold]Next steps[/bold]")
    console.print("  Push:        [green]git-multi-push push[/green]")
    console.print("  Status:      [green]git-multi-push status[/green]")
    console.print("  Reconfigure: [green]git-multi-push config[/green]")


def show_reconcile_actions(actions: list[ReconcileAction]) -> None:
    for action in actions:
        if action.action == "created":
            info(f"Added remote [bold]{action.endpoint_key}[/bold] → {action.url}")
        elif action.action == "updated":
            info(f"Repointed remote [bold]{action.endpoint_key}[/bold] → {action.url}")


def show_push_result(result: PushResult, registry: EndpointRegistry) -> None:
    label = registry.get(result.endpoint_key).label
    if result.succeeded:
        success(f"{label} pushed")
    else:
        error(f"{label} push failed")


def show_report(report: PushReport) -> None:
    style = "green" if report.ok else "yellow"
    console.print()
    console.print(summarize(report), style=style, highlight=False, markup=False)


def show_status(branch: str, rows: list[PlatformStatus]) -> None:
    console.print(f"Current branch: [bold]{branch}[/bold]")
    if not rows:
        console.print("No platforms configured.")
        return
    table = Table(show_header=True, header_style="bold")
    table.add_column("Platform")
    table.add_column("Account", style="cyan")
    table.add_column("Enabled", justify="center")
    table.add_column("Remote")
    for row in rows:
        if not row.remote_present:
            remote = "[red]missing[/red]"
        elif row.in_sync:
            remote = "[green]configured[/green]"
        else:
            remote = f"[yellow]differs[/yellow] ({row.remote_url})"
        table.add_row(row.name, row.account, "yes" if row.enabled else "no", remote)
    console.print(table)
