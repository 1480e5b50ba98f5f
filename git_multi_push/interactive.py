"""Interactive prompt helpers built on InquirerPy."""

from __future__ import annotations

import sys
from typing import Any, Sequence

from InquirerPy import inquirer
from InquirerPy.base.control import Choice
from InquirerPy.validator import EmptyInputValidator

from .config import suggest_account
from .endpoints import EndpointRegistry
from .exceptions import ValidationError
from .models import InitSelections, RemoteDiscovery, WorkingCopyConfig


def _ensure_tty() -> None:
    if not sys.stdin.isatty():
        raise ValidationError(
            "Interactive mode requires a TTY. Run this command from a terminal."
        )


def select(message: str, choices: Sequence[Choice | str], default: Any = None) -> Any:
    _ensure_tty()
    return inquirer.select(message=message, choices=choices, default=default).execute()


def checkbox(message: str, choices: Sequence[Choice], *, required: bool = True) -> list[Any]:
    _ensure_tty()
    return list(
        inquirer.checkbox(
            message=message,
            choices=choices,
            validate=(lambda result: len(result) > 0) if required else None,
            invalid_message="Select at least one option.",
        ).execute()
    )


def text_input(message: str, default: str | None = None) -> str:
    _ensure_tty()
    return (
        inquirer.text(
            message=message,
            default=default or "",
            validate=EmptyInputValidator("Value cannot be empty."),
        )
        .execute()
        .strip()
    )


def confirm(message: str, default: bool = True) -> bool:
    _ensure_tty()
    return bool(inquirer.confirm(message=message, default=default).execute())


def platform_choices(
    registry: EndpointRegistry,
    checked: Sequence[str],
) -> list[Choice]:
    return [
        Choice(value=endpoint.key, name=endpoint.label, enabled=endpoint.key in checked)
        for endpoint in registry
    ]


def collect_init_selections(
    registry: EndpointRegistry,
    discovery: RemoteDiscovery,
    existing: WorkingCopyConfig | None,
    *,
    fallback_account: str,
    default_platforms: Sequence[str],
) -> InitSelections:
    """Ask the operator everything the configuration merge needs."""

    uniform_account = None
    if fallback_account and confirm(
        f'Is your account name "{fallback_account}" on every platform?', default=False
    ):
        uniform_account = fallback_account

    repository = text_input("Repository name", default=discovery.repository_guess)

    if existing is not None:
        checked = [key for key, cfg in existing.platforms.items() if cfg.enabled]
    else:
        checked = [key for key in default_platforms if key in registry]
    platforms = checkbox("Platforms to push to", platform_choices(registry, checked))

    accounts: dict[str, str] = {}
    if uniform_account is None:
        for key in platforms:
            endpoint = registry.get(key)
            default = suggest_account(key, existing, discovery, fallback_account)
            accounts[key] = text_input(f"{endpoint.label} account", default=default)

    return InitSelections(
        repository=repository,
        platforms=[key for key in registry.keys() if key in platforms],
        fallback_account=fallback_account,
        uniform_account=uniform_account,
        accounts=accounts,
    )
