"""Runtime settings and the per-working-copy push configuration."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Mapping

from .endpoints import EndpointRegistry
from .exceptions import ConfigWriteError, GitCommandError, ValidationError
from .git import rev_parse_toplevel
from .models import InitSelections, PlatformConfig, RemoteDiscovery, WorkingCopyConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".mgit-push.json"
DEFAULT_BRANCH = "main"
DEFAULT_PLATFORMS = ("github", "gitee")


@dataclass(frozen=True)
class Settings:
    """Settings resolved from environment variables."""

    config_file: str = DEFAULT_CONFIG_FILE
    default_branch: str = DEFAULT_BRANCH
    default_platforms: tuple[str, ...] = DEFAULT_PLATFORMS


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    platforms = env.get("GIT_MULTI_PUSH_DEFAULT_PLATFORMS")
    return Settings(
        config_file=env.get("GIT_MULTI_PUSH_CONFIG") or DEFAULT_CONFIG_FILE,
        default_branch=env.get("GIT_MULTI_PUSH_DEFAULT_BRANCH") or DEFAULT_BRANCH,
        default_platforms=_split_list(platforms) if platforms else DEFAULT_PLATFORMS,
    )


def resolve_repo_root(repo_override: Path | None = None) -> Path:
    """Return the top level of the working copy at `repo_override` or the cwd.

    A directory that is not inside a repository is returned unchanged so the
    caller can report it as such.
    """

    if repo_override:
        candidate = repo_override.expanduser()
        if not candidate.is_dir():
            raise ValidationError(f"Repository path does not exist: {candidate}")
    else:
        candidate = Path.cwd()
    try:
        return rev_parse_toplevel(candidate)
    except GitCommandError:
        return candidate


def config_path(root: Path, settings: Settings) -> Path:
    return root / settings.config_file


def platform_config(
    registry: EndpointRegistry,
    key: str,
    account: str,
    repository: str,
    *,
    enabled: bool = True,
) -> PlatformConfig:
    """Build a platform entry whose URL is rendered from account and repository."""

    return PlatformConfig(
        enabled=enabled,
        account=account,
        url=registry.render_url(key, account, repository),
    )


def load_config(path: Path, registry: EndpointRegistry) -> WorkingCopyConfig | None:
    """Read the stored configuration.

    Missing, unreadable and corrupt files all return None so callers can run
    the guided setup instead.
    """

    if not path.exists():
        logger.debug("No configuration at %s", path)
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable configuration %s: %s", path, exc)
        return None
    try:
        return config_from_dict(data, registry)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        logger.warning("Ignoring malformed configuration %s: %s", path, exc)
        return None


def config_from_dict(data: Mapping, registry: EndpointRegistry) -> WorkingCopyConfig:
    repository = str(data["repository"]).strip()
    if not repository:
        raise ValueError("repository name is empty")
    platforms: dict[str, PlatformConfig] = {}
    for key, raw in dict(data.get("platforms") or {}).items():
        if key not in registry:
            logger.warning("Dropping unknown platform %r from configuration", key)
            continue
        # "username" is what earlier versions of the file called the account.
        account = str(raw.get("account") or raw.get("username") or "").strip()
        if not account:
            raise ValueError(f"platform {key!r} has no account")
        enabled = raw.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError(f"platform {key!r} has a non-boolean enabled flag: {enabled!r}")
        platforms[key] = platform_config(
            registry,
            key,
            account,
            repository,
            enabled=enabled,
        )
    created_at = data.get("created_at") or data.get("createdAt") or _now()
    return WorkingCopyConfig(repository=repository, platforms=platforms, created_at=str(created_at))


def save_config(path: Path, config: WorkingCopyConfig) -> None:
    """Write the whole configuration or nothing."""

    content = json.dumps(config.to_dict(), indent=2, ensure_ascii=False) + "\n"
    temp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            "w",
            encoding="utf-8",
            delete=False,
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
        ) as handle:
            handle.write(content)
            temp_path = Path(handle.name)
        os.replace(temp_path, path)
    except OSError as exc:
        raise ConfigWriteError(f"Failed to save configuration to {path}: {exc}") from exc
    finally:
        if temp_path is not None and temp_path.exists():
            temp_path.unlink(missing_ok=True)
    logger.debug("Saved configuration to %s", path)


def suggest_account(
    key: str,
    existing: WorkingCopyConfig | None,
    discovery: RemoteDiscovery,
    fallback_account: str,
) -> str:
    """Best known account for a platform: discovered, then persisted, then fallback."""

    discovered = discovery.platforms.get(key)
    if discovered and discovered.account:
        return discovered.account
    if existing is not None:
        prior = existing.platforms.get(key)
        if prior and prior.account:
            return prior.account
    return fallback_account


def merge_for_init(
    existing: WorkingCopyConfig | None,
    discovery: RemoteDiscovery,
    selections: InitSelections,
    registry: EndpointRegistry,
) -> WorkingCopyConfig:
    """Combine operator answers with discovered and persisted state.

    Selected platforms are enabled. Platforms present in `existing` but not
    selected this time keep their account and are disabled.
    """

    repository = selections.repository.strip()
    selected = set(selections.platforms)
    unknown = selected.difference(registry.keys())
    if unknown:
        raise KeyError(f"Unknown platform(s): {', '.join(sorted(unknown))}")

    platforms: dict[str, PlatformConfig] = {}
    for key in registry.keys():
        if key in selected:
            account = (
                selections.uniform_account
                or selections.accounts.get(key)
                or suggest_account(key, existing, discovery, selections.fallback_account)
            )
            platforms[key] = platform_config(registry, key, account.strip(), repository)
        elif existing is not None and key in existing.platforms:
            prior = existing.platforms[key]
            platforms[key] = platform_config(registry, key, prior.account, repository, enabled=False)

    created_at = existing.created_at if existing is not None else _now()
    return WorkingCopyConfig(repository=repository, platforms=platforms, created_at=created_at)


def enabled_platforms(config: WorkingCopyConfig) -> list[str]:
    return [key for key, cfg in config.platforms.items() if cfg.enabled]


def ensure_gitignored(root: Path, filename: str) -> str:
    """Append `filename` to the repository's .gitignore unless already listed.

    Returns "exists" or "added".
    """

    gitignore = root / ".gitignore"
    try:
        content = gitignore.read_text(encoding="utf-8") if gitignore.exists() else ""
        entries = {line.strip() for line in content.splitlines()}
        if filename in entries or f"/{filename}" in entries:
            return "exists"
        separator = "\n" if content and not content.endswith("\n") else ""
        with gitignore.open("a", encoding="utf-8") as handle:
            handle.write(f"{separator}# git-multi-push local configuration\n{filename}\n")
    except OSError as exc:
        raise ConfigWriteError(f"Failed to update {gitignore}: {exc}") from exc
    return "added"


def _split_list(raw: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()
