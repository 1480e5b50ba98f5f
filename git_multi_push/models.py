"""Dataclasses shared across modules."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping


@dataclass(frozen=True)
class Endpoint:
    """A supported hosting platform."""

    key: str
    name: str
    pattern: re.Pattern[str]
    template: str
    icon: str = ""

    @property
    def label(self) -> str:
        return f"{self.icon} {self.name}".strip()


@dataclass(frozen=True)
class RemoteBinding:
    """A named remote as reported by `git remote -v`."""

    name: str
    fetch_url: str | None = None
    push_url: str | None = None

    @property
    def url(self) -> str | None:
        return self.fetch_url or self.push_url


@dataclass(frozen=True)
class ParsedRemoteInfo:
    endpoint_key: str
    account: str
    repository: str
    source_url: str


@dataclass(frozen=True)
class DiscoveredPlatform:
    account: str
    binding_name: str
    url: str


@dataclass(frozen=True)
class RemoteDiscovery:
    """What the working copy's existing remotes tell us about each platform."""

    repository_guess: str
    platforms: Mapping[str, DiscoveredPlatform] = field(default_factory=dict)

    @property
    def from_remotes(self) -> bool:
        return bool(self.platforms)


@dataclass(frozen=True)
class PlatformConfig:
    enabled: bool
    account: str
    url: str


@dataclass(frozen=True)
class WorkingCopyConfig:
    """Persisted per-working-copy push configuration."""

    repository: str
    platforms: Mapping[str, PlatformConfig]
    created_at: str

    def to_dict(self) -> dict:
        return {
            "repository": self.repository,
            "platforms": {
                key: {"enabled": cfg.enabled, "account": cfg.account, "url": cfg.url}
                for key, cfg in self.platforms.items()
            },
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class InitSelections:
    """Answers collected from the operator during init, already validated."""

    repository: str
    platforms: list[str]
    fallback_account: str
    uniform_account: str | None = None
    accounts: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PushOptions:
    branch: str | None = None
    force: bool = False
    tags: bool = False


@dataclass(frozen=True)
class PushResult:
    endpoint_key: str
    succeeded: bool
    message: str = ""


@dataclass
class PushReport:
    """Per-destination outcomes of one push run, in attempt order."""

    successes: list[str] = field(default_factory=list)
    failures: list[tuple[str, str]] = field(default_factory=list)

    def record(self, result: PushResult) -> None:
        if result.succeeded:
            self.successes.append(result.endpoint_key)
        else:
            self.failures.append((result.endpoint_key, result.message))

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass(frozen=True)
class ReconcileAction:
    endpoint_key: str
    action: str
    url: str


@dataclass(frozen=True)
class ChangeSummary:
    """Counts of uncommitted changes from `git status --porcelain`."""

    modified: int = 0
    added: int = 0
    deleted: int = 0
    untracked: int = 0
    total: int = 0

    def describe(self) -> str:
        parts = []
        if self.modified:
            parts.append(f"{self.modified} modified")
        if self.added:
            parts.append(f"{self.added} added")
        if self.deleted:
            parts.append(f"{self.deleted} deleted")
        if self.untracked:
            parts.append(f"{self.untracked} untracked")
        return ", ".join(parts) or f"{self.total} changed"


@dataclass(frozen=True)
class PlatformStatus:
    """One row of the `status` command."""

    endpoint_key: str
    name: str
    enabled: bool
    account: str
    url: str
    remote_url: str | None

    @property
    def remote_present(self) -> bool:
        return self.remote_url is not None

    @property
    def in_sync(self) -> bool:
        return self.remote_url == self.url
