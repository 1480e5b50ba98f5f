"""High-level orchestration for multi-platform pushes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from . import config as config_store
from .config import Settings
from .driver import VCSDriver
from .endpoints import EndpointRegistry
from .exceptions import ConfigWriteError, NotARepositoryError
from .git import summarize_status
from .inspector import discover
from .models import (
    ChangeSummary,
    InitSelections,
    PlatformStatus,
    PushOptions,
    PushReport,
    PushResult,
    ReconcileAction,
    RemoteDiscovery,
    WorkingCopyConfig,
)
from .push import push_all, resolve_branch
from .reconcile import reconcile

logger = logging.getLogger(__name__)


@dataclass
class MultiPushService:
    driver: VCSDriver
    registry: EndpointRegistry
    settings: Settings
    root: Path

    @property
    def config_path(self) -> Path:
        return config_store.config_path(self.root, self.settings)

    def ensure_repository(self) -> None:
        if not self.driver.is_repository():
            raise NotARepositoryError(f"{self.root} is not a git repository.")

    def discover(self) -> RemoteDiscovery:
        return discover(self.driver, self.registry, self.root)

    def load_config(self) -> WorkingCopyConfig | None:
        return config_store.load_config(self.config_path, self.registry)

    def fallback_account(self) -> str:
        return self.driver.user_name() or ""

    def initialize(
        self,
        selections: InitSelections,
        *,
        existing: WorkingCopyConfig | None = None,
        discovery: RemoteDiscovery | None = None,
    ) -> tuple[WorkingCopyConfig, str]:
        """Merge answers into a new configuration and persist it.

        Returns the configuration and the .gitignore outcome ("exists",
        "added" or "error").
        """

        if discovery is None:
            discovery = self.discover()
        merged = config_store.merge_for_init(existing, discovery, selections, self.registry)
        config_store.save_config(self.config_path, merged)
        try:
            ignored = config_store.ensure_gitignored(self.root, self.settings.config_file)
        except ConfigWriteError as exc:
            logger.warning("%s", exc)
            ignored = "error"
        return merged, ignored

    def sync_remotes(self, config: WorkingCopyConfig) -> list[ReconcileAction]:
        return reconcile(config, self.driver)

    def branch(self, options: PushOptions) -> str:
        return resolve_branch(self.driver, options, self.settings)

    def push(
        self,
        config: WorkingCopyConfig,
        options: PushOptions,
        on_result: Callable[[PushResult], None] | None = None,
    ) -> PushReport:
        keys = config_store.enabled_platforms(config)
        return push_all(self.driver, keys, self.branch(options), options, on_result=on_result)

    def status(self, config: WorkingCopyConfig) -> list[PlatformStatus]:
        remotes = {binding.name: binding for binding in self.driver.list_remotes()}
        rows: list[PlatformStatus] = []
        for key, cfg in config.platforms.items():
            binding = remotes.get(key)
            rows.append(
                PlatformStatus(
                    endpoint_key=key,
                    name=self.registry.get(key).label,
                    enabled=cfg.enabled,
                    account=cfg.account,
                    url=cfg.url,
                    remote_url=binding.url if binding else None,
                )
            )
        return rows

    def pending_changes(self) -> ChangeSummary | None:
        summary = summarize_status(self.driver.status_lines())
        return summary if summary.total else None

    def commit_all(self, message: str) -> None:
        self.driver.commit_all(message)
