"""Bring the working copy's remotes in line with the stored configuration."""

from __future__ import annotations

import logging

from .driver import VCSDriver
from .exceptions import GitCommandError, ReconcileError
from .models import ReconcileAction, WorkingCopyConfig

logger = logging.getLogger(__name__)

CREATED = "created"
UPDATED = "updated"
UNCHANGED = "unchanged"


def reconcile(config: WorkingCopyConfig, driver: VCSDriver) -> list[ReconcileAction]:
    """Create or repoint one remote per enabled platform, named after the platform.

    Stops at the first failure with a ReconcileError. Remotes reconciled
    before the failure are left as they are.
    """

    current = {binding.name: binding for binding in driver.list_remotes()}

    actions: list[ReconcileAction] = []
    for key, cfg in config.platforms.items():
        if not cfg.enabled:
            continue
        binding = current.get(key)
        try:
            if binding is None:
                driver.add_remote(key, cfg.url)
                action = CREATED
            elif binding.url == cfg.url:
                action = UNCHANGED
            else:
                driver.set_remote_url(key, cfg.url)
                action = UPDATED
        except GitCommandError as exc:
            raise ReconcileError(key, exc.diagnostic) from exc
        logger.debug("Remote %s %s (%s)", key, action, cfg.url)
        actions.append(ReconcileAction(endpoint_key=key, action=action, url=cfg.url))
    return actions
