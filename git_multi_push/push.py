"""Push one branch to every enabled platform."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from .config import Settings
from .driver import VCSDriver
from .exceptions import GitCommandError, NothingToPushError
from .models import PushOptions, PushReport, PushResult

logger = logging.getLogger(__name__)


def resolve_branch(driver: VCSDriver, options: PushOptions, settings: Settings) -> str:
    if options.branch:
        return options.branch
    return driver.current_branch() or settings.default_branch


def push_all(
    driver: VCSDriver,
    endpoint_keys: Sequence[str],
    branch: str,
    options: PushOptions,
    on_result: Callable[[PushResult], None] | None = None,
) -> PushReport:
    """Attempt a push to every remote in order, whatever happens to the others.

    A failed push is recorded with git's diagnostic and never stops the loop.
    KeyboardInterrupt is not caught.
    """

    if not endpoint_keys:
        raise NothingToPushError("No platforms are enabled; nothing to push.")

    report = PushReport()
    for key in endpoint_keys:
        logger.debug("Pushing %s to %s (force=%s, tags=%s)", branch, key, options.force, options.tags)
        try:
            driver.push(key, branch, force=options.force, tags=options.tags)
        except GitCommandError as exc:
            message = exc.stderr.strip() or f"push failed with exit code {exc.returncode}"
            result = PushResult(endpoint_key=key, succeeded=False, message=message)
        else:
            result = PushResult(endpoint_key=key, succeeded=True)
        report.record(result)
        if on_result is not None:
            on_result(result)
    return report
