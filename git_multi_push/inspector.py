"""Discover which hosting platforms the working copy already points at."""

from __future__ import annotations

import logging
from pathlib import Path

from .driver import VCSDriver
from .endpoints import EndpointRegistry
from .exceptions import MultiPushError
from .models import DiscoveredPlatform, RemoteBinding, RemoteDiscovery

logger = logging.getLogger(__name__)

PRIMARY_REMOTE = "origin"


def discover(driver: VCSDriver, registry: EndpointRegistry, root: Path) -> RemoteDiscovery:
    """Classify the working copy's remotes by endpoint.

    Never raises: when git cannot list remotes the discovery is empty and the
    repository guess falls back to the directory name.
    """

    try:
        bindings = driver.list_remotes()
    except MultiPushError as exc:
        logger.debug("Remote discovery skipped: %s", exc)
        bindings = []
    return fold_bindings(bindings, registry, fallback_name=root.name)


def fold_bindings(
    bindings: list[RemoteBinding],
    registry: EndpointRegistry,
    *,
    fallback_name: str,
) -> RemoteDiscovery:
    """Fold bindings in order; the first binding seen for a platform wins."""

    platforms: dict[str, DiscoveredPlatform] = {}
    first_repository: str | None = None
    primary_repository: str | None = None
    for binding in bindings:
        url = binding.url
        if not url:
            continue
        parsed = registry.match_endpoint(url)
        if parsed is None:
            logger.debug("Remote %s (%s) matches no known platform", binding.name, url)
            continue
        if first_repository is None:
            first_repository = parsed.repository
        if binding.name == PRIMARY_REMOTE and primary_repository is None:
            primary_repository = parsed.repository
        if parsed.endpoint_key in platforms:
            logger.debug(
                "Ignoring remote %s for %s; already discovered via %s",
                binding.name,
                parsed.endpoint_key,
                platforms[parsed.endpoint_key].binding_name,
            )
            continue
        platforms[parsed.endpoint_key] = DiscoveredPlatform(
            account=parsed.account,
            binding_name=binding.name,
            url=url,
        )
    guess = primary_repository or first_repository or fallback_name
    return RemoteDiscovery(repository_guess=guess, platforms=platforms)
