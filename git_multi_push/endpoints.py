"""Catalog of supported hosting platforms."""

from __future__ import annotations

import re
from typing import Iterable, Iterator

from .models import Endpoint, ParsedRemoteInfo


def _host_pattern(host: str) -> re.Pattern[str]:
    # Matches git@host:acct/repo(.git) as well as https://host/acct/repo(.git).
    return re.compile(
        rf"(?:^|[@/]){re.escape(host)}[:/](?P<account>[^/\s]+)/(?P<repository>[^/\s]+?)(?:\.git)?/?$",
        re.IGNORECASE,
    )


def _ssh_template(host: str) -> str:
    return f"git@{host}:{{account}}/{{repository}}.git"


DEFAULT_ENDPOINTS: tuple[Endpoint, ...] = (
    Endpoint("github", "GitHub", _host_pattern("github.com"), _ssh_template("github.com"), "🐙"),
    Endpoint("gitee", "Gitee", _host_pattern("gitee.com"), _ssh_template("gitee.com"), "🔥"),
    Endpoint("gitlab", "GitLab", _host_pattern("gitlab.com"), _ssh_template("gitlab.com"), "🦊"),
    Endpoint("gitcode", "GitCode", _host_pattern("gitcode.com"), _ssh_template("gitcode.com"), "💻"),
)


class EndpointRegistry:
    """Ordered, immutable set of endpoints.

    Order is significant: when matching a URL the first endpoint whose pattern
    matches wins, and listings (prompts, status) follow the same order.
    """

    def __init__(self, endpoints: Iterable[Endpoint]):
        self._endpoints = tuple(endpoints)
        seen: set[str] = set()
        for endpoint in self._endpoints:
            if endpoint.key in seen:
                raise ValueError(f"Duplicate endpoint key: {endpoint.key}")
            seen.add(endpoint.key)
        self._by_key = {endpoint.key: endpoint for endpoint in self._endpoints}

    def __iter__(self) -> Iterator[Endpoint]:
        return iter(self._endpoints)

    def __len__(self) -> int:
        return len(self._endpoints)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def keys(self) -> list[str]:
        return [endpoint.key for endpoint in self._endpoints]

    def get(self, key: str) -> Endpoint:
        return self._by_key[key]

    def match_endpoint(self, url: str) -> ParsedRemoteInfo | None:
        candidate = url.strip()
        for endpoint in self._endpoints:
            match = endpoint.pattern.search(candidate)
            if match:
                return ParsedRemoteInfo(
                    endpoint_key=endpoint.key,
                    account=match.group("account"),
                    repository=match.group("repository"),
                    source_url=url,
                )
        return None

    def render_url(self, key: str, account: str, repository: str) -> str:
        template = self._by_key[key].template
        return template.replace("{account}", account).replace("{repository}", repository)


def default_registry() -> EndpointRegistry:
    return EndpointRegistry(DEFAULT_ENDPOINTS)
