"""Protocol definition for version-control drivers."""

from __future__ import annotations

from typing import Protocol

from .models import RemoteBinding


class VCSDriver(Protocol):
    """The narrow set of git operations the push workflow relies on.

    Implementations own all command construction; callers only pass names,
    URLs and flags.
    """

    def is_repository(self) -> bool:
        ...

    def current_branch(self) -> str | None:
        """Return the checked-out branch, or None when detached or unknown."""
        ...

    def user_name(self) -> str | None:
        ...

    def list_remotes(self) -> list[RemoteBinding]:
        """Return remotes in the order git lists them.

        Raises:
            GitCommandError: If the remotes cannot be queried.
        """
        ...

    def add_remote(self, name: str, url: str) -> None:
        ...

    def set_remote_url(self, name: str, url: str) -> None:
        ...

    def push(self, remote: str, branch: str, *, force: bool = False, tags: bool = False) -> None:
        """Push `branch` to `remote`, blocking until git exits.

        Raises:
            GitCommandError: If git exits non-zero; `stderr` holds its diagnostic.
        """
        ...

    def status_lines(self) -> list[str]:
        ...

    def commit_all(self, message: str) -> None:
        ...
