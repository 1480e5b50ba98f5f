"""Thin wrappers around git CLI commands."""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from .exceptions import GitCommandError, GitUnavailableError
from .models import ChangeSummary, RemoteBinding

logger = logging.getLogger(__name__)

_REMOTE_LINE = re.compile(r"^(\S+)\s+(\S+)\s+\((fetch|push)\)$")


def run_git(
    args: Iterable[str],
    *,
    cwd: Path,
    raise_on_error: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Execute a git command and optionally raise on failure."""

    cmd = ["git", *args]
    logger.debug("Running command: %s (cwd=%s)", " ".join(cmd), cwd)
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as exc:
        raise GitUnavailableError("git executable not found in PATH.") from exc
    if raise_on_error and proc.returncode != 0:
        raise GitCommandError(cmd, proc.returncode, proc.stderr)
    return proc


def rev_parse_toplevel(path: Path) -> Path:
    proc = run_git(["rev-parse", "--show-toplevel"], cwd=path)
    return Path(proc.stdout.strip())


def parse_remote_listing(output: str) -> list[RemoteBinding]:
    """Fold `git remote -v` output into bindings, keeping first-seen order."""

    order: list[str] = []
    urls: dict[str, dict[str, str]] = {}
    for raw in output.splitlines():
        match = _REMOTE_LINE.match(raw.strip())
        if not match:
            continue
        name, url, kind = match.groups()
        if name not in urls:
            order.append(name)
            urls[name] = {}
        urls[name].setdefault(kind, url)
    return [
        RemoteBinding(name=name, fetch_url=urls[name].get("fetch"), push_url=urls[name].get("push"))
        for name in order
    ]


def summarize_status(lines: Iterable[str]) -> ChangeSummary:
    """Count porcelain status lines by kind of change."""

    modified = added = deleted = untracked = total = 0
    for line in lines:
        if not line.strip():
            continue
        total += 1
        flag = line[:2]
        if "M" in flag:
            modified += 1
        elif "A" in flag:
            added += 1
        elif "D" in flag:
            deleted += 1
        elif flag == "??":
            untracked += 1
    return ChangeSummary(
        modified=modified,
        added=added,
        deleted=deleted,
        untracked=untracked,
        total=total,
    )


@dataclass
class GitDriver:
    """Drives the git CLI for a single working copy."""

    root: Path

    def is_repository(self) -> bool:
        proc = run_git(["rev-parse", "--git-dir"], cwd=self.root, raise_on_error=False)
        return proc.returncode == 0

    def current_branch(self) -> str | None:
        proc = run_git(["branch", "--show-current"], cwd=self.root, raise_on_error=False)
        if proc.returncode != 0:
            return None
        return proc.stdout.strip() or None

    def user_name(self) -> str | None:
        proc = run_git(["config", "user.name"], cwd=self.root, raise_on_error=False)
        if proc.returncode != 0:
            return None
        return proc.stdout.strip() or None

    def list_remotes(self) -> list[RemoteBinding]:
        proc = run_git(["remote", "-v"], cwd=self.root)
        return parse_remote_listing(proc.stdout)

    def add_remote(self, name: str, url: str) -> None:
        run_git(["remote", "add", name, url], cwd=self.root)

    def set_remote_url(self, name: str, url: str) -> None:
        run_git(["remote", "set-url", name, url], cwd=self.root)

    def push(self, remote: str, branch: str, *, force: bool = False, tags: bool = False) -> None:
        args = ["push"]
        if force:
            args.append("--force")
        if tags:
            args.append("--tags")
        args.extend([remote, branch])
        run_git(args, cwd=self.root)

    def status_lines(self) -> list[str]:
        proc = run_git(["status", "--porcelain"], cwd=self.root)
        return [line for line in proc.stdout.splitlines() if line.strip()]

    def commit_all(self, message: str) -> None:
        run_git(["add", "."], cwd=self.root)
        run_git(["commit", "-m", message], cwd=self.root)
