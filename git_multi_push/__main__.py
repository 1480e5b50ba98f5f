"""Entry point shim for `python -m git_multi_push`."""

from __future__ import annotations

from git_multi_push.cli import app


def main() -> None:
    app()


if __name__ == "__main__":
    main()
