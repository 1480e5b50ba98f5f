"""End-to-end CLI tests against the in-memory driver."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from typer.testing import CliRunner

from git_multi_push import __version__, cli
from git_multi_push.config import Settings, platform_config, save_config
from git_multi_push.endpoints import default_registry
from git_multi_push.models import InitSelections, WorkingCopyConfig
from git_multi_push.service import MultiPushService

from tests.fakes import FakeDriver

runner = CliRunner()


class CliTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.registry = default_registry()
        self.driver = FakeDriver(remotes={"origin": "git@github.com:alice/proj.git"})
        self.service = MultiPushService(self.driver, self.registry, Settings(), self.root)
        patcher = mock.patch("git_multi_push.cli._build_service", return_value=self.service)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def write_config(self, **enabled: bool) -> None:
        config = WorkingCopyConfig(
            repository="proj",
            platforms={
                key: platform_config(self.registry, key, "alice", "proj", enabled=flag)
                for key, flag in enabled.items()
            },
            created_at="now",
        )
        save_config(self.service.config_path, config)


class PushCommandTests(CliTestCase):
    def test_pushes_to_every_enabled_platform(self) -> None:
        self.write_config(github=True, gitee=True)

        result = runner.invoke(cli.app, ["push", "--yes"])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(
            self.driver.pushes,
            [("push", "github", "main", False, False), ("push", "gitee", "main", False, False)],
        )
        self.assertEqual(self.driver.remotes["gitee"], "git@gitee.com:alice/proj.git")
        self.assertIn("Succeeded: github, gitee", result.output)

    def test_branch_and_flags(self) -> None:
        self.write_config(gitlab=True)

        result = runner.invoke(cli.app, ["push", "release", "--force", "--tags", "-y"])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(self.driver.pushes, [("push", "gitlab", "release", True, True)])

    def test_failed_destination_exits_non_zero_after_trying_all(self) -> None:
        self.write_config(github=True, gitee=True)
        self.driver.push_failures["github"] = "permission denied"

        result = runner.invoke(cli.app, ["push", "--yes"])

        self.assertEqual(result.exit_code, 1)
        self.assertEqual([call[1] for call in self.driver.pushes], ["github", "gitee"])
        self.assertIn("permission denied", result.output)

    def test_reconcile_failure_stops_before_pushing(self) -> None:
        self.write_config(github=True, gitee=True)
        self.driver.remote_failures["gitee"] = "fatal: bad config"

        result = runner.invoke(cli.app, ["push", "--yes"])

        self.assertEqual(result.exit_code, 1)
        self.assertEqual(self.driver.pushes, [])
        self.assertIn("gitee", result.output)
        self.assertIn("fatal: bad config", result.output)

    def test_nothing_enabled(self) -> None:
        self.write_config(github=False)

        result = runner.invoke(cli.app, ["push", "--yes"])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("nothing to push", result.output)
        self.assertEqual(self.driver.pushes, [])

    def test_not_a_repository(self) -> None:
        self.driver.repository = False

        result = runner.invoke(cli.app, ["push", "--yes"])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("not a git repository", result.output)

    def test_missing_config_runs_setup_first(self) -> None:
        selections = InitSelections(repository="proj", platforms=["gitee"], fallback_account="Alice")
        with mock.patch("git_multi_push.cli.interactive.collect_init_selections", return_value=selections):
            result = runner.invoke(cli.app, ["push", "--yes"])

        self.assertEqual(result.exit_code, 0, result.output)
        stored = json.loads(self.service.config_path.read_text(encoding="utf-8"))
        self.assertEqual(stored["platforms"]["gitee"]["url"], "git@gitee.com:Alice/proj.git")
        self.assertEqual(self.driver.pushes, [("push", "gitee", "main", False, False)])

    def test_declined_confirmation(self) -> None:
        self.write_config(github=True)
        with mock.patch("git_multi_push.cli.interactive.confirm", return_value=False):
            result = runner.invoke(cli.app, ["push"])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(self.driver.pushes, [])

    def test_commit_pending_changes_before_push(self) -> None:
        self.write_config(github=True)
        self.driver.status = [" M app.py"]
        with mock.patch("git_multi_push.cli.interactive.select", return_value="commit"), mock.patch(
            "git_multi_push.cli.interactive.text_input", return_value="wip"
        ), mock.patch("git_multi_push.cli.interactive.confirm", return_value=True):
            result = runner.invoke(cli.app, ["push"])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(self.driver.commits, ["wip"])
        self.assertEqual(len(self.driver.pushes), 1)

    def test_failed_commit_shows_git_diagnostic(self) -> None:
        self.write_config(github=True)
        self.driver.status = [" M app.py"]
        self.driver.commit_error = "pre-commit hook rejected: lint failed"
        with mock.patch("git_multi_push.cli.interactive.select", return_value="commit"), mock.patch(
            "git_multi_push.cli.interactive.text_input", return_value="wip"
        ):
            result = runner.invoke(cli.app, ["push"])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("git commit -m wip", result.output)
        self.assertIn("pre-commit hook rejected: lint failed", result.output)
        self.assertEqual(self.driver.pushes, [])

    def test_remote_listing_failure_shows_git_diagnostic(self) -> None:
        self.write_config(github=True)
        self.driver.list_error = True

        result = runner.invoke(cli.app, ["push", "--yes"])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("fatal: not a git repository", result.output)
        self.assertEqual(self.driver.pushes, [])

    def test_cancel_on_pending_changes(self) -> None:
        self.write_config(github=True)
        self.driver.status = ["?? scratch.txt"]
        with mock.patch("git_multi_push.cli.interactive.select", return_value="cancel"):
            result = runner.invoke(cli.app, ["push"])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(self.driver.pushes, [])
        self.assertEqual(self.driver.commits, [])

    def test_interrupt_exits_130(self) -> None:
        self.write_config(github=True, gitee=True)

        def interrupted(*args, **kwargs):
            raise KeyboardInterrupt

        with mock.patch.object(self.driver, "push", side_effect=interrupted):
            result = runner.invoke(cli.app, ["push", "--yes"])

        self.assertEqual(result.exit_code, 130)


class InitCommandTests(CliTestCase):
    def test_init_writes_config_and_gitignore(self) -> None:
        selections = InitSelections(
            repository="proj",
            platforms=["github", "gitcode"],
            fallback_account="Alice",
            uniform_account="Alice",
        )
        with mock.patch("git_multi_push.cli.interactive.collect_init_selections", return_value=selections):
            result = runner.invoke(cli.app, ["init"])

        self.assertEqual(result.exit_code, 0, result.output)
        stored = json.loads(self.service.config_path.read_text(encoding="utf-8"))
        self.assertEqual(list(stored["platforms"]), ["github", "gitcode"])
        self.assertIn(".mgit-push.json", (self.root / ".gitignore").read_text(encoding="utf-8"))

    def test_config_reuses_init_flow(self) -> None:
        self.write_config(github=True, gitee=True)
        selections = InitSelections(repository="proj", platforms=["gitee"], fallback_account="Alice")
        with mock.patch(
            "git_multi_push.cli.interactive.collect_init_selections", return_value=selections
        ) as collect:
            result = runner.invoke(cli.app, ["config"])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIsNotNone(collect.call_args.args[2])
        stored = json.loads(self.service.config_path.read_text(encoding="utf-8"))
        self.assertFalse(stored["platforms"]["github"]["enabled"])
        self.assertTrue(stored["platforms"]["gitee"]["enabled"])


class StatusCommandTests(CliTestCase):
    def test_status_and_alias(self) -> None:
        self.write_config(github=True)
        self.driver.remotes["github"] = "git@github.com:alice/proj.git"

        for command in ("status", "st"):
            with self.subTest(command=command):
                result = runner.invoke(cli.app, [command])

                self.assertEqual(result.exit_code, 0, result.output)
                self.assertIn("alice", result.output)
                self.assertIn("configured", result.output)

    def test_status_listing_failure_shows_git_diagnostic(self) -> None:
        self.write_config(github=True)
        self.driver.list_error = True

        result = runner.invoke(cli.app, ["status"])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("git remote -v", result.output)
        self.assertIn("fatal: not a git repository", result.output)

    def test_status_without_config(self) -> None:
        result = runner.invoke(cli.app, ["status"])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("git-multi-push init", result.output)


class OverviewTests(CliTestCase):
    def test_version(self) -> None:
        result = runner.invoke(cli.app, ["--version"])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output.strip(), f"git-multi-push {__version__}")

    def test_unconfigured_overview(self) -> None:
        result = runner.invoke(cli.app, [])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Not configured yet", result.output)

    def test_configured_overview(self) -> None:
        self.write_config(github=True)

        result = runner.invoke(cli.app, [])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Configured", result.output)


if __name__ == "__main__":
    unittest.main()
