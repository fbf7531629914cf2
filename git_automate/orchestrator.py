"""
High-level orchestration for git-automate.

Each user-facing action is a short, fixed sequence of git requests that
stops at the first failure:
  - commit: pull, stage, check for changes, commit, push;
  - branch create/switch/delete: a single git call;
  - status: read the branch name and whether the tree is dirty;
  - init: write the default settings file.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import List, Optional, Union

from .config import CONFIG_FILENAME, Settings, load_settings, write_default_settings
from .domain import GitRequest, Invocation, RepoStatus, ResultStatus
from .errors import NotARepositoryError
from .git_adapter import CommandRunner, GitExecutor
from .logging_utils import Reporter
from .messages import generate_commit_message

LOG = logging.getLogger(__name__)


class GitAutomation:
    """
    Sequences git requests for one invocation.

    The runner is any CommandRunner, normally a GitExecutor; tests pass a
    recording fake instead.
    """

    def __init__(
        self,
        settings: Settings,
        runner: CommandRunner,
        reporter: Reporter,
        dry_run: bool = False,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.settings = settings
        self.runner = runner
        self.reporter = reporter
        self.dry_run = dry_run
        self.rng = rng

    def ensure_repository(self) -> None:
        """
        Raise NotARepositoryError unless the cwd is inside a working tree.
        """

        result = self.runner.run(GitRequest.is_inside_work_tree())
        if result.ok and result.stdout.strip() == "true":
            return
        # A missing git binary is reported as such, not as "not a repository".
        if result.status is ResultStatus.NOT_LAUNCHED:
            result.check()
        raise NotARepositoryError("not in a git repository")

    def current_branch(self) -> str:
        """
        Return the checked-out branch name.

        In a repository without commits HEAD cannot be resolved yet, so
        the name is read from the symbolic ref instead.
        """

        result = self.runner.run(GitRequest.current_branch())
        if result.status is ResultStatus.FAILED:
            LOG.debug("rev-parse HEAD failed; trying symbolic-ref for an unborn branch")
            fallback = self.runner.run(GitRequest.unborn_branch())
            if fallback.ok:
                return fallback.stdout.strip()
        # Report the original failure, it is the more useful diagnostic.
        return result.check().stdout.strip()

    def has_changes(self) -> bool:
        result = self.runner.run(GitRequest.status()).check()
        return bool(result.stdout.strip())

    def commit_and_push(
        self,
        message: Optional[str] = None,
        files: Optional[List[str]] = None,
        conventional: bool = False,
    ) -> bool:
        """
        Pull, stage, commit and push the current branch.

        Returns False without committing when there is nothing to commit.
        An explicit message is used verbatim; otherwise a placeholder
        message is generated.
        """

        remote = self.settings.default_remote

        if self.settings.auto_pull:
            LOG.info("Pulling from %s", remote)
            self.runner.run(GitRequest.pull(remote)).check()

        add = GitRequest.add(files)
        LOG.info("Staging %s", " ".join(add.paths))
        self.runner.run(add).check()

        if not self.has_changes():
            self.reporter.warning("No changes to commit")
            return False

        if message is None:
            message = generate_commit_message(
                self.settings.commit_template, conventional, rng=self.rng
            )
            LOG.info("Generated commit message: %s", message)

        self.runner.run(GitRequest.commit(message)).check()

        branch = self.current_branch()
        self.runner.run(GitRequest.push(remote, branch)).check()

        if self.dry_run:
            self.reporter.info(f"[dry run] would commit and push {branch} to {remote}: {message}")
        else:
            self.reporter.info(f"Committed and pushed {branch} to {remote}: {message}")
        return True

    def create_branch(self, name: str) -> None:
        self.runner.run(GitRequest.create_branch(name)).check()
        self._report_done(f"Created and switched to branch {name}")

    def switch_branch(self, name: str) -> None:
        self.runner.run(GitRequest.switch_branch(name)).check()
        self._report_done(f"Switched to branch {name}")

    def delete_branch(self, name: str) -> None:
        self.runner.run(GitRequest.delete_branch(name)).check()
        self._report_done(f"Deleted branch {name}")

    def _report_done(self, message: str) -> None:
        # In dry-run mode the executor has already echoed the command.
        if not self.dry_run:
            self.reporter.info(message)

    def status(self) -> RepoStatus:
        return RepoStatus(branch=self.current_branch(), has_changes=self.has_changes())

    def init_settings(self, path: Union[str, Path] = CONFIG_FILENAME) -> None:
        """
        Overwrite the settings file with the defaults.

        Existing values are not merged. In dry-run mode nothing is
        written.
        """

        if self.dry_run:
            self.reporter.info(f"[dry run] would write default settings to {path}")
            return
        written = write_default_settings(path)
        self.reporter.info(f"Initialized configuration file {written}")


def run(
    invocation: Invocation,
    reporter: Optional[Reporter] = None,
    runner: Optional[CommandRunner] = None,
    settings_path: Union[str, Path] = CONFIG_FILENAME,
) -> None:
    """
    Entry point for the CLI.

    Settings are loaded once, before any git subprocess runs, and the
    repository check precedes every action. init does not read the file
    it is about to replace, so it can repair a malformed one.
    """

    LOG.debug("Starting git-automate with invocation: %s", invocation)

    reporter = reporter or Reporter()
    if invocation.action == "init":
        settings = Settings()
    else:
        settings = load_settings(settings_path)
    if runner is None:
        runner = GitExecutor(dry_run=invocation.dry_run, reporter=reporter)

    automation = GitAutomation(settings, runner, reporter, dry_run=invocation.dry_run)
    automation.ensure_repository()

    action = invocation.action
    if action == "commit":
        automation.commit_and_push(
            message=invocation.message,
            files=list(invocation.files) if invocation.files else None,
            conventional=invocation.conventional,
        )
    elif action == "branch":
        _run_branch_action(automation, invocation)
    elif action == "init":
        automation.init_settings(settings_path)
    elif action == "status":
        for line in automation.status().lines():
            reporter.info(line)
    else:
        raise ValueError(f"unknown action: {action}")


def _run_branch_action(automation: GitAutomation, invocation: Invocation) -> None:
    name = invocation.name or ""
    if invocation.branch_action == "create":
        automation.create_branch(name)
    elif invocation.branch_action == "switch":
        automation.switch_branch(name)
    elif invocation.branch_action == "delete":
        automation.delete_branch(name)
    else:
        raise ValueError(f"unknown branch action: {invocation.branch_action}")
