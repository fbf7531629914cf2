"""
Git integration for git-automate.

This module is the only place that turns GitRequest values into git
argument lists and runs them. Results come back as CommandResult values;
deciding whether a failure is fatal is left to the caller.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from typing import TYPE_CHECKING, List, Optional, Protocol

from .domain import CommandResult, GitOperation, GitRequest, ResultStatus

if TYPE_CHECKING:
    from .logging_utils import Reporter

LOG = logging.getLogger(__name__)

GIT_EXECUTABLE = "git"


class CommandRunner(Protocol):
    """Anything that can run a git request and report its outcome."""

    def run(self, request: GitRequest) -> CommandResult:
        ...


def to_args(request: GitRequest) -> List[str]:
    """
    Translate a request into the git argument list, without the executable.
    """

    op = request.operation
    if op is GitOperation.IS_INSIDE_WORK_TREE:
        return ["rev-parse", "--is-inside-work-tree"]
    if op is GitOperation.CURRENT_BRANCH:
        return ["rev-parse", "--abbrev-ref", "HEAD"]
    if op is GitOperation.UNBORN_BRANCH:
        return ["symbolic-ref", "--short", "HEAD"]
    if op is GitOperation.STATUS:
        return ["status", "--porcelain"]
    if op is GitOperation.PULL:
        return ["pull", _require(request.remote, op)]
    if op is GitOperation.ADD:
        return ["add", *request.paths]
    if op is GitOperation.COMMIT:
        # An empty message is passed through; git rejects it itself.
        if request.message is None:
            raise ValueError("commit request requires a message")
        return ["commit", "-m", request.message]
    if op is GitOperation.PUSH:
        return ["push", _require(request.remote, op), _require(request.branch, op)]
    if op is GitOperation.CREATE_BRANCH:
        return ["checkout", "-b", _require(request.branch, op)]
    if op is GitOperation.SWITCH_BRANCH:
        return ["checkout", _require(request.branch, op)]
    if op is GitOperation.DELETE_BRANCH:
        return ["branch", "-d", _require(request.branch, op)]
    raise ValueError(f"unsupported git operation: {op}")


def _require(value: Optional[str], op: GitOperation) -> str:
    # Empty strings are passed through; git rejects them with its own error.
    if value is None:
        raise ValueError(f"{op.value} request is missing a required parameter")
    return value


def format_command(args: List[str]) -> str:
    return shlex.join([GIT_EXECUTABLE, *args])


class GitExecutor:
    """
    Runs git requests as subprocesses.

    In dry-run mode mutating requests are not executed: the command line
    is logged and echoed through the reporter, and a synthetic success
    is returned. Read-only requests always run so status output stays
    accurate.
    """

    def __init__(
        self,
        dry_run: bool = False,
        reporter: Optional["Reporter"] = None,
        cwd: Optional[str] = None,
    ) -> None:
        self.dry_run = dry_run
        self.reporter = reporter
        self.cwd = cwd

    def run(self, request: GitRequest) -> CommandResult:
        args = to_args(request)

        if self.dry_run and request.operation.mutating:
            command = format_command(args)
            LOG.info("[dry run] would %s: %s", request.operation.value, command)
            if self.reporter is not None:
                self.reporter.info(f"[dry run] {command}")
            return CommandResult(status=ResultStatus.SUCCESS, args=args, dry_run=True)

        return _run_git(args, cwd=self.cwd)


def _run_git(args: List[str], cwd: Optional[str] = None) -> CommandResult:
    """
    Run git with args and classify the outcome.

    Output is decoded as UTF-8, replacing undecodable bytes.
    """

    cmd = [GIT_EXECUTABLE, *args]
    LOG.debug("Running git command: %s", " ".join(cmd))
    try:
        completed = subprocess.run(
            cmd,
            cwd=cwd,
            check=False,
            capture_output=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as exc:
        LOG.debug("failed to launch git: %s", exc)
        return CommandResult(
            status=ResultStatus.NOT_LAUNCHED,
            args=args,
            stderr=str(exc),
        )

    if completed.returncode != 0:
        LOG.debug("git stderr: %s", completed.stderr)
        status = ResultStatus.FAILED
    else:
        status = ResultStatus.SUCCESS

    return CommandResult(
        status=status,
        args=args,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
        returncode=completed.returncode,
    )
