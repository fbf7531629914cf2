"""
Core domain models for git-automate.

Git operations are described as typed request values and only turned
into argument lists at the executor boundary, so the orchestrator never
builds command strings itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .errors import GitError, GitLaunchError


class GitOperation(Enum):
    """
    Every git operation the orchestrator may request.

    The value is a human-readable label used in log lines.
    """

    IS_INSIDE_WORK_TREE = "check repository"
    CURRENT_BRANCH = "read current branch"
    UNBORN_BRANCH = "read unborn branch"
    STATUS = "check for changes"
    PULL = "pull"
    ADD = "stage files"
    COMMIT = "commit"
    PUSH = "push"
    CREATE_BRANCH = "create branch"
    SWITCH_BRANCH = "switch branch"
    DELETE_BRANCH = "delete branch"

    @property
    def mutating(self) -> bool:
        return self not in _READ_ONLY


_READ_ONLY = frozenset(
    {
        GitOperation.IS_INSIDE_WORK_TREE,
        GitOperation.CURRENT_BRANCH,
        GitOperation.UNBORN_BRANCH,
        GitOperation.STATUS,
    }
)


@dataclass(frozen=True)
class GitRequest:
    """
    A single git operation with its structured parameters.

    Only the fields relevant to the operation are populated; use the
    classmethod constructors rather than filling fields by hand.
    """

    operation: GitOperation
    paths: Tuple[str, ...] = ()
    message: Optional[str] = None
    remote: Optional[str] = None
    branch: Optional[str] = None

    @classmethod
    def is_inside_work_tree(cls) -> "GitRequest":
        return cls(GitOperation.IS_INSIDE_WORK_TREE)

    @classmethod
    def current_branch(cls) -> "GitRequest":
        return cls(GitOperation.CURRENT_BRANCH)

    @classmethod
    def unborn_branch(cls) -> "GitRequest":
        return cls(GitOperation.UNBORN_BRANCH)

    @classmethod
    def status(cls) -> "GitRequest":
        return cls(GitOperation.STATUS)

    @classmethod
    def pull(cls, remote: str) -> "GitRequest":
        return cls(GitOperation.PULL, remote=remote)

    @classmethod
    def add(cls, paths: Optional[List[str]] = None) -> "GitRequest":
        return cls(GitOperation.ADD, paths=tuple(paths or ["."]))

    @classmethod
    def commit(cls, message: str) -> "GitRequest":
        return cls(GitOperation.COMMIT, message=message)

    @classmethod
    def push(cls, remote: str, branch: str) -> "GitRequest":
        return cls(GitOperation.PUSH, remote=remote, branch=branch)

    @classmethod
    def create_branch(cls, name: str) -> "GitRequest":
        return cls(GitOperation.CREATE_BRANCH, branch=name)

    @classmethod
    def switch_branch(cls, name: str) -> "GitRequest":
        return cls(GitOperation.SWITCH_BRANCH, branch=name)

    @classmethod
    def delete_branch(cls, name: str) -> "GitRequest":
        return cls(GitOperation.DELETE_BRANCH, branch=name)


class ResultStatus(Enum):
    SUCCESS = "success"
    FAILED = "failed"
    NOT_LAUNCHED = "not-launched"


@dataclass
class CommandResult:
    """
    Outcome of one git invocation.

    FAILED means git ran and exited non-zero; NOT_LAUNCHED means the
    executable could not be started, in which case stderr holds the OS
    error text and returncode is None.
    """

    status: ResultStatus
    args: List[str]
    stdout: str = ""
    stderr: str = ""
    returncode: Optional[int] = None
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        return self.status is ResultStatus.SUCCESS

    def check(self) -> "CommandResult":
        """
        Return self on success, otherwise raise the matching error.
        """

        if self.status is ResultStatus.NOT_LAUNCHED:
            raise GitLaunchError(f"failed to execute git: {self.stderr}")
        if self.status is ResultStatus.FAILED:
            raise GitError(self.args, self.returncode, self.stderr)
        return self


@dataclass(frozen=True)
class Invocation:
    """
    The parsed command line for one run of git-automate.

    action is one of "commit", "branch", "init" or "status"; branch_action
    is set only for "branch".
    """

    action: str
    branch_action: Optional[str] = None
    name: Optional[str] = None
    message: Optional[str] = None
    files: Optional[Tuple[str, ...]] = None
    conventional: bool = False
    dry_run: bool = False
    verbosity: int = 0


@dataclass
class RepoStatus:
    branch: str
    has_changes: bool

    def lines(self) -> List[str]:
        return [
            f"Current branch: {self.branch}",
            f"Has uncommitted changes: {str(self.has_changes).lower()}",
        ]
