"""
Custom exception types used across git-automate.

Every fatal condition the CLI reports derives from GitAutomateError so
that user-facing failures can be told apart from unexpected bugs.
"""

from __future__ import annotations

from typing import Optional, Sequence


class GitAutomateError(Exception):
    """Base class for all git-automate specific errors."""


class ConfigError(GitAutomateError):
    """Raised when the settings file cannot be read or parsed."""


class NotARepositoryError(GitAutomateError):
    """Raised when the working directory is not inside a git working tree."""


class GitLaunchError(GitAutomateError):
    """Raised when the git executable cannot be started at all."""


class GitError(GitAutomateError):
    """
    Raised when git ran but exited with a non-zero status.

    The captured stderr is kept on the exception and included in its
    message so the CLI can show git's own diagnostic.
    """

    def __init__(
        self,
        args: Sequence[str],
        returncode: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr

        message = f"git command failed: {' '.join(['git', *self.command])}"
        details = stderr.strip()
        if details:
            message = f"{message}: {details}"
        super().__init__(message)
