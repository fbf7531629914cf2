"""
Logging helpers for git-automate.

configure_logging sets up the standard logging module from the -v count;
Reporter carries the user-facing output of a single invocation so the
orchestrator does not write to process-wide streams on its own.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

LOG = logging.getLogger("git_automate")


def configure_logging(verbosity: int) -> None:
    """
    Configure the root logger based on a verbosity count.

    verbosity == 0 -> WARNING
    verbosity == 1 -> INFO
    verbosity >= 2 -> DEBUG
    """

    if verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )


class Reporter:
    """
    Writes progress and result lines for one invocation.

    info goes to stdout, warnings and errors to stderr. Every line is
    also sent to the logger at the matching level.
    """

    def __init__(
        self,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._out = out
        self._err = err
        self._logger = logger or LOG

    @property
    def out(self) -> TextIO:
        # Resolved lazily so pytest's capsys sees the output.
        return self._out or sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err or sys.stderr

    def info(self, message: str) -> None:
        self._logger.debug("report: %s", message)
        print(message, file=self.out)

    def warning(self, message: str) -> None:
        self._logger.debug("warning: %s", message)
        print(f"warning: {message}", file=self.err)

    def error(self, message: str) -> None:
        self._logger.debug("error: %s", message)
        print(f"git-automate: error: {message}", file=self.err)
