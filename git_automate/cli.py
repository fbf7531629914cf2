"""
Command-line interface for git-automate.

This module is responsible for argument parsing and delegating to the
orchestration layer; it also maps errors to exit codes.
"""

from __future__ import annotations

import argparse
from typing import List, Optional

from . import __version__
from .domain import Invocation
from .errors import GitAutomateError
from .logging_utils import Reporter, configure_logging
from .orchestrator import run


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-automate",
        description="Stage, commit and push changes, and manage branches, in one step.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be specified multiple times).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the git commands that would change the repository instead of running them.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="action", metavar="COMMAND")
    subparsers.required = True

    commit = subparsers.add_parser("commit", help="Commit and push changes.")
    commit.add_argument(
        "-m",
        "--message",
        help="Commit message (default: a generated placeholder).",
    )
    commit.add_argument(
        "-f",
        "--files",
        nargs="+",
        action="extend",
        metavar="FILE",
        help="Files to stage (default: all).",
    )
    commit.add_argument(
        "-c",
        "--conventional",
        action="store_true",
        help='Prefix the generated message with "feat: ".',
    )

    branch = subparsers.add_parser("branch", help="Branch operations.")
    branch_actions = branch.add_subparsers(dest="branch_action", metavar="ACTION")
    branch_actions.required = True
    for name, help_text in (
        ("create", "Create a new branch and switch to it."),
        ("switch", "Switch to an existing branch."),
        ("delete", "Delete a branch."),
    ):
        sub = branch_actions.add_parser(name, help=help_text)
        sub.add_argument("name", help="Branch name.")

    subparsers.add_parser("init", help="Write a default git-automate.toml.")
    subparsers.add_parser("status", help="Show the current branch and whether there are changes.")

    return parser


def parse_invocation(argv: Optional[List[str]] = None) -> Invocation:
    args = build_arg_parser().parse_args(argv)
    files = getattr(args, "files", None)
    return Invocation(
        action=args.action,
        branch_action=getattr(args, "branch_action", None),
        name=getattr(args, "name", None),
        message=getattr(args, "message", None),
        files=tuple(files) if files else None,
        conventional=getattr(args, "conventional", False),
        dry_run=args.dry_run,
        verbosity=args.verbose,
    )


def main(argv: Optional[List[str]] = None) -> int:
    invocation = parse_invocation(argv)

    configure_logging(verbosity=invocation.verbosity)
    reporter = Reporter()

    try:
        run(invocation, reporter=reporter)
    except KeyboardInterrupt:
        # Graceful shutdown on Ctrl+C
        return 130
    except GitAutomateError as exc:
        reporter.error(str(exc))
        return 1

    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
