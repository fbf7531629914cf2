"""
git-automate: stage, commit, push and manage branches in one command.
"""

__version__ = "0.1.0"
