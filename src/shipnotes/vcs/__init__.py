"""
Version control system (VCS) integration.

Contains the Git client used to read the commit history that release notes
are generated from.
"""

from .git_client import GitClient, GitError  # noqa: F401
