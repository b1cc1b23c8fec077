"""
Git client implementation for shipnotes.

This module wraps the few read-only Git operations the release notes
generator needs: locating the repository, resolving tags and dumping the
commit log in the format understood by
:mod:`shipnotes.parsing.log_parser`. All subprocess calls go through
:meth:`GitClient._run` so that unit tests can mock them easily.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from shipnotes.parsing.log_parser import GIT_LOG_FORMAT


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class GitClient:
    """Client for reading history from a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If the command exits with a non-zero status when ``check`` is
            True, or if the ``git`` executable cannot be found.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as e:
            raise GitError("The 'git' executable was not found on PATH") from e

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------
    def latest_tag(self) -> str:
        """Return the most recent tag reachable from HEAD.

        Raises
        ------
        GitError
            If the repository has no tags.
        """
        result = self._run(["describe", "--tags", "--abbrev=0"], check=False)
        tag = result.stdout.strip()
        if result.returncode != 0 or not tag:
            raise GitError("No tags found in repository")
        return tag

    def previous_tag(self, ref: str) -> Optional[str]:
        """Return the tag preceding ``ref``, or None if there is none."""
        result = self._run(["describe", "--tags", "--abbrev=0", f"{ref}^"], check=False)
        tag = result.stdout.strip()
        if result.returncode != 0 or not tag:
            logger.debug("No tag found before %s", ref)
            return None
        return tag

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    def get_log(self, to: str = "HEAD", from_ref: Optional[str] = None, limit: Optional[int] = None) -> str:
        """Return the commit log between ``from_ref`` (exclusive) and ``to``.

        Commits are listed oldest first, one block per commit in the format
        given by :data:`GIT_LOG_FORMAT`.

        Parameters
        ----------
        to : str
            Commit or tag to end at (inclusive).
        from_ref : Optional[str]
            Commit or tag to start after. When omitted the whole history up
            to ``to`` is listed.
        limit : Optional[int]
            Only include the ``limit`` most recent commits.
        """
        args = ["log", "--reverse", f"--format={GIT_LOG_FORMAT}"]
        if limit:
            args.append(f"-{limit}")
        args.append(f"{from_ref}..{to}" if from_ref else to)
        return self._run(args, check=True).stdout
