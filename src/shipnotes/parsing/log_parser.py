"""
Parser for the delimited ``git log`` output consumed by shipnotes.

The version control collaborator runs ``git log`` with
:data:`GIT_LOG_FORMAT`, which prints one block per commit. Each block holds
the commit hash, subject, author name, author email and ISO-8601 author
date on separate lines, followed by the (possibly empty) body and a
terminating :data:`SENTINEL` line. This module turns that text into an
ordered list of :class:`Commit` records without touching the filesystem
or the ``git`` binary.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


SENTINEL = "---END---"
GIT_LOG_FORMAT = f"%H%n%s%n%an%n%ae%n%aI%n%b%n{SENTINEL}"

# hash, subject, author name, author email, timestamp
MIN_FIELDS = 5


class EmptyInputError(Exception):
    """Raised when there are no commits to build release notes from."""

    pass


@dataclass(frozen=True)
class Commit:
    """A single commit read from the version history.

    Attributes
    ----------
    id : str
        The full commit hash.
    subject : str
        First line of the commit message.
    author_name : str
        Name of the commit author.
    author_email : str
        Email address of the commit author.
    timestamp : str
        Author date in ISO-8601 format.
    body : str
        Remaining lines of the commit message, trimmed. Empty when the
        commit has no body.
    """

    id: str
    subject: str
    author_name: str
    author_email: str
    timestamp: str
    body: str = ""

    @property
    def short_id(self) -> str:
        return self.id[:7]

    @property
    def message(self) -> str:
        """Subject and body joined, as scanned for ticket references."""
        if self.body:
            return f"{self.subject}\n{self.body}"
        return self.subject


def _split_blocks(raw: str) -> List[List[str]]:
    blocks: List[List[str]] = []
    current: List[str] = []
    for line in raw.splitlines():
        if line.strip() == SENTINEL:
            blocks.append(current)
            current = []
        else:
            current.append(line)
    # Output that was cut off before the final sentinel still counts.
    if any(line.strip() for line in current):
        blocks.append(current)
    return blocks


def parse_git_log(raw: str) -> List[Commit]:
    """Parse raw ``git log`` output into commits, preserving input order.

    Parameters
    ----------
    raw : str
        Text produced with :data:`GIT_LOG_FORMAT`.

    Returns
    -------
    List[Commit]
        One commit per well-formed block. Blocks with fewer than
        :data:`MIN_FIELDS` lines are skipped.

    Raises
    ------
    EmptyInputError
        If the input holds no parsable commit block.
    """
    if not raw.strip():
        raise EmptyInputError("No commits found")

    commits: List[Commit] = []
    for block in _split_blocks(raw):
        # Drop blank lines left over between sentinel and next hash
        while block and not block[0].strip():
            block = block[1:]
        if len(block) < MIN_FIELDS:
            logger.debug("Skipping incomplete log block: %r", block)
            continue
        commit_id, subject, author_name, author_email, timestamp = block[:MIN_FIELDS]
        body = "\n".join(block[MIN_FIELDS:]).strip()
        commits.append(
            Commit(
                id=commit_id,
                subject=subject,
                author_name=author_name,
                author_email=author_email,
                timestamp=timestamp,
                body=body,
            )
        )

    if not commits:
        raise EmptyInputError("No commits found")
    logger.debug("Parsed %d commit(s) from git log output", len(commits))
    return commits
