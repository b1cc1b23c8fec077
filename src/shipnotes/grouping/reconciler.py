"""
Removal of reverted work from the commit history.

A revert commit is identified by its subject starting with the word
"revert". The ticket references it carries tell which earlier commits it
undoes. Both the revert and every earlier commit carrying one of its
references are dropped, while commits carrying the same reference *after*
the revert are kept, since they re-apply the change.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, Sequence, Set, Tuple

from shipnotes.matching.matchers import extract_references
from shipnotes.parsing.log_parser import Commit


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


_REVERT_RE = re.compile(r"^\s*revert\b", re.IGNORECASE)


def is_revert(commit: Commit, scan_body: bool = False) -> bool:
    """Return True if ``commit`` undoes an earlier commit."""
    if _REVERT_RE.match(commit.subject):
        return True
    return bool(scan_body and _REVERT_RE.match(commit.body))


def _references(commit: Commit, labels: Iterable[str], allow_glued: bool) -> List[Tuple[str, str]]:
    keys: List[Tuple[str, str]] = []
    for label in labels:
        for ref in extract_references(label, commit.message, allow_glued=allow_glued):
            if ref.key not in keys:
                keys.append(ref.key)
    return keys


def reconcile_reverts(
    commits: Sequence[Commit],
    labels: Iterable[str],
    scan_body: bool = False,
    allow_glued: bool = False,
) -> List[Commit]:
    """Drop revert commits and the earlier commits they revert.

    Args:
        commits: Commits in chronological order, oldest first.
        labels: Ticket labels used to link a revert to the work it undoes.
        scan_body: Also treat commits whose body starts with "revert" as
            reverts.
        allow_glued: Accept references without a separator (``US123``).

    Returns:
        A new list with the surviving commits in their original order.
    """
    labels = list(labels)
    refs_by_position = [_references(commit, labels, allow_glued) for commit in commits]

    positions: Dict[Tuple[str, str], List[int]] = {}
    for position, keys in enumerate(refs_by_position):
        for key in keys:
            positions.setdefault(key, []).append(position)

    removed: Set[int] = set()
    for position, commit in enumerate(commits):
        if not is_revert(commit, scan_body=scan_body):
            continue
        removed.add(position)
        for key in refs_by_position[position]:
            earlier = [p for p in positions[key] if p < position]
            removed.update(earlier)
            logger.debug(
                "Revert %s of %s-%s removes %d earlier commit(s)",
                commit.short_id,
                key[0],
                key[1],
                len(earlier),
            )

    if removed:
        logger.info("Dropped %d reverted or revert commit(s)", len(removed))
    return [commit for position, commit in enumerate(commits) if position not in removed]
