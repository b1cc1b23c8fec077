"""
End-to-end processing of ``git log`` output into release notes.

The pipeline runs the parser, the revert reconciler, the classifier and the
assembler in sequence. It performs no I/O: the caller provides the raw log
text and renders the returned :class:`ReleaseNotes`.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from shipnotes.grouping.assembler import assemble
from shipnotes.grouping.classifier import classify_commits
from shipnotes.grouping.reconciler import reconcile_reverts
from shipnotes.grouping.section_model import (
    DEFAULT_REFERENCE_LABELS,
    ChangelogMode,
    ReleaseNotes,
    SectionRule,
    default_rules,
)
from shipnotes.parsing.log_parser import EmptyInputError, parse_git_log


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


def build_release_notes(
    raw_log: str,
    rules: Optional[Sequence[SectionRule]] = None,
    mode: ChangelogMode = ChangelogMode.CHANGELOG,
    allow_glued: bool = False,
    scan_revert_body: bool = False,
) -> ReleaseNotes:
    """Turn raw ``git log`` output into grouped release notes.

    Args:
        raw_log: Output of ``git log`` in chronological order, formatted
            with :data:`shipnotes.parsing.log_parser.GIT_LOG_FORMAT`.
        rules: Section rules; the defaults of ``mode`` when ``None`` or
            empty.
        mode: Conventional changelog or ticket release notes.
        allow_glued: Accept ticket references without a separator.
        scan_revert_body: Detect reverts from the commit body as well.

    Returns:
        The assembled release notes.

    Raises:
        EmptyInputError: If there are no commits, or none is left after
            reverts are removed and unmatched commits are excluded.
        PatternError: If a rule pattern is invalid.
    """
    rules = list(rules) if rules else default_rules(mode)

    commits = parse_git_log(raw_log)

    if mode is ChangelogMode.RELEASE_NOTES:
        labels = [rule.pattern for rule in rules]
    else:
        labels = list(DEFAULT_REFERENCE_LABELS)
    commits = reconcile_reverts(commits, labels, scan_body=scan_revert_body, allow_glued=allow_glued)
    logger.debug("%d commit(s) left after revert reconciliation", len(commits))

    classification = classify_commits(commits, rules, mode, allow_glued=allow_glued)
    notes = assemble(classification, rules, mode)
    if notes.total == 0:
        raise EmptyInputError("No commits found matching the configured sections")
    return notes
