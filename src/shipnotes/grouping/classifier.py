"""
Assignment of commits to changelog sections.

Both output modes share :func:`classify`; they differ only in the matchers
built for the rules and in the :class:`MatchPolicy`:

``EXCLUSIVE``
    Rules are tried in order and the first hit wins. Catch-all rules are
    tried after every other rule. Used for the conventional changelog.
``INCLUSIVE``
    Every hit of every rule becomes its own entry, so a commit tagged with
    two tickets shows up twice. Used for ticket release notes.
"""

from __future__ import annotations

import logging
import re
from collections import OrderedDict
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from shipnotes.grouping.section_model import (
    DEFAULT_SCOPE,
    ChangelogEntry,
    ChangelogMode,
    SectionRule,
)
from shipnotes.matching.matchers import (
    CatchAll,
    Match,
    Matcher,
    PrefixMatcher,
    ReferenceMatcher,
    is_catch_all,
)
from shipnotes.parsing.log_parser import Commit


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


Classification = Dict[str, List[ChangelogEntry]]
MatcherFactory = Callable[[SectionRule], Matcher]

# type(scope)!: text
_CONVENTIONAL_RE = re.compile(r"^(?P<type>[\w-]+)(?:\((?P<scope>[^)]*)\))?!?:\s*(?P<text>.*)$", re.DOTALL)


class MatchPolicy(Enum):
    EXCLUSIVE = "exclusive"
    INCLUSIVE = "inclusive"


def split_subject(subject: str) -> Tuple[Optional[str], str]:
    """Split a Conventional Commit subject into its scope and text.

    ``"feat(api): add auth"`` gives ``("api", "add auth")``. The scope is
    ``None`` when the subject has no parenthesised scope, and the text is
    the whole subject when it does not have a ``type:`` prefix at all.
    """
    m = _CONVENTIONAL_RE.match(subject)
    if not m:
        return None, subject
    scope = (m.group("scope") or "").strip() or None
    return scope, m.group("text").strip()


def build_matcher(rule: SectionRule, mode: ChangelogMode, allow_glued: bool = False) -> Matcher:
    """Create the matcher for ``rule`` in the given output mode."""
    if mode is ChangelogMode.RELEASE_NOTES:
        return ReferenceMatcher(rule.pattern, allow_glued=allow_glued)
    if is_catch_all(rule.pattern):
        return CatchAll()
    return PrefixMatcher(rule.pattern)


def policy_for(mode: ChangelogMode) -> MatchPolicy:
    if mode is ChangelogMode.RELEASE_NOTES:
        return MatchPolicy.INCLUSIVE
    return MatchPolicy.EXCLUSIVE


def _entry(commit: Commit, rule: SectionRule, match: Match) -> ChangelogEntry:
    scope, text = split_subject(commit.subject)
    return ChangelogEntry(
        commit=commit,
        rule=rule,
        text=text,
        scope=scope or DEFAULT_SCOPE,
        reference=match.reference,
    )


def classify(
    commits: Sequence[Commit],
    rules: Sequence[SectionRule],
    policy: MatchPolicy,
    matcher_factory: MatcherFactory,
) -> Classification:
    """Group ``commits`` into sections according to ``rules``.

    Parameters
    ----------
    commits : Sequence[Commit]
        Commits in chronological order. Entry order inside each section
        follows this order.
    rules : Sequence[SectionRule]
        Section rules in priority and rendering order.
    policy : MatchPolicy
        Whether a commit is assigned to the first matching rule only or to
        every matching rule.
    matcher_factory : callable
        Builds the matcher for a rule.

    Returns
    -------
    Classification
        Section name mapped to its entries, with a key for every rule.
        Commits without any hit are left out.

    Raises
    ------
    PatternError
        If a rule pattern cannot be compiled.
    """
    matchers = [(rule, matcher_factory(rule)) for rule in rules]
    if policy is MatchPolicy.EXCLUSIVE:
        # Catch-all rules claim whatever the other rules left over.
        matchers.sort(key=lambda pair: isinstance(pair[1], CatchAll))

    result: Classification = OrderedDict((rule.name, []) for rule in rules)
    unmatched = 0
    for commit in commits:
        matched = False
        for rule, matcher in matchers:
            hits = matcher.find_in(commit)
            if not hits:
                continue
            matched = True
            if policy is MatchPolicy.EXCLUSIVE:
                result[rule.name].append(_entry(commit, rule, hits[0]))
                break
            result[rule.name].extend(_entry(commit, rule, hit) for hit in hits)
        if not matched:
            unmatched += 1
            logger.debug("Commit %s matched no section: %s", commit.short_id, commit.subject)

    if unmatched:
        logger.info("%d commit(s) did not match any section", unmatched)
    return result


def classify_commits(
    commits: Sequence[Commit],
    rules: Sequence[SectionRule],
    mode: ChangelogMode,
    allow_glued: bool = False,
) -> Classification:
    """Classify ``commits`` with the policy and matchers of ``mode``."""
    return classify(
        commits,
        rules,
        policy_for(mode),
        lambda rule: build_matcher(rule, mode, allow_glued=allow_glued),
    )
