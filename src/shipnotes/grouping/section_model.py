"""
Data models for grouping commits into changelog sections.

A :class:`SectionRule` describes one output section. The classifier turns
commits into :class:`ChangelogEntry` objects and the assembler collects them
into :class:`Section` objects inside a :class:`ReleaseNotes` document.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from shipnotes.matching.matchers import CATCH_ALL_PATTERN, Reference
from shipnotes.parsing.log_parser import Commit


DEFAULT_SCOPE = "Other"


class ChangelogMode(Enum):
    """Output flavour: a conventional changelog or ticket release notes."""

    CHANGELOG = "changelog"
    RELEASE_NOTES = "release-notes"


@dataclass(frozen=True)
class SectionRule:
    """Configuration of one changelog section.

    Attributes
    ----------
    name : str
        Heading of the section in the output.
    pattern : str
        A commit type prefix (``^feat``), the catch-all marker ``*`` or a
        ticket label (``US``) depending on the mode.
    label : str
        Short tag shown next to each rendered entry.
    """

    name: str
    pattern: str
    label: str = ""

    @property
    def display_label(self) -> str:
        return self.label or self.pattern


DEFAULT_CHANGELOG_RULES: List[SectionRule] = [
    SectionRule(name="Features", pattern="^feat", label="feat"),
    SectionRule(name="Bug Fixes", pattern="^fix", label="fix"),
    SectionRule(name="Other Changes", pattern=CATCH_ALL_PATTERN, label="other"),
]

DEFAULT_RELEASE_NOTES_RULES: List[SectionRule] = [
    SectionRule(name="User Stories", pattern="US", label="US"),
    SectionRule(name="Bugs", pattern="BUG", label="BUG"),
]

DEFAULT_REFERENCE_LABELS: List[str] = [rule.pattern for rule in DEFAULT_RELEASE_NOTES_RULES]


def default_rules(mode: ChangelogMode) -> List[SectionRule]:
    if mode is ChangelogMode.RELEASE_NOTES:
        return list(DEFAULT_RELEASE_NOTES_RULES)
    return list(DEFAULT_CHANGELOG_RULES)


@dataclass(frozen=True)
class ChangelogEntry:
    """One rendered line of a section.

    ``scope`` is only filled in changelog mode and ``reference`` only in
    release notes mode.
    """

    commit: Commit
    rule: SectionRule
    text: str
    scope: str = DEFAULT_SCOPE
    reference: Optional[Reference] = None


@dataclass
class Section:
    """A non-empty section of the output document."""

    rule: SectionRule
    entries: List[ChangelogEntry] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.rule.name

    def __len__(self) -> int:
        return len(self.entries)

    def by_scope(self) -> "OrderedDict[str, List[ChangelogEntry]]":
        """Group entries by scope: alphabetical, with ``Other`` last."""
        buckets: Dict[str, List[ChangelogEntry]] = {}
        for entry in self.entries:
            buckets.setdefault(entry.scope, []).append(entry)
        ordered: "OrderedDict[str, List[ChangelogEntry]]" = OrderedDict()
        for scope in sorted(buckets, key=str.lower):
            if scope != DEFAULT_SCOPE:
                ordered[scope] = buckets[scope]
        if DEFAULT_SCOPE in buckets:
            ordered[DEFAULT_SCOPE] = buckets[DEFAULT_SCOPE]
        return ordered


@dataclass
class ReleaseNotes:
    """The assembled document handed to the renderer."""

    mode: ChangelogMode
    sections: List[Section] = field(default_factory=list)
    total: int = 0

    def section(self, name: str) -> Optional[Section]:
        for section in self.sections:
            if section.name == name:
                return section
        return None
