"""Collects classified entries into the document handed to the renderer."""

from __future__ import annotations

from typing import Sequence

from shipnotes.grouping.classifier import Classification
from shipnotes.grouping.section_model import ChangelogMode, ReleaseNotes, Section, SectionRule


def assemble(classification: Classification, rules: Sequence[SectionRule], mode: ChangelogMode) -> ReleaseNotes:
    """Build :class:`ReleaseNotes` from a classification.

    Sections follow rule order. Empty sections are left out but a section
    name used by several rules is only emitted once. Entries are not
    reordered.
    """
    notes = ReleaseNotes(mode=mode)
    seen = set()
    for rule in rules:
        if rule.name in seen:
            continue
        seen.add(rule.name)
        entries = list(classification.get(rule.name, []))
        notes.total += len(entries)
        if entries:
            notes.sections.append(Section(rule=rule, entries=entries))
    return notes
