"""
Markdown rendering of assembled release notes.

Two layouts are supported. :func:`render_changelog` produces a conventional
changelog with one sub-heading per commit scope, and
:func:`render_release_notes` produces a ticket list where each entry may
link to an issue tracker.
"""

from __future__ import annotations

import re
from datetime import date
from typing import List, Optional

from shipnotes.grouping.section_model import ChangelogEntry, ChangelogMode, ReleaseNotes


_MARKDOWN_SPECIAL = re.compile(r"([\\`*_\[\]<>])")


def escape_markdown(text: str) -> str:
    """Escape characters that would otherwise be read as markdown syntax."""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)


def ticket_url(base_url: str, ticket_id: str) -> str:
    return f"{base_url.rstrip('/')}/{ticket_id}"


def _header(title: str, from_ref: Optional[str], to_ref: str, generated: Optional[date]) -> List[str]:
    generated = generated or date.today()
    lines = [f"# {title}", "", f"Generated: {generated.isoformat()}", ""]
    if from_ref:
        lines.append(f"Range: {from_ref}..{to_ref}")
    else:
        lines.append(f"Up to: {to_ref}")
    lines.append("")
    return lines


def _plural(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


def render_changelog(
    notes: ReleaseNotes,
    from_ref: Optional[str] = None,
    to_ref: str = "HEAD",
    generated: Optional[date] = None,
) -> str:
    """Render a conventional changelog grouped by section and scope."""
    lines = _header("Changelog", from_ref, to_ref, generated)
    for section in notes.sections:
        lines += [f"## {section.name}", ""]
        for scope, entries in section.by_scope().items():
            lines += [f"### {escape_markdown(scope)}", ""]
            for entry in entries:
                lines.append(f"- {escape_markdown(entry.text)} ({entry.commit.short_id})")
            lines.append("")
    lines += ["---", "", f"**Total:** {_plural(notes.total, 'change', 'changes')}", ""]
    return "\n".join(lines)


def _release_line(entry: ChangelogEntry, base_url: Optional[str]) -> str:
    ticket = entry.reference.ticket_id if entry.reference else ""
    tag = f"{entry.rule.display_label} {ticket}".strip()
    text = escape_markdown(entry.text)
    if base_url and ticket:
        return f"- [{escape_markdown(tag)}]({ticket_url(base_url, ticket)}): {text}"
    return f"- {escape_markdown(tag)}: {text}"


def render_release_notes(
    notes: ReleaseNotes,
    from_ref: Optional[str] = None,
    to_ref: str = "HEAD",
    base_url: Optional[str] = None,
    generated: Optional[date] = None,
) -> str:
    """Render ticket release notes, linking tickets when ``base_url`` is set."""
    lines = _header("Release Notes", from_ref, to_ref, generated)
    for section in notes.sections:
        lines += [f"## {section.name}", ""]
        lines += [_release_line(entry, base_url) for entry in section.entries]
        lines.append("")
    counts = ", ".join(f"{section.name}: {len(section)}" for section in notes.sections)
    lines += ["---", "", f"**Total:** {_plural(notes.total, 'entry', 'entries')} ({counts})", ""]
    return "\n".join(lines)


def render(
    notes: ReleaseNotes,
    from_ref: Optional[str] = None,
    to_ref: str = "HEAD",
    base_url: Optional[str] = None,
    generated: Optional[date] = None,
) -> str:
    """Render ``notes`` in the layout matching their mode."""
    if notes.mode is ChangelogMode.RELEASE_NOTES:
        return render_release_notes(notes, from_ref, to_ref, base_url=base_url, generated=generated)
    return render_changelog(notes, from_ref, to_ref, generated=generated)
