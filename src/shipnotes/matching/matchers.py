"""
Matchers used to assign commits to changelog sections.

Every section rule is turned into a :class:`Matcher` before it is applied.
A matcher knows which part of a commit it looks at (:meth:`Matcher.text_for`)
and how to find hits in that text (:meth:`Matcher.find`). This keeps the
classifier free of any regular expression details:

* :class:`PrefixMatcher` anchors a Conventional Commit type such as
  ``feat`` or ``^fix`` at the start of the subject.
* :class:`ReferenceMatcher` finds ticket references such as ``US-123`` or
  ``BUG: 42`` anywhere in the subject and body.
* :class:`CatchAll` matches every commit.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple

from shipnotes.parsing.log_parser import Commit


CATCH_ALL_PATTERN = "*"

# Characters allowed between a label and its ticket number, on one line.
_SEPARATOR = r"[ \t_:#-]+"
# Word characters joined by single hyphens, with at least one digit.
_TICKET = r"(?P<ticket>(?=[\w-]*\d)\w+(?:-\w+)*)"


class PatternError(ValueError):
    """Raised when a section rule pattern is not a usable expression."""

    pass


@dataclass(frozen=True)
class Reference:
    """A ticket reference such as ``US-123`` found in commit text."""

    label: str
    ticket_id: str

    @property
    def key(self) -> Tuple[str, str]:
        """Case-insensitive identity of the reference."""
        return self.label.upper(), self.ticket_id.upper()


@dataclass(frozen=True)
class Match:
    """A single hit of a matcher.

    ``reference`` is only set by :class:`ReferenceMatcher`.
    """

    text: str
    reference: Optional[Reference] = None


def _reference_regex(label: str, allow_glued: bool) -> "re.Pattern[str]":
    label = re.escape(label)
    separator = f"(?:{_SEPARATOR}|(?=\\d))" if allow_glued else _SEPARATOR
    # "bug BUG-2": the word "bug" must not take the reference after it as its ticket
    following = rf"(?!{label}(?:{_SEPARATOR}|\d))"
    return re.compile(
        rf"(?<!\w){label}{separator}{following}{_TICKET}",
        re.IGNORECASE,
    )


def extract_references(label: str, text: str, allow_glued: bool = False) -> List[Reference]:
    """Return every reference to ``label`` in ``text``, in order of appearance.

    The label has to stand on its own as a word, so ``US`` matches
    ``US-12`` or ``(US: 12)`` but never ``FOCUS-12``. The label and ticket
    are separated by any run of underscores, hyphens, colons, spaces, tabs
    or ``#``, never by a line break. With ``allow_glued`` set, the ticket may
    also follow the label directly as long as it starts with a digit
    (``US123``). A label word in prose never claims the reference that
    follows it: ``"login bug BUG-2"`` yields the single ticket ``2``.
    """
    if not label.strip() or not text:
        return []
    return [m.reference for m in ReferenceMatcher(label, allow_glued).find(text)]


class Matcher(ABC):
    """Finds the hits of one section rule in a commit."""

    def text_for(self, commit: Commit) -> str:
        """Return the part of ``commit`` this matcher inspects."""
        return commit.subject

    @abstractmethod
    def find(self, text: str) -> List[Match]:
        """Return all hits in ``text``; an empty list means no match."""

    def find_in(self, commit: Commit) -> List[Match]:
        return self.find(self.text_for(commit))


class PrefixMatcher(Matcher):
    """Case-insensitive match anchored at the start of the subject."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        try:
            self._regex = re.compile(pattern, re.IGNORECASE)
        except re.error as exc:
            raise PatternError(f"Invalid section pattern {pattern!r}: {exc}") from exc

    def find(self, text: str) -> List[Match]:
        m = self._regex.match(text)
        return [Match(text=m.group(0))] if m else []

    def __repr__(self) -> str:
        return f"PrefixMatcher({self.pattern!r})"


class ReferenceMatcher(Matcher):
    """Finds ``label`` ticket references in the subject and body."""

    def __init__(self, label: str, allow_glued: bool = False) -> None:
        if not label.strip():
            raise PatternError("Reference label must not be empty")
        self.label = label
        self.allow_glued = allow_glued
        self._regex = _reference_regex(label, allow_glued)

    def text_for(self, commit: Commit) -> str:
        return commit.message

    def find(self, text: str) -> List[Match]:
        matches: List[Match] = []
        for m in self._regex.finditer(text):
            ticket = m.group("ticket")
            # "--" ends the ticket early and can leave it without a digit
            if not any(ch.isdigit() for ch in ticket):
                continue
            matches.append(Match(text=m.group(0), reference=Reference(label=self.label, ticket_id=ticket)))
        return matches

    def __repr__(self) -> str:
        return f"ReferenceMatcher({self.label!r})"


class CatchAll(Matcher):
    """Matches any commit."""

    def find(self, text: str) -> List[Match]:
        return [Match(text="")]

    def __repr__(self) -> str:
        return "CatchAll()"


def is_catch_all(pattern: str) -> bool:
    return pattern.strip() == CATCH_ALL_PATTERN
