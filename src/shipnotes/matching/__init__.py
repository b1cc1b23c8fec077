"""
Rule matching for commit classification.

This package provides the matcher variants applied by the classifier and
the ticket reference extractor. See :mod:`shipnotes.matching.matchers`.
"""

from .matchers import (  # noqa: F401
    CatchAll,
    Match,
    Matcher,
    PatternError,
    PrefixMatcher,
    Reference,
    ReferenceMatcher,
    extract_references,
)
