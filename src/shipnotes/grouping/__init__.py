"""
Grouping of commits into changelog sections.

This package removes reverted work (:mod:`shipnotes.grouping.reconciler`),
assigns commits to sections (:mod:`shipnotes.grouping.classifier`) and
collects the result (:mod:`shipnotes.grouping.assembler`). The data models
live in :mod:`shipnotes.grouping.section_model`.
"""

from .assembler import assemble  # noqa: F401
from .classifier import MatchPolicy, classify, classify_commits  # noqa: F401
from .reconciler import reconcile_reverts  # noqa: F401
from .section_model import ChangelogMode, ReleaseNotes, SectionRule  # noqa: F401
