"""
Parsing of version history into commit records.

See :mod:`shipnotes.parsing.log_parser` for the block format.
"""

from .log_parser import Commit, EmptyInputError, parse_git_log  # noqa: F401
