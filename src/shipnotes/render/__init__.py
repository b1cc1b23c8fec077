"""
Rendering of release notes into markdown documents.

See :mod:`shipnotes.render.markdown`.
"""

from .markdown import escape_markdown, render, render_changelog, render_release_notes  # noqa: F401
