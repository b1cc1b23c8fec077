"""
Top-level package for shipnotes.

shipnotes generates changelogs and ticket release notes from git history.
The command line entry point lives in :mod:`shipnotes.cli`; the processing
itself is available through :func:`shipnotes.pipeline.build_release_notes`.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
