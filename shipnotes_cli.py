#!/usr/bin/env python
"""
Thin wrapper script to invoke the shipnotes CLI.

Running ``python shipnotes_cli.py`` is equivalent to running the ``shipnotes``
console script installed via ``pyproject.toml``.
"""

from shipnotes.cli import main


if __name__ == "__main__":
    main(prog_name="shipnotes")
