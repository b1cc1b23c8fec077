"""
Configuration loading for shipnotes.

Provides a loader for the optional ``shipnotes.json`` file in the working
directory. See :mod:`shipnotes.config.loader` for implementation details.
"""

from .loader import ConfigError, load_config, save_config, section_rules  # noqa: F401
