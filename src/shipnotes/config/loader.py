"""
Configuration loader for shipnotes.

The tool reads an optional JSON file named ``shipnotes.json`` from the
current working directory. All keys are optional; command line options
take precedence over the values found here. A missing file yields an empty
configuration, while an unreadable file, invalid JSON or values of the
wrong type raise :class:`ConfigError`.

Example::

    {
      "baseUrl": "https://jira.company.com/browse",
      "releaseNotes": true,
      "output": "RELEASE_NOTES.md",
      "sections": [
        {"section": "User Stories", "pattern": "US", "label": "US"},
        {"section": "Bugs", "pattern": "BUG", "label": "BUG"}
      ]
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from shipnotes.grouping.section_model import ChangelogMode, SectionRule


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


CONFIG_FILE = "shipnotes.json"

_STRING_KEYS = ("baseUrl", "output")
_BOOL_KEYS = ("releaseNotes", "allowGluedReferences", "scanRevertBody")


class ConfigError(Exception):
    """Raised when the shipnotes configuration file is invalid."""

    pass


def config_path(directory: Optional[Path] = None) -> Path:
    return (directory or Path.cwd()) / CONFIG_FILE


def _validate_sections(sections: Any) -> None:
    if not isinstance(sections, list):
        raise ConfigError("'sections' must be a list")
    for index, item in enumerate(sections):
        if not isinstance(item, dict):
            raise ConfigError(f"'sections[{index}]' must be an object")
        for key in ("section", "pattern"):
            if not isinstance(item.get(key), str) or not item[key].strip():
                raise ConfigError(f"'sections[{index}].{key}' must be a non-empty string")
        if "label" in item and not isinstance(item["label"], str):
            raise ConfigError(f"'sections[{index}].label' must be a string")


def load_config(directory: Optional[Path] = None) -> Dict[str, Any]:
    """Load ``shipnotes.json`` from ``directory`` (default: the cwd).

    Returns
    -------
    Dict[str, Any]
        The validated configuration, empty when no file exists.

    Raises
    ------
    ConfigError
        If the file cannot be read, is not a JSON object or holds a value
        of the wrong type.
    """
    path = config_path(directory)
    if not path.exists():
        logger.debug("No configuration file at %s, using defaults", path)
        return {}

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {path.name}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{path.name} must contain a JSON object")

    for key in _STRING_KEYS:
        if key in data and not isinstance(data[key], str):
            raise ConfigError(f"'{key}' must be a string")
    for key in _BOOL_KEYS:
        if key in data and not isinstance(data[key], bool):
            raise ConfigError(f"'{key}' must be a boolean")
    if "sections" in data:
        _validate_sections(data["sections"])

    logger.debug("Loaded configuration from: %s", path)
    logger.debug("Configuration data: %s", data)
    return data


def section_rules(config: Dict[str, Any],
                  mode: ChangelogMode = ChangelogMode.RELEASE_NOTES) -> Optional[List[SectionRule]]:
    """Return the configured section rules, or ``None`` to use the defaults.

    Configured sections describe ticket labels, so they only apply to release
    notes. A changelog always uses the built-in commit type sections.
    """
    if mode is not ChangelogMode.RELEASE_NOTES:
        return None
    sections = config.get("sections") or []
    if not sections:
        return None
    return [
        SectionRule(
            name=item["section"],
            pattern=item["pattern"],
            label=item.get("label") or item["pattern"],
        )
        for item in sections
    ]


def save_config(config: Dict[str, Any], directory: Optional[Path] = None) -> Path:
    """Write ``config`` as ``shipnotes.json`` and return the file path."""
    path = config_path(directory)
    path.write_text(json.dumps(config, indent=2) + "\n", encoding="utf-8")
    logger.debug("Saved configuration to: %s", path)
    return path
