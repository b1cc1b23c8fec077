"""
Command line interface for shipnotes.

This module defines the ``main`` click group used as the entry point of the
``shipnotes`` command. ``generate`` reads the git history, builds release
notes and writes them to a markdown file. ``init`` interactively creates a
``shipnotes.json`` configuration file. Exit codes are listed below.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import click

from shipnotes import __version__
from shipnotes.config.loader import CONFIG_FILE, ConfigError, config_path, load_config, save_config, section_rules
from shipnotes.grouping.section_model import DEFAULT_RELEASE_NOTES_RULES, ChangelogMode
from shipnotes.parsing.log_parser import EmptyInputError
from shipnotes.pipeline import build_release_notes
from shipnotes.render.markdown import render
from shipnotes.vcs.git_client import GitClient, GitError

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_INVALID_USAGE = 2
EXIT_NO_REPO = 3
EXIT_NO_COMMITS = 4
EXIT_CONFIG_ERROR = 5
EXIT_VCS_FAILURE = 6
EXIT_WRITE_FAILURE = 7

DEFAULT_OUTPUT = "RELEASE_NOTES.md"


# ---------------------------------------------------------------------------
# Status display utilities
# ---------------------------------------------------------------------------

class ProgressIndicator:
    """Prints a start line and a timed completion line around a step."""

    def __init__(self, message: str):
        self.message = message
        self.start_time = 0.0

    def __enter__(self):
        self.start_time = time.time()
        click.echo(f"→ {self.message}...")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            click.echo(f"  ✓ Done ({time.time() - self.start_time:.1f}s)")
        return False


def print_info(message: str, indent: int = 0):
    click.echo(f"{'  ' * indent}ℹ {message}")


def print_success(message: str, indent: int = 0):
    click.echo(f"{'  ' * indent}✓ {message}")


def print_warning(message: str, indent: int = 0):
    click.echo(f"{'  ' * indent}⚠ {message}")


def print_error(message: str, indent: int = 0):
    click.echo(f"{'  ' * indent}✗ {message}", err=True)


class AliasedGroup(click.Group):
    """Click group that also resolves short command aliases."""

    aliases = {"g": "generate"}

    def get_command(self, ctx, cmd_name):
        return super().get_command(ctx, self.aliases.get(cmd_name, cmd_name))


# ---------------------------------------------------------------------------
# Core functionality
# ---------------------------------------------------------------------------

def configure_logging(verbose: bool) -> None:
    """Send log records of every shipnotes module to the console.

    Module loggers only carry a ``NullHandler`` and do not propagate until
    this is called, so importing the package stays silent.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )
    for name in list(logging.Logger.manager.loggerDict):
        if name == "shipnotes" or name.startswith("shipnotes."):
            logging.getLogger(name).propagate = True


def resolve_range(client: GitClient, from_ref: Optional[str], to_ref: str,
                  last: bool) -> Tuple[Optional[str], str]:
    """Work out the revision range to read.

    With ``last`` the most recent tag becomes the end of the range. When the
    range ends at a tag and no start was given, the tag before it is used as
    the start.
    """
    if last:
        to_ref = client.latest_tag()
        print_info(f"Latest tag found: {to_ref}")
    if not from_ref and to_ref and to_ref != "HEAD":
        from_ref = client.previous_tag(to_ref)
        if from_ref:
            print_info(f"Auto-detected previous tag: {from_ref}")
    return from_ref, to_ref


def merge_options(config: Dict[str, Any], output: Optional[str], release_notes: Optional[bool],
                  base_url: Optional[str]) -> Dict[str, Any]:
    """Combine CLI options with the configuration; CLI values win."""
    return {
        "output": output or config.get("output") or DEFAULT_OUTPUT,
        "release_notes": release_notes if release_notes is not None else config.get("releaseNotes", False),
        "base_url": base_url or config.get("baseUrl"),
        "allow_glued": config.get("allowGluedReferences", False),
        "scan_revert_body": config.get("scanRevertBody", False),
    }


@click.group(cls=AliasedGroup)
@click.version_option(version=__version__, prog_name="shipnotes")
def main() -> None:
    """📝 Generate release notes from git history."""


@main.command()
@click.option("-o", "--output", help=f"Output file path [default: {DEFAULT_OUTPUT}].")
@click.option("-f", "--from", "from_ref", help="Start from commit/tag (exclusive).")
@click.option("-t", "--to", "to_ref", default="HEAD", show_default=True, help="End at commit/tag (inclusive).")
@click.option("-l", "--limit", type=click.IntRange(min=1), help="Limit number of commits.")
@click.option("-r", "--release-notes", is_flag=True,
              help="Generate ticket release notes grouped by section rules.")
@click.option("--no-release-notes", is_flag=True,
              help="Generate a conventional changelog (overrides config).")
@click.option("-b", "--base-url", help="Base URL for linking tickets (e.g. https://jira.company.com/browse).")
@click.option("--last", is_flag=True, help="Generate release notes for the last tag.")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
def generate(output: Optional[str], from_ref: Optional[str], to_ref: str, limit: Optional[int],
             release_notes: bool, no_release_notes: bool, base_url: Optional[str], last: bool,
             verbose: bool) -> None:
    """Generate release notes from git commit history."""
    if release_notes and no_release_notes:
        print_error("--release-notes and --no-release-notes are mutually exclusive")
        raise click.exceptions.Exit(EXIT_INVALID_USAGE)
    configure_logging(verbose)

    try:
        cwd = Path.cwd()
        repo_root = GitClient.find_repo_root(cwd)
        if repo_root is None:
            print_error("Not a git repository")
            raise click.exceptions.Exit(EXIT_NO_REPO)
        logger.debug("Repository root: %s", repo_root)

        try:
            config = load_config(cwd)
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

        requested_mode = True if release_notes else (False if no_release_notes else None)
        options = merge_options(config, output, requested_mode, base_url)
        mode = ChangelogMode.RELEASE_NOTES if options["release_notes"] else ChangelogMode.CHANGELOG
        client = GitClient(repo_root)

        try:
            from_ref, to_ref = resolve_range(client, from_ref, to_ref, last)
            with ProgressIndicator("Reading commit history"):
                raw_log = client.get_log(to=to_ref, from_ref=from_ref, limit=limit)
        except GitError as exc:
            print_error(f"Git error: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)

        try:
            notes = build_release_notes(
                raw_log,
                rules=section_rules(config, mode),
                mode=mode,
                allow_glued=options["allow_glued"],
                scan_revert_body=options["scan_revert_body"],
            )
        except EmptyInputError as exc:
            print_warning(str(exc))
            raise click.exceptions.Exit(EXIT_NO_COMMITS)

        for section in notes.sections:
            print_info(f"{section.name}: {len(section)} entr{'y' if len(section) == 1 else 'ies'}", indent=1)

        document = render(notes, from_ref, to_ref, base_url=options["base_url"])
        output_path = cwd / options["output"]
        try:
            output_path.write_text(document, encoding="utf-8")
        except OSError as exc:
            print_error(f"Failed to write {output_path}: {exc}")
            raise click.exceptions.Exit(EXIT_WRITE_FAILURE)

        print_success(f"Release notes generated: {options['output']}")

    except click.exceptions.Exit:
        raise
    except Exception as exc:
        logger.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        raise click.exceptions.Exit(EXIT_GENERIC_ERROR)


@main.command()
def init() -> None:
    """Initialize the shipnotes.json configuration file."""
    cwd = Path.cwd()
    path = config_path(cwd)

    click.echo("🔧 Initialize shipnotes configuration\n")
    if path.exists():
        if not click.confirm(f"Configuration file already exists at {path}. Overwrite?", default=False):
            print_info("Configuration initialization cancelled.")
            return

    base_url = click.prompt(
        "Base URL for ticket links (e.g. https://jira.company.com/browse)", default="", show_default=False
    ).strip()
    release_notes = click.confirm("Use release notes format by default?", default=False)
    output = click.prompt(f"Default output file (press Enter for {DEFAULT_OUTPUT})", default="",
                          show_default=False).strip()
    custom_sections = click.confirm("Configure custom sections?", default=False)

    config: Dict[str, Any] = {}
    if base_url:
        config["baseUrl"] = base_url
    if release_notes:
        config["releaseNotes"] = True
    if output:
        config["output"] = output
    if custom_sections:
        sections: List[Dict[str, str]] = [
            {"section": rule.name, "pattern": rule.pattern, "label": rule.label}
            for rule in DEFAULT_RELEASE_NOTES_RULES
        ]
        config["sections"] = sections
        click.echo("\n📝 Default sections configured. Patterns match ticket references (e.g. US: 123, BUG-456).")
        click.echo(f"Edit {CONFIG_FILE} to customize sections.")

    try:
        saved = save_config(config, cwd)
    except OSError as exc:
        print_error(f"Failed to write {path}: {exc}")
        raise click.exceptions.Exit(EXIT_WRITE_FAILURE)

    print_success(f"Configuration saved to {saved}")
    click.echo("\nYou can now run: shipnotes generate")
    click.echo("Note: CLI options override configuration file settings.")
