"""Configuration: argument parser and config file loader."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Any

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from pygit_scan.models import DEFAULT_MAX_DEPTH

CONFIG_FILENAME = '.pygitscan.toml'


def create_argument_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with all pygit-scan flags."""
    # Lazy import to avoid circular dependency with __init__.py
    from pygit_scan import __version__

    parser = argparse.ArgumentParser(
        description="Discover git projects under one or more directories",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s ~/projects                          # Scan one tree
  %(prog)s ~/work ~/oss --max-depth 3          # Several roots, shallower
  %(prog)s ~/projects --prune dist --json      # Extra pruning, JSON output
  %(prog)s ~/projects --no-vcs                 # Names and paths only
        """
    )

    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('directories', nargs='*',
                        help='Root directories to scan (default: config roots or current dir)')
    parser.add_argument('--max-depth', type=int, default=DEFAULT_MAX_DEPTH,
                        help=f'Maximum recursion depth below each root (default: {DEFAULT_MAX_DEPTH})')
    parser.add_argument('--prune', action='append', default=[],
                        help='Extra directory name to skip (can specify multiple)')
    parser.add_argument('--max-workers', type=int, default=min(os.cpu_count() or 4, 8),
                        help='Max parallel workers (default: min(cpu_count, 8))')
    parser.add_argument('--command-timeout', type=float, default=10.0,
                        help='Seconds before a git command is killed (default: 10)')
    parser.add_argument('--timeout', type=float, default=None,
                        help='Stop the whole scan after N seconds and report partial results')
    parser.add_argument('--manifest', action='append', default=[],
                        help='Manifest filename to read names from, in priority order '
                             '(default: package.json, pyproject.toml, Cargo.toml)')
    parser.add_argument('--no-vcs', dest='include_vcs', action='store_false',
                        help='Do not run git to collect branch/commit/status')
    parser.add_argument('--no-remotes', dest='include_remotes', action='store_false',
                        help='Do not list configured remotes')
    parser.add_argument('--json', dest='json_output', action='store_true',
                        help='Output results as JSON (suppresses normal output)')
    parser.add_argument('--verbose', action='store_true',
                        help='Verbose output')
    parser.add_argument('--progress', action='store_true',
                        help='Always show the progress bar')
    parser.add_argument('--config', type=str, default=None,
                        help=f'Path to config file (default: {CONFIG_FILENAME} in current dir or home)')

    return parser


def load_config_file(search_dir: Path, config_path: str | None = None) -> dict[str, Any]:
    """Load .pygitscan.toml from explicit path, search dir, or home dir.

    Returns empty dict if not found or unparseable.
    """
    candidates = (
        [Path(config_path).expanduser()] if config_path
        else [search_dir / CONFIG_FILENAME, Path.home() / CONFIG_FILENAME]
    )
    for path in candidates:
        if path.is_file():
            try:
                with open(path, 'rb') as f:
                    return tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                print(f"Warning: Failed to parse {path}: {e}", file=sys.stderr)
                return {}
    if config_path:
        print(f"Warning: Config file '{config_path}' not found. Ignoring.", file=sys.stderr)
    return {}
