"""CLI entry point: main() function."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

from colorama import Fore, Style

from pygit_scan.config import create_argument_parser, load_config_file
from pygit_scan.models import DEFAULT_MANIFEST_NAMES, DEFAULT_PRUNE_NAMES, ScanRequest
from pygit_scan.orchestrator import ScanOrchestrator
from pygit_scan.output import ConsoleOutputHandler, NullOutputHandler
from pygit_scan.reporter import SummaryReporter


def main(argv: list[str] | None = None):
    """Main entry point"""
    parser = create_argument_parser()
    raw_args = sys.argv[1:] if argv is None else argv
    args = parser.parse_args(raw_args)

    file_config = load_config_file(Path.cwd(), args.config)

    # Determine which args were explicitly set on CLI
    given = {arg.split('=', 1)[0] for arg in raw_args}
    cli_explicit = set()
    for action in parser._actions:
        if action.dest in ('help', 'version'):
            continue
        if any(opt in given for opt in action.option_strings):
            cli_explicit.add(action.dest)

    def effective(dest: str, toml_key: str):
        if dest in cli_explicit:
            return getattr(args, dest)
        if toml_key in file_config:
            return file_config[toml_key]
        return getattr(args, dest)

    roots = args.directories or list(file_config.get('roots', [])) or ['.']
    prune_names = set(file_config.get('prune_names', DEFAULT_PRUNE_NAMES)) | set(args.prune)
    manifest_names = args.manifest or list(file_config.get('manifest_names', DEFAULT_MANIFEST_NAMES))
    json_output = effective('json_output', 'json_output')
    verbose = effective('verbose', 'verbose')

    try:
        request = ScanRequest(
            roots=tuple(roots),
            max_depth=effective('max_depth', 'max_depth'),
            prune_names=frozenset(prune_names),
            max_workers=effective('max_workers', 'max_workers'),
            command_timeout=effective('command_timeout', 'command_timeout'),
            timeout=effective('timeout', 'timeout'),
            manifest_names=tuple(manifest_names),
            include_vcs=effective('include_vcs', 'include_vcs'),
            include_remotes=effective('include_remotes', 'include_remotes'),
        )
    except (TypeError, ValueError) as e:
        parser.error(str(e))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    output = NullOutputHandler() if json_output else ConsoleOutputHandler(verbose=verbose)
    show_progress = args.progress or (not json_output and sys.stderr.isatty())

    orchestrator = ScanOrchestrator(request, output, show_progress=show_progress)

    try:
        result = orchestrator.scan()

        if json_output:
            print(json.dumps(result.to_dict(), indent=2))
        else:
            SummaryReporter(output, verbose=verbose).print_summary(result, request)

        sys.exit(0)

    except KeyboardInterrupt:
        if not json_output:
            output.warning("\n\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        if json_output:
            print(json.dumps({'error': str(e)}, indent=2))
        else:
            print(f"{Fore.RED}Unexpected error: {e}{Style.RESET_ALL}", file=sys.stderr)
            if verbose:
                import traceback
                traceback.print_exc()
        sys.exit(1)
