"""ScanOrchestrator: builds the scanner components from a ScanRequest and runs them."""

from __future__ import annotations

import threading
from collections.abc import Sequence

from pygit_scan.inspector import VcsInspector
from pygit_scan.manifest import ManifestReader
from pygit_scan.models import DiscoveredProject, ScanRequest, ScanResult
from pygit_scan.output import NullOutputHandler
from pygit_scan.protocols import OutputHandler, VcsQuerier
from pygit_scan.repository import GitCommandQuerier
from pygit_scan.walker import DirectoryWalker


class ScanOrchestrator:
    """Main entry point - one orchestrator per request, one fresh result per scan()"""

    def __init__(
        self,
        request: ScanRequest,
        output: OutputHandler | None = None,
        querier: VcsQuerier | None = None,
        show_progress: bool = False,
    ):
        """querier defaults to a GitCommandQuerier using the request's command timeout."""
        self.request = request
        self.output = output or NullOutputHandler()
        self.querier = querier or GitCommandQuerier(timeout=request.command_timeout)
        self.show_progress = show_progress

    def build_walker(self) -> DirectoryWalker:
        inspector = None
        if self.request.include_vcs:
            inspector = VcsInspector(self.querier, include_remotes=self.request.include_remotes)
        return DirectoryWalker(
            self.request,
            ManifestReader(self.request.manifest_names),
            inspector,
            show_progress=self.show_progress,
        )

    def scan(self, cancel_event: threading.Event | None = None) -> ScanResult:
        """Walk every root in the request and return the aggregated result."""
        roots = self.request.roots
        self.output.info(f"Scanning {len(roots)} root(s), max depth {self.request.max_depth}")
        for root in roots:
            self.output.debug(f"root: {root}")

        result = self.build_walker().walk(cancel_event=cancel_event)

        if result.cancelled:
            self.output.warning(f"Scan cancelled; returning {len(result.projects)} project(s) found so far")
        elif not result.projects:
            self.output.warning("No projects found")
        else:
            self.output.debug(f"Found {len(result.projects)} project(s)")
        return result


def scan_projects(
    roots: Sequence[str],
    querier: VcsQuerier | None = None,
    cancel_event: threading.Event | None = None,
    **options,
) -> list[DiscoveredProject]:
    """Convenience wrapper: scan roots and return only the discovered projects.

    options are ScanRequest fields (max_depth, prune_names, max_workers, ...).
    """
    request = ScanRequest(roots=tuple(roots), **options)
    return ScanOrchestrator(request, querier=querier).scan(cancel_event).projects
