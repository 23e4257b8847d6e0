"""ResultAggregator: lock-guarded accumulation of scan output."""

from __future__ import annotations

import threading
from collections.abc import Iterable

from pygit_scan.models import DiscoveredProject, ScanIssue, ScanResult


class ResultAggregator:
    """Collects projects and issues from worker threads into one deduplicated result"""

    def __init__(self):
        self._lock = threading.Lock()
        self._projects: dict[str, DiscoveredProject] = {}
        self._order: dict[str, tuple] = {}
        self._issues: list[ScanIssue] = []
        self._visited = 0
        self._truncated = 0

    @staticmethod
    def merge(sequences: Iterable[Iterable[DiscoveredProject]]) -> list[DiscoveredProject]:
        """Flatten project sequences, dropping duplicate ids.

        The last record for an id wins; its position is where the id was first seen.
        """
        merged: dict[str, DiscoveredProject] = {}
        for sequence in sequences:
            for project in sequence:
                merged[project.id] = project
        return list(merged.values())

    def add(self, project: DiscoveredProject, order_key: tuple = ()) -> None:
        """Record a project. A repeated id replaces the metadata but keeps the earliest order."""
        with self._lock:
            self._projects[project.id] = project
            previous = self._order.get(project.id)
            if previous is None or order_key < previous:
                self._order[project.id] = order_key

    def add_issue(self, issue: ScanIssue) -> None:
        with self._lock:
            self._issues.append(issue)

    def note_visited(self) -> None:
        with self._lock:
            self._visited += 1

    def note_truncated(self) -> None:
        with self._lock:
            self._truncated += 1

    def result(self, cancelled: bool = False) -> ScanResult:
        """Snapshot the accumulated state, projects sorted by order key then path."""
        with self._lock:
            ordered = sorted(
                self._projects.values(),
                key=lambda p: (self._order[p.id], p.path),
            )
            return ScanResult(
                projects=ordered,
                issues=list(self._issues),
                directories_visited=self._visited,
                truncated_branches=self._truncated,
                cancelled=cancelled,
            )
