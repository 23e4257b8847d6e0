"""DirectoryWalker: bounded, concurrent discovery of project roots."""

from __future__ import annotations

import concurrent.futures
import logging
import os
import threading
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from tqdm import tqdm

from pygit_scan.aggregator import ResultAggregator
from pygit_scan.inspector import VcsInspector
from pygit_scan.manifest import ManifestReader
from pygit_scan.models import DiscoveredProject, IssueType, ScanIssue, ScanRequest, ScanResult
from pygit_scan.scanner import PathAccessGate, RepositoryRootDetector, is_pruned

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.1
# How long a stopped walk waits for tasks that were already running.
SHUTDOWN_GRACE = 2.0


def canonical_path(path: str) -> str:
    """Absolute, symlink-free form of path; used as the project id."""
    return os.path.realpath(os.path.expanduser(path))


@dataclass(frozen=True)
class _DirTask:
    path: str
    depth: int
    root_index: int


@dataclass
class _WalkState:
    """Per-walk state shared by the scheduling loop and the worker threads"""
    aggregator: ResultAggregator
    stop: threading.Event = field(default_factory=threading.Event)
    cancel_event: threading.Event | None = None
    deadline: float | None = None

    def stopped(self) -> bool:
        """True once the walk must wind down; latches the first cancel or timeout seen."""
        if self.stop.is_set():
            return True
        if (
            (self.cancel_event is not None and self.cancel_event.is_set())
            or (self.deadline is not None and time.monotonic() >= self.deadline)
        ):
            self.stop.set()
            return True
        return False


class DirectoryWalker:
    """Walks root directories with one task per directory on a bounded thread pool.

    A directory holding the VCS marker becomes a DiscoveredProject and its
    subtree is never visited. Every other directory fans out into its
    unpruned, non-symlink subdirectories until max_depth is reached. Failures
    are recorded as ScanIssues and only cut off the branch they occur in.
    """

    def __init__(
        self,
        request: ScanRequest,
        manifest_reader: ManifestReader,
        inspector: VcsInspector | None = None,
        gate: PathAccessGate | None = None,
        detector: RepositoryRootDetector | None = None,
        show_progress: bool = False,
    ):
        self.request = request
        self.manifest_reader = manifest_reader
        self.inspector = inspector
        self.gate = gate or PathAccessGate()
        self.detector = detector or RepositoryRootDetector()
        self.show_progress = show_progress

    def walk(
        self,
        roots: Sequence[str] | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ScanResult:
        """Scan roots (default: the request's roots) and return every project found.

        Setting cancel_event, or exceeding the request timeout, stops the walk;
        whatever was aggregated so far is returned with cancelled=True. Tasks
        already running see the stop through their VCS queries and are given
        SHUTDOWN_GRACE seconds to finish before the result is taken.
        """
        roots = list(roots) if roots is not None else list(self.request.roots)
        state = _WalkState(
            ResultAggregator(),
            cancel_event=cancel_event,
            deadline=(
                time.monotonic() + self.request.timeout
                if self.request.timeout is not None else None
            ),
        )

        executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=self.request.max_workers,
            thread_name_prefix='pygit-scan',
        )
        pending: dict[concurrent.futures.Future, _DirTask] = {}
        scheduled: set[str] = set()

        def submit(task: _DirTask) -> None:
            if task.path in scheduled:
                return
            scheduled.add(task.path)
            pending[executor.submit(self._visit, task, state)] = task

        try:
            with tqdm(desc="Scanning", unit="dir", disable=not self.show_progress) as pbar:
                if not state.stopped():
                    for index, root in enumerate(roots):
                        submit(_DirTask(canonical_path(root), 0, index))

                while pending:
                    if state.stopped():
                        logger.warning("Scan cancelled with %d directories pending", len(pending))
                        for future in pending:
                            future.cancel()
                        break

                    done, _ = concurrent.futures.wait(
                        pending,
                        timeout=POLL_INTERVAL,
                        return_when=concurrent.futures.FIRST_COMPLETED,
                    )
                    for future in done:
                        task = pending.pop(future)
                        pbar.update(1)
                        try:
                            children = future.result()
                        except Exception as e:
                            logger.exception("Unexpected error scanning %s", task.path)
                            state.aggregator.add_issue(ScanIssue(
                                task.path, IssueType.UNEXPECTED, 'scan', f"Unexpected error: {e}"
                            ))
                            continue
                        for child in children:
                            submit(child)
        except BaseException:
            state.stop.set()
            raise
        finally:
            executor.shutdown(wait=not state.stop.is_set(), cancel_futures=True)
            running = [future for future in pending if not future.done()]
            if running:
                _, stragglers = concurrent.futures.wait(running, timeout=SHUTDOWN_GRACE)
                if stragglers:
                    logger.warning(
                        "%d scan task(s) still running %.1fs after cancellation",
                        len(stragglers), SHUTDOWN_GRACE,
                    )

        result = state.aggregator.result(cancelled=state.stop.is_set())
        logger.debug(
            "Scan finished: %d projects, %d issues, %d directories",
            len(result.projects), len(result.issues), result.directories_visited,
        )
        return result

    def _visit(self, task: _DirTask, state: _WalkState) -> list[_DirTask]:
        """Classify one directory. Returns the child tasks to schedule (none for a root)."""
        if state.stopped() or task.depth > self.request.max_depth:
            return []

        if not self.gate.can_access(task.path):
            if os.path.lexists(task.path):
                issue_type, details = IssueType.ACCESS_DENIED, "directory is not readable"
            else:
                issue_type, details = IssueType.NOT_FOUND, "directory does not exist"
            logger.warning("Skipping %s: %s", task.path, details)
            state.aggregator.add_issue(ScanIssue(task.path, issue_type, 'access', details))
            return []

        try:
            with os.scandir(task.path) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.warning("Could not list %s: %s", task.path, e)
            state.aggregator.add_issue(ScanIssue(
                task.path, IssueType.LISTING_FAILED, 'list', str(e)
            ))
            return []

        state.aggregator.note_visited()

        if self.detector.is_project_root(entries):
            project = self._build_project(task.path, state)
            state.aggregator.add(project, order_key=(task.root_index,))
            return []

        children = []
        for entry in entries:
            if is_pruned(entry.name, self.request.prune_names):
                continue
            try:
                if not entry.is_dir(follow_symlinks=False):
                    continue
            except OSError:
                continue
            children.append(_DirTask(entry.path, task.depth + 1, task.root_index))

        if children and task.depth + 1 > self.request.max_depth:
            logger.debug("Depth limit reached at %s; not descending", task.path)
            state.aggregator.note_truncated()
            return []
        return children

    def _build_project(self, path: str, state: _WalkState) -> DiscoveredProject:
        """Combine manifest name and VCS metadata into the single record for a root."""
        on_issue = state.aggregator.add_issue
        manifest = self.manifest_reader.read_manifest(path, on_issue=on_issue)
        vcs = None
        if self.inspector is not None:
            vcs = self.inspector.inspect(path, should_stop=state.stopped, on_issue=on_issue)
        return DiscoveredProject(
            id=path,
            name=manifest.name or os.path.basename(path) or path,
            path=path,
            vcs=vcs,
            manifest=manifest.source,
            scanned_at=datetime.now(),
        )
