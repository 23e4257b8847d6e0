"""VcsInspector: best-effort working tree metadata for a project root."""

from __future__ import annotations

import logging
from collections.abc import Callable

from pygit_scan.models import (
    IssueType,
    QueryResult,
    QueryType,
    Remote,
    ScanIssue,
    VcsInfo,
)
from pygit_scan.protocols import VcsQuerier

logger = logging.getLogger(__name__)

IssueCallback = Callable[[ScanIssue], None]


def parse_remotes(output: str) -> tuple[Remote, ...]:
    """Parse `git remote -v` output into unique (name, fetch url) pairs."""
    remotes: dict[str, Remote] = {}
    for line in output.splitlines():
        parts = line.split()
        if len(parts) < 2:
            continue
        if len(parts) >= 3 and parts[2] != '(fetch)':
            continue
        remotes.setdefault(parts[0], Remote(parts[0], parts[1]))
    return tuple(remotes.values())


class VcsInspector:
    """Collects branch, last commit, dirty flag and remotes; each one independently."""

    def __init__(
        self,
        querier: VcsQuerier,
        include_remotes: bool = True,
        on_issue: IssueCallback | None = None,
    ):
        self.querier = querier
        self.include_remotes = include_remotes
        self.on_issue = on_issue

    def inspect(
        self,
        path: str,
        should_stop: Callable[[], bool] | None = None,
        on_issue: IssueCallback | None = None,
    ) -> VcsInfo:
        """Query the working tree at path. Never raises; failed queries leave fields unset.

        should_stop is handed to each query and checked between them, so a
        cancelled scan abandons the running subprocess and starts no more.
        Queries abandoned that way are not reported. on_issue overrides the
        inspector's own callback for this call.
        """
        stop = should_stop or (lambda: False)
        report_to = on_issue or self.on_issue

        branch = last_commit = dirty = remotes = None

        if not stop():
            result = self._query(path, QueryType.BRANCH, self.querier.current_branch, stop, report_to)
            if result is not None:
                branch = result.output.strip() or None

        if not stop():
            result = self._query(path, QueryType.LAST_COMMIT, self.querier.last_commit, stop, report_to)
            if result is not None:
                last_commit = result.output.strip() or None

        if not stop():
            result = self._query(path, QueryType.STATUS, self.querier.status, stop, report_to)
            if result is not None:
                dirty = bool(result.output.strip())

        if self.include_remotes and not stop():
            result = self._query(path, QueryType.REMOTES, self.querier.remotes, stop, report_to)
            if result is not None:
                remotes = parse_remotes(result.output)

        return VcsInfo(branch=branch, last_commit=last_commit, dirty=dirty, remotes=remotes)

    def _query(
        self,
        path: str,
        query: QueryType,
        call: Callable[..., QueryResult],
        stop: Callable[[], bool],
        report_to: IssueCallback | None,
    ) -> QueryResult | None:
        """Run one query; return the result on success, None on any failure."""
        try:
            result = call(path, should_stop=stop)
        except Exception as e:
            issue = ScanIssue(path, IssueType.VCS_QUERY_FAILED, _operation(query), f"unexpected error: {e}")
        else:
            if result.success:
                return result
            if stop():
                return None
            issue_type = IssueType.TOOL_UNAVAILABLE if result.tool_missing else IssueType.VCS_QUERY_FAILED
            details = str(result.error).strip() if result.error else "query failed"
            issue = ScanIssue(path, issue_type, _operation(query), details)

        logger.debug("VCS %s failed for %s: %s", issue.operation, path, issue.details)
        if report_to is not None:
            report_to(issue)
        return None


def _operation(query: QueryType) -> str:
    return f"vcs:{query.name.lower()}"
