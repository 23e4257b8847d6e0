"""Shared fakes and fixtures."""

import shutil
import subprocess
from pathlib import Path

import pytest

from pygit_scan import QueryResult, QueryType

DEFAULT_REMOTES = (
    "origin\thttps://example.com/acme/repo.git (fetch)\n"
    "origin\thttps://example.com/acme/repo.git (push)"
)


class FakeVcsQuerier:
    """Fake VCS querier returning canned output per query type."""

    def __init__(
        self,
        *,
        branch: str = "main",
        last_commit: str = "abc1234 Initial commit",
        status: str = "",
        remotes: str = DEFAULT_REMOTES,
        fail: tuple = (),
        missing_tool: tuple = (),
        raise_on: tuple = (),
    ):
        self.outputs = {
            QueryType.BRANCH: branch,
            QueryType.LAST_COMMIT: last_commit,
            QueryType.STATUS: status,
            QueryType.REMOTES: remotes,
        }
        self.fail = set(fail)
        self.missing_tool = set(missing_tool)
        self.raise_on = set(raise_on)
        self.calls: list[tuple[QueryType, str]] = []

    def _answer(self, query: QueryType, path: str) -> QueryResult:
        self.calls.append((query, path))
        if query in self.raise_on:
            raise RuntimeError(f"{query.name} exploded")
        if query in self.missing_tool:
            return QueryResult(False, query, error=FileNotFoundError("git"), tool_missing=True)
        if query in self.fail:
            return QueryResult(False, query, error=RuntimeError(f"{query.name} failed"))
        return QueryResult(True, query, self.outputs[query])

    def current_branch(self, path: str, should_stop=None) -> QueryResult:
        return self._answer(QueryType.BRANCH, path)

    def last_commit(self, path: str, should_stop=None) -> QueryResult:
        return self._answer(QueryType.LAST_COMMIT, path)

    def status(self, path: str, should_stop=None) -> QueryResult:
        return self._answer(QueryType.STATUS, path)

    def remotes(self, path: str, should_stop=None) -> QueryResult:
        return self._answer(QueryType.REMOTES, path)


@pytest.fixture
def make_querier():
    """Factory for FakeVcsQuerier instances."""
    return FakeVcsQuerier


@pytest.fixture
def fake_querier() -> FakeVcsQuerier:
    return FakeVcsQuerier()


def make_repo(path: Path) -> Path:
    """Create a directory that looks like a project root (has a .git directory)."""
    (path / ".git").mkdir(parents=True)
    return path


requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")


def git(cwd: Path, *args: str) -> str:
    """Run a git command and return stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()
