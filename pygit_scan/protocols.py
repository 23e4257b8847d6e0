"""Protocols for the seams that tests replace with fakes."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from pygit_scan.models import QueryResult

StopCheck = Callable[[], bool]


class VcsQuerier(Protocol):
    """Read-only version-control queries against a working directory.

    Implementations report failure through QueryResult instead of raising.
    should_stop is polled while a query runs; once it returns True the query
    is abandoned and reported as failed.
    """

    def current_branch(self, path: str, should_stop: StopCheck | None = None) -> QueryResult: ...
    def last_commit(self, path: str, should_stop: StopCheck | None = None) -> QueryResult: ...
    def status(self, path: str, should_stop: StopCheck | None = None) -> QueryResult: ...
    def remotes(self, path: str, should_stop: StopCheck | None = None) -> QueryResult: ...


class OutputHandler(Protocol):
    """Protocol for handling user-facing output"""

    def info(self, message: str, indent: int = 0) -> None: ...
    def success(self, message: str, indent: int = 0) -> None: ...
    def warning(self, message: str, indent: int = 0) -> None: ...
    def error(self, message: str, indent: int = 0) -> None: ...
    def section(self, title: str) -> None: ...
    def debug(self, message: str) -> None: ...
