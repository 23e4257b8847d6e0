"""Per-directory checks: access gate, project root detection, pruning policy."""

from __future__ import annotations

import os
from collections.abc import Collection, Iterable
from typing import Protocol

VCS_MARKER = '.git'
HIDDEN_PREFIX = '.'


class DirEntryLike(Protocol):
    name: str

    def is_dir(self, *, follow_symlinks: bool = True) -> bool: ...


class PathAccessGate:
    """Guards every directory read so one unreadable branch is skipped, not fatal"""

    @staticmethod
    def can_access(path: str) -> bool:
        """Return True if path is a directory we can list and enter. Never raises."""
        try:
            return os.path.isdir(path) and os.access(path, os.R_OK | os.X_OK)
        except (OSError, ValueError):
            return False


class RepositoryRootDetector:
    """Classifies a directory as a project root from its already-listed entries"""

    def __init__(self, marker: str = VCS_MARKER):
        self.marker = marker

    def is_project_root(self, entries: Iterable[DirEntryLike]) -> bool:
        """True iff the entries contain a *directory* named like the VCS marker.

        A marker that is a plain file (submodule or worktree pointer) does not count.
        """
        for entry in entries:
            if entry.name != self.marker:
                continue
            try:
                return entry.is_dir()
            except OSError:
                return False
        return False


def is_pruned(name: str, prune_names: Collection[str]) -> bool:
    """Return True if a child directory must not be descended into."""
    return name.startswith(HIDDEN_PREFIX) or name in prune_names
