"""Domain models: enums, dataclasses, and the scan request."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any

DEFAULT_MAX_DEPTH = 5
DEFAULT_PRUNE_NAMES = frozenset({"node_modules", "__pycache__", "venv", "bower_components"})
DEFAULT_MANIFEST_NAMES = ("package.json", "pyproject.toml", "Cargo.toml")


class IssueType(Enum):
    """Categories of tolerated scan failures"""
    ACCESS_DENIED = auto()
    NOT_FOUND = auto()
    LISTING_FAILED = auto()
    MANIFEST_UNREADABLE = auto()
    MANIFEST_MALFORMED = auto()
    VCS_QUERY_FAILED = auto()
    TOOL_UNAVAILABLE = auto()
    UNEXPECTED = auto()


class QueryType(Enum):
    """Read-only VCS queries"""
    BRANCH = auto()
    LAST_COMMIT = auto()
    STATUS = auto()
    REMOTES = auto()


@dataclass(frozen=True)
class QueryResult:
    """Outcome of a single VCS query"""
    success: bool
    query: QueryType
    output: str = ""
    error: Exception | None = None
    tool_missing: bool = False


@dataclass(frozen=True)
class Remote:
    name: str
    url: str


@dataclass(frozen=True)
class VcsInfo:
    """Best-effort working tree metadata; every field may be unset independently."""
    branch: str | None = None
    last_commit: str | None = None
    dirty: bool | None = None
    remotes: tuple[Remote, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            'branch': self.branch,
            'last_commit': self.last_commit,
            'dirty': self.dirty,
            'remotes': (
                None if self.remotes is None
                else [{'name': r.name, 'url': r.url} for r in self.remotes]
            ),
        }


@dataclass(frozen=True)
class ManifestInfo:
    """Name declared by a manifest file, and which file declared it"""
    name: str | None = None
    source: str | None = None


@dataclass(frozen=True)
class DiscoveredProject:
    """One detected project root"""
    id: str
    name: str
    path: str
    vcs: VcsInfo | None = None
    manifest: str | None = None
    scanned_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict for JSON output."""
        return {
            'id': self.id,
            'name': self.name,
            'path': self.path,
            'manifest': self.manifest,
            'vcs': self.vcs.to_dict() if self.vcs is not None else None,
            'scanned_at': self.scanned_at.isoformat(),
        }


@dataclass(frozen=True)
class ScanIssue:
    """Structured notice for a failure the scan absorbed"""
    path: str
    issue_type: IssueType
    operation: str
    details: str
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"[{self.timestamp:%H:%M:%S}] {self.path} ({self.operation}): {self.details}"


@dataclass
class ScanResult:
    """Outcome of one scan invocation"""
    projects: list[DiscoveredProject] = field(default_factory=list)
    issues: list[ScanIssue] = field(default_factory=list)
    directories_visited: int = 0
    truncated_branches: int = 0
    cancelled: bool = False

    def get_issues_by_type(self, issue_type: IssueType) -> list[ScanIssue]:
        """Filter issues by category (e.g. ACCESS_DENIED)."""
        return [issue for issue in self.issues if issue.issue_type == issue_type]

    def has_issues(self) -> bool:
        return len(self.issues) > 0

    def project_ids(self) -> set[str]:
        return {project.id for project in self.projects}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict for JSON output."""
        return {
            'projects': [p.to_dict() for p in self.projects],
            'issues': [
                {
                    'path': i.path,
                    'type': i.issue_type.name,
                    'operation': i.operation,
                    'details': i.details,
                    'timestamp': i.timestamp.isoformat(),
                }
                for i in self.issues
            ],
            'directories_visited': self.directories_visited,
            'truncated_branches': self.truncated_branches,
            'cancelled': self.cancelled,
        }


@dataclass(frozen=True)
class ScanRequest:
    """Everything a scan needs, passed explicitly instead of read from ambient state.

    Construction validates the request; an invalid one raises ValueError.
    """
    roots: tuple[str, ...]
    max_depth: int = DEFAULT_MAX_DEPTH
    prune_names: frozenset[str] = DEFAULT_PRUNE_NAMES
    max_workers: int = field(default_factory=lambda: min(os.cpu_count() or 4, 8))
    command_timeout: float = 10.0
    timeout: float | None = None
    manifest_names: tuple[str, ...] = DEFAULT_MANIFEST_NAMES
    include_vcs: bool = True
    include_remotes: bool = True

    def __post_init__(self):
        if isinstance(self.roots, str):
            raise ValueError("roots must be a sequence of paths, not a single string")
        object.__setattr__(self, 'roots', tuple(self.roots))
        object.__setattr__(self, 'prune_names', frozenset(self.prune_names))
        object.__setattr__(self, 'manifest_names', tuple(self.manifest_names))

        if not self.roots:
            raise ValueError("at least one root directory is required")
        for root in self.roots:
            if not isinstance(root, str) or not root.strip():
                raise ValueError(f"invalid root path: {root!r}")
            if '\0' in root:
                raise ValueError(f"root path contains a NUL byte: {root!r}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.command_timeout <= 0:
            raise ValueError(f"command_timeout must be > 0, got {self.command_timeout}")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be > 0 when set, got {self.timeout}")

    def with_updates(self, **kwargs) -> ScanRequest:
        """Return a new ScanRequest with the given fields replaced."""
        current = {f.name: getattr(self, f.name) for f in self.__dataclass_fields__.values()}
        current.update(kwargs)
        return ScanRequest(**current)
