"""ManifestReader: declared project names from package manifests."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable, Sequence
from typing import Any

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from pygit_scan.models import DEFAULT_MANIFEST_NAMES, IssueType, ManifestInfo, ScanIssue

logger = logging.getLogger(__name__)


def _name_from_pyproject(data: dict[str, Any]) -> Any:
    project = data.get('project')
    if isinstance(project, dict) and project.get('name'):
        return project['name']
    tool = data.get('tool')
    poetry = tool.get('poetry') if isinstance(tool, dict) else None
    return poetry.get('name') if isinstance(poetry, dict) else None


def _name_from_cargo(data: dict[str, Any]) -> Any:
    package = data.get('package')
    return package.get('name') if isinstance(package, dict) else None


def _name_from_top_level(data: dict[str, Any]) -> Any:
    return data.get('name')


_NAME_EXTRACTORS: dict[str, Callable[[dict[str, Any]], Any]] = {
    'pyproject.toml': _name_from_pyproject,
    'Cargo.toml': _name_from_cargo,
}


class ManifestReader:
    """Reads at most one well-known manifest per directory and extracts its `name`"""

    def __init__(
        self,
        manifest_names: Sequence[str] = DEFAULT_MANIFEST_NAMES,
        on_issue: Callable[[ScanIssue], None] | None = None,
    ):
        """manifest_names is ordered by priority; the first one present is used."""
        self.manifest_names = tuple(manifest_names)
        self.on_issue = on_issue

    def read_manifest(
        self,
        directory: str,
        on_issue: Callable[[ScanIssue], None] | None = None,
    ) -> ManifestInfo:
        """Return the declared name, or an empty ManifestInfo. Never raises.

        on_issue overrides the reader's own callback for this call.
        """
        report_to = on_issue or self.on_issue
        manifest_path = self._find(directory)
        if manifest_path is None:
            return ManifestInfo()

        filename = os.path.basename(manifest_path)
        try:
            with open(manifest_path, 'rb') as f:
                raw = f.read()
        except OSError as e:
            self._report(report_to, manifest_path, IssueType.MANIFEST_UNREADABLE, str(e))
            return ManifestInfo()

        try:
            text = raw.decode('utf-8-sig')
        except UnicodeDecodeError as e:
            self._report(report_to, manifest_path, IssueType.MANIFEST_UNREADABLE, str(e))
            return ManifestInfo()

        try:
            data = self._parse(filename, text)
        except (ValueError, RecursionError) as e:
            # RecursionError: pathologically nested arrays or tables
            self._report(report_to, manifest_path, IssueType.MANIFEST_MALFORMED, str(e))
            return ManifestInfo()

        if not isinstance(data, dict):
            return ManifestInfo()

        name = _NAME_EXTRACTORS.get(filename, _name_from_top_level)(data)
        if not isinstance(name, str) or not name.strip():
            return ManifestInfo()
        return ManifestInfo(name=name.strip(), source=filename)

    def _find(self, directory: str) -> str | None:
        for name in self.manifest_names:
            candidate = os.path.join(directory, name)
            if os.path.isfile(candidate):
                return candidate
        return None

    def _parse(self, filename: str, text: str) -> Any:
        if filename.endswith('.toml'):
            return tomllib.loads(text)
        return json.loads(text)

    @staticmethod
    def _report(
        report_to: Callable[[ScanIssue], None] | None,
        path: str,
        issue_type: IssueType,
        details: str,
    ) -> None:
        logger.warning("Could not read manifest %s: %s", path, details)
        if report_to is not None:
            report_to(ScanIssue(path, issue_type, 'manifest', details))
