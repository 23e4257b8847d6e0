"""SummaryReporter: prints discovered projects and absorbed failures."""

from __future__ import annotations

from pygit_scan.models import DiscoveredProject, IssueType, ScanIssue, ScanRequest, ScanResult
from pygit_scan.output import SECTION_WIDTH
from pygit_scan.protocols import OutputHandler

ISSUE_TITLES = [
    (IssueType.NOT_FOUND, "\U0001f6ab MISSING DIRECTORIES"),
    (IssueType.ACCESS_DENIED, "\U0001f512 ACCESS DENIED"),
    (IssueType.LISTING_FAILED, "\U0001f4c2 LISTING FAILURES"),
    (IssueType.MANIFEST_UNREADABLE, "\U0001f4c4 UNREADABLE MANIFESTS"),
    (IssueType.MANIFEST_MALFORMED, "\U0001f4c4 MALFORMED MANIFESTS"),
    (IssueType.TOOL_UNAVAILABLE, "\U0001f527 GIT UNAVAILABLE"),
    (IssueType.VCS_QUERY_FAILED, "\U0001f33f GIT QUERIES FAILED"),
    (IssueType.UNEXPECTED, "\U0001f534 UNEXPECTED ERRORS"),
]


class SummaryReporter:
    """Generates and displays the scan report"""

    def __init__(self, output: OutputHandler, verbose: bool = False):
        self.output = output
        self.verbose = verbose

    def print_summary(self, result: ScanResult, request: ScanRequest):
        """Print projects, scan statistics, issue categories and recommendations."""
        self.output.section("╔" + "=" * SECTION_WIDTH + "╗")
        self.output.info("║" + "PROJECT SCAN".center(SECTION_WIDTH) + "║")
        self.output.info("╚" + "=" * SECTION_WIDTH + "╝")
        self.output.info("")

        if result.projects:
            self.output.success(f"Found {len(result.projects)} project(s)")
            self.output.info("")
            for project in result.projects:
                self._print_project(project)
        else:
            self.output.warning("No projects found")

        self.output.info("")
        self.output.info(f"Directories visited: {result.directories_visited}")
        if result.truncated_branches:
            self.output.info(
                f"Branches cut off at depth {request.max_depth}: {result.truncated_branches}"
            )
        if result.cancelled:
            self.output.warning("⏱ Scan was cancelled; results are partial")

        if result.has_issues():
            self._print_issues(result, request)

        self.output.info("")
        self.output.info("=" * SECTION_WIDTH)

    def _print_project(self, project: DiscoveredProject):
        self.output.info(f"\U0001f4c1 {project.name}")
        self.output.info(project.path, indent=2)
        vcs = project.vcs
        if vcs is None:
            return

        branch = vcs.branch or "(no branch)"
        if vcs.dirty is True:
            self.output.warning(f"\U0001f33f {branch} • uncommitted changes", indent=2)
        elif vcs.dirty is False:
            self.output.info(f"\U0001f33f {branch} • clean", indent=2)
        else:
            self.output.info(f"\U0001f33f {branch}", indent=2)

        if vcs.last_commit:
            self.output.info(f"↳ {vcs.last_commit}", indent=2)
        if self.verbose and vcs.remotes:
            for remote in vcs.remotes:
                self.output.info(f"⇄ {remote.name} {remote.url}", indent=2)

    def _print_issues(self, result: ScanResult, request: ScanRequest):
        self.output.info("")
        self.output.warning(f"⚠️  {len(result.issues)} problem(s) skipped during scan")
        self.output.info("")

        for issue_type, title in ISSUE_TITLES:
            issues = result.get_issues_by_type(issue_type)
            # Routine git failures (detached HEAD, empty repo) only show when verbose
            if issue_type is IssueType.VCS_QUERY_FAILED and not self.verbose:
                if issues:
                    self.output.info(f"{title}: {len(issues)} (use --verbose for details)")
                continue
            self._print_issue_category(title, issues)

        recommendations = []
        if result.get_issues_by_type(IssueType.TOOL_UNAVAILABLE):
            recommendations.append("Install git or make sure it is on PATH")
        if result.truncated_branches:
            recommendations.append(f"Raise --max-depth (currently {request.max_depth}) to look deeper")
        if result.get_issues_by_type(IssueType.ACCESS_DENIED):
            recommendations.append("Check permissions on the directories listed above")

        if recommendations:
            self.output.info("")
            self.output.info("\U0001f4a1 RECOMMENDATIONS:")
            for line in recommendations:
                self.output.info(f"• {line}")

    def _print_issue_category(self, title: str, issues: list[ScanIssue]):
        if not issues:
            return

        self.output.info(f"{title} ({len(issues)}):")
        self.output.info("-" * SECTION_WIDTH)
        for issue in issues:
            self.output.info(f"  {issue.path}")
            self.output.info(f"     ↳ {issue.operation}: {issue.details}")
        self.output.info("")
