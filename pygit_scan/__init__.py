"""
pygit-scan: Project Discovery Scanner

Recursively discovers git project roots under a set of directories and
collects lightweight metadata (declared name, branch, last commit, dirty
state) for each one.
"""

from colorama import init as colorama_init

colorama_init(autoreset=True)

__version__ = "1.0.0"

# Re-export public API so `from pygit_scan import X` keeps working.
from pygit_scan.aggregator import ResultAggregator  # noqa: E402
from pygit_scan.cli import main  # noqa: E402
from pygit_scan.config import create_argument_parser, load_config_file  # noqa: E402
from pygit_scan.inspector import VcsInspector, parse_remotes  # noqa: E402
from pygit_scan.manifest import ManifestReader  # noqa: E402
from pygit_scan.models import (  # noqa: E402
    DEFAULT_MANIFEST_NAMES,
    DEFAULT_MAX_DEPTH,
    DEFAULT_PRUNE_NAMES,
    DiscoveredProject,
    IssueType,
    ManifestInfo,
    QueryResult,
    QueryType,
    Remote,
    ScanIssue,
    ScanRequest,
    ScanResult,
    VcsInfo,
)
from pygit_scan.orchestrator import ScanOrchestrator, scan_projects  # noqa: E402
from pygit_scan.output import SECTION_WIDTH, ConsoleOutputHandler, NullOutputHandler  # noqa: E402
from pygit_scan.protocols import OutputHandler, VcsQuerier  # noqa: E402
from pygit_scan.reporter import SummaryReporter  # noqa: E402
from pygit_scan.repository import GitCommandQuerier  # noqa: E402
from pygit_scan.scanner import PathAccessGate, RepositoryRootDetector, is_pruned  # noqa: E402
from pygit_scan.walker import DirectoryWalker, canonical_path  # noqa: E402

__all__ = [
    "__version__",
    # Models
    "DEFAULT_MANIFEST_NAMES",
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_PRUNE_NAMES",
    "DiscoveredProject",
    "IssueType",
    "ManifestInfo",
    "QueryResult",
    "QueryType",
    "Remote",
    "ScanIssue",
    "ScanRequest",
    "ScanResult",
    "VcsInfo",
    # Protocols
    "OutputHandler",
    "VcsQuerier",
    # Implementations
    "GitCommandQuerier",
    "ConsoleOutputHandler",
    "NullOutputHandler",
    "SECTION_WIDTH",
    # Scanner components
    "DirectoryWalker",
    "ManifestReader",
    "PathAccessGate",
    "RepositoryRootDetector",
    "ResultAggregator",
    "VcsInspector",
    "canonical_path",
    "is_pruned",
    "parse_remotes",
    # Services
    "ScanOrchestrator",
    "SummaryReporter",
    "scan_projects",
    # Config / CLI
    "create_argument_parser",
    "load_config_file",
    "main",
]
