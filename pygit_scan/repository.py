"""GitPython-backed implementation of the read-only VCS queries."""

from __future__ import annotations

import logging
import os
import subprocess
import time

# Without this GitPython refuses to import when no git executable is on PATH;
# a missing tool must surface per query as TOOL_UNAVAILABLE instead.
os.environ.setdefault('GIT_PYTHON_REFRESH', 'quiet')

from git import Git  # noqa: E402
from git.compat import defenc  # noqa: E402
from git.exc import GitCommandError, GitCommandNotFound  # noqa: E402

from pygit_scan.models import QueryResult, QueryType  # noqa: E402
from pygit_scan.protocols import StopCheck  # noqa: E402

# Keeps `git status` from refreshing (writing) the index.
READ_ONLY_ENV = {'GIT_OPTIONAL_LOCKS': '0'}

# How often a running command checks for cancellation and its deadline.
POLL_INTERVAL = 0.1


class GitCommandQuerier:
    """Runs read-only git subcommands with the target directory as working dir"""

    def __init__(self, timeout: float = 10.0):
        """Create a querier whose commands are killed after `timeout` seconds."""
        self.timeout = timeout
        self._logger = logging.getLogger(__name__)

    def current_branch(self, path: str, should_stop: StopCheck | None = None) -> QueryResult:
        """Short name of the symbolic ref HEAD points at; fails on detached HEAD."""
        return self._run(path, QueryType.BRANCH, should_stop, 'symbolic_ref', '--short', '-q', 'HEAD')

    def last_commit(self, path: str, should_stop: StopCheck | None = None) -> QueryResult:
        """Abbreviated hash and subject of the most recent commit."""
        return self._run(path, QueryType.LAST_COMMIT, should_stop, 'log', '-1', '--pretty=format:%h %s')

    def status(self, path: str, should_stop: StopCheck | None = None) -> QueryResult:
        """Porcelain status; empty output means a clean working tree."""
        return self._run(path, QueryType.STATUS, should_stop, 'status', '--porcelain')

    def remotes(self, path: str, should_stop: StopCheck | None = None) -> QueryResult:
        """Configured remotes as printed by `git remote -v`."""
        return self._run(path, QueryType.REMOTES, should_stop, 'remote', '-v')

    def _run(
        self,
        path: str,
        query: QueryType,
        should_stop: StopCheck | None,
        command: str,
        *args: str,
    ) -> QueryResult:
        """Start the command as a process and wait for it, killing it on cancel or timeout."""
        try:
            handle = getattr(Git(path), command)(*args, as_process=True, env=READ_ONLY_ENV)
        except GitCommandNotFound as e:
            self._logger.debug("git executable unavailable for %s: %s", path, e)
            return QueryResult(False, query, error=e, tool_missing=True)
        except OSError as e:
            self._logger.debug("could not run git %s in %s: %s", command, path, e)
            return QueryResult(False, query, error=e)

        proc = handle.proc
        deadline = time.monotonic() + self.timeout
        while True:
            try:
                stdout, stderr = proc.communicate(timeout=POLL_INTERVAL)
                break
            except subprocess.TimeoutExpired:
                if should_stop is not None and should_stop():
                    reason = "cancelled"
                elif time.monotonic() >= deadline:
                    reason = f"timed out after {self.timeout}s"
                else:
                    continue
            proc.kill()
            proc.communicate()
            self._logger.debug("git %s in %s %s", command, path, reason)
            return QueryResult(False, query, error=GitCommandError(handle.args, None, reason))

        if proc.returncode != 0:
            error = GitCommandError(handle.args, proc.returncode, stderr)
            self._logger.debug("git %s failed in %s: %s", command, path, error)
            return QueryResult(False, query, error=error)

        output = stdout.decode(defenc, errors='replace')
        if output.endswith('\n'):
            output = output[:-1]
        return QueryResult(True, query, output)
