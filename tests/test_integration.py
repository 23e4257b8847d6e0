"""Integration tests using real git repositories.

Builds small repositories with the git CLI and scans them end-to-end
through GitCommandQuerier.
"""

import json
from pathlib import Path

import pytest
from conftest import git, make_repo, requires_git

from pygit_scan import (
    GitCommandQuerier,
    IssueType,
    ScanOrchestrator,
    ScanRequest,
    main,
    scan_projects,
)

pytestmark = requires_git


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _init_repo(path: Path, branch: str = "main") -> Path:
    path.mkdir(parents=True, exist_ok=True)
    git(path, "init", "-b", branch)
    git(path, "config", "user.email", "test@test.com")
    git(path, "config", "user.name", "Test")
    return path


def _commit_file(repo: Path, filename: str, content: str, message: str) -> str:
    """Create/overwrite a file and commit it. Returns the abbreviated hash."""
    (repo / filename).write_text(content)
    git(repo, "add", filename)
    git(repo, "commit", "-m", message)
    return git(repo, "rev-parse", "--short", "HEAD")


@pytest.fixture
def committed_repo(tmp_path: Path) -> Path:
    repo = _init_repo(tmp_path / "workspace" / "app")
    _commit_file(repo, "README.md", "hello", "Initial commit")
    return repo


# ---------------------------------------------------------------------------
# GitCommandQuerier
# ---------------------------------------------------------------------------

class TestGitCommandQuerier:
    def test_branch_commit_and_clean_status(self, committed_repo: Path):
        querier = GitCommandQuerier(timeout=30)
        sha = git(committed_repo, "rev-parse", "--short", "HEAD")

        assert querier.current_branch(str(committed_repo)).output == "main"
        assert querier.last_commit(str(committed_repo)).output == f"{sha} Initial commit"
        status = querier.status(str(committed_repo))
        assert status.success is True
        assert status.output.strip() == ""

    def test_untracked_file_is_dirty(self, committed_repo: Path):
        (committed_repo / "scratch.txt").write_text("wip")
        assert GitCommandQuerier().status(str(committed_repo)).output.strip() != ""

    def test_detached_head_has_no_branch(self, committed_repo: Path):
        git(committed_repo, "checkout", "--detach")
        result = GitCommandQuerier().current_branch(str(committed_repo))
        assert result.success is False
        assert result.tool_missing is False

    def test_empty_repository_has_no_last_commit(self, tmp_path: Path):
        repo = _init_repo(tmp_path / "empty")
        querier = GitCommandQuerier()
        assert querier.last_commit(str(repo)).success is False
        # HEAD still points at the unborn branch
        assert querier.current_branch(str(repo)).output == "main"

    def test_not_a_repository(self, tmp_path: Path):
        plain = tmp_path / "plain"
        plain.mkdir()
        result = GitCommandQuerier().status(str(plain))
        assert result.success is False
        assert result.error is not None

    def test_remotes_listed(self, committed_repo: Path):
        git(committed_repo, "remote", "add", "origin", "https://example.com/acme/app.git")
        output = GitCommandQuerier().remotes(str(committed_repo)).output
        assert "origin\thttps://example.com/acme/app.git (fetch)" in output

    def test_missing_git_executable(self, committed_repo: Path, monkeypatch):
        from git import Git

        monkeypatch.setattr(Git, "GIT_PYTHON_GIT_EXECUTABLE", "/nonexistent/bin/git")
        result = GitCommandQuerier().current_branch(str(committed_repo))
        assert result.success is False
        assert result.output == ""


# ---------------------------------------------------------------------------
# End-to-end scans
# ---------------------------------------------------------------------------

class TestEndToEndScan:
    def test_scan_collects_metadata(self, committed_repo: Path):
        git(committed_repo, "remote", "add", "origin", "https://example.com/acme/app.git")
        (committed_repo / "package.json").write_text('{"name": "acme-app"}')

        projects = scan_projects([str(committed_repo.parent)])
        assert len(projects) == 1
        project = projects[0]
        assert project.name == "acme-app"
        assert project.vcs.branch == "main"
        assert project.vcs.last_commit.endswith("Initial commit")
        # package.json is untracked
        assert project.vcs.dirty is True
        assert [r.name for r in project.vcs.remotes] == ["origin"]

    def test_scan_does_not_modify_repository(self, committed_repo: Path):
        (committed_repo / "README.md").write_text("changed")
        before = git(committed_repo, "status", "--porcelain")
        scan_projects([str(committed_repo.parent)])
        assert git(committed_repo, "status", "--porcelain") == before

    def test_mixed_workspace(self, tmp_path: Path, committed_repo: Path):
        _init_repo(tmp_path / "workspace" / "group" / "fresh")
        make_repo(tmp_path / "workspace" / "node_modules" / "dep")
        missing = tmp_path / "does-not-exist"

        request = ScanRequest(roots=(str(tmp_path / "workspace"), str(missing)), max_workers=4)
        result = ScanOrchestrator(request).scan()

        names = sorted(p.name for p in result.projects)
        assert names == ["app", "fresh"]
        fresh = next(p for p in result.projects if p.name == "fresh")
        assert fresh.vcs.last_commit is None
        assert fresh.vcs.dirty is False
        assert fresh.vcs.remotes == ()
        assert len(result.get_issues_by_type(IssueType.NOT_FOUND)) == 1
        assert any(i.operation == "vcs:last_commit" for i in result.issues)

    def test_nested_submodule_style_repo_hidden(self, committed_repo: Path):
        _init_repo(committed_repo / "libs" / "inner")
        projects = scan_projects([str(committed_repo.parent)])
        assert [p.name for p in projects] == ["app"]


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

class TestCli:
    def test_json_output(self, committed_repo: Path, capsys, monkeypatch):
        monkeypatch.chdir(committed_repo.parent)
        monkeypatch.setenv("HOME", str(committed_repo.parent))
        with pytest.raises(SystemExit) as exc:
            main([str(committed_repo.parent), "--json", "--no-remotes"])
        assert exc.value.code == 0

        data = json.loads(capsys.readouterr().out)
        assert [p["name"] for p in data["projects"]] == ["app"]
        assert data["projects"][0]["vcs"]["branch"] == "main"
        assert data["projects"][0]["vcs"]["remotes"] is None
        assert data["cancelled"] is False

    def test_console_output(self, committed_repo: Path, capsys, monkeypatch):
        monkeypatch.chdir(committed_repo.parent)
        monkeypatch.setenv("HOME", str(committed_repo.parent))
        with pytest.raises(SystemExit) as exc:
            main([str(committed_repo.parent)])
        assert exc.value.code == 0
        out = capsys.readouterr().out
        assert "Found 1 project(s)" in out
        assert str(committed_repo.resolve()) in out
