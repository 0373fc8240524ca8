"""Tests for branch module (current branch, rebase fallbacks)."""

import io
import logging
from pathlib import Path
from unittest.mock import MagicMock

from git import Repo
from git.exc import GitCommandError

from mob_githooks.branch import current_branch, parse_rebasing_branch, rebase_head_name
from mob_githooks.log import new_logger


def _log(stream: io.StringIO | None = None):
    return new_logger(logging.DEBUG, stream=stream or io.StringIO())


def _detached_repo(git_dir: Path) -> MagicMock:
    repo = MagicMock()
    repo.head.is_detached = True
    repo.git_dir = str(git_dir)
    return repo


def test_parse_rebasing_branch() -> None:
    out = "* (no branch, rebasing feature/super-awesome-4)\n  develop\n  main\n"
    assert parse_rebasing_branch(out) == "feature/super-awesome-4"


def test_parse_rebasing_branch_not_rebasing() -> None:
    assert parse_rebasing_branch("  develop\n* main\n") is None
    assert parse_rebasing_branch("* (HEAD detached at 1a2b3c4)\n  main\n") is None


def test_rebase_head_name_merge_backend(tmp_path: Path) -> None:
    (tmp_path / "rebase-merge").mkdir()
    (tmp_path / "rebase-merge" / "head-name").write_text("refs/heads/feature/x\n")
    assert rebase_head_name(tmp_path) == "feature/x"


def test_rebase_head_name_apply_backend(tmp_path: Path) -> None:
    (tmp_path / "rebase-apply").mkdir()
    (tmp_path / "rebase-apply" / "head-name").write_text("refs/heads/GH-9\n")
    assert rebase_head_name(tmp_path) == "GH-9"


def test_rebase_head_name_detached_or_missing(tmp_path: Path) -> None:
    assert rebase_head_name(tmp_path) is None
    (tmp_path / "rebase-merge").mkdir()
    (tmp_path / "rebase-merge" / "head-name").write_text("detached HEAD\n")
    assert rebase_head_name(tmp_path) is None


def test_current_branch_attached() -> None:
    repo = MagicMock()
    repo.head.is_detached = False
    repo.active_branch.name = "GH-123"
    assert current_branch(repo, _log()) == "GH-123"
    repo.git.branch.assert_not_called()


def test_current_branch_from_real_repo(make_repo) -> None:
    """HEAD on an unborn branch still names the branch."""
    with Repo(make_repo(branch="feature/GH-7")) as repo:
        assert current_branch(repo, _log()) == "feature/GH-7"


def test_current_branch_rebase_state(tmp_path: Path) -> None:
    (tmp_path / "rebase-merge").mkdir()
    (tmp_path / "rebase-merge" / "head-name").write_text("refs/heads/feature/x\n")
    repo = _detached_repo(tmp_path)
    assert current_branch(repo, _log()) == "feature/x"
    repo.git.branch.assert_not_called()


def test_current_branch_branch_list_fallback(tmp_path: Path) -> None:
    repo = _detached_repo(tmp_path)
    repo.git.branch.return_value = "* (no branch, rebasing feature/y)\n  main"
    assert current_branch(repo, _log()) == "feature/y"
    repo.git.branch.assert_called_once_with("--list")


def test_current_branch_not_found(tmp_path: Path) -> None:
    stream = io.StringIO()
    repo = _detached_repo(tmp_path)
    repo.git.branch.return_value = "* (HEAD detached at 1a2b3c4)\n  main"
    assert current_branch(repo, _log(stream)) == ""
    assert "could not find the current branch" in stream.getvalue()


def test_current_branch_git_error(tmp_path: Path) -> None:
    stream = io.StringIO()
    repo = _detached_repo(tmp_path)
    repo.git.branch.side_effect = GitCommandError("git branch", 128)
    assert current_branch(repo, _log(stream)) == ""
    assert "could not list branches" in stream.getvalue()
