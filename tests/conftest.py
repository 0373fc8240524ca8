from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

MakeRepo = Callable[..., Path]


@pytest.fixture
def make_repo(tmp_path: Path) -> MakeRepo:
    """Factory for a minimal non-bare repository (enough for GitPython to open) with HEAD on branch."""

    def _make(branch: str = "main", config: str = "", name: str = "repo") -> Path:
        path = tmp_path / name
        git_dir = path / ".git"
        (git_dir / "objects").mkdir(parents=True)
        (git_dir / "refs" / "heads").mkdir(parents=True)
        (git_dir / "HEAD").write_text(f"ref: refs/heads/{branch}\n")
        (git_dir / "config").write_text(
            "[core]\n\trepositoryformatversion = 0\n\tfilemode = true\n\tbare = false\n" + config
        )
        return path

    return _make
