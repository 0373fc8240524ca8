"""Determine the current branch name, including while an interactive rebase is in progress."""

from __future__ import annotations

import re
from pathlib import Path
from typing import TYPE_CHECKING

from git.exc import GitCommandError

if TYPE_CHECKING:
    from git import Repo

    from .log import HookLog

# `git branch --list` during a rebase: "* (no branch, rebasing feature/super-awesome-4)"
_RE_REBASING = re.compile(r"\* \(no branch, rebasing ([^)]+)\)")

# Files git keeps while rebasing, holding e.g. "refs/heads/feature/x".
_REBASE_HEAD_NAME_FILES = ("rebase-merge/head-name", "rebase-apply/head-name")

_HEADS_PREFIX = "refs/heads/"


def parse_rebasing_branch(branch_list: str) -> str | None:
    """Branch being rebased from `git branch --list` output, or None."""
    m = _RE_REBASING.search(branch_list)
    return m.group(1) if m else None


def _short_ref(ref: str) -> str:
    ref = ref.strip()
    return ref[len(_HEADS_PREFIX):] if ref.startswith(_HEADS_PREFIX) else ref


def rebase_head_name(git_dir: Path) -> str | None:
    """Branch recorded in rebase-merge/ or rebase-apply/ head-name, or None when not rebasing."""
    for rel in _REBASE_HEAD_NAME_FILES:
        path = git_dir / rel
        if not path.is_file():
            continue
        name = _short_ref(path.read_text(encoding="utf-8"))
        # "detached HEAD" is written when the rebase started from a detached HEAD.
        if name and name != "detached HEAD":
            return name
    return None


def current_branch(repo: Repo, log: HookLog) -> str:
    """
    Short name of the checked-out branch; "" when it cannot be determined.

    Order: HEAD's symbolic ref, then the rebase state files, then the
    "(no branch, rebasing ...)" line of `git branch --list`.
    """
    if not repo.head.is_detached:
        return repo.active_branch.name

    name = rebase_head_name(Path(repo.git_dir))
    if name:
        log.debug("found branch from rebase state", fields={"branch": name})
        return name

    try:
        name = parse_rebasing_branch(repo.git.branch("--list"))
    except GitCommandError as e:
        log.debug("could not list branches", fields={"error": e})
        return ""
    if name:
        log.debug("found branch from branch list", fields={"branch": name})
        return name

    log.debug("could not find the current branch")
    return ""
