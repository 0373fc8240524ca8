"""prepare-commit-msg: read the draft message, prefix it with the branch, add mob co-authors, write it back."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Callable

from .message import inject_branch_prefix, inject_coauthors

if TYPE_CHECKING:
    from .coauthors import CoauthorSource
    from .config import Options
    from .log import HookLog

BranchSource = Callable[[], str]

# surrogateescape keeps undecodable bytes intact across read + write.
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def read_message(path: Path) -> str:
    """Draft commit message; "" if git has not created the file."""
    try:
        return path.read_text(encoding=_ENCODING, errors=_ERRORS)
    except FileNotFoundError:
        return ""


def write_message(path: Path, message: str) -> None:
    path.write_text(message, encoding=_ENCODING, errors=_ERRORS)


def prepare_commit_message(
    options: Options,
    *,
    branch_source: BranchSource,
    coauthor_source: CoauthorSource,
    log: HookLog,
) -> str:
    """
    Rewrite options.commit_message_file in place and return the new message.

    branch_source is only called when branch prefixing is enabled; an empty
    branch or one in the exclusion list leaves the message unprefixed.
    """
    path = options.commit_message_file
    message = read_message(path)

    if options.prefix_with_branch:
        branch = branch_source()
        if not branch:
            log.debug("cannot find current branch")
        elif options.is_excluded(branch):
            log.debug("branch is excluded from prefixing", fields={"branch": branch})
        else:
            log.debug(
                "adding branch prefix",
                fields={"branch": branch, "template": options.prefix_with_branch_template},
            )
            message = inject_branch_prefix(message, options.prefix_with_branch_template, branch)

    coauthors = coauthor_source()
    if coauthors.strip():
        log.debug("injecting coauthors", fields={"coauthors": coauthors})
        message = inject_coauthors(message, coauthors)
    else:
        log.debug("no coauthors to add")

    write_message(path, message)
    return message
