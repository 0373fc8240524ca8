"""Fetch the current mob's Co-authored-by trailers from `git mob-print`."""

from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING, Callable, Sequence

if TYPE_CHECKING:
    from .log import HookLog

MOB_PRINT_CMD = ("git", "mob-print")

# Returns raw trailer text ("" when there is no mob).
CoauthorSource = Callable[[], str]


def list_coauthors(log: HookLog, command: Sequence[str] = MOB_PRINT_CMD) -> str:
    """
    Run the mob co-author command and return its stripped stdout.
    A failing or missing command means no co-authors: returns "".
    """
    try:
        proc = subprocess.run(
            list(command),
            capture_output=True,
            text=True,
        )
    except OSError as e:
        log.debug("could not list the mob", fields={"command": " ".join(command), "error": e})
        return ""
    if proc.returncode != 0:
        log.debug(
            "could not list the mob",
            fields={"command": " ".join(command), "exit_code": proc.returncode, "stderr": (proc.stderr or "").strip()},
        )
        return ""
    return (proc.stdout or "").strip()
