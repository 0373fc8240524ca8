"""Classification of the commit source Git passes as the hook's second argument."""

from __future__ import annotations

from enum import Enum


class CommitSource(Enum):
    UNKNOWN = "unknown"
    EMPTY = ""  # no source given: plain interactive `git commit`
    MESSAGE = "message"  # -m or -F
    TEMPLATE = "template"  # -t or commit.template
    MERGE = "merge"  # merge commit or .git/MERGE_MSG exists
    SQUASH = "squash"  # .git/SQUASH_MSG exists
    COMMIT = "commit"  # -c, -C or --amend; followed by a commit object name

    @classmethod
    def from_string(cls, value: str | None) -> CommitSource:
        """Map Git's source argument to a CommitSource; unrecognized values are UNKNOWN."""
        if value is None:
            return cls.EMPTY
        for source in cls:
            if source is not cls.UNKNOWN and source.value == value:
                return source
        return cls.UNKNOWN

    def __str__(self) -> str:
        return self.value
