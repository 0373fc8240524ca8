"""Commit message rewriting: branch prefix and mob co-author trailers."""

from __future__ import annotations

import re

# Matches trailers such as "Co-authored-by: Zoe Washburne <zoe@serenity.org>".
COAUTHOR_TRAILER_RE = re.compile(r"^co-authored-by: [^>\n]+>", re.IGNORECASE | re.MULTILINE)

# Git starts its instructional comment block with "# Please enter the commit message ...".
COMMENT_MARKER = "# "


def inject_branch_prefix(message: str, template: str, branch: str) -> str:
    """
    Prefix message with template % branch (e.g. "[GH-123] do something").

    An empty branch leaves the message untouched. A message that already starts
    with the prefix only gets its trailing blank line normalized, so running the
    hook twice gives the same result as running it once.
    """
    if not branch:
        return message
    # Surrounding whitespace in the template is dropped; the body is stripped too.
    prefix = (template % branch).strip()
    trimmed = message.strip()
    if trimmed == prefix:
        # Prefix with an empty body: same shape as prefixing an empty message.
        trimmed = ""
    if trimmed.startswith(prefix):
        return f"{trimmed}\n\n"
    if trimmed.startswith("#"):
        # Only Git's comment block: keep the prefix on its own line above it.
        return f"{prefix} \n\n{trimmed}\n\n"
    return f"{prefix} {trimmed}\n\n"


def split_comment_block(message: str) -> tuple[str, str]:
    """(body, comment_block) split at the first "# "; comment_block is "" when absent."""
    pos = message.find(COMMENT_MARKER)
    if pos < 0:
        return message, ""
    return message[:pos], message[pos:]


def strip_coauthor_trailers(message: str) -> str:
    """Remove every Co-authored-by trailer (any case) and strip the result."""
    return COAUTHOR_TRAILER_RE.sub("", message).strip()


def inject_coauthors(message: str, coauthors: str) -> str:
    """
    Replace the message's Co-authored-by trailers with coauthors.

    Existing trailers are dropped wherever they appear, then the given block is
    placed after the body and before Git's comment block (if any). Trailer lines
    are passed through as-is, in the order given.
    """
    coauthors = coauthors.strip()
    if not coauthors:
        return message
    cleaned = strip_coauthor_trailers(message)
    body, comments = split_comment_block(cleaned)
    if comments:
        return f"{body.strip()}\n\n{coauthors}\n\n{comments}"
    return f"{cleaned}\n\n{coauthors}\n\n"
