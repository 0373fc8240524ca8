"""Resolve hook options from defaults, environment and repository git config."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Mapping, NamedTuple

from .commit_source import CommitSource

if TYPE_CHECKING:
    from git.config import GitConfigParser

REPO_CONFIG_SECTION = "go-githooks"
REPO_CONFIG_SUBSECTION = "prepare-commit-message"

REPO_DIR_ENV = "PREPARE_COMMIT_MESSAGE_REPO_DIR"
LOG_LEVEL_ENV = "GIT_COMMIT_MSG_LOG_LEVEL"
LOG_FILE_ENV = "GIT_COMMIT_MSG_LOG_FILE"

PREFIX_WITH_BRANCH = "prefix_with_branch"
PREFIX_BRANCH_EXCLUSIONS = "prefix_branch_exclusions"
PREFIX_WITH_BRANCH_TEMPLATE = "prefix_with_branch_template"


class Setting(NamedTuple):
    name: str
    env_key: str
    repo_key: str
    default: str
    help: str


SETTINGS = (
    Setting(
        PREFIX_WITH_BRANCH,
        "GIT_COMMIT_MSG_PREFIX_WITH_BRANCH_NAME",
        "prefixWithBranch",
        "false",
        "Prefix the commit message with the current branch name.",
    ),
    Setting(
        PREFIX_BRANCH_EXCLUSIONS,
        "GIT_COMMIT_MSG_PREFIX_WITH_BRANCH_NAME_EXCLUSIONS",
        "prefixBranchExclusions",
        "master,main,dev,develop",
        "Comma-separated branches that are never used as a prefix.",
    ),
    Setting(
        PREFIX_WITH_BRANCH_TEMPLATE,
        "GIT_COMMIT_MSG_PREFIX_WITH_BRANCH_NAME_TEMPLATE",
        "prefixWithBranchTemplate",
        "[%s]",
        "Prefix template; %s is replaced by the branch name.",
    ),
)

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
}

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}


class ConfigError(ValueError):
    """A configuration value could not be parsed."""


class UsageError(ValueError):
    """The hook was invoked with the wrong positional arguments."""


@dataclass(frozen=True)
class Options:
    commit_message_file: Path
    commit_source: CommitSource = CommitSource.EMPTY
    commit_sha: str | None = None
    prefix_with_branch: bool = False
    prefix_branch_exclusions: frozenset[str] = frozenset({"master", "main", "dev", "develop"})
    prefix_with_branch_template: str = "[%s]"

    def is_excluded(self, branch: str) -> bool:
        return branch in self.prefix_branch_exclusions


@dataclass(frozen=True)
class LogSettings:
    level: int = logging.ERROR
    log_file: Path | None = None


def parse_bool(value: str, name: str = "value") -> bool:
    """Parse 1/t/true/0/f/false (and their upper/title case forms); raise ConfigError otherwise."""
    v = value.strip()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ConfigError(f"failed parsing '{value}' as a bool for {name}")


def parse_list(value: str) -> list[str]:
    """Comma-separated list; items are stripped and empty items dropped."""
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_template(value: str, name: str = PREFIX_WITH_BRANCH_TEMPLATE) -> str:
    """Validate a prefix template: must contain %s and format with exactly one string."""
    if "%s" not in value:
        raise ConfigError(f"template '{value}' for {name} must contain %s")
    try:
        value % "branch"
    except (TypeError, ValueError) as e:
        raise ConfigError(f"template '{value}' for {name} is invalid: {e}") from None
    return value


def parse_log_level(value: str) -> int:
    try:
        return _LOG_LEVELS[value.strip().lower()]
    except KeyError:
        raise ConfigError(
            f"invalid log level '{value}' for {LOG_LEVEL_ENV} (expected one of: {', '.join(_LOG_LEVELS)})"
        ) from None


def _find_section(reader: GitConfigParser, section: str, subsection: str) -> str | None:
    """Section names compare case-insensitively, subsection names exactly (git semantics)."""
    for name in reader.sections():
        head, _, rest = name.partition(" ")
        if head.lower() != section.lower():
            continue
        if not subsection and not rest:
            return name
        if subsection and rest.strip('"') == subsection:
            return name
    return None


def get_repo_option(
    reader: GitConfigParser,
    section: str,
    subsection: str,
    key: str,
    default: str = "",
) -> str:
    """Value of section.subsection.key; default if the section, subsection or key is missing."""
    name = _find_section(reader, section, subsection)
    if name is None:
        return default
    for option in reader.options(name):
        if option.lower() == key.lower():
            return str(reader.get(name, option)).strip()
    return default


def get_settings(
    env: Mapping[str, str] | None = None,
    repo_config: GitConfigParser | None = None,
) -> dict[str, str]:
    """Merge defaults, env and repo config; later non-empty values win."""
    env = env if env is not None else os.environ
    settings = {s.name: s.default for s in SETTINGS}
    for s in SETTINGS:
        value = env.get(s.env_key)
        if value:
            settings[s.name] = value
    if repo_config is not None:
        for s in SETTINGS:
            value = get_repo_option(repo_config, REPO_CONFIG_SECTION, REPO_CONFIG_SUBSECTION, s.repo_key)
            if value:
                settings[s.name] = value
    return settings


def resolve_options(
    args: list[str] | tuple[str, ...],
    env: Mapping[str, str] | None = None,
    repo_config: GitConfigParser | None = None,
) -> Options:
    """
    Build Options from the hook's positional args:
      <commit-message-file> [<commit-source>] [<commit-object>]
    Raises UsageError for a wrong argument count and ConfigError for unparseable settings.
    """
    if not 1 <= len(args) <= 3:
        raise UsageError(
            "expected <commit-message-file> [<commit-source>] [<commit-object>], "
            f"got {len(args)} argument(s): {list(args)}"
        )
    if not args[0]:
        raise UsageError("commit message file must not be empty")
    settings = get_settings(env, repo_config)
    return Options(
        commit_message_file=Path(args[0]),
        commit_source=CommitSource.from_string(args[1] if len(args) > 1 else None),
        commit_sha=(args[2] or None) if len(args) > 2 else None,
        prefix_with_branch=parse_bool(settings[PREFIX_WITH_BRANCH], PREFIX_WITH_BRANCH),
        prefix_branch_exclusions=frozenset(parse_list(settings[PREFIX_BRANCH_EXCLUSIONS])),
        prefix_with_branch_template=parse_template(settings[PREFIX_WITH_BRANCH_TEMPLATE]),
    )


def get_log_settings(env: Mapping[str, str] | None = None) -> LogSettings:
    """Log level (default error) and optional log file from the environment."""
    env = env if env is not None else os.environ
    level = parse_log_level(env.get(LOG_LEVEL_ENV) or "error")
    log_file = env.get(LOG_FILE_ENV)
    return LogSettings(level=level, log_file=Path(log_file) if log_file else None)


def get_repo_dir(env: Mapping[str, str] | None = None) -> Path:
    env = env if env is not None else os.environ
    return Path(env.get(REPO_DIR_ENV) or ".").resolve()
