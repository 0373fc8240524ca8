"""CLI entry point: the prepare-commit-msg hook executable (plus `version` and `help`)."""

from __future__ import annotations

import configparser
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import NoReturn

import click
from git import Repo
from git.exc import InvalidGitRepositoryError, NoSuchPathError

from .branch import current_branch
from .coauthors import MOB_PRINT_CMD, list_coauthors
from .config import (
    LOG_FILE_ENV,
    LOG_LEVEL_ENV,
    REPO_CONFIG_SECTION,
    REPO_CONFIG_SUBSECTION,
    REPO_DIR_ENV,
    SETTINGS,
    ConfigError,
    UsageError,
    get_log_settings,
    get_repo_dir,
    resolve_options,
)
from .hook import prepare_commit_message
from .log import HookLog, new_logger

APP_NAME = "prepare-commit-msg"
DIST_NAME = "mob-githooks"

CONTEXT_SETTINGS = {"ignore_unknown_options": True}


def get_version() -> str:
    try:
        return version(DIST_NAME)
    except PackageNotFoundError:
        return "n/a"


def _configuration_help() -> str:
    # \b keeps click from re-wrapping the block.
    lines = [
        "\b",
        "Configuration (defaults, then environment, then git config; later wins):",
    ]
    for s in SETTINGS:
        lines.append(f"  {s.env_key}")
        lines.append(f"  git config {REPO_CONFIG_SECTION}.{REPO_CONFIG_SUBSECTION}.{s.repo_key}")
        lines.append(f"      {s.help} Default: {s.default}")
    lines.append(f"  {LOG_LEVEL_ENV}")
    lines.append("      debug, info, warn, error or fatal. Default: error")
    lines.append(f"  {LOG_FILE_ENV}")
    lines.append("      Append log lines to this file instead of stderr.")
    lines.append(f"  {REPO_DIR_ENV}")
    lines.append("      Repository to read branch and config from. Default: .")
    lines.append("")
    lines.append("\b")
    lines.append(f"Co-authors come from `{' '.join(MOB_PRINT_CMD)}`; if it fails, none are added.")
    return "\n".join(lines)


def _abort(log: HookLog | None, action: str, err: Exception, code: int = 1) -> NoReturn:
    if log is not None:
        log.error(action, fields={"error": err})
    click.echo(f"{APP_NAME}: {action}: {err}", err=True)
    sys.exit(code)


def run_hook(args: tuple[str, ...], log: HookLog) -> None:
    """Open the repository, resolve options and rewrite the commit message file."""
    repo_dir = get_repo_dir()
    log.debug("opening git repo", fields={"path": repo_dir})
    try:
        repo = Repo(repo_dir)
    except (InvalidGitRepositoryError, NoSuchPathError) as e:
        _abort(log, "read git repo", RuntimeError(f"could not find repo at '{repo_dir}': {e}"))

    with repo:
        try:
            options = resolve_options(args, repo_config=repo.config_reader("repository"))
        except UsageError as e:
            raise click.UsageError(str(e)) from None
        except ConfigError as e:
            _abort(log, "prepare options", e)
        except configparser.Error as e:
            _abort(log, "read git config", e)

        log = log.bind(**{"commit.source": options.commit_source, "commit.sha": options.commit_sha or ""})
        try:
            prepare_commit_message(
                options,
                branch_source=lambda: current_branch(repo, log),
                coauthor_source=lambda: list_coauthors(log),
                log=log,
            )
        except OSError as e:
            _abort(log, "executing", e)


@click.command(context_settings=CONTEXT_SETTINGS, epilog=_configuration_help())
@click.argument("args", nargs=-1)
@click.pass_context
def main(ctx: click.Context, args: tuple[str, ...]) -> None:
    """Git prepare-commit-msg hook: prefix the message with the branch and add mob co-authors.

    \b
    prepare-commit-msg <commit-message-file> [<commit-source>] [<commit-object>]
    prepare-commit-msg version
    prepare-commit-msg help

    Install by linking or copying this executable to .git/hooks/prepare-commit-msg.
    """
    if len(args) == 1 and args[0].lower() == "version":
        click.echo(f"version: {get_version()}")
        return
    if len(args) == 1 and args[0].lower() == "help":
        click.echo(ctx.get_help())
        return

    try:
        log_settings = get_log_settings()
    except ConfigError as e:
        _abort(None, "configure logging", e)
    try:
        log = new_logger(
            log_settings.level,
            log_settings.log_file,
            fields={"app": APP_NAME, "app_version": get_version()},
        )
    except OSError as e:
        _abort(None, "open log file", e)
    try:
        run_hook(args, log)
    finally:
        log.close()


if __name__ == "__main__":
    main()
