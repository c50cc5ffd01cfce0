"""
Workflow commands understood by the GitHub Actions runner.

https://docs.github.com/en/actions/reference/workflow-commands-for-github-actions
"""

import logging

import click

log = logging.getLogger(__name__)


def escape(message: str) -> str:
    """Escape a message so it stays on a single workflow command line."""
    return message.replace('%', '%25').replace('\r', '%0D').replace('\n', '%0A')


def command(name: str, message: str) -> str:
    return f"::{name}::{escape(message)}"


def notice(message: str) -> None:
    log.info(message)
    click.echo(command('notice', message))


def error(message: str) -> None:
    log.debug(f"Reporting step failure: {message}")
    click.echo(command('error', message))
