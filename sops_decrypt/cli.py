import logging
import pathlib
import typing

import click

from . import __doc__, __version__, actions
from .api import Outcome, run_cleanup, run_decrypt
from .config import CleanupConfig, DecryptConfig
from .sops import Sops
from .utils import SopsDecryptError

log = logging.getLogger(__name__)

STEPS = {
    'decrypt': 'sops-decrypt',
    'cleanup': 'sops-decrypt post',
}


class StepFailed(click.ClickException):
    """Report a failed step to the pipeline runner."""

    def show(self, file=None):
        actions.error(self.message)


class PathType(click.Path):
    def convert(self, value, param, ctx):
        return pathlib.Path(super().convert(value, param, ctx))


class ActionsBoolean(click.ParamType):
    """
    Booleans spelled the way GitHub Actions inputs accept them.

    Only the YAML 1.2 core schema spellings are allowed, so that a typo in a
    workflow file is an error instead of silently meaning false. A missing or
    invalid value fails the step like any other error.
    """

    name = 'boolean'
    true = ('true', 'True', 'TRUE')
    false = ('false', 'False', 'FALSE')

    def convert(self, value, param, ctx):
        if isinstance(value, bool):
            return value
        value = value.strip()
        if value in self.true:
            return True
        if value in self.false:
            return False
        step = STEPS.get(ctx.info_name if ctx is not None else None, 'sops-decrypt')
        name = param.name if param is not None else 'input'
        raise StepFailed(
            f"{step} failed with: Input does not meet YAML 1.2 \"Core Schema\" "
            f"specification: {name} {value!r}. Support boolean input list: "
            f"`true | True | TRUE | false | False | FALSE`")


def report(outcome: Outcome) -> None:
    if not outcome.succeeded:
        raise StepFailed(typing.cast(str, outcome.message))


dest_dir_option = click.option(
    '--dest-dir', 'dest_dir',
    envvar='INPUT_DEST_DIR',
    default='',
    show_envvar=True,
    type=click.STRING,
    help="Directory to remove.")


@click.group(help=__doc__)
@click.option(
    '-d', '--debug', 'debug',
    default=False,
    is_flag=True,
    envvar='RUNNER_DEBUG',
    help="Enable debug logging.")
@click.option(
    '-v', '--verbose', 'sops_verbose',
    default=False,
    is_flag=True,
    help="Run sops with --verbose.")
@click.option(
    '--sops', 'sops_binary',
    default='sops',
    envvar='SOPS_BINARY',
    show_envvar=True,
    metavar='PATH',
    help="The sops executable to run.")
@click.pass_context
def main(ctx, debug: bool, sops_verbose: bool, sops_binary: str):
    logging.basicConfig(level=(logging.DEBUG if debug else logging.WARNING))
    ctx.obj = Sops(binary=sops_binary, verbose=sops_verbose)


@main.command()
def version():
    """Show the application version."""
    click.echo(f"sops-decrypt {__version__}")


@main.command()
@click.option(
    '--source-dir', 'source_dir',
    envvar='INPUT_SOURCE_DIR',
    default='',
    show_envvar=True,
    type=PathType(),
    help="Directory containing the encrypted files.")
@click.option(
    '--dest-dir', 'dest_dir',
    envvar='INPUT_DEST_DIR',
    default='',
    show_envvar=True,
    type=PathType(),
    help="Directory the decrypted files are written to.")
@click.option(
    '--file-pattern', 'file_pattern',
    envvar='INPUT_FILE_PATTERN',
    default='',
    show_envvar=True,
    type=click.STRING,
    help="Regular expression file names must match to be decrypted.")
@click.option(
    '--create-dest-dir', 'create_dest_dir',
    envvar='INPUT_CREATE_DEST_DIR',
    default='',
    show_envvar=True,
    type=ActionsBoolean(),
    help="Create the destination directory if it does not exist.")
@click.option(
    '--check-gitignore', 'check_gitignore',
    envvar='INPUT_CHECK_GITIGNORE',
    default='false',
    show_envvar=True,
    type=ActionsBoolean(),
    help="Refuse to decrypt into paths git does not ignore.")
@click.pass_obj
def decrypt(
        sops: Sops,
        source_dir: pathlib.Path,
        dest_dir: pathlib.Path,
        file_pattern: str,
        create_dest_dir: bool,
        check_gitignore: bool):
    """
    Decrypt matching files from the source directory.

    Each matching file is written to the same name in the destination
    directory. The first failure stops the step.
    """
    try:
        config = DecryptConfig.from_inputs(
            source_dir=source_dir,
            dest_dir=dest_dir,
            file_pattern=file_pattern,
            create_dest_dir=create_dest_dir,
            check_gitignore=check_gitignore)
    except SopsDecryptError as error:
        outcome = Outcome.failure(STEPS['decrypt'], error)
    else:
        outcome = run_decrypt(config, sops)
    report(outcome)


@main.command()
@dest_dir_option
@click.option(
    '--delete-dest-dir', 'delete_dest_dir',
    envvar='INPUT_DELETE_DEST_DIR',
    default='',
    show_envvar=True,
    type=ActionsBoolean(),
    help="Remove the destination directory.")
def cleanup(dest_dir: str, delete_dest_dir: bool):
    """Remove the destination directory at the end of a run."""
    report(run_cleanup(CleanupConfig(
        dest_dir=dest_dir,
        delete_dest_dir=delete_dest_dir)))
