import logging
import shutil
import sys

from . import actions
from .config import CleanupConfig
from .utils import CleanupError, NotFoundError

log = logging.getLogger(__name__)


def _tolerate_missing(function, path, error: BaseException):
    # Entries that disappear while the tree is being removed are fine.
    if isinstance(error, FileNotFoundError):
        log.debug(f"{path} was already removed")
        return
    raise error


def _rmtree(path) -> None:
    if sys.version_info >= (3, 12):
        shutil.rmtree(path, onexc=_tolerate_missing)
    else:
        shutil.rmtree(path, onerror=lambda f, p, info: _tolerate_missing(f, p, info[1]))


def remove_tree(config: CleanupConfig) -> bool:
    """
    Remove the destination directory if the step was asked to.

    Returns whether anything was removed.
    """
    if not config.delete_dest_dir:
        actions.notice(f"Skipping deletion of {config.dest_dir}.")
        return False

    dest_dir = config.path
    if dest_dir is None or not dest_dir.exists():
        raise NotFoundError(f"{config.dest_dir} does not exist")

    log.info(f"Removing {dest_dir}")
    try:
        if dest_dir.is_dir() and not dest_dir.is_symlink():
            _rmtree(dest_dir)
        else:
            dest_dir.unlink()
    except OSError as error:
        raise CleanupError(
            f"Error removing output directory {dest_dir} with {error}") from error

    actions.notice(f"Secrets output directory {dest_dir} has been removed.")
    return True
