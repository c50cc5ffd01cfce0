import logging
import pathlib
import typing

import click

if typing.TYPE_CHECKING:
    import git

log = logging.getLogger(__name__)


class SopsDecryptError(click.ClickException):
    pass


class ConfigurationError(SopsDecryptError):
    pass


class NotFoundError(SopsDecryptError):
    pass


class DecryptionError(SopsDecryptError):
    pass


class CleanupError(SopsDecryptError):
    pass


def find_git_repository(path: pathlib.Path) -> typing.Optional['git.Repo']:
    """Find the git repository containing a path, if there is one."""
    # GitPython fails to import without a git executable, and only the
    # optional ignore check needs it.
    try:
        import git
    except ImportError as error:
        raise ConfigurationError(
            f"Checking .gitignore needs a working git installation: {error}") from error

    try:
        return git.Repo(path, search_parent_directories=True)
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
        return None


def unignored_paths(
        repo: 'git.Repo',
        paths: typing.Iterable[pathlib.Path]) -> typing.Set[pathlib.Path]:
    """Return the paths that git would not ignore in a repository."""
    import git

    root = pathlib.Path(repo.working_dir).resolve()
    relative: typing.Dict[str, pathlib.Path] = {}
    for path in paths:
        try:
            relative[path.resolve().relative_to(root).as_posix()] = path
        except ValueError as error:
            raise ConfigurationError(
                f"{path} resolves outside the git repository {root}") from error
    if not relative:
        return set()

    # -z keeps git from quoting names with unusual characters.
    try:
        output = repo.git.check_ignore('-z', '--', *relative.keys())
    except git.exc.GitCommandError as error:
        # Exit status 1 means none of the paths are ignored.
        if error.status != 1:
            raise ConfigurationError(
                f"git check-ignore failed: {error.stderr.strip()}") from error
        output = ''

    ignored = {name for name in output.split('\0') if name}
    log.debug(f"git ignores {len(ignored)} of {len(relative)} paths")
    return {path for name, path in relative.items() if name not in ignored}
