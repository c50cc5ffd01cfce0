import logging
import os
import pathlib
import typing

import attr

from . import actions
from .config import DecryptConfig
from .sops import Sops
from .utils import (
    ConfigurationError,
    NotFoundError,
    find_git_repository,
    unignored_paths,
)

log = logging.getLogger(__name__)


@attr.s(frozen=True, kw_only=True)
class Secret:
    encrypted: pathlib.Path = attr.ib()
    decrypted: pathlib.Path = attr.ib()

    def __str__(self):
        return self.encrypted.name

    def decrypt(self, sops: Sops) -> None:
        # The listing can be stale by the time we get to this entry.
        if not self.encrypted.exists():
            raise NotFoundError(f"File {self.encrypted} does not exist.")
        log.debug(f"Decrypting {self.encrypted} to {self.decrypted}")
        sops.decrypt(self.encrypted, self.decrypted)


def select(config: DecryptConfig) -> typing.Tuple[Secret, ...]:
    """
    Pair each matching entry in the source directory with its destination.

    Only the top level of the source directory is listed, in the order the
    filesystem returns it.
    """
    try:
        names = os.listdir(config.source_dir)
    except NotADirectoryError as error:
        raise ConfigurationError(
            f"Source directory {config.source_dir} is not a directory.") from error
    except OSError as error:
        raise ConfigurationError(
            f"Cannot list source directory {config.source_dir}: {error}") from error
    log.debug(f"files: {', '.join(names)}")

    pattern = config.pattern
    matched = [name for name in names if pattern.search(name)]
    log.debug(f"filtered_files: {', '.join(matched)}")

    return tuple(Secret(
        encrypted=config.source_dir / name,
        decrypted=config.dest_dir / name,
    ) for name in matched)


def check_gitignore(
        dest_dir: pathlib.Path,
        secrets: typing.Sequence[Secret]) -> None:
    """Fail if git would not ignore a decrypted path."""
    existing = next(p for p in (dest_dir, *dest_dir.parents) if p.exists())
    repo = find_git_repository(existing)
    if repo is None:
        log.info(f"{dest_dir} is not in a git repository, skipping ignore check")
        return

    log.info("Checking all decrypted files are ignored by git")
    included = unignored_paths(repo, (s.decrypted for s in secrets))
    if included:
        raise ConfigurationError(
            f"Decrypted file(s) not excluded by .gitignore: "
            f"{', '.join(sorted(str(p) for p in included))}")


def decrypt_all(
        config: DecryptConfig,
        sops: Sops,
        on_decrypt: typing.Optional[typing.Callable[[Secret], None]] = None,
) -> typing.Tuple[Secret, ...]:
    """
    Decrypt every selected secret, stopping at the first failure.

    Secrets decrypted before a failure are left in place.
    """
    if not config.source_dir.exists():
        raise NotFoundError(
            f"Source directory {config.source_dir} does not exist.")

    if config.create_dest_dir and not config.dest_dir.exists():
        log.info(f"Creating destination directory {config.dest_dir}")
        try:
            config.dest_dir.mkdir(parents=True)
        except OSError as error:
            raise ConfigurationError(
                f"Cannot create destination directory {config.dest_dir}: "
                f"{error}") from error

    secrets = select(config)
    log.info(f"Decrypting {len(secrets)} secrets")

    if config.check_gitignore:
        check_gitignore(config.dest_dir, secrets)

    for secret in secrets:
        secret.decrypt(sops)
        actions.notice(f"Successfully decrypted file: {secret.encrypted}")
        if on_decrypt is not None:
            on_decrypt(secret)

    log.info(f"Decrypted {len(secrets)} secrets")
    return secrets
