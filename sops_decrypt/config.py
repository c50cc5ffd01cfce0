"""
Configuration for the decrypt and cleanup steps.

Both are built once from the step's inputs and never modified afterwards.
"""

import logging
import pathlib
import re
import typing

import attr

from .utils import ConfigurationError

log = logging.getLogger(__name__)


@attr.s(frozen=True, kw_only=True)
class DecryptConfig:
    source_dir: pathlib.Path = attr.ib()
    dest_dir: pathlib.Path = attr.ib()
    file_pattern: str = attr.ib(default='')
    create_dest_dir: bool = attr.ib(default=False)
    check_gitignore: bool = attr.ib(default=False)

    def __attrs_post_init__(self):
        if not self.source_dir.is_absolute():
            raise ConfigurationError(
                f"Invalid source directory {self.source_dir}")
        if not self.dest_dir.is_absolute():
            raise ConfigurationError(
                f"Invalid destination directory {self.dest_dir}")
        try:
            re.compile(self.file_pattern)
        except re.error as error:
            raise ConfigurationError(
                f"Invalid file pattern {self.file_pattern!r}: {error}") from error

    @property
    def pattern(self) -> typing.Pattern[str]:
        return re.compile(self.file_pattern)

    @classmethod
    def from_inputs(
            cls,
            source_dir: typing.Union[str, pathlib.Path],
            dest_dir: typing.Union[str, pathlib.Path],
            file_pattern: str,
            create_dest_dir: bool,
            check_gitignore: bool = False,
            cwd: typing.Optional[pathlib.Path] = None) -> 'DecryptConfig':
        """Resolve the step's inputs against the working directory."""
        cwd = cwd if cwd is not None else pathlib.Path.cwd()
        config = cls(
            source_dir=cwd / source_dir,
            dest_dir=cwd / dest_dir,
            file_pattern=file_pattern,
            create_dest_dir=create_dest_dir,
            check_gitignore=check_gitignore)
        log.debug(f"source_dir: {config.source_dir}")
        log.debug(f"dest_dir: {config.dest_dir}")
        log.debug(f"file_pattern: {config.file_pattern}")
        return config


@attr.s(frozen=True, kw_only=True)
class CleanupConfig:
    dest_dir: str = attr.ib()
    delete_dest_dir: bool = attr.ib(default=False)

    @property
    def path(self) -> typing.Optional[pathlib.Path]:
        """The destination as a path, or None if no directory was given."""
        return pathlib.Path(self.dest_dir) if self.dest_dir else None
