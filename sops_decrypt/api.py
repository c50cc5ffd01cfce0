"""
Entry points for the two pipeline steps.

Each step returns an Outcome instead of raising, so a caller other than the
command line can decide how to report a failed step.
"""

import logging
import typing

import attr

from .cleanup import remove_tree
from .config import CleanupConfig, DecryptConfig
from .secrets import Secret, decrypt_all
from .sops import Sops
from .utils import SopsDecryptError

log = logging.getLogger(__name__)


@attr.s(frozen=True, kw_only=True)
class Outcome:
    succeeded: bool = attr.ib()
    message: typing.Optional[str] = attr.ib(default=None)
    decrypted: typing.Tuple[Secret, ...] = attr.ib(default=())

    @classmethod
    def failure(
            cls,
            prefix: str,
            error: SopsDecryptError,
            decrypted: typing.Sequence[Secret] = ()) -> 'Outcome':
        return cls(
            succeeded=False,
            message=f"{prefix} failed with: {error.format_message()}",
            decrypted=tuple(decrypted))


def run_decrypt(config: DecryptConfig, sops: Sops = Sops()) -> Outcome:
    done: typing.List[Secret] = []
    try:
        decrypt_all(config, sops, on_decrypt=done.append)
    except SopsDecryptError as error:
        log.debug(f"Decrypt step stopped after {len(done)} secrets")
        return Outcome.failure('sops-decrypt', error, done)
    return Outcome(succeeded=True, decrypted=tuple(done))


def run_cleanup(config: CleanupConfig) -> Outcome:
    try:
        remove_tree(config)
    except SopsDecryptError as error:
        return Outcome.failure('sops-decrypt post', error)
    return Outcome(succeeded=True)
