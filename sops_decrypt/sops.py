import logging
import pathlib
import subprocess
import typing

import attr

from .utils import DecryptionError

log = logging.getLogger(__name__)


@attr.s(frozen=True)
class Sops:
    binary: str = attr.ib(default='sops')
    verbose: bool = attr.ib(default=False)

    def command(self, arguments: typing.Sequence[str]) -> typing.Tuple[str, ...]:
        command: typing.Tuple[str, ...] = (self.binary,)
        if self.verbose:
            command = (*command, '--verbose')
        return (*command, *arguments)

    def decrypt(
            self,
            encrypted: pathlib.Path,
            decrypted: pathlib.Path) -> subprocess.CompletedProcess:
        """
        Decrypt a file, writing sops' output to the decrypted path.

        The output file is opened before sops runs and is left behind if
        sops fails, in the same way a shell redirection would leave it.
        """
        command = self.command(['-d', str(encrypted)])
        log.debug(f"Running {' '.join(command)} > {decrypted}")

        try:
            with decrypted.open('wb') as output:
                return subprocess.run(
                    command,
                    stdout=output,
                    stderr=subprocess.PIPE,
                    check=True)
        except subprocess.CalledProcessError as error:
            stderr = error.stderr.decode('utf-8', errors='replace').strip()
            for line in stderr.splitlines():
                log.error(line)
            raise DecryptionError(
                f"Error decrypting {encrypted} with error "
                f"{stderr or error}") from error
        except OSError as error:
            raise DecryptionError(
                f"Error decrypting {encrypted} with error {error}") from error
