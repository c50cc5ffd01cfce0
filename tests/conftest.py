import pathlib
import stat
import typing

import click.testing
import pytest

import sops_decrypt.cli
from sops_decrypt.config import DecryptConfig
from sops_decrypt.sops import Sops

FAKE_SOPS = """\
#!/bin/sh
# Stands in for sops: "decrypts" a file by prefixing its contents.
if [ "$1" = "--verbose" ]; then shift; fi
if [ "$1" != "-d" ]; then
    echo "unexpected arguments: $*" >&2
    exit 2
fi
if grep -q CORRUPT "$2"; then
    echo "Failed to get the data key required to decrypt the SOPS file." >&2
    exit 128
fi
printf 'decrypted:'
cat "$2"
"""


@pytest.fixture()
def fake_sops(tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / 'bin' / 'sops'
    path.parent.mkdir()
    path.write_text(FAKE_SOPS)
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return path


@pytest.fixture()
def sops(fake_sops: pathlib.Path) -> Sops:
    return Sops(binary=str(fake_sops))


@pytest.fixture()
def workspace(tmp_path: pathlib.Path, monkeypatch) -> pathlib.Path:
    """A working directory with a 'secrets' directory of encrypted files."""
    root = tmp_path / 'work'
    secrets = root / 'secrets'
    secrets.mkdir(parents=True)
    (secrets / 'a.enc').write_text('alpha\n')
    (secrets / 'b.enc').write_text('bravo\n')
    (secrets / 'c.txt').write_text('charlie\n')
    monkeypatch.chdir(root)
    return root


@pytest.fixture()
def config(workspace: pathlib.Path) -> DecryptConfig:
    return DecryptConfig(
        source_dir=workspace / 'secrets',
        dest_dir=workspace / 'out',
        file_pattern=r'\.enc$',
        create_dest_dir=True)


@pytest.fixture()
def invoke(fake_sops: pathlib.Path):
    def invoke_func(
            arguments: typing.Sequence[str],
            env: typing.Optional[typing.Dict[str, str]] = None,
    ) -> click.testing.Result:
        assert all(isinstance(arg, str) for arg in arguments)
        runner = click.testing.CliRunner()
        return runner.invoke(
            sops_decrypt.cli.main,
            ['--sops', str(fake_sops), *arguments],
            env=env)

    return invoke_func
