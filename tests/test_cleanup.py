import errno
import os
import shutil

import pytest

from sops_decrypt.cleanup import _tolerate_missing, remove_tree
from sops_decrypt.config import CleanupConfig
from sops_decrypt.utils import CleanupError, NotFoundError


@pytest.fixture()
def dest_dir(workspace):
    path = workspace / 'out'
    (path / 'nested').mkdir(parents=True)
    (path / 'a.enc').write_text('decrypted:alpha\n')
    (path / 'nested' / 'b.enc').write_text('decrypted:bravo\n')
    return path


def test_skip(dest_dir, capsys):
    assert not remove_tree(CleanupConfig(dest_dir=str(dest_dir), delete_dest_dir=False))

    assert (dest_dir / 'a.enc').read_text() == 'decrypted:alpha\n'
    assert (dest_dir / 'nested' / 'b.enc').exists()
    assert capsys.readouterr().out == f"::notice::Skipping deletion of {dest_dir}.\n"


def test_skip_missing_directory(workspace):
    assert not remove_tree(CleanupConfig(dest_dir='missing', delete_dest_dir=False))


def test_remove(dest_dir, capsys):
    assert remove_tree(CleanupConfig(dest_dir=str(dest_dir), delete_dest_dir=True))

    assert not dest_dir.exists()
    assert "has been removed" in capsys.readouterr().out


def test_remove_relative(dest_dir):
    remove_tree(CleanupConfig(dest_dir='out', delete_dest_dir=True))
    assert not dest_dir.exists()


def test_remove_missing(workspace):
    with pytest.raises(NotFoundError, match='missing does not exist'):
        remove_tree(CleanupConfig(dest_dir='missing', delete_dest_dir=True))


def test_remove_empty_path(workspace):
    with pytest.raises(NotFoundError):
        remove_tree(CleanupConfig(dest_dir='', delete_dest_dir=True))

    assert (workspace / 'secrets').exists()


def test_remove_tolerates_vanishing_entries(dest_dir, monkeypatch):
    unlink = os.unlink

    def vanishing_unlink(path, *args, **kwargs):
        # Another process got there first.
        unlink(path, *args, **kwargs)
        if os.fspath(path).endswith('a.enc'):
            raise FileNotFoundError(errno.ENOENT, 'No such file or directory', path)

    monkeypatch.setattr(os, 'unlink', vanishing_unlink)

    assert remove_tree(CleanupConfig(dest_dir=str(dest_dir), delete_dest_dir=True))
    assert not dest_dir.exists()


def test_tolerate_missing(tmp_path):
    _tolerate_missing(os.unlink, str(tmp_path / 'gone'), FileNotFoundError())

    with pytest.raises(PermissionError):
        _tolerate_missing(os.unlink, str(tmp_path / 'locked'), PermissionError())


def test_remove_failure(dest_dir, monkeypatch):
    def rmtree(path, *args, **kwargs):
        raise PermissionError(13, 'Permission denied', str(path))

    monkeypatch.setattr(shutil, 'rmtree', rmtree)

    with pytest.raises(CleanupError, match='Error removing output directory') as excinfo:
        remove_tree(CleanupConfig(dest_dir=str(dest_dir), delete_dest_dir=True))

    assert 'Permission denied' in excinfo.value.message
    assert dest_dir.exists()


@pytest.mark.skipif(
    not hasattr(os, 'geteuid') or os.geteuid() == 0,
    reason="root can remove entries from read-only directories")
def test_remove_read_only_tree(dest_dir):
    (dest_dir / 'nested').chmod(0o500)
    try:
        with pytest.raises(CleanupError, match='Error removing output directory'):
            remove_tree(CleanupConfig(dest_dir=str(dest_dir), delete_dest_dir=True))
    finally:
        (dest_dir / 'nested').chmod(0o700)
