import errno
import os

import pytest


@pytest.fixture
def case_insensitive_volume(monkeypatch):
    """Make existence and identity checks fold case, like APFS or NTFS do.

    Directory listings and renames keep the real (case preserving) names.
    """
    listdir = os.listdir

    def on_disk(path):
        directory, name = os.path.split(os.fspath(path))
        for entry in listdir(directory or os.curdir):
            if entry.lower() == name.lower():
                return os.path.join(directory, entry)
        return None

    def samefile(a, b):
        found_a, found_b = on_disk(a), on_disk(b)
        if found_a is None or found_b is None:
            raise FileNotFoundError(errno.ENOENT, 'No such file or directory', os.fspath(a))
        return found_a == found_b

    monkeypatch.setattr(os.path, 'lexists', lambda path: on_disk(path) is not None)
    monkeypatch.setattr(os.path, 'samefile', samefile)
