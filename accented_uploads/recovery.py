"""Find a file under any of its likely historical names and rename it.

recover() is conservative: it never overwrites an existing target and
renames at most one file per call. Trying encoding variants is expected to
fail most of the time, so the usual rename errors are swallowed; anything
else (eg. a read-only or vanished volume) propagates to the caller.
"""
from dataclasses import dataclass
import errno
import logging
import os

from .candidates import candidates_for
from .filename import Filename
from .mojibake import DEFAULT_TABLE
from .normalizer import DEFAULT_NORMALIZER

log = logging.getLogger(__name__)

# errors that only mean "not this candidate"
EXPECTED_RENAME_ERRORS = {
    errno.ENOENT,
    errno.ENOTDIR,
    errno.EACCES,
    errno.EPERM,
    errno.EXDEV,
    errno.EISDIR,
    errno.EEXIST,
    errno.ENOTEMPTY,
    errno.EINVAL,
    errno.ENAMETOOLONG,
    errno.EILSEQ,
}


@dataclass(frozen=True)
class Succeeded:
    old_path: str
    succeeded = True


@dataclass(frozen=True)
class NotFound:
    succeeded = False


def _try_rename(src: str, dst: str) -> bool:
    try:
        os.rename(src, dst)
    except UnicodeEncodeError:
        # name can't even be expressed on this filesystem
        log.debug('rename %r: not encodable', src)
        return False
    except OSError as e:
        if e.errno not in EXPECTED_RENAME_ERRORS:
            raise
        log.debug('rename %r -> %r failed: %s', src, dst, e.strerror)
        return False
    return True


def _is_respelling(old_path: str, new_path: str) -> bool:
    """True when *new_path* only exists because the volume folds case (or
    unicode form) and it is really *old_path* under another spelling.

    A second directory entry for the same file (a hard link) is not a
    respelling: the listing already holds *new_path* verbatim.
    """
    try:
        if not os.path.samefile(old_path, new_path):
            return False
        entries = os.listdir(os.path.dirname(new_path) or os.curdir)
    except OSError:
        return False
    return os.path.basename(new_path) not in entries


def recover(old_path, new_path, table=DEFAULT_TABLE, normalizer=DEFAULT_NORMALIZER):
    """Rename *old_path* (or one of its encoding variants) to *new_path*.

    Returns Succeeded(path actually renamed) or NotFound(). NotFound is also
    what a second run gets once *new_path* exists, so callers should treat
    it as "nothing to do" rather than a failure.
    """
    old_path = os.fspath(old_path)
    new_path = os.fspath(new_path)

    if os.path.lexists(new_path):
        if not _is_respelling(old_path, new_path):
            log.debug('target %r already exists, not touching it', new_path)
            return NotFound()
        # case or normalization only rename on a folding volume
        if _try_rename(old_path, new_path):
            return Succeeded(old_path)
        return NotFound()

    if _try_rename(old_path, new_path):
        return Succeeded(old_path)

    old = Filename.parse(old_path)
    for candidate in candidates_for(old.basename, table, normalizer):
        candidate_path = old.with_basename(candidate).path
        if _try_rename(candidate_path, new_path):
            log.debug('recovered %r as %r', old_path, candidate_path)
            return Succeeded(candidate_path)

    return NotFound()
