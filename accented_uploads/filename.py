"""Split paths into the directory (left alone) and the basename (sanitized)."""
from dataclasses import dataclass
import os

CURRENT_DIR_SENTINELS = ('', os.curdir)
SEPARATORS = os.sep + (os.altsep or '')


@dataclass(frozen=True)
class Filename:
    directory: str
    basename: str

    @classmethod
    def parse(cls, path: str) -> 'Filename':
        path = os.fspath(path)
        # 'dir/' names dir itself; a bare root stays as it is
        path = path.rstrip(SEPARATORS) or path
        directory, basename = os.path.split(path)
        if directory in CURRENT_DIR_SENTINELS:
            directory = ''
        return cls(directory, basename)

    @property
    def path(self) -> str:
        if not self.directory:
            return self.basename
        return os.path.join(self.directory, self.basename)

    def with_basename(self, basename: str) -> 'Filename':
        return Filename(self.directory, basename)

    def __str__(self):
        return self.path
