"""Import path lists for generated files."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator


def _quoted(path: str) -> str:
    return path if path.endswith('"') else f'"{path}"'


@dataclass(frozen=True)
class ImportPaths:
    """An ordered list of quoted import paths, with blank lines between groups."""

    paths: tuple[str, ...] = ()

    def add(self, *args: str) -> "ImportPaths":
        """Return a new list with the given paths appended as one group.

        Paths are trimmed and quoted; blank entries separate groups, and paths
        already present before this call are skipped.
        """
        cleaned = (raw.strip() for raw in args)
        added = tuple(
            _quoted(path) if path else ""
            for path in cleaned
            if not path or _quoted(path) not in self.paths
        )
        return ImportPaths(self.paths + added + ("",))


def _separated(groups: Iterable[Iterable[str]]) -> Iterator[str]:
    for number, group in enumerate(groups):
        if number:
            yield ""
        yield from group


_ORM = "gorm.io/gorm"
_GEN = "gorm.io/gen"

IMPORT_LIST = ImportPaths().add(
    *_separated(
        (
            ("context", "database/sql", "strings"),
            (_ORM, f"{_ORM}/schema", f"{_ORM}/clause"),
            (_GEN, f"{_GEN}/field", f"{_GEN}/helper"),
            ("gorm.io/plugin/dbresolver",),
        )
    )
)

UNIT_TEST_IMPORT_LIST = ImportPaths().add(
    *_separated(
        (
            ("context", "fmt", "strconv", "testing"),
            ("gorm.io/driver/sqlite", _ORM),
        )
    )
)