"""File discovery over an ordered list of search roots."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from pathlib import Path


class FileLocator:
    """Resolve file names against search roots, first match wins.

    Args:
        paths: Search roots in priority order. Roots that do not exist are
            skipped by ``locate``; ``iter_files`` reports them.
    """

    def __init__(self, paths: Sequence[str | Path]) -> None:
        self._paths = tuple(Path(p) for p in paths)

    @property
    def paths(self) -> tuple[Path, ...]:
        return self._paths

    def locate(self, file_name: str) -> Path | None:
        """Return the first ``root/file_name`` that exists, or None."""
        for root in self._paths:
            candidate = root / file_name
            if candidate.is_file():
                return candidate
        return None

    @staticmethod
    def iter_files(root: Path, suffix: str) -> Iterator[Path]:
        """Recursively yield files under ``root`` whose name ends with ``suffix``.

        Raises:
            NotADirectoryError: If ``root`` is not a directory.
        """
        if not root.is_dir():
            raise NotADirectoryError(str(root))
        for path in sorted(root.rglob("*")):
            if path.is_file() and path.name.endswith(suffix):
                yield path
