"""Document under lint."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

README_NAMES = ("readme.md", "readme.markdown")


@dataclass(frozen=True, slots=True)
class Document:
    """A file under lint; repository-level rules only need its location."""

    path: Path

    @property
    def directory(self) -> Path:
        return self.path.parent

    @property
    def filename(self) -> str:
        return str(self.path)


def load_document(path: Path) -> Document:
    """Return a Document for an existing file."""
    resolved = path.resolve()
    if not resolved.is_file():
        raise ValueError(f"Document does not exist: {path}")
    return Document(path=resolved)


def find_readme(directory: Path) -> Path | None:
    """Find a readme in ``directory`` matching case-insensitively."""
    if not directory.is_dir():
        return None
    candidates = {entry.name.lower(): entry for entry in directory.iterdir() if entry.is_file()}
    for name in README_NAMES:
        if name in candidates:
            return candidates[name]
    return None
