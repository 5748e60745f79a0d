from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath

from pydantic import BaseModel


@dataclass(frozen=True)
class FileRef:
    """A file inside the vault, addressed by its vault-relative POSIX path."""

    path: str

    @property
    def name(self) -> str:
        return PurePosixPath(self.path).name

    @property
    def basename(self) -> str:
        return PurePosixPath(self.path).stem

    @property
    def extension(self) -> str:
        return PurePosixPath(self.path).suffix.removeprefix(".")

    @property
    def parent(self) -> str:
        parent = str(PurePosixPath(self.path).parent)
        return "" if parent == "." else parent

    def with_extension(self, extension: str) -> FileRef:
        return FileRef(str(PurePosixPath(self.path).with_suffix(f".{extension}")))


class CompressionResult(BaseModel):
    """Outcome of compressing one markdown file."""

    source: str
    target: str
    original_size: int
    compressed_size: int

    @property
    def saved_ratio(self) -> float:
        """Percentage of bytes saved, 0.0 for an empty source."""
        if self.original_size == 0:
            return 0.0
        return (1 - self.compressed_size / self.original_size) * 100
