"""Package build types.

All values here are immutable except ChecksumLedger, which the data builder
appends to while streaming and the control builder only reads.
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from debpack.core.errors import InvalidEntryError

ROOT_MARKER = "./"


@dataclass(frozen=True)
class PackageInfo:
    name: str
    version: str
    section: str = ""
    priority: str = ""
    architecture: str = ""
    maintainer: str = ""
    vendor: str = ""
    homepage: str = ""
    description: str = ""
    replaces: str = ""
    provides: str = ""
    depends: tuple[str, ...] = ()
    conflicts: tuple[str, ...] = ()


@dataclass(frozen=True)
class FileEntry:
    """A source file and the path it installs to, e.g. './usr/bin/tool'."""

    src: Path
    dst: str

    def __post_init__(self) -> None:
        if not self.dst.startswith(ROOT_MARKER) or len(self.dst) <= len(ROOT_MARKER):
            raise InvalidEntryError(self.dst)
        if not isinstance(self.src, Path):
            object.__setattr__(self, "src", Path(self.src))

    @property
    def rel_path(self) -> str:
        return self.dst[len(ROOT_MARKER) :]


@dataclass(frozen=True, order=True)
class BuildTimestamp:
    """Single build time shared by every header of every archive layer."""

    epoch: int

    @classmethod
    def now(cls) -> BuildTimestamp:
        return cls(int(time.time()))

    @classmethod
    def from_epoch(cls, epoch: int) -> BuildTimestamp:
        if epoch < 0:
            raise ValueError(f"timestamp must not be negative: {epoch}")
        return cls(int(epoch))


@dataclass
class ChecksumLedger:
    """Ordered (hex digest, relative path) pairs in file-processing order."""

    entries: list[tuple[str, str]] = field(default_factory=list)

    def append(self, digest: str, rel_path: str) -> None:
        self.entries.append((digest, rel_path))

    def render(self) -> bytes:
        # surrogateescape matches how tarfile encodes the data member names
        text = "".join(f"{digest}  {path}\n" for digest, path in self.entries)
        return text.encode("utf-8", "surrogateescape")

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.entries)


@dataclass(frozen=True)
class DataArchive:
    tar_gz: bytes
    ledger: ChecksumLedger
    installed_size: int  # bytes
    files: int

    @property
    def installed_size_kib(self) -> int:
        return self.installed_size // 1024


@dataclass(frozen=True)
class BuildResult:
    timestamp: BuildTimestamp
    installed_size_kib: int
    files: int
    ledger: ChecksumLedger
    bytes_written: int
