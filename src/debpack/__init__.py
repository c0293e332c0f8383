"""debpack - reproducible binary .deb package builder."""

__version__ = "0.1.0"

from debpack.core.errors import (
    ArchiveWriteError,
    ContainerWriteError,
    DebpackError,
    RenderError,
    SourceReadError,
)
from debpack.deb import (
    BuildResult,
    BuildTimestamp,
    FileEntry,
    PackageInfo,
    build_package,
    write_package,
)

__all__ = [
    "ArchiveWriteError",
    "BuildResult",
    "BuildTimestamp",
    "ContainerWriteError",
    "DebpackError",
    "FileEntry",
    "PackageInfo",
    "RenderError",
    "SourceReadError",
    "build_package",
    "write_package",
]
