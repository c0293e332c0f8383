"""Binary package (.deb) construction."""

from .ar import ArMember, ArWriter, assemble, read_members
from .control import build_control_archive, render_control
from .data import build_data_archive
from .package import build_package, write_package
from .types import (
    BuildResult,
    BuildTimestamp,
    ChecksumLedger,
    DataArchive,
    FileEntry,
    PackageInfo,
)

__all__ = [
    "ArMember",
    "ArWriter",
    "BuildResult",
    "BuildTimestamp",
    "ChecksumLedger",
    "DataArchive",
    "FileEntry",
    "PackageInfo",
    "assemble",
    "build_control_archive",
    "build_data_archive",
    "build_package",
    "read_members",
    "render_control",
    "write_package",
]
