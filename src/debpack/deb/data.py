"""data.tar.gz builder.

Streams every regular source file into the data member in input order,
hashing each body while it is copied so the md5sums ledger describes the
exact bytes that went into the archive.
"""

from __future__ import annotations

import hashlib
import os
import stat
from collections.abc import Iterable
from typing import Any, BinaryIO

from debpack.core.errors import ArchiveWriteError, SourceReadError
from debpack.core.logging import get_logger

from .tarball import TarGzWriter, tarinfo_deterministic
from .types import BuildTimestamp, ChecksumLedger, DataArchive, FileEntry

log = get_logger(__name__)

DATA_MEMBER = "data.tar.gz"


class _DigestingReader:
    """File wrapper that feeds every byte read into a digest."""

    def __init__(self, f: BinaryIO, digest: Any) -> None:
        self._f = f
        self._digest = digest

    def read(self, size: int = -1) -> bytes:
        chunk = self._f.read(size)
        self._digest.update(chunk)
        return chunk


def build_data_archive(
    files: Iterable[FileEntry],
    timestamp: BuildTimestamp,
    *,
    compress_level: int = 9,
) -> DataArchive:
    """Build data.tar.gz from file entries.

    Directories are skipped. Any unreadable source or write failure aborts
    the whole build; no partial archive is returned.

    Raises:
        SourceReadError: a source path is missing or cannot be opened
        ArchiveWriteError: a header or body could not be written
    """
    writer = TarGzWriter(DATA_MEMBER, timestamp, compress_level)
    ledger = ChecksumLedger()
    installed_size = 0
    count = 0

    try:
        for entry in files:
            size = _add_entry(writer, entry, timestamp, ledger)
            if size is None:
                continue
            installed_size += size
            count += 1
        tar_gz = writer.finish()
    except BaseException:
        writer.abort()
        raise

    log.debug(f"{DATA_MEMBER}: files={count} installed_size={installed_size} bytes={len(tar_gz)}")
    return DataArchive(tar_gz=tar_gz, ledger=ledger, installed_size=installed_size, files=count)


def _add_entry(
    writer: TarGzWriter,
    entry: FileEntry,
    timestamp: BuildTimestamp,
    ledger: ChecksumLedger,
) -> int | None:
    """Add one entry; returns its size, or None when it was skipped."""
    src = str(entry.src)
    # stat before open: opening a FIFO would block
    try:
        st = os.stat(src)
    except OSError as e:
        raise SourceReadError(src, e.strerror or str(e)) from e
    if not _is_regular(src, entry, st.st_mode):
        return None

    try:
        f = open(src, "rb")
    except OSError as e:
        raise SourceReadError(src, e.strerror or str(e)) from e

    with f:
        try:
            st = os.fstat(f.fileno())
        except OSError as e:
            raise SourceReadError(src, e.strerror or str(e)) from e
        # the path may have been swapped between stat and open
        if not _is_regular(src, entry, st.st_mode):
            return None

        ti = tarinfo_deterministic(entry.dst, st.st_size, stat.S_IMODE(st.st_mode), timestamp)
        digest = hashlib.md5(usedforsecurity=False)
        reader = _DigestingReader(f, digest)
        writer.add(ti, reader)

        try:
            trailing = f.read(1)
        except OSError as e:
            raise SourceReadError(src, e.strerror or str(e)) from e
        if trailing:
            raise ArchiveWriteError(
                DATA_MEMBER, entry.dst, f"file grew past {st.st_size} bytes while copying"
            )

    ledger.append(digest.hexdigest(), entry.rel_path)
    log.verbose(f"add {entry.dst} size={st.st_size} mode={ti.mode:o}")
    return st.st_size


def _is_regular(src: str, entry: FileEntry, mode: int) -> bool:
    """False for directories (skipped); raises for other non-regular files."""
    if stat.S_ISDIR(mode):
        log.verbose(f"skip directory {src} -> {entry.dst}")
        return False
    if not stat.S_ISREG(mode):
        raise SourceReadError(src, "not a regular file")
    return True
