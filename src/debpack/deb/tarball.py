"""Deterministic gzip-compressed tar streams held in memory."""

from __future__ import annotations

import contextlib
import gzip
import io
import tarfile
from typing import BinaryIO

from debpack.core.errors import ArchiveWriteError

from .types import BuildTimestamp


def tarinfo_deterministic(
    name: str, size: int, mode: int, timestamp: BuildTimestamp
) -> tarfile.TarInfo:
    ti = tarfile.TarInfo(name=name)
    ti.type = tarfile.REGTYPE
    ti.size = size
    ti.mode = mode
    ti.mtime = timestamp.epoch
    ti.uid = 0
    ti.gid = 0
    ti.uname = "root"
    ti.gname = "root"
    return ti


class TarGzWriter:
    """Single-writer tar stream wrapped in gzip.

    The gzip header carries the build timestamp and no file name, so two
    writers fed the same entries produce the same bytes.
    """

    def __init__(self, member: str, timestamp: BuildTimestamp, compress_level: int = 9) -> None:
        self.member = member
        self._buf = io.BytesIO()
        self._gz = gzip.GzipFile(
            filename="",
            mode="wb",
            fileobj=self._buf,
            compresslevel=compress_level,
            mtime=timestamp.epoch,
        )
        self._tar = tarfile.open(fileobj=self._gz, mode="w", format=tarfile.GNU_FORMAT)
        self._closed = False

    def add(self, ti: tarfile.TarInfo, fileobj: BinaryIO) -> None:
        """Write header then exactly ti.size bytes read from fileobj."""
        try:
            self._tar.addfile(ti, fileobj)
        except (OSError, tarfile.TarError, ValueError) as e:
            raise ArchiveWriteError(self.member, ti.name, str(e)) from e

    def add_bytes(self, ti: tarfile.TarInfo, data: bytes) -> None:
        ti.size = len(data)
        self.add(ti, io.BytesIO(data))

    def finish(self) -> bytes:
        """Close tar and gzip layers and return the compressed bytes."""
        if not self._closed:
            self._closed = True
            try:
                self._tar.close()
                self._gz.close()
            except (OSError, tarfile.TarError) as e:
                raise ArchiveWriteError(self.member, "<trailer>", str(e)) from e
        return self._buf.getvalue()

    def abort(self) -> None:
        """Drop a partially written stream."""
        self._closed = True
        with contextlib.suppress(OSError):
            self._gz.close()
        self._buf = io.BytesIO()
