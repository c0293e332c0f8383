"""Minimal ar(5) container writer and member lister.

Common ar format only: 16-byte names, no symbol table, no GNU/BSD long
name extensions. That is all a binary package needs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO

from debpack.core.errors import ContainerWriteError

from .types import BuildTimestamp

AR_MAGIC = b"!<arch>\n"
AR_HEADER_SIZE = 60
AR_FMAG = b"`\n"
AR_NAME_MAX = 16

DEBIAN_BINARY_MEMBER = "debian-binary"
DEBIAN_BINARY = b"2.0\n"


@dataclass(frozen=True)
class ArMember:
    name: str
    mtime: int
    mode: int
    size: int
    offset: int  # start of body in the container


def _ar_header(name: str, size: int, mtime: int, mode: int) -> bytes:
    try:
        raw_name = name.encode("ascii")
    except UnicodeEncodeError as e:
        raise ContainerWriteError(name, "member name must be ASCII") from e
    if not raw_name or len(raw_name) > AR_NAME_MAX:
        raise ContainerWriteError(name, f"member name must be 1-{AR_NAME_MAX} bytes")

    header = (
        raw_name.ljust(16)
        + str(mtime).encode("ascii").ljust(12)
        + b"0".ljust(6)
        + b"0".ljust(6)
        + f"{0o100000 | mode:o}".encode("ascii").ljust(8)
        + str(size).encode("ascii").ljust(10)
        + AR_FMAG
    )
    if len(header) != AR_HEADER_SIZE:
        raise ContainerWriteError(name, "header field overflow")
    return header


class ArWriter:
    """Sequential ar writer over a binary sink."""

    def __init__(self, sink: BinaryIO) -> None:
        self._sink = sink
        self.bytes_written = 0

    def _write(self, member: str, data: bytes) -> None:
        try:
            self._sink.write(data)
        except OSError as e:
            raise ContainerWriteError(member, str(e)) from e
        self.bytes_written += len(data)

    def write_global_header(self) -> None:
        self._write("<global header>", AR_MAGIC)

    def add_member(self, name: str, body: bytes, *, mtime: int, mode: int = 0o644) -> None:
        self._write(name, _ar_header(name, len(body), mtime, mode))
        self._write(name, body)
        if len(body) % 2 == 1:
            self._write(name, b"\n")


def assemble(
    sink: BinaryIO,
    control_tar_gz: bytes,
    data_tar_gz: bytes,
    timestamp: BuildTimestamp,
) -> int:
    """Write the binary package container; returns bytes written.

    Member order is fixed: debian-binary, control.tar.gz, data.tar.gz.
    """
    w = ArWriter(sink)
    w.write_global_header()
    w.add_member(DEBIAN_BINARY_MEMBER, DEBIAN_BINARY, mtime=timestamp.epoch)
    w.add_member("control.tar.gz", control_tar_gz, mtime=timestamp.epoch)
    w.add_member("data.tar.gz", data_tar_gz, mtime=timestamp.epoch)
    return w.bytes_written


def read_members(f: BinaryIO) -> list[ArMember]:
    """List members of an ar container without reading their bodies.

    Raises:
        ValueError: not an ar container or truncated header
    """
    if f.read(len(AR_MAGIC)) != AR_MAGIC:
        raise ValueError("not an ar archive")
    pos = len(AR_MAGIC)
    members: list[ArMember] = []
    while True:
        header = f.read(AR_HEADER_SIZE)
        if not header:
            return members
        if len(header) != AR_HEADER_SIZE or header[58:60] != AR_FMAG:
            raise ValueError(f"truncated or corrupt ar header at offset {pos}")
        size = int(header[48:58].decode("ascii").strip())
        members.append(
            ArMember(
                name=header[0:16].decode("ascii").rstrip(" ").rstrip("/"),
                mtime=int(header[16:28].decode("ascii").strip() or "0"),
                mode=int(header[40:48].decode("ascii").strip() or "0", 8),
                size=size,
                offset=pos + AR_HEADER_SIZE,
            )
        )
        skip = size + (size % 2)
        f.seek(skip, 1)
        pos += AR_HEADER_SIZE + skip
