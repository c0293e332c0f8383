"""Unit tests for the ar container writer."""

from __future__ import annotations

import io

import pytest

from debpack.core.errors import ContainerWriteError
from debpack.deb.ar import AR_MAGIC, ArWriter, assemble, read_members
from debpack.deb.types import BuildTimestamp


def test_member_header_layout() -> None:
    out = io.BytesIO()
    w = ArWriter(out)
    w.write_global_header()
    w.add_member("debian-binary", b"2.0\n", mtime=1704067200)

    raw = out.getvalue()
    assert raw[:8] == AR_MAGIC
    header = raw[8:68]
    assert header == (
        b"debian-binary   "
        b"1704067200  "
        b"0     "
        b"0     "
        b"100644  "
        b"4         "
        b"`\n"
    )
    assert raw[68:] == b"2.0\n"
    assert w.bytes_written == len(raw)


def test_odd_body_is_padded() -> None:
    out = io.BytesIO()
    w = ArWriter(out)
    w.write_global_header()
    w.add_member("a", b"abc", mtime=0)
    w.add_member("b", b"de", mtime=0)

    raw = out.getvalue()
    assert raw[68:72] == b"abc\n"
    members = read_members(io.BytesIO(raw))
    assert [(m.name, m.size) for m in members] == [("a", 3), ("b", 2)]
    assert raw[members[1].offset : members[1].offset + 2] == b"de"


def test_name_too_long_raises() -> None:
    w = ArWriter(io.BytesIO())
    with pytest.raises(ContainerWriteError) as ei:
        w.add_member("x" * 17, b"", mtime=0)
    assert ei.value.member == "x" * 17


def test_non_ascii_name_raises() -> None:
    with pytest.raises(ContainerWriteError):
        ArWriter(io.BytesIO()).add_member("contröl", b"", mtime=0)


def test_sink_failure_raises_with_member_name() -> None:
    class _Broken(io.RawIOBase):
        def writable(self) -> bool:
            return True

        def write(self, b) -> int:
            raise OSError(28, "No space left on device")

    with pytest.raises(ContainerWriteError) as ei:
        assemble(_Broken(), b"c", b"d", BuildTimestamp.from_epoch(0))
    assert ei.value.member == "<global header>"


def test_assemble_member_order() -> None:
    out = io.BytesIO()
    ts = BuildTimestamp.from_epoch(1704067200)

    written = assemble(out, b"control-bytes", b"data-bytes!", ts)

    raw = out.getvalue()
    assert written == len(raw)
    members = read_members(io.BytesIO(raw))
    assert [m.name for m in members] == ["debian-binary", "control.tar.gz", "data.tar.gz"]
    assert all(m.mtime == ts.epoch and m.mode & 0o777 == 0o644 for m in members)
    data = members[2]
    assert raw[data.offset : data.offset + data.size] == b"data-bytes!"


def test_read_members_rejects_non_ar() -> None:
    with pytest.raises(ValueError):
        read_members(io.BytesIO(b"PK\x03\x04"))
