"""Binary package pipeline: data -> control -> container."""

from __future__ import annotations

import contextlib
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import BinaryIO

from debpack.core.errors import ContainerWriteError
from debpack.core.logging import get_logger

from .ar import assemble
from .control import build_control_archive
from .data import build_data_archive
from .types import BuildResult, BuildTimestamp, FileEntry, PackageInfo

log = get_logger(__name__)


def build_package(
    info: PackageInfo,
    files: Sequence[FileEntry],
    sink: BinaryIO,
    *,
    timestamp: BuildTimestamp | None = None,
    compress_level: int = 9,
) -> BuildResult:
    """Write a binary package for `info` and `files` to `sink`.

    Each stage completes before the next starts. On error nothing is
    retried and whatever reached `sink` must be discarded by the caller;
    see write_package for a path-based variant that does this.
    """
    ts = timestamp or BuildTimestamp.now()
    log.verbose(f"build {info.name} {info.version} timestamp={ts.epoch} entries={len(files)}")

    data = build_data_archive(files, ts, compress_level=compress_level)
    log.info(
        f"data.tar.gz: {data.files} files, {data.installed_size_kib} KiB installed, "
        f"{len(data.tar_gz)} bytes"
    )

    control = build_control_archive(
        info, data.installed_size, data.ledger, ts, compress_level=compress_level
    )
    log.info(f"control.tar.gz: {len(control)} bytes")

    written = assemble(sink, control, data.tar_gz, ts)
    log.info(f"package {info.name}_{info.version}: {written} bytes")

    return BuildResult(
        timestamp=ts,
        installed_size_kib=data.installed_size_kib,
        files=data.files,
        ledger=data.ledger,
        bytes_written=written,
    )


def write_package(
    info: PackageInfo,
    files: Sequence[FileEntry],
    path: Path,
    *,
    timestamp: BuildTimestamp | None = None,
    compress_level: int = 9,
) -> BuildResult:
    """Build into a unique temp file beside `path`; replace `path` only on success."""
    path.parent.mkdir(parents=True, exist_ok=True)
    f, tmp = _open_output(path)
    try:
        with f:
            result = build_package(
                info, files, f, timestamp=timestamp, compress_level=compress_level
            )
            _sync(f, tmp)
        _replace(tmp, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            tmp.unlink()
        raise
    return result


def _open_output(path: Path) -> tuple[BinaryIO, Path]:
    try:
        f = tempfile.NamedTemporaryFile(
            mode="wb", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        )
    except OSError as e:
        raise ContainerWriteError(str(path), e.strerror or str(e)) from e
    return f, Path(f.name)


def _sync(f: BinaryIO, tmp: Path) -> None:
    try:
        f.flush()
        os.fsync(f.fileno())
        # NamedTemporaryFile creates 0600; packages are published world-readable
        os.chmod(tmp, 0o644)
    except OSError as e:
        raise ContainerWriteError(str(tmp), e.strerror or str(e)) from e


def _replace(tmp: Path, path: Path) -> None:
    try:
        tmp.replace(path)
    except OSError as e:
        raise ContainerWriteError(str(path), e.strerror or str(e)) from e
