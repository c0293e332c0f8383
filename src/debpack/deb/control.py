"""control.tar.gz builder and control record rendering."""

from __future__ import annotations

from collections.abc import Sequence

from debpack.core.errors import RenderError
from debpack.core.logging import get_logger

from .tarball import TarGzWriter, tarinfo_deterministic
from .types import BuildTimestamp, ChecksumLedger, PackageInfo

log = get_logger(__name__)

CONTROL_MEMBER = "control.tar.gz"
CONTROL_MODE = 0o644


def join_list(values: Sequence[str]) -> str:
    """Render a list-valued field: ', '-joined with outer blanks trimmed."""
    return ", ".join(values).strip(" ")


def _single_line(field: str, value: str) -> str:
    if "\n" in value or "\r" in value:
        raise RenderError(field, "value must be a single line")
    return value


def _description(value: str) -> str:
    """Fold a multi-line description into Debian extended-description form."""
    if "\r" in value:
        raise RenderError("Description", "carriage return is not allowed")
    synopsis, *extended = value.rstrip("\n").split("\n")
    lines = [synopsis]
    for line in extended:
        lines.append(" ." if line.strip() == "" else f" {line}")
    return "\n".join(lines)


def render_control(info: PackageInfo, installed_size_kib: int) -> str:
    """Render the control record.

    Output is a pure function of the arguments; field order is fixed.

    Raises:
        RenderError: a field would break the one-field-per-line layout
    """
    fields = [
        ("Package", _single_line("Package", info.name)),
        ("Version", _single_line("Version", info.version)),
        ("Section", _single_line("Section", info.section)),
        ("Priority", _single_line("Priority", info.priority)),
        ("Architecture", _single_line("Architecture", info.architecture)),
        ("Maintainer", _single_line("Maintainer", info.maintainer)),
        ("Vendor", _single_line("Vendor", info.vendor)),
        ("Installed-Size", str(int(installed_size_kib))),
        ("Replaces", _single_line("Replaces", info.replaces)),
        ("Provides", _single_line("Provides", info.provides)),
        ("Depends", _single_line("Depends", join_list(info.depends))),
        ("Conflicts", _single_line("Conflicts", join_list(info.conflicts))),
        ("Homepage", _single_line("Homepage", info.homepage)),
        ("Description", _description(info.description)),
    ]
    return "".join(f"{name}: {value}\n" for name, value in fields)


def build_control_archive(
    info: PackageInfo,
    installed_size: int,
    ledger: ChecksumLedger,
    timestamp: BuildTimestamp,
    *,
    compress_level: int = 9,
) -> bytes:
    """Build control.tar.gz holding 'control' then 'md5sums'.

    Args:
        info: package metadata
        installed_size: total regular file bytes (rendered in KiB)
        ledger: checksum ledger from the data builder, in its order
        timestamp: shared build timestamp
    """
    try:
        control = render_control(info, installed_size // 1024).encode("utf-8", "surrogateescape")
    except UnicodeEncodeError as e:
        raise RenderError("control", f"cannot encode {e.object[e.start : e.end]!r}") from e
    try:
        md5sums = ledger.render()
    except UnicodeEncodeError as e:
        raise RenderError("md5sums", f"cannot encode {e.object[e.start : e.end]!r}") from e

    writer = TarGzWriter(CONTROL_MEMBER, timestamp, compress_level)
    try:
        writer.add_bytes(tarinfo_deterministic("control", 0, CONTROL_MODE, timestamp), control)
        writer.add_bytes(tarinfo_deterministic("md5sums", 0, CONTROL_MODE, timestamp), md5sums)
        tar_gz = writer.finish()
    except BaseException:
        writer.abort()
        raise

    log.debug(
        f"{CONTROL_MEMBER}: control={len(control)} md5sums={len(md5sums)} bytes={len(tar_gz)}"
    )
    return tar_gz
