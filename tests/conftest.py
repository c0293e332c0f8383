"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add src to path (for 'debpack.*' imports without installing)
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root / "src"))


@pytest.fixture(autouse=True)
def _quiet_logging():
    """Keep per-test verbosity changes from leaking."""
    from debpack.core.logging import VerbosityLevel, set_verbosity

    set_verbosity(VerbosityLevel.NORMAL)
    yield
    set_verbosity(VerbosityLevel.NORMAL)


@pytest.fixture
def timestamp():
    """Fixed build timestamp (2024-01-01T00:00:00Z)."""
    from debpack.deb.types import BuildTimestamp

    return BuildTimestamp.from_epoch(1704067200)


@pytest.fixture
def package_info():
    """Minimal package metadata."""
    from debpack.deb.types import PackageInfo

    return PackageInfo(
        name="demo",
        version="1.0",
        section="utils",
        priority="optional",
        architecture="amd64",
        maintainer="Demo Maintainer <demo@example.org>",
        vendor="Example",
        homepage="https://example.org/demo",
        description="Demo package",
        depends=("libc",),
    )


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """Source files: bin/tool (0755), share/readme.txt (0644), share/ dir."""
    root = tmp_path / "src"
    (root / "bin").mkdir(parents=True)
    (root / "share").mkdir()

    tool = root / "bin" / "tool"
    tool.write_bytes(b"#!/bin/sh\necho tool\n")
    tool.chmod(0o755)

    readme = root / "share" / "readme.txt"
    readme.write_bytes(b"x" * 3000)
    readme.chmod(0o644)
    return root
