"""Tests for the YAML package manifest loader."""

from __future__ import annotations

from pathlib import Path

import pytest

from debpack.core.errors import ManifestError
from debpack.manifest import load_manifest

MANIFEST = """\
package:
  name: demo
  version: "1.0"
  arch: amd64
  maintainer: Demo <demo@example.org>
  depends: [libc6, "zlib1g (>= 1.2)"]
  conflicts: demo-legacy
files:
  - src: bin/tool
    dst: ./usr/bin/tool
  - src: /opt/readme
    dst: ./usr/share/doc/demo/README
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "pkg.yaml"
    path.write_text(text)
    return path


def test_load_manifest(tmp_path: Path) -> None:
    manifest = load_manifest(_write(tmp_path, MANIFEST))

    assert manifest.info.name == "demo"
    assert manifest.info.architecture == "amd64"
    assert manifest.info.depends == ("libc6", "zlib1g (>= 1.2)")
    assert manifest.info.conflicts == ("demo-legacy",)
    assert [f.dst for f in manifest.files] == ["./usr/bin/tool", "./usr/share/doc/demo/README"]
    assert manifest.files[0].src == tmp_path / "bin" / "tool"
    assert manifest.files[1].src == Path("/opt/readme")
    assert manifest.default_filename() == "demo_1.0_amd64.deb"


def test_default_filename_without_arch(tmp_path: Path) -> None:
    manifest = load_manifest(_write(tmp_path, 'package: {name: demo, version: "2"}\n'))
    assert manifest.default_filename() == "demo_2_all.deb"
    assert manifest.files == ()


def test_missing_manifest(tmp_path: Path) -> None:
    with pytest.raises(ManifestError):
        load_manifest(tmp_path / "missing.yaml")


def test_unquoted_version_rejected(tmp_path: Path) -> None:
    with pytest.raises(ManifestError) as ei:
        load_manifest(_write(tmp_path, "package: {name: demo, version: 1.10}\n"))
    assert ei.value.suggestion is not None


def test_required_fields(tmp_path: Path) -> None:
    with pytest.raises(ManifestError, match="package.version"):
        load_manifest(_write(tmp_path, "package: {name: demo}\n"))


def test_unknown_field(tmp_path: Path) -> None:
    with pytest.raises(ManifestError, match="unknown package field 'essential'"):
        load_manifest(_write(tmp_path, 'package: {name: d, version: "1", essential: "yes"}\n'))


def test_bad_destination_reports_index(tmp_path: Path) -> None:
    text = 'package: {name: d, version: "1"}\nfiles:\n  - {src: a, dst: usr/bin/a}\n'
    with pytest.raises(ManifestError, match=r"files\[0\]"):
        load_manifest(_write(tmp_path, text))


def test_not_a_mapping(tmp_path: Path) -> None:
    with pytest.raises(ManifestError):
        load_manifest(_write(tmp_path, "- just\n- a list\n"))
