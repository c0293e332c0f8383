"""Tests for the debpack command line driver."""

from __future__ import annotations

from pathlib import Path

import pytest

from debpack.cli import main


@pytest.fixture
def manifest(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.delenv("SOURCE_DATE_EPOCH", raising=False)
    (tmp_path / "tool").write_bytes(b"#!/bin/sh\n")
    path = tmp_path / "pkg.yaml"
    path.write_text(
        "package:\n"
        "  name: demo\n"
        '  version: "1.0"\n'
        "  arch: all\n"
        "files:\n"
        "  - {src: tool, dst: ./usr/bin/tool}\n"
    )
    return path


def _config(tmp_path: Path) -> list[str]:
    return ["--config", str(tmp_path / "no-config.yaml")]


def test_build_writes_package(tmp_path: Path, manifest: Path, capsys) -> None:
    out = tmp_path / "demo.deb"

    rc = main([*_config(tmp_path), "build", str(manifest), "-o", str(out), "--timestamp", "0"])

    assert rc == 0
    assert out.read_bytes().startswith(b"!<arch>\n")
    assert "installed_size=0KiB" in capsys.readouterr().out


def test_build_is_reproducible(tmp_path: Path, manifest: Path) -> None:
    a, b = tmp_path / "a.deb", tmp_path / "b.deb"

    for out in (a, b):
        args = ["-q", "build", str(manifest), "-o", str(out), "--timestamp", "99"]
        assert main([*_config(tmp_path), *args]) == 0

    assert a.read_bytes() == b.read_bytes()


def test_build_default_output_name(
    tmp_path: Path, manifest: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("DEBPACK_OUTPUT_DIR", str(tmp_path / "dist"))

    assert main([*_config(tmp_path), "build", str(manifest), "--timestamp", "0"]) == 0
    assert (tmp_path / "dist" / "demo_1.0_all.deb").exists()


def test_build_missing_source_fails(tmp_path: Path, manifest: Path, capsys) -> None:
    (tmp_path / "tool").unlink()
    out = tmp_path / "demo.deb"

    rc = main([*_config(tmp_path), "build", str(manifest), "-o", str(out)])

    assert rc == 1
    assert not out.exists()
    assert "Cannot read source file" in capsys.readouterr().err


def test_inspect_lists_members(tmp_path: Path, manifest: Path, capsys) -> None:
    out = tmp_path / "demo.deb"
    main([*_config(tmp_path), "-q", "build", str(manifest), "-o", str(out), "--timestamp", "0"])
    capsys.readouterr()

    assert main([*_config(tmp_path), "inspect", str(out)]) == 0
    names = [line.split("\t")[0] for line in capsys.readouterr().out.splitlines()]
    assert names == ["debian-binary", "control.tar.gz", "data.tar.gz"]


def test_inspect_rejects_non_ar(tmp_path: Path) -> None:
    bogus = tmp_path / "x.deb"
    bogus.write_bytes(b"not an archive")
    assert main([*_config(tmp_path), "inspect", str(bogus)]) == 1


def test_bad_compress_level_is_usage_error(tmp_path: Path, manifest: Path) -> None:
    with pytest.raises(SystemExit) as ei:
        main(["build", str(manifest), "--compress-level", "12"])
    assert ei.value.code == 2
