"""Command line driver.

    python -m debpack build pkg.yaml [-o out.deb] [--timestamp N]
    python -m debpack inspect out.deb
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from debpack.core.config import ConfigResolver
from debpack.core.errors import DebpackError
from debpack.core.logging import apply_logging_policy, get_logger, set_colors
from debpack.deb.ar import read_members
from debpack.deb.package import write_package
from debpack.deb.types import BuildTimestamp
from debpack.manifest import load_manifest

log = get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="debpack", description="Build binary .deb packages")
    p.add_argument("--config", type=Path, default=None, help="User config file (YAML)")
    verbosity = p.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose", action="count", default=0, help="More output (-vv for debug)"
    )
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Warnings and errors only")
    sub = p.add_subparsers(dest="cmd", required=True)

    build = sub.add_parser("build", help="Build a package from a YAML manifest")
    build.add_argument("manifest", type=Path, help="Path to package manifest")
    build.add_argument("-o", "--out", type=Path, default=None, help="Output .deb path")
    build.add_argument("--timestamp", type=int, default=None, help="Build time as epoch seconds")
    build.add_argument(
        "--compress-level",
        type=int,
        choices=range(0, 10),
        default=None,
        metavar="0-9",
        help="gzip level for control and data members (default: 9)",
    )

    inspect = sub.add_parser("inspect", help="List the ar members of a package")
    inspect.add_argument("package", type=Path, help="Path to .deb")
    return p


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    cli: dict[str, Any] = {}
    if args.verbose >= 2:
        cli["logging"] = {"level": "debug"}
    elif args.verbose == 1:
        cli["logging"] = {"level": "verbose"}
    elif args.quiet:
        cli["logging"] = {"level": "quiet"}

    build: dict[str, Any] = {}
    if getattr(args, "timestamp", None) is not None:
        build["timestamp"] = args.timestamp
    if getattr(args, "compress_level", None) is not None:
        build["compress_level"] = args.compress_level
    if build:
        cli["build"] = build
    return cli


def _cmd_build(args: argparse.Namespace, resolver: ConfigResolver) -> int:
    manifest = load_manifest(args.manifest)
    out = args.out or resolver.resolve_output_dir() / manifest.default_filename()
    timestamp = BuildTimestamp.from_epoch(resolver.resolve_build_timestamp())

    result = write_package(
        manifest.info,
        manifest.files,
        out,
        timestamp=timestamp,
        compress_level=resolver.resolve_compress_level(),
    )
    print(f"{out} files={result.files} installed_size={result.installed_size_kib}KiB")
    return 0


def _cmd_inspect(args: argparse.Namespace) -> int:
    try:
        with open(args.package, "rb") as f:
            members = read_members(f)
    except OSError as e:
        log.error(f"cannot read {args.package}: {e.strerror or e}")
        return 1
    except ValueError as e:
        log.error(f"{args.package}: {e}")
        return 1
    for m in members:
        print(f"{m.name}\t{m.size}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    resolver = ConfigResolver(cli_args=_cli_overrides(args), user_config_path=args.config)

    try:
        policy = resolver.resolve_logging_policy()
        apply_logging_policy(policy)
        set_colors(policy.color)

        if args.cmd == "build":
            return _cmd_build(args, resolver)
        return _cmd_inspect(args)
    except DebpackError as e:
        log.error(str(e))
        return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
