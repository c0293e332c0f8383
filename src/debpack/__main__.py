"""Package entry point: python -m debpack ..."""

from __future__ import annotations

import sys

from debpack.cli import main

if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
