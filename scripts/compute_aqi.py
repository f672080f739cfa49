#!/usr/bin/env python
from __future__ import annotations


import sys
from pathlib import Path as _Path

# Ensure 'src' is on PYTHONPATH when running from repo root
ROOT = _Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from airwise.cli import main


if __name__ == "__main__":
    sys.exit(main())
