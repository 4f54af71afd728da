#!/usr/bin/env python3
"""
Creation Registry - command-line runner

Usage:
    python run.py register c1 --title T --description D --content-hash <hex> --category art
    python run.py get c1
    python run.py update c1 --title T2 --description D2 --category craft
    python run.py list-by-creator <principal>
"""

from __future__ import annotations

import sys

from src.cli import main


if __name__ == "__main__":
    sys.exit(main())
