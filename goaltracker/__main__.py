"""
Module entrypoint for the GoalTracker CLI.

This file exists so that `python -m goaltracker ...` works consistently in all
environments, including when the console-script wrapper is not installed.
"""

from __future__ import annotations

from goaltracker.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
