#!/usr/bin/env python
"""Seed the local document store emulator.

Usage:
    # Seed every entity type
    uv run python scripts/seed_sandbox.py all

    # Reset products with 25 records
    uv run python scripts/seed_sandbox.py products --clear --count=25

    # Show current document counts
    uv run python scripts/seed_sandbox.py --status
"""

from app.cli import run

if __name__ == "__main__":
    run()
