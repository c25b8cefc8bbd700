#!/usr/bin/env python3
"""
Convenience shim to run Prowling from a source checkout.
Usage: python prowling.py
"""

from prowling.cli import main


if __name__ == "__main__":
    main()
