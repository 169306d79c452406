"""
Main entry point for running secretstore as a module.

Usage:
    python -m secretstore <command> [args...]
"""

from .cli import main
import sys

if __name__ == "__main__":
    sys.exit(main())
