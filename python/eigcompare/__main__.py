"""Entry point for python -m eigcompare."""
import sys

from eigcompare.cli import main

if __name__ == "__main__":
    sys.exit(main())
