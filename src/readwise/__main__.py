"""Allows running the client as a module (python -m readwise)."""

import sys

from readwise.cli import main

if __name__ == "__main__":
    sys.exit(main())
