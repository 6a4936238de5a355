"""
itfstack: entry point.

Usage:
    python -m itfstack summary stack.itf
    python -m itfstack resistance stack.itf metal1 --width 0.1 --length 100
    python -m itfstack path stack.itf metal1 metal3
"""

import sys

from itfstack.cli import main

if __name__ == "__main__":
    sys.exit(main())
