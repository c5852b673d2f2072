"""
Module execution entry point.

Allows running with: python -m tinychain_cli
"""

import sys
from tinychain_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
