"""
Module execution entry point.

Allows running with: python -m fission_cli
"""

import sys
from fission_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
