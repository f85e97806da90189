"""
Module execution entry point.

Allows running with: python -m arbor_cli
"""

import sys
from arbor_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
