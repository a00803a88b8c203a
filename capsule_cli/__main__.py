"""
Module execution entry point.

Allows running with: python -m capsule_cli
"""

import sys
from capsule_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
