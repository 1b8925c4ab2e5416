"""CLI dispatch for python -m gewe_cc."""

import sys

from gewe_cc.cli import main

if __name__ == "__main__":
    sys.exit(main())
