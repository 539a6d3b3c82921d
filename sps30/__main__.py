"""Allow running the CLI with ``python -m sps30``."""

import sys

from sps30.cli import main

if __name__ == "__main__":
    sys.exit(main())
