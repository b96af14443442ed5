"""Run the Behave Pro client from a source checkout."""

import sys

from behavepro.main import main

if __name__ == "__main__":
    sys.exit(main())
