"""Allow ``python -m jot`` to run the native messaging host."""

import sys

from jot.main import main

if __name__ == "__main__":
    sys.exit(main())
