"""Allow `python -m stash_scanner`."""

import sys

from stash_scanner.cli import main


sys.exit(main())
