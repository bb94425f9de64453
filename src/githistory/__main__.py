"""Allow ``python -m githistory``."""

import sys

from githistory.cli import main

sys.exit(main())
