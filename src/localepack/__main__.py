"""Allow ``python -m localepack``."""

import sys

from localepack.cli import main

sys.exit(main())
