"""Allow ``python -m debup``."""

import sys

from .cli import main

sys.exit(main())
