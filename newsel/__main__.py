"""Allow ``python -m newsel``."""

import sys

from newsel.cli import main

sys.exit(main())
