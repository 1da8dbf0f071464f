"""Allow ``python -m meshtracer``."""

import sys

from meshtracer.cli import main

sys.exit(main())
