"""Allow ``python -m apk_checksum``."""

import sys

from .cli import main

sys.exit(main())
