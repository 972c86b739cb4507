"""Allow ``python -m stat_monitor``."""

import sys

from stat_monitor.web.server import main

sys.exit(main())
