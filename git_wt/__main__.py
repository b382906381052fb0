"""Allow running git-wt with ``python -m git_wt``."""

import sys

from git_wt.cli.main import main

sys.exit(main())
