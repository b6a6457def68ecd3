"""Allow `python -m agent_diff check <address>`."""

import sys

from agent_diff.cli import main

sys.exit(main())
