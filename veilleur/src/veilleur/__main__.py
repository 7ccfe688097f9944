"""Allow `python -m veilleur`."""

import sys

from veilleur.cli import main

sys.exit(main())
