"""Allow running as: python -m charmodel"""

import sys

from charmodel.cli import main

sys.exit(main())
