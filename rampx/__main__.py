import sys

from rampx.cli import main

sys.exit(main())
