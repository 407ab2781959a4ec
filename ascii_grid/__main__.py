import sys

from ascii_grid.cli import main

sys.exit(main())
