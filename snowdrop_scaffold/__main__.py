import sys

from snowdrop_scaffold.cli import main

sys.exit(main())
