import sys

from trbbfi.cli import main

sys.exit(main())
