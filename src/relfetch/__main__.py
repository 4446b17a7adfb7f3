import sys

from relfetch.cli import main

sys.exit(main())
