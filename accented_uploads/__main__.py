import sys

from .rename_tool import main

sys.exit(main())
