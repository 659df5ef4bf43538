"""python -m mscode"""

import sys

from .runner import main

sys.exit(main())
