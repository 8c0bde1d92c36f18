"""Allow ``python -m blogfeed.cli`` execution."""

import sys

from blogfeed.cli.posts import main

sys.exit(main())
