import sys

from go2web.cli import main

sys.exit(main())
