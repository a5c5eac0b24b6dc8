import sys

from socialite.cli import main

sys.exit(main())
