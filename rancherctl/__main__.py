import sys

from rancherctl.cli import main

sys.exit(main())
