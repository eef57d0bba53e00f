import sys

from devenv_demo.server import main

sys.exit(main())
