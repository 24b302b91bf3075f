import sys

from huffcomp.cli import main

sys.exit(main())
