import sys

from lispwalk.cli import main

sys.exit(main())
