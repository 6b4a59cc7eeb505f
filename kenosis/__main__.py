import sys

from kenosis.cli import main

sys.exit(main())
