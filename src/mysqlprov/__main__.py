import sys

from mysqlprov.cli import main

sys.exit(main())
