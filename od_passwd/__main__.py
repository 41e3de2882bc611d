import sys

from od_passwd.cli import main

sys.exit(main())
