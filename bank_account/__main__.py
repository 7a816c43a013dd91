import sys

from bank_account.console import main

sys.exit(main())
