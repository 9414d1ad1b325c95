import sys

from lexua.main import main

sys.exit(main())
