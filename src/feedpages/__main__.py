import sys

from feedpages.main import main

sys.exit(main())
