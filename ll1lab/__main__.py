import sys

from ll1lab.report import main

sys.exit(main())
