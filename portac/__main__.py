import sys

from portac.cli import main

sys.exit(main())
