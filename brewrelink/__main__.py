import sys

from brewrelink.main import main

sys.exit(main())
