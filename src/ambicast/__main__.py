import sys

from ambicast.main import main


sys.exit(main())
