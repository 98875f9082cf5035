import sys

from izhinet.cli import main

sys.exit(main())
