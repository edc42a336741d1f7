"""Allow ``python -m photo_extractor``."""

import sys
from multiprocessing import freeze_support

from .cli import main

if __name__ == "__main__":
    freeze_support()
    sys.exit(main())
