"""Entry point for running SchemaDraw as a module: python -m schemadraw"""

import sys
from .ui import main

if __name__ == "__main__":
    sys.exit(main())
