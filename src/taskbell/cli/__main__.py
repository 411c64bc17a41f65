"""
Allow running taskbellctl as a module: python -m taskbell.cli
"""

import sys
from .taskbellctl import main

if __name__ == "__main__":
    sys.exit(main())
