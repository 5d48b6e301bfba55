"""
Entry point for module execution (``python -m domtify_autoimport``).
"""

import sys

from domtify_autoimport.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
