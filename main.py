"""
Portfolio Analytics - Main Entry Point
Command-line interface for performance, quality and simulation analytics.
"""

import sys

from cli import main

if __name__ == '__main__':
    sys.exit(main())
