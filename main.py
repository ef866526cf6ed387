#!/usr/bin/env python3
"""
Main entry point for urlhash.
"""

import sys

from urlhash.app import main


if __name__ == '__main__':
    sys.exit(main())
