#!/usr/bin/env python3
"""
terrarun - Main entry point.

Runs one Terraform operation from the command line.
"""

import sys

from terrarun.main import main


if __name__ == "__main__":
    sys.exit(main())
