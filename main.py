#!/usr/bin/env python3
"""Main entry point for Launch Policy."""

import sys

from launch_policy.cli import main


if __name__ == "__main__":
    sys.exit(main())
