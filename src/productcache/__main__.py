"""Main entry point for the productcache CLI.

Usage:
    python -m productcache --help
"""

from productcache.cli import main

if __name__ == "__main__":
    main()
