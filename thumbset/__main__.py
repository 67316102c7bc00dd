"""
Main entry point for running the package as a module.

Usage:
    python -m thumbset generate photo.jpg --local-root /srv/media --thumb small=120x90
    python -m thumbset destroy --local-root /srv/media --original images/photo.jpg --thumb small=120x90
    python -m thumbset paths --original images/photo.jpg --thumb small=120x90
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())
