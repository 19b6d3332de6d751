"""
Entry point for running microposts as a module.

Usage:
    python -m microposts [args]
"""
from microposts.cli import main

if __name__ == "__main__":
    main()
