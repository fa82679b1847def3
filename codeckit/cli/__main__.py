"""
Entry point for running the codeckit CLI as a module.

Usage: python -m codeckit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
