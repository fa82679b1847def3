"""
Entry point for running the codeckit CLI as a module.

Usage: python -m codeckit [command] [options]
"""

from codeckit.cli.parser import main

if __name__ == "__main__":
    main()
