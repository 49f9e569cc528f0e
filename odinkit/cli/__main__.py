"""
Entry point for running OdinKit CLI as a module.

Usage: python -m odinkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
