"""
Entry point for running the SysrootKit CLI as a module.

Usage: python -m sysrootkit [options]
"""

from sysrootkit.cli.parser import main

if __name__ == "__main__":
    main()
