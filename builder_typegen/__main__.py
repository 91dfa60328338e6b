"""
Entry point for running the type generator as a module.

Usage:
    python -m builder_typegen generate [model]    # write interfaces
    python -m builder_typegen                     # MCP server over stdio
"""

from .cli import main

if __name__ == "__main__":
    main()
