"""
copyplane command-line interface.
"""

from copyplane.cli.main import main

__all__ = ["main"]
