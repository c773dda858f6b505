"""kubeinventory command-line interface.

Exposes:
    cli -- Click group entry point (registered as ``kubeinv`` script).
"""

from kubeinventory.cli.main import cli

__all__ = ["cli"]
