"""
CLI layer for zyra.

Entry point::

    zyra --help
"""

from zyra.cli.app import app

__all__ = ["app"]
