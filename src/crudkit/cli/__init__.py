"""
CLI layer for crudkit.

Provides a Typer application that serves and administers the sample
address-book application.

Entry point::

    crudkit --help
"""

from crudkit.cli.app import app

__all__ = ["app"]
