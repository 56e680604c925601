"""Command line front end for json2yaml."""

from .main import cli, main

__all__ = ["cli", "main"]
