"""
CLI layer for rulebundle.

Two entry points share the same build path (``rulebundle.bundle.pipeline``):

    rulebundle-compile <rules-folder> <output-archive>
    rulebundle build|discover|descriptor ...

This package handles only terminal transport: argument parsing, logging
setup, coloured output and exit codes.
"""

from rulebundle.cli.app import app

__all__ = ["app"]
