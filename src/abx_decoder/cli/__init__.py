"""Command-line interface module for the ABX decoder.

This module provides the abx2xml converter from Android Binary XML files to
indented markup.
"""

from .main import main

__all__ = ["main"]
