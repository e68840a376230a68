"""
CLI module for readprep.
"""

from .main import app, main

__all__ = ["app", "main"]
