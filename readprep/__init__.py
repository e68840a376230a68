"""
readprep: reading exam practice core.

Subpackages:
- processing: raw text -> cleaned text -> word-bounded passages
- selection:  item pool -> diversified practice session
- study:      adaptive difficulty and SM-2 review of missed items
"""

__version__ = "0.3.0"
