"""
Remix - packs a repository into a filtered, transformed in-memory snapshot.
"""

__version__ = "0.1.0"
