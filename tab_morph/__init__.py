"""
tab_morph
=========

Convert tabular files between CSV, Excel and JSON without naming the source format.
"""

from .data import Encoding, Format, RecordSet, convert, detect, read, write

__all__ = ["Format", "Encoding", "RecordSet", "detect", "read", "write", "convert"]
