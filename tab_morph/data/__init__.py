"""
tab_morph.data
==============

Data handling modules for tab_morph.
"""

from .formats import Format
from .encoding import Encoding, sniff
from .records import RecordSet, sanitize, align_width
from .converter import detect, read, write, convert

__all__ = [
    "Format",
    "Encoding",
    "RecordSet",
    "sniff",
    "sanitize",
    "align_width",
    "detect",
    "read",
    "write",
    "convert",
]
