"""
tab_morph.utils
===============

Utility functions for tab_morph.
"""
from .file_utils import get_metadata

__all__ = ["get_metadata"]
