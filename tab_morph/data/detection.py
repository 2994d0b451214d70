"""
detection.py  ── content-based format detection

The file extension is never consulted: binary containers are recognised by
their signature, text files by a bounded sample of their content.

>>> from tab_morph.data.detection import detect
>>> detect("report.dat")
<Format.XLSX: 'xlsx'>
"""
from __future__ import annotations

import codecs
import logging
from pathlib import Path
from typing import Union

from .encoding import SAMPLE_SIZE
from .exceptions import DetectionError
from .formats import Format

logger = logging.getLogger(__name__)

HEADER_PROBE_SIZE = 8

ZIP_SIGNATURE = b"PK"                      # modern spreadsheet (xlsx) container
OLE2_SIGNATURE = b"\xd0\xcf\x11\xe0"       # legacy compound file (xls)

_WHITESPACE = b" \t\r\n\x0b\x0c"

__all__ = ["detect", "detect_bytes", "HEADER_PROBE_SIZE"]


def detect(path: Union[str, Path]) -> Format:
    """Infer the real format of *path* from its content.

    Reads at most ``SAMPLE_SIZE`` bytes and leaves nothing open, so readers
    always start from a fresh handle.

    Args:
        path: File to inspect.

    Returns:
        The detected ``Format``.

    Raises:
        DetectionError: If the content matches no supported format.
        OSError: If the file cannot be opened or read.
    """
    with open(path, "rb") as fh:
        header = fh.read(HEADER_PROBE_SIZE)
        # binary signatures never need the larger text sample
        if _binary_format(header) is None:
            header += fh.read(SAMPLE_SIZE - len(header))
    fmt = detect_bytes(header)
    logger.debug("Detected %s for %s", fmt.value, path)
    return fmt


def detect_bytes(data: bytes) -> Format:
    """Classify an in-memory prefix of a file (see ``detect``)."""
    binary = _binary_format(data[:HEADER_PROBE_SIZE])
    if binary is not None:
        return binary

    sample = data[:SAMPLE_SIZE]
    if b"\x00" in sample:
        raise DetectionError("not supported")

    content = sample.strip(_WHITESPACE)
    # a UTF-8 marker is not content
    if content.startswith(codecs.BOM_UTF8):
        content = content[len(codecs.BOM_UTF8):].lstrip(_WHITESPACE)
    if not content:
        raise DetectionError("not supported")

    if content[:1] in (b"[", b"{"):
        return Format.JSON
    if b"," in content or b"\t" in content:
        return Format.CSV
    raise DetectionError("not supported")


def _binary_format(header: bytes):
    if header.startswith(ZIP_SIGNATURE):
        return Format.XLSX
    if header.startswith(OLE2_SIGNATURE):
        return Format.XLS
    return None
