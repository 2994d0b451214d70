"""
encoding.py  ── text-encoding sniffing and transcoding for delimited text

Public API
==========

    from tab_morph.data.encoding import sniff, open_text, Encoding

    enc = sniff(prefix_bytes)               # Encoding.UTF8, Encoding.EUC_KR, ...
    with open_text("legacy.csv") as fh:     # canonical str regardless of source bytes
        text = fh.read()

Only byte-order-marked UTF-16 is recognised; an unmarked prefix that is not
valid UTF-8 is assumed to be Korean legacy 8-bit text.
"""
from __future__ import annotations

import codecs
import io
import logging
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Optional, Union

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 4096  # bytes inspected by sniff()

__all__ = ["Encoding", "SAMPLE_SIZE", "sniff", "wrap", "open_text"]


class Encoding(str, Enum):
    UTF8 = "utf-8"
    UTF8_BOM = "utf-8-bom"
    UTF16_LE = "utf-16-le"
    UTF16_BE = "utf-16-be"
    EUC_KR = "euc-kr"

    @property
    def bom(self) -> bytes:
        return _BOMS.get(self, b"")

    @property
    def codec(self) -> str:
        """Python codec name used to decode the content bytes."""
        return _CODECS[self]


_BOMS = {
    Encoding.UTF8_BOM: codecs.BOM_UTF8,
    Encoding.UTF16_LE: codecs.BOM_UTF16_LE,
    Encoding.UTF16_BE: codecs.BOM_UTF16_BE,
}

# cp949 is the Windows superset of EUC-KR; plain EUC-KR files decode identically.
_CODECS = {
    Encoding.UTF8: "utf-8",
    Encoding.UTF8_BOM: "utf-8",
    Encoding.UTF16_LE: "utf-16-le",
    Encoding.UTF16_BE: "utf-16-be",
    Encoding.EUC_KR: "cp949",
}


# ---------------------------------------------------------------------------
# Sniffer
# ---------------------------------------------------------------------------

def sniff(prefix: bytes) -> Encoding:
    """Classify the text encoding of a byte prefix.

    The checks run in a fixed order and the first match wins: UTF-8 marker,
    UTF-16 little-endian marker, UTF-16 big-endian marker, well-formed UTF-8,
    and finally the legacy 8-bit fallback.

    Args:
        prefix: The first bytes of a file (``SAMPLE_SIZE`` bytes is enough).

    Returns:
        The detected ``Encoding``.
    """
    if prefix.startswith(codecs.BOM_UTF8):
        return Encoding.UTF8_BOM
    if prefix.startswith(codecs.BOM_UTF16_LE):
        return Encoding.UTF16_LE
    if prefix.startswith(codecs.BOM_UTF16_BE):
        return Encoding.UTF16_BE
    if _is_utf8(prefix):
        return Encoding.UTF8
    return Encoding.EUC_KR


def _is_utf8(data: bytes) -> bool:
    """True when *data* is UTF-8.

    A full ``SAMPLE_SIZE`` prefix may end inside a multibyte character; that
    cut is tolerated.  A shorter prefix is the whole file and must be complete.
    """
    try:
        data.decode("utf-8")
    except UnicodeDecodeError as exc:
        if len(data) < SAMPLE_SIZE:
            return False
        # at most 3 trailing bytes of one character
        return exc.reason == "unexpected end of data" and exc.start >= len(data) - 3
    return True


# ---------------------------------------------------------------------------
# Transcoding adapter
# ---------------------------------------------------------------------------

def wrap(stream: BinaryIO, encoding: Encoding) -> io.TextIOWrapper:
    """Wrap a binary stream positioned past any byte-order mark.

    Reads from the returned wrapper yield ``str``. Undecodable bytes become
    U+FFFD so one bad byte never aborts a whole read. Newlines are passed
    through untranslated so the csv module sees quoted line breaks intact.
    """
    return io.TextIOWrapper(stream, encoding=encoding.codec, errors="replace", newline="")


def open_text(path: Union[str, Path], encoding: Optional[Encoding] = None) -> io.TextIOWrapper:
    """Open *path* as canonical text, sniffing its encoding when none is given.

    The byte-order mark (if any) is skipped before wrapping. The caller owns
    the returned stream and must close it; closing it closes the file.
    """
    fh = open(path, "rb")
    try:
        prefix = fh.read(SAMPLE_SIZE)
        resolved = encoding or sniff(prefix)
        logger.debug("Sniffed encoding %s for %s", resolved.value, path)
        skip = len(resolved.bom) if prefix.startswith(resolved.bom) else 0
        fh.seek(skip)
        return wrap(fh, resolved)
    except BaseException:
        fh.close()
        raise
