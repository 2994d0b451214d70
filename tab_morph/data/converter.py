"""
tab_morph.data.converter
==============

Format-agnostic conversion between CSV, XLSX, XLS and JSON.  The source
format is detected from file content; the destination format comes from the
output extension.

Public API
----------
• detect(path) → Format                  - content-based format detection
• read(path, fmt=None) → RecordSet        - read file into a RecordSet
• write(records, path, fmt=None)          - write records to file, returns *records*
• convert(src, dst) → int                 - number of data rows written

Example
-------

>>> from tab_morph.data import convert
>>> convert("export.dat", "export.json")
42
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from . import _io as _io
from .detection import detect
from .encoding import Encoding
from .exceptions import UnsupportedOutputError
from .formats import Format
from .records import RecordSet

logger = logging.getLogger(__name__)

__all__ = ["Format", "RecordSet", "detect", "read", "write", "convert"]


# ============================== public helpers ============================== #


def read(
    path: Union[str, Path],
    fmt: Optional[Format] = None,
    *,
    encoding: Optional[Encoding] = None,
) -> RecordSet:
    """Read a CSV, XLSX, XLS or JSON file into a RecordSet.

    Args:
        path: A string or Path object pointing to the file to read.
        fmt: Optional format specification. If None, the format is detected
             from the file content (never from the extension).
        encoding: Optional text encoding for CSV input. If None, it is
                  sniffed from the first bytes of the file.

    Returns:
        A RecordSet whose cells are sanitized and whose rows are at least as
        wide as row 0.

    Raises:
        DetectionError: If no format is given and the content is unsupported.
        EmptyDataError: If the source holds no usable rows.
        OSError: If the file cannot be read.
    """
    resolved_fmt = Format(fmt) if fmt is not None else detect(path)
    kwargs = {}
    if encoding is not None:
        kwargs["encoding"] = encoding
    return _io._read_impl(Path(path), resolved_fmt, **kwargs)


def write(
    records: RecordSet,
    path: Union[str, Path],
    fmt: Optional[Format] = None,
) -> RecordSet:
    """Write a RecordSet to a file and return it for chaining.

    Args:
        records: The rows to write.
        path: A string or Path object pointing to the destination file.
        fmt: Optional format specification. If None, the format is chosen by
             the output extension (.csv, .json or .xlsx).

    Raises:
        UnsupportedOutputError: If the destination format has no writer.
        NoDataError: If JSON or XLSX output is requested for an empty set.
        OSError: If the file cannot be written.
    """
    resolved_fmt = Format(fmt) if fmt is not None else Format.output_from_path(path)
    if not resolved_fmt.is_writable:
        raise UnsupportedOutputError(f"Unsupported output format: {resolved_fmt.value}")
    _io._write_impl(records, Path(path), resolved_fmt)
    return records


def convert(src: Union[str, Path], dst: Union[str, Path]) -> int:
    """Convert *src* to the format named by *dst*'s extension.

    The output extension is checked before the source is read, so an
    unsupported destination never costs a full read.  A writer that fails
    part-way may leave a partial file behind.

    Args:
        src: Input file in any supported format.
        dst: Output file ending in .csv, .json or .xlsx.

    Returns:
        The number of data rows written (rows after the header, never negative).

    Raises:
        UnsupportedOutputError: If *dst* has an unsupported extension.
        ConversionError: For any detection, read or write failure.
        OSError: If a file cannot be opened, read or written.
    """
    dst_fmt = Format.output_from_path(dst)
    records = read(src)
    write(records, dst, fmt=dst_fmt)
    logger.info("Converted %s -> %s (%d rows)", src, dst, records.data_row_count)
    return records.data_row_count
