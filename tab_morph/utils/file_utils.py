"""
file_utils.py

Metadata helper for the files tab_morph can read.
"""

import datetime as _dt
from pathlib import Path
from typing import Any, Union

from tab_morph.data.converter import read
from tab_morph.data.detection import detect
from tab_morph.data.encoding import SAMPLE_SIZE, sniff
from tab_morph.data.formats import Format


def get_metadata(filepath: Union[str, Path]) -> dict[str, Any]:
    """
    Return metadata for the given file.

    The format is detected from content and the file is read in full to
    count its rows, so the counts match what a conversion would write.

    Args:
        filepath (str | Path): Path to the data file.

    Returns:
        dict[str, Any]: A dict with keys 'format', 'encoding', 'num_records',
        'num_columns', 'header', 'file_size' and 'modified'.

    Raises:
        FileNotFoundError: If filepath does not exist or is not a regular file.
        DetectionError: If the file format is unsupported.
    """
    path = Path(filepath)
    if not path.is_file():
        raise FileNotFoundError(f"{str(filepath)!r} does not exist or is not a regular file.")

    # ---------- filesystem --------------------------------------------------
    stats = path.stat()
    modified = _dt.datetime.fromtimestamp(stats.st_mtime, _dt.timezone.utc)

    # ---------- format & encoding -------------------------------------------
    fmt = detect(path)
    encoding = _guess_encoding(path, fmt)

    # ---------- records -----------------------------------------------------
    records = read(path, fmt)

    return {
        "format": fmt.value,
        "encoding": encoding,
        "num_records": records.data_row_count,
        "num_columns": records.width,
        "header": records.header,
        "file_size": stats.st_size,
        "modified": modified,
    }


def _guess_encoding(path: Path, fmt: Format) -> str:
    """Encoding label for *fmt*: sniffed for CSV, fixed for the rest."""
    if fmt is Format.CSV:
        with open(path, "rb") as fh:
            return sniff(fh.read(SAMPLE_SIZE)).value
    if fmt is Format.JSON:
        return "utf-8"
    return "binary"
