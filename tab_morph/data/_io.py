"""
Internal I/O helpers - kept separate so the public package namespace stays tidy.

Each reader lowers one source format into a ``RecordSet`` and each writer
raises a ``RecordSet`` into one destination format.  Spreadsheet containers
are decoded by openpyxl (xlsx) and xlrd (xls).
"""
from __future__ import annotations

import csv
import datetime as _dt
import itertools
import json
import logging
from json import JSONDecodeError
from pathlib import Path
from typing import Any, Iterator, List, Optional

import openpyxl
import xlrd
from openpyxl.cell import WriteOnlyCell
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from .encoding import Encoding, open_text
from .exceptions import (
    EmptyArrayError,
    EmptySheetError,
    MalformedJSONError,
    MalformedRecordError,
    NoDataError,
    NoSheetError,
    SpreadsheetOpenError,
    UnsupportedFormatError,
)
from .formats import Format
from .records import RecordSet, normalize_rows

logger = logging.getLogger(__name__)

XLSX_SHEET_NAME = "Sheet1"
CSV_FIELD_SIZE_LIMIT = 2**31 - 1  # largest value a C long accepts on every platform


# --------------------------------------------------------------------------- #
# Cell text
# --------------------------------------------------------------------------- #
def _cell_text(value: Any) -> str:
    """Render a spreadsheet cell value the way it reads in the sheet."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        # both libraries hand back numeric cells as floats
        return str(int(value))
    if isinstance(value, (_dt.datetime, _dt.date, _dt.time)):
        return value.isoformat()
    return str(value)


def _xls_cell_text(cell: xlrd.sheet.Cell, datemode: int) -> str:
    if cell.ctype == xlrd.XL_CELL_DATE:
        try:
            return _cell_text(xlrd.xldate_as_datetime(cell.value, datemode))
        except xlrd.xldate.XLDateError:
            return _cell_text(cell.value)
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return _cell_text(bool(cell.value))
    if cell.ctype == xlrd.XL_CELL_ERROR:
        return xlrd.error_text_from_code.get(cell.value, "#ERR")
    return _cell_text(cell.value)


def _json_cell_text(value: Any) -> str:
    """Strings stay as they are; everything else takes its JSON literal form."""
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _rstrip_empty(cells: List[str]) -> List[str]:
    while cells and cells[-1] == "":
        cells.pop()
    return cells


# --------------------------------------------------------------------------- #
# Readers
# --------------------------------------------------------------------------- #
def _read_impl(path: Path, fmt: Format, **kwargs) -> RecordSet:
    """Read *path* with the reader for *fmt*.

    Args:
        path: File to read.
        fmt: Format of the file, normally the result of ``detect``.
        **kwargs: Reader options; only ``encoding`` (CSV) is recognised.

    Returns:
        The file's rows as a normalized ``RecordSet``.
    """
    if fmt is Format.CSV:
        return read_csv(path, encoding=kwargs.pop("encoding", None))
    elif fmt is Format.XLSX:
        return read_xlsx(path)
    elif fmt is Format.XLS:
        return read_xls(path)
    elif fmt is Format.JSON:
        return read_json(path)
    else:
        raise UnsupportedFormatError(f"No reader for format {fmt!r}")


def read_csv(path: Path, encoding: Optional[Encoding] = None) -> RecordSet:
    """Read delimited text in any supported encoding.

    Quoting is parsed leniently and rows may have any number of fields.
    A record the parser rejects is dropped and the read carries on.
    """
    # the csv default (128 KiB per field) would drop valid rows as malformed
    if csv.field_size_limit() < CSV_FIELD_SIZE_LIMIT:
        csv.field_size_limit(CSV_FIELD_SIZE_LIMIT)
    with open_text(path, encoding) as fh:
        first = fh.readline()
        delimiter = _guess_delimiter(first)
        reader = csv.reader(itertools.chain([first], fh), delimiter=delimiter, strict=False)
        rows = list(_iter_records(reader))
    return RecordSet(normalize_rows(rows))


def _guess_delimiter(line: str) -> str:
    if "\t" in line and "," not in line:
        return "\t"
    return ","


def _next_record(reader) -> List[str]:
    try:
        return next(reader)
    except csv.Error as exc:
        raise MalformedRecordError(f"line {getattr(reader, 'line_num', '?')}: {exc}") from exc


def _iter_records(reader) -> Iterator[List[str]]:
    """Yield the non-blank records of *reader*, skipping malformed ones."""
    while True:
        try:
            record = _next_record(reader)
        except StopIteration:
            return
        except MalformedRecordError as exc:
            logger.debug("Skipping malformed record, %s", exc)
            continue
        if record:
            yield record


def read_xlsx(path: Path) -> RecordSet:
    """Read every row of the first sheet of a modern (ZIP/XML) workbook.

    Raises:
        SpreadsheetOpenError: If openpyxl cannot open the workbook.
        NoSheetError: If the workbook has no sheets.
        EmptySheetError: If the first sheet has no rows.
    """
    # a file object keeps openpyxl from vetting the extension
    with open(path, "rb") as fh:
        try:
            wb = openpyxl.load_workbook(fh, read_only=True, data_only=True)
        except Exception as exc:
            raise SpreadsheetOpenError(f"cannot open workbook {path}: {exc}") from exc
        try:
            if not wb.sheetnames:
                raise NoSheetError(f"no sheets in {path}")
            ws = wb[wb.sheetnames[0]]
            rows = [
                _rstrip_empty([_cell_text(value) for value in values])
                for values in ws.iter_rows(values_only=True)
            ]
        finally:
            wb.close()

    # openpyxl reports the used range; drop the blank rows it pads at the end
    while rows and not rows[-1]:
        rows.pop()
    if not rows:
        raise EmptySheetError(f"sheet {ws.title!r} in {path} is empty")
    return RecordSet(normalize_rows(rows))


def read_xls(path: Path) -> RecordSet:
    """Read the first sheet of a legacy (OLE2) workbook.

    A file xlrd cannot open is retried once as a modern workbook, since
    mislabelled xlsx files are common.  If that fails too, the original
    xlrd failure is reported.

    Raises:
        SpreadsheetOpenError: If neither xlrd nor openpyxl can open the file.
        NoSheetError: If the workbook has no sheets.
    """
    try:
        book = xlrd.open_workbook(str(path), ragged_rows=True)
    except OSError:
        raise
    except Exception as legacy_exc:
        logger.debug("xlrd could not open %s (%s); retrying as xlsx", path, legacy_exc)
        try:
            return read_xlsx(path)
        except SpreadsheetOpenError:
            raise SpreadsheetOpenError(
                f"cannot open legacy workbook {path}: {legacy_exc}"
            ) from legacy_exc

    try:
        if book.nsheets == 0:
            raise NoSheetError(f"no sheets in {path}")
        sheet = book.sheet_by_index(0)
        width = sheet.row_len(0) if sheet.nrows else 0
        rows = []
        for rx in range(sheet.nrows):
            if sheet.row_len(rx) == 0:
                # no cells recorded for this row
                continue
            rows.append([_xls_cell_text(cell, book.datemode) for cell in sheet.row(rx)])
    finally:
        book.release_resources()
    return RecordSet(normalize_rows(rows, width))


def read_json(path: Path) -> RecordSet:
    """Read an array of objects; the header comes from the first object's keys.

    Keys that appear only in later objects are not represented, and keys of
    the first object missing from a later one give an empty cell.  A lone
    top-level object is read as a one-element array.

    Raises:
        MalformedJSONError: If the file is not an array of objects.
        EmptyArrayError: If the array is empty.
    """
    with open(path, "rb") as fh:
        raw = fh.read()
    try:
        items = json.loads(raw.decode("utf-8-sig"))
    except (UnicodeDecodeError, JSONDecodeError) as exc:
        raise MalformedJSONError(f"JSON parse failed for {path}: {exc}") from exc

    if isinstance(items, dict):
        items = [items]
    if not isinstance(items, list):
        raise MalformedJSONError(f"{path}: expected an array of objects")
    if not items:
        raise EmptyArrayError(f"{path}: empty JSON array")
    if not all(isinstance(item, dict) for item in items):
        raise MalformedJSONError(f"{path}: every array element must be an object")

    header = list(items[0])
    rows = [header]
    for item in items:
        rows.append([_json_cell_text(item[key]) if key in item else "" for key in header])
    return RecordSet(normalize_rows(rows))


# --------------------------------------------------------------------------- #
# Writers
# --------------------------------------------------------------------------- #
def _write_impl(records: RecordSet, path: Path, fmt: Format) -> None:
    """Write *records* to *path* in *fmt*.

    Args:
        records: Rows to write; row 0 is the header for JSON output.
        path: Destination file, created or truncated.
        fmt: Destination format (CSV, JSON or XLSX).
    """
    if fmt is Format.CSV:
        write_csv(records, path)
    elif fmt is Format.JSON:
        write_json(records, path)
    elif fmt is Format.XLSX:
        write_xlsx(records, path)
    elif fmt is Format.XLS:
        raise AssertionError("xls output is rejected before dispatch")
    else:
        raise AssertionError("unreachable")


def write_csv(records: RecordSet, path: Path) -> None:
    """Write every row verbatim, row 0 included, with minimal quoting."""
    with open(path, "w", encoding="utf-8", newline="") as fo:
        writer = csv.writer(fo, lineterminator="\n")
        writer.writerows(records.rows)


def write_json(records: RecordSet, path: Path) -> None:
    """Write data rows as an indented array of header-keyed objects."""
    if len(records) < 1:
        raise NoDataError("no data to write")
    with open(path, "w", encoding="utf-8") as fo:
        # json never escapes "/" or "<>"; ensure_ascii keeps non-ASCII literal
        json.dump(records.to_records(), fo, ensure_ascii=False, indent=2)
        fo.write("\n")


def write_xlsx(records: RecordSet, path: Path) -> None:
    """Write every cell at its 1-indexed (row, column) on a single sheet."""
    if len(records) < 1:
        raise NoDataError("no data to write")
    wb = openpyxl.Workbook(write_only=True)
    ws = wb.create_sheet(XLSX_SHEET_NAME)
    for row in records:
        ws.append([_text_cell(ws, cell) for cell in row])
    wb.save(path)


def _text_cell(ws, text: str) -> Optional[WriteOnlyCell]:
    """A cell that always holds *text* as a string, never a formula or error code."""
    # control characters are not representable in the sheet XML
    text = ILLEGAL_CHARACTERS_RE.sub("", text)
    if not text:
        return None
    cell = WriteOnlyCell(ws, value=text)
    cell.data_type = "s"
    return cell
