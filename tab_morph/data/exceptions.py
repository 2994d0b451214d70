"""
exceptions.py  ── Custom exceptions for the tab_morph.data module
"""


class ConversionError(RuntimeError):
    """Base class for every failure raised while detecting, reading or writing."""


class DetectionError(ConversionError):
    """Raised when file content matches no known signature or heuristic."""

    def __init__(self, reason: str = "not supported"):
        super().__init__(reason)
        self.reason = reason


class UnsupportedFormatError(ConversionError):
    """Raised when a recognised input format has no reader."""


class UnsupportedOutputError(ConversionError):
    """Raised for an output extension other than .csv, .json or .xlsx."""


class SpreadsheetOpenError(ConversionError):
    """Raised when a spreadsheet library cannot open a workbook."""


class MalformedJSONError(ConversionError):
    """Raised when a JSON file is not an array of key-value objects."""


class MalformedRecordError(ConversionError):
    """Raised for a single unparsable delimited-text record.

    Readers catch this and drop the record; it never reaches the caller.
    """


# ---------------------------------------------------------------------------
# Empty data
# ---------------------------------------------------------------------------

class EmptyDataError(ConversionError):
    """A structurally valid container with no usable rows."""


class NoSheetError(EmptyDataError):
    """The workbook contains no sheets."""


class EmptySheetError(EmptyDataError):
    """The first sheet contains no rows."""


class EmptyArrayError(EmptyDataError):
    """The JSON array has no elements."""


class NoDataError(EmptyDataError):
    """A writer was handed a record set without a header row."""
