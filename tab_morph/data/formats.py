"""
Format definitions for tab_morph data handling.
"""
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Union

from .exceptions import UnsupportedOutputError

OUTPUT_EXTENSIONS = (".csv", ".xlsx", ".json")


class Format(str, Enum):
    CSV = "csv"
    XLSX = "xlsx"
    XLS = "xls"
    JSON = "json"

    @classmethod
    def _missing_(cls, value):
        # accept "CSV", ".json", " xlsx "
        val = str(value).strip().lower().lstrip(".")
        for member in cls:
            if member.value == val:
                return member
        raise ValueError(f"Unrecognized format: {value!r}")

    # ---------- helpers ----------

    @property
    def is_writable(self) -> bool:
        """XLS is read-only; every other format has a writer."""
        return self is not Format.XLS

    @staticmethod
    def output_from_path(path: Union[str, Path]) -> "Format":
        """Choose the writer format from an output filename extension."""
        ext = Path(path).suffix.lower()
        mapping = {
            ".csv": Format.CSV,
            ".xlsx": Format.XLSX,
            ".json": Format.JSON,
        }
        try:
            return mapping[ext]
        except KeyError:
            raise UnsupportedOutputError(
                f"Unsupported output format: {ext or '(none)'!s} "
                f"(supported: {', '.join(OUTPUT_EXTENSIONS)})"
            ) from None
