import pytest

from tab_morph.data.exceptions import UnsupportedOutputError
from tab_morph.data.formats import Format


@pytest.mark.parametrize("value,expected", [
    ("csv", Format.CSV),
    ("XLSX", Format.XLSX),
    (".json", Format.JSON),
    (" xls ", Format.XLS),
])
def test_format_from_name(value, expected):
    assert Format(value) is expected


def test_unknown_format_name():
    with pytest.raises(ValueError, match="Unrecognized format"):
        Format("parquet")


@pytest.mark.parametrize("path,expected", [
    ("out.csv", Format.CSV),
    ("OUT.JSON", Format.JSON),
    ("dir/report.final.xlsx", Format.XLSX),
])
def test_output_from_path(path, expected):
    assert Format.output_from_path(path) is expected


@pytest.mark.parametrize("path", ["out.xls", "out.txt", "out", "out.tsv"])
def test_output_from_path_rejects(path):
    with pytest.raises(UnsupportedOutputError, match="supported: .csv, .xlsx, .json"):
        Format.output_from_path(path)


def test_is_writable():
    assert [f for f in Format if not f.is_writable] == [Format.XLS]
