"""Unit tests for the encoding sniffer and transcoding adapter."""

import codecs
import io

import pytest

from tab_morph.data.encoding import SAMPLE_SIZE, Encoding, open_text, sniff, wrap

KOREAN = "이름,나이\n김철수,30\n"


@pytest.mark.parametrize(
    "prefix,expected",
    [
        (codecs.BOM_UTF8 + b"a,b", Encoding.UTF8_BOM),
        (codecs.BOM_UTF16_LE + "a,b".encode("utf-16-le"), Encoding.UTF16_LE),
        (codecs.BOM_UTF16_BE + "a,b".encode("utf-16-be"), Encoding.UTF16_BE),
        (b"plain,ascii\n", Encoding.UTF8),
        (KOREAN.encode("utf-8"), Encoding.UTF8),
        (KOREAN.encode("euc-kr"), Encoding.EUC_KR),
        (b"", Encoding.UTF8),
    ],
    ids=["utf8-bom", "utf16-le", "utf16-be", "ascii", "utf8-korean", "euc-kr", "empty"],
)
def test_sniff(prefix, expected):
    assert sniff(prefix) is expected


def test_sniff_prefers_marker_over_validity():
    # FF FE is never valid UTF-8, but the marker check runs first anyway
    assert sniff(b"\xff\xfe") is Encoding.UTF16_LE


def test_sniff_tolerates_character_cut_at_sample_boundary():
    text = ("가" * SAMPLE_SIZE).encode("utf-8")
    prefix = text[:SAMPLE_SIZE]
    # 4096 is not a multiple of 3, so the last character is split
    assert SAMPLE_SIZE % 3 != 0
    assert sniff(prefix) is Encoding.UTF8


def test_sniff_invalid_byte_in_middle_is_legacy():
    assert sniff(b"abc\xffdef") is Encoding.EUC_KR


def test_sniff_short_file_ending_mid_character_is_legacy():
    # the whole file is in the prefix, so a cut character is really broken
    prefix = "가나".encode("utf-8")[:-1]
    assert len(prefix) < SAMPLE_SIZE
    assert sniff(prefix) is Encoding.EUC_KR


@pytest.mark.parametrize(
    "raw",
    [
        KOREAN.encode("utf-8"),
        codecs.BOM_UTF8 + KOREAN.encode("utf-8"),
        codecs.BOM_UTF16_LE + KOREAN.encode("utf-16-le"),
        codecs.BOM_UTF16_BE + KOREAN.encode("utf-16-be"),
        KOREAN.encode("euc-kr"),
    ],
    ids=["utf8", "utf8-bom", "utf16-le", "utf16-be", "euc-kr"],
)
def test_open_text_yields_canonical_text(tmp_path, raw):
    path = tmp_path / "input.csv"
    path.write_bytes(raw)
    with open_text(path) as fh:
        assert fh.read() == KOREAN


def test_open_text_with_explicit_encoding(tmp_path):
    path = tmp_path / "input.csv"
    path.write_bytes(KOREAN.encode("euc-kr"))
    with open_text(path, Encoding.EUC_KR) as fh:
        assert fh.read() == KOREAN


def test_wrap_keeps_line_endings_and_replaces_bad_bytes():
    stream = io.BytesIO(b"a\r\nb\xff\n")
    text = wrap(stream, Encoding.UTF8).read()
    assert text == "a\r\nb\ufffd\n"


def test_encoding_properties():
    assert Encoding.UTF8_BOM.bom == codecs.BOM_UTF8
    assert Encoding.UTF8.bom == b""
    assert Encoding.EUC_KR.codec == "cp949"
    assert Encoding("utf-16-be") is Encoding.UTF16_BE
