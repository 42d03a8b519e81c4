from __future__ import annotations
import pytest
from disktop.errors import SizeFormatError
from disktop.utils import clamp, format_bytes, parse_size, split_globs


@pytest.mark.parametrize("text,expected", [
    ("", 0),
    ("0", 0),
    ("512", 512),
    ("10K", 10 * 1024),
    ("10k", 10 * 1024),
    ("1.5G", int(1.5 * 1024 ** 3)),
    ("100M", 100 * 1024 ** 2),
    ("100MiB", 100 * 1024 ** 2),
    ("2 GB", 2 * 1024 ** 3),
    ("1T", 1024 ** 4),
    (" 7B ", 7),
    (".5K", 512),
])
def test_parse_size(text, expected):
    assert parse_size(text) == expected


@pytest.mark.parametrize("text", ["abc", "-1", "10X", "1..5M", "5iB", "M"])
def test_parse_size_rejects(text):
    with pytest.raises(SizeFormatError):
        parse_size(text)


def test_size_format_error_is_value_error():
    with pytest.raises(ValueError):
        parse_size("nope")


@pytest.mark.parametrize("num,expected", [
    (0, "0B"),
    (1023, "1023B"),
    (1024, "1.0KiB"),
    (1536, "1.5KiB"),
    (1024 ** 2 * 10, "10.0MiB"),
    (1024 ** 3, "1.0GiB"),
    (1024 ** 6, "1.0EiB"),
])
def test_format_bytes(num, expected):
    assert format_bytes(num) == expected


def test_split_globs():
    assert split_globs("") == ()
    assert split_globs(None) == ()
    assert split_globs("*.log, ,*/tmp ") == ("*.log", "*/tmp")


def test_clamp():
    assert clamp(1, 4, 64) == 4
    assert clamp(100, 4, 64) == 64
    assert clamp(10, 4, 64) == 10
