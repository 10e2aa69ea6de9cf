import re
from datetime import datetime, timezone

import pytest

from utils.helpers import format_iso_date, format_list, generate_request_id, mask_value, truncate_text


@pytest.mark.parametrize("value, expected", [
    (None, "(not set)"),
    ("", "(not set)"),
    ("short", "*****"),
    ("12345678", "********"),
    ("sk-abcdef123456", "sk-*********456"),
    ("https://example.openai.azure.com/", "http" + "*" * 25 + "com/"),
])
def test_mask_value(value, expected):
    assert mask_value(value) == expected


def test_format_list():
    assert format_list([]) == ""
    assert format_list(["cat"]) == "cat"
    assert format_list(["cat", "dog"]) == "cat and dog"
    assert format_list(["cat", "dog", "bird"]) == "cat, dog, and bird"


def test_truncate_text():
    assert truncate_text("hello", 10) == "hello"
    assert truncate_text("hello world", 5) == "hello..."


def test_generate_request_id():
    assert re.fullmatch(r"req_\d+", generate_request_id())


def test_format_iso_date():
    assert format_iso_date(datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)) == "2024-01-02T03:04:05+00:00"
