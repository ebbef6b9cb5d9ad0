from __future__ import annotations

import pytest

from apicompat.tags import parse_tags, quote, unquote


def test_parse_tags_reads_every_entry():
    assert parse_tags('json:"name,omitempty" xml:"n"  yaml:"-"') == {
        "json": "name,omitempty",
        "xml": "n",
        "yaml": "-",
    }


def test_parse_tags_empty_and_blank():
    assert parse_tags("") == {}
    assert parse_tags("   ") == {}


def test_parse_tags_honors_escapes():
    assert parse_tags(r'a:"x\"y" b:"tab\there"') == {"a": 'x"y', "b": "tab\there"}


@pytest.mark.parametrize(
    "tag, expected",
    [
        ('a:"1" b', {"a": "1"}),
        ('a:"1" b:2', {"a": "1"}),
        ('a:"1" b :"2"', {"a": "1"}),
        ('a:"1" b:"unterminated', {"a": "1"}),
        ('"a":"1"', {}),
    ],
)
def test_parse_tags_stops_at_malformed_entry(tag: str, expected: dict[str, str]):
    assert parse_tags(tag) == expected


def test_parse_tags_last_value_wins():
    assert parse_tags('a:"1" a:"2"') == {"a": "2"}


@pytest.mark.parametrize(
    "quoted, expected",
    [
        ('"plain"', "plain"),
        (r'"é\x41\101"', "éAA"),
        (r'"\\"', "\\"),
        (r'"\q"', ""),
        ('"a"b"', ""),
        ('"no end', ""),
        ('"line\nbreak"', ""),
    ],
)
def test_unquote(quoted: str, expected: str):
    assert unquote(quoted) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("plain", '"plain"'),
        ("", '""'),
        ('say "hi"\\', r'"say \"hi\"\\"'),
        ("a\x01\x7f", r'"a\x01\x7f"'),
        ("tab\there\n", r'"tab\there\n"'),
        ("\u00a0\u200b\U0001f600", r'"\u00a0\u200b😀"'),
        (" ​", r'" ​"'),
    ],
)
def test_quote_matches_go_literals(value: str, expected: str):
    assert quote(value) == expected
    assert unquote(quote(value)) == value
