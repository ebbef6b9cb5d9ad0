"""Struct tag parsing (`key:"value" other:"value"`)."""

from __future__ import annotations

import re

_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
}

_ESCAPE_RE = re.compile(
    r"\\(?:"
    r"(?P<simple>[abfnrtv\\\"])"
    r"|x(?P<hex>[0-9a-fA-F]{2})"
    r"|(?P<oct>[0-7]{3})"
    r"|u(?P<u4>[0-9a-fA-F]{4})"
    r"|U(?P<u8>[0-9a-fA-F]{8})"
    r")"
)


def _decode_escape(m: re.Match[str]) -> str:
    if m.group("simple") is not None:
        return _SIMPLE_ESCAPES[m.group("simple")]
    if m.group("hex") is not None:
        return chr(int(m.group("hex"), 16))
    if m.group("oct") is not None:
        v = int(m.group("oct"), 8)
        if v > 0xFF:
            raise ValueError("octal escape out of range")
        return chr(v)
    v = int(m.group("u4") or m.group("u8"), 16)
    if v > 0x10FFFF or 0xD800 <= v <= 0xDFFF:
        raise ValueError("invalid unicode escape")
    return chr(v)


def unquote(quoted: str) -> str:
    """Unquote a double-quoted Go string literal.

    Returns the empty string when the literal is malformed.
    """
    if len(quoted) < 2 or quoted[0] != '"' or quoted[-1] != '"':
        return ""
    body = quoted[1:-1]
    if "\n" in body:
        return ""

    out: list[str] = []
    pos = 0
    while True:
        i = body.find("\\", pos)
        if i == -1:
            if '"' in body[pos:]:
                return ""
            out.append(body[pos:])
            return "".join(out)
        if '"' in body[pos:i]:
            return ""
        out.append(body[pos:i])
        m = _ESCAPE_RE.match(body, i)
        if m is None:
            return ""
        try:
            out.append(_decode_escape(m))
        except ValueError:
            return ""
        pos = m.end()


_QUOTE_ESCAPES = {v: "\\" + k for k, v in _SIMPLE_ESCAPES.items()}


def quote(s: str) -> str:
    """Return `s` as a double-quoted Go string literal, as `%q` prints it."""
    out = ['"']
    for ch in s:
        if ch in ('"', "\\"):
            out.append("\\" + ch)
        elif ch.isprintable():
            out.append(ch)
        elif ch in _QUOTE_ESCAPES:
            out.append(_QUOTE_ESCAPES[ch])
        elif ord(ch) < 0x80:
            out.append(f"\\x{ord(ch):02x}")
        elif ord(ch) < 0x10000:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(f"\\U{ord(ch):08x}")
    out.append('"')
    return "".join(out)


def parse_tags(tag: str) -> dict[str, str]:
    """Return every `key:"value"` entry of a struct tag as a dict.

    Parsing stops silently at the first malformed entry; entries read before
    it are kept. A repeated key keeps its last value.
    """
    tags: dict[str, str] = {}
    while tag:
        tag = tag.lstrip(" ")
        if not tag:
            break

        # Key runs up to the colon; a space or quote first is a syntax error.
        i = 0
        while i < len(tag) and tag[i] not in ' :"':
            i += 1
        if i + 1 >= len(tag) or tag[i] != ":" or tag[i + 1] != '"':
            break
        key = tag[:i]
        tag = tag[i + 1 :]

        # Scan the quoted value, skipping escaped characters.
        i = 1
        while i < len(tag) and tag[i] != '"':
            if tag[i] == "\\":
                i += 1
            i += 1
        if i >= len(tag):
            break
        quoted = tag[: i + 1]
        tag = tag[i + 1 :]

        tags[key] = unquote(quoted)
    return tags
