#!/usr/bin/env python3
"""
Text formatting helpers shared by handlers and exceptions.
"""

# Single-character escapes understood by existing clients
_ESCAPES = {
    '"': '\\"',
    '\\': '\\\\',
    '\a': '\\a',
    '\b': '\\b',
    '\f': '\\f',
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
    '\v': '\\v',
}


def decode_operand(raw: bytes) -> str:
    """
    Decode request bytes without losing undecodable bytes.

    Undecodable bytes survive as surrogate escapes so that go_quote can
    render them as ``\\xNN``.
    """
    return raw.decode('utf-8', errors='surrogateescape')


def go_quote(text: str) -> str:
    """
    Double-quote text with backslash escapes.

    This is the quoting existing clients see in confirmation and health
    payloads: ``abc`` plus a newline becomes ``"abc\\n"``. Printable
    characters pass through; others become ``\\xNN``, ``\\uNNNN`` or
    ``\\UNNNNNNNN``.
    """
    out = ['"']
    for ch in text:
        code = ord(ch)
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif 0xDC80 <= code <= 0xDCFF:
            # surrogate-escaped raw byte
            out.append(f'\\x{code - 0xDC00:02x}')
        elif ch.isprintable():
            out.append(ch)
        elif code < 0x80:
            out.append(f'\\x{code:02x}')
        elif code <= 0xFFFF:
            out.append(f'\\u{code:04x}')
        else:
            out.append(f'\\U{code:08x}')
    out.append('"')
    return ''.join(out)


def first_line(text: str) -> str:
    """First line of a response payload, for log messages."""
    return text.split('\n', 1)[0]


def strip_line_terminator(text: str) -> str:
    """Remove one trailing "\\n" or "\\r\\n"."""
    if text.endswith('\r\n'):
        return text[:-2]
    if text.endswith('\n'):
        return text[:-1]
    return text
