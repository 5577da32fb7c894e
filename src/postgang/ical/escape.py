from __future__ import annotations

ESCAPED_CHARS = frozenset("\\;,")


def escape_char(char: str) -> str:
    if char in ESCAPED_CHARS:
        return "\\" + char
    if char == "\n":
        return "\\n"
    return char


def escape(text: str) -> str:
    return "".join(escape_char(c) for c in text)
