"""
Streaming iCalendar content-line printer.

Fields are escaped and folded at 75 octets as they are written, so the
line length has to be carried between calls. A printer is good for one
document on one sink.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterable
from typing import Protocol

from postgang.ical.escape import escape_char
from postgang.ical.model import Attribute, Field, Section

logger = logging.getLogger(__name__)

MAX_LINE_LENGTH = 75
CRLF = "\r\n"
FOLD = "\r\n "


class TextSink(Protocol):
    def write(self, s: str, /) -> object: ...


class PrintAbortedError(RuntimeError):
    """Raised by a strict printer when the sink fails."""


class PrinterStateError(RuntimeError):
    """The printer was driven out of order, e.g. a field started mid-line."""


class ContentPrinter:
    def __init__(
        self,
        sink: TextSink,
        *,
        raise_on_error: bool = False,
        encoding: str = "utf-8",
    ) -> None:
        self._sink = sink
        self._raise_on_error = raise_on_error
        self._encoding = encoding
        self._line_length = 0
        self._bytes_written = 0
        self._error: Exception | None = None

    @classmethod
    def strict(cls, sink: TextSink, *, encoding: str = "utf-8") -> ContentPrinter:
        return cls(sink, raise_on_error=True, encoding=encoding)

    @classmethod
    def checked(cls, sink: TextSink, *, encoding: str = "utf-8") -> ContentPrinter:
        return cls(sink, raise_on_error=False, encoding=encoding)

    @property
    def error(self) -> Exception | None:
        return self._error

    @property
    def ok(self) -> bool:
        return self._error is None

    @property
    def line_length(self) -> int:
        return self._line_length

    @property
    def bytes_written(self) -> int:
        return self._bytes_written

    def _write(self, text: str) -> bool:
        try:
            self._sink.write(text)
        except Exception as exc:
            self._error = exc
            logger.debug("Sink failed after %d bytes: %s", self._bytes_written, exc)
            if self._raise_on_error:
                raise PrintAbortedError(
                    f"Output failed after {self._bytes_written} bytes: {exc}"
                ) from exc
            return False
        self._bytes_written += len(text.encode(self._encoding))
        return True

    def print(self, text: str, escape: bool = True) -> ContentPrinter:
        if self._error is not None:
            return self
        for char in text:
            # Newlines are escaped regardless of the flag.
            unit = escape_char(char) if escape or char == "\n" else char
            size = len(unit.encode(self._encoding))
            if self._line_length + size > MAX_LINE_LENGTH:
                if not self._write(FOLD):
                    return self
                self._line_length = 1
            if not self._write(unit):
                return self
            self._line_length += size
        return self

    def print_line(self) -> ContentPrinter:
        if self._error is not None:
            return self
        if self._write(CRLF):
            self._line_length = 0
        return self

    def print_attribute(self, attribute: Attribute) -> ContentPrinter:
        """Write `name=value`; the name goes through the escaper too, a no-op for keyword tokens."""
        self.print(attribute.name)
        self.print("=", escape=False)
        return self.print(attribute.value)

    def print_field(self, field: Field) -> ContentPrinter:
        if self._error is not None:
            return self
        if self._line_length != 0:
            raise PrinterStateError(
                f"Cannot start field {field.name!r} at line offset {self._line_length}"
            )
        self.print(field.name)
        for attribute in field.attributes:
            self.print(";", escape=False)
            self.print_attribute(attribute)
        self.print(":", escape=False)
        self.print(field.value)
        return self.print_line()

    def print_document(self, fields: Iterable[Field]) -> ContentPrinter:
        for field in fields:
            if self._error is not None:
                break
            self.print_field(field)
        return self

    def print_section(self, section: Section) -> ContentPrinter:
        return self.print_document(section.iter_fields())


def dump(section: Section, sink: TextSink, *, strict: bool = False) -> ContentPrinter:
    printer = ContentPrinter(sink, raise_on_error=strict)
    return printer.print_section(section)


def dumps(section: Section) -> str:
    buf = io.StringIO()
    dump(section, buf, strict=True)
    return buf.getvalue()
