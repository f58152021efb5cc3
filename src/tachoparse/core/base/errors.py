"""Error taxonomy raised by the decoding engine.

Every error carries the byte offset where decoding stopped and, when one
was being decoded, the tag of the enclosing record or block.
"""

from __future__ import annotations


class ParseError(Exception):
    """Base class for all decoding failures."""

    kind = "parse error"

    def __init__(self, message: str, *, offset: int | None = None, tag: object | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.tag = tag

    def __str__(self) -> str:
        where = []
        if self.offset is not None:
            where.append(f"offset 0x{self.offset:X}")
        if self.tag is not None:
            where.append(f"tag {self.tag}")
        if not where:
            return self.message
        return f"{self.message} ({', '.join(where)})"


class ClassificationError(ParseError):
    """Leading bytes match no known device class and generation."""

    kind = "classification error"


class TruncationError(ParseError):
    """A field needs more bytes than remain in the buffer."""

    kind = "truncation error"

    def __init__(
        self,
        what: str,
        *,
        wanted: int,
        available: int,
        offset: int | None = None,
        tag: object | None = None,
    ) -> None:
        super().__init__(
            f"truncated {what}: need {wanted} bytes, {available} available",
            offset=offset,
            tag=tag,
        )
        self.what = what
        self.wanted = wanted
        self.available = available


class RecordShapeError(ParseError):
    """A known record's declared length disagrees with its layout."""

    kind = "record shape error"


class InvalidRepeatCountError(ParseError):
    """A repeat count implies more bytes than remain."""

    kind = "invalid repeat count"


class UnsupportedGenerationError(ParseError):
    """A tag needs a generation variant the document does not have."""

    kind = "unsupported generation"


class UnknownTagError(ParseError):
    """An unknown tag was met while parsing in strict mode."""

    kind = "unknown tag"
