"""Position-tracking read view over an immutable byte buffer."""

from __future__ import annotations

from typing import Callable, TypeVar

from tachoparse.core.base.errors import InvalidRepeatCountError, TruncationError

T = TypeVar("T")


class Cursor:
    """Bounded, forward-only reader over a shared buffer.

    A cursor never copies the underlying buffer. Sub-cursors made with
    take() share it and report offsets relative to the start of the whole
    file, so errors raised deep inside a record still point at the right
    byte. A read that does not fit raises TruncationError and leaves the
    offset untouched.
    """

    __slots__ = ("_buf", "offset", "end", "tag")

    def __init__(
        self,
        buffer: bytes | bytearray | memoryview,
        offset: int = 0,
        end: int | None = None,
        tag: object | None = None,
    ) -> None:
        self._buf = buffer if isinstance(buffer, memoryview) else memoryview(buffer)
        self.offset = offset
        self.end = len(self._buf) if end is None else end
        self.tag = tag

    def __repr__(self) -> str:
        return f"Cursor(offset=0x{self.offset:X}, end=0x{self.end:X}, tag={self.tag})"

    @property
    def remaining(self) -> int:
        return self.end - self.offset

    def at_end(self) -> bool:
        return self.offset >= self.end

    def _need(self, n: int, what: str, tag: object | None = None) -> None:
        if n < 0 or n > self.remaining:
            raise TruncationError(
                what, wanted=n, available=self.remaining, offset=self.offset,
                tag=tag if tag is not None else self.tag,
            )

    # ---- raw reads ----

    def read(self, n: int, what: str = "bytes") -> bytes:
        """Read n bytes as an independent bytes object."""
        self._need(n, what)
        data = bytes(self._buf[self.offset : self.offset + n])
        self.offset += n
        return data

    def rest(self, what: str = "trailing bytes") -> bytes:
        """Read everything up to the end of this cursor."""
        return self.read(self.remaining, what)

    def peek(self, n: int = 1, what: str = "bytes") -> bytes:
        """Return the next n bytes without advancing."""
        self._need(n, what)
        return bytes(self._buf[self.offset : self.offset + n])

    def skip(self, n: int, what: str = "bytes") -> None:
        self._need(n, what)
        self.offset += n

    def _uint(self, n: int, what: str) -> int:
        self._need(n, what)
        value = int.from_bytes(self._buf[self.offset : self.offset + n], "big")
        self.offset += n
        return value

    def u8(self, what: str = "u8") -> int:
        return self._uint(1, what)

    def u16(self, what: str = "u16") -> int:
        return self._uint(2, what)

    def u24(self, what: str = "u24") -> int:
        return self._uint(3, what)

    def u32(self, what: str = "u32") -> int:
        return self._uint(4, what)

    def u64(self, what: str = "u64") -> int:
        return self._uint(8, what)

    def s24(self, what: str = "s24") -> int:
        """Read a 3-byte two's complement integer."""
        value = self._uint(3, what)
        if value & 0x800000:
            value -= 0x1000000
        return value

    # ---- structure ----

    def take(self, n: int, what: str = "record", tag: object | None = None) -> Cursor:
        """Split off the next n bytes as a sub-cursor and advance past them."""
        self._need(n, what, tag)
        sub = Cursor(self._buf, self.offset, self.offset + n, tag if tag is not None else self.tag)
        self.offset += n
        return sub

    def at(self, offset: int, n: int, what: str = "record") -> Cursor:
        """Sub-cursor over n bytes at an absolute offset ahead of this one, without advancing."""
        if offset < self.offset or n < 0 or offset + n > self.end:
            raise TruncationError(
                what, wanted=n, available=max(self.end - offset, 0), offset=offset, tag=self.tag,
            )
        return Cursor(self._buf, offset, offset + n, self.tag)

    def repeat(self, count: int, size: int, decode: Callable[[Cursor], T], what: str = "records") -> list[T]:
        """Decode count fixed-size records, each within its own slice."""
        if count == 0:
            return []
        if count * size > self.remaining:
            raise InvalidRepeatCountError(
                f"{count} {what} of {size} bytes exceed {self.remaining} remaining",
                offset=self.offset,
                tag=self.tag,
            )
        return [decode(self.take(size, what)) for _ in range(count)]
