"""Field-level decoders shared by every record layout.

Each decoder takes a Cursor, reads exactly its field width and returns a
plain Python value. Sentinel encodings for "not available" decode to None.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass
from datetime import date, datetime, timezone

from tachoparse.core.base.cursor import Cursor
from tachoparse.core.base.tables import Code, lookup

UNSET_TIME = (0x00000000, 0xFFFFFFFF)


@dataclass(frozen=True)
class CodedText:
    """Text stored with its one-byte code page."""

    code_page: int
    text: str

    def __str__(self) -> str:
        return self.text


_CODE_PAGES: dict[int, str] = {n: f"iso8859_{n}" for n in range(1, 17) if n != 12}
_CODE_PAGES[80] = "koi8_u"
_CODE_PAGES[85] = "koi8_r"


# --- Integers and times ---


def time_real(cur: Cursor, what: str = "TimeReal") -> datetime | None:
    """Seconds since 1970-01-01T00:00:00Z; 0 and all-0xFF mean unset."""
    seconds = cur.u32(what)
    if seconds in UNSET_TIME:
        return None
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def odometer(cur: Cursor, what: str = "odometer") -> int | None:
    """3-byte kilometre count; 0xFFFFFF means not available."""
    value = cur.u24(what)
    return None if value == 0xFFFFFF else value


def code(cur: Cursor, table: dict[int, str], what: str = "code") -> Code:
    return lookup(table, cur.u8(what))


# --- BCD ---


def decode_bcd(data: bytes) -> int | None:
    """Decode packed BCD digits; any nibble above 9 means not applicable."""
    value = 0
    for byte in data:
        hi, lo = byte >> 4, byte & 0x0F
        if hi > 9 or lo > 9:
            return None
        value = value * 100 + hi * 10 + lo
    return value


def bcd(cur: Cursor, n: int, what: str = "BCD") -> int | None:
    return decode_bcd(cur.read(n, what))


def datef(cur: Cursor, what: str = "Datef") -> date | None:
    """BCD yyyy mm dd; all zeros or an impossible date means unset."""
    raw = cur.read(4, what)
    year = decode_bcd(raw[:2])
    month = decode_bcd(raw[2:3])
    day = decode_bcd(raw[3:4])
    if not year or not month or not day:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def month_year(cur: Cursor, what: str = "MonthYear") -> tuple[int | None, int | None]:
    """BCD mm yy, returned as (month, year) with a four digit year."""
    raw = cur.read(2, what)
    month = decode_bcd(raw[:1])
    year = decode_bcd(raw[1:])
    return month, None if year is None else 2000 + year


# --- Text ---


def _trim(raw: bytes) -> bytes:
    if raw and all(b == 0xFF for b in raw):
        return b""
    return raw.rstrip(b" \x00")


def ia5(cur: Cursor, n: int, what: str = "IA5String") -> str:
    """Fixed-width ASCII text with trailing padding removed."""
    return _trim(cur.read(n, what)).decode("latin-1")


def decode_text(code_page: int, raw: bytes) -> str:
    encoding = _CODE_PAGES.get(code_page, "latin-1")
    try:
        codecs.lookup(encoding)
    except LookupError:
        encoding = "latin-1"
    return _trim(raw).decode(encoding, errors="replace")


def coded_text(cur: Cursor, n: int, what: str = "text") -> CodedText:
    """One code page byte followed by n bytes of text."""
    code_page = cur.u8(f"{what} code page")
    return CodedText(code_page, decode_text(code_page, cur.read(n, what)))


def name(cur: Cursor, what: str = "Name") -> CodedText:
    return coded_text(cur, 35, what)


def address(cur: Cursor, what: str = "Address") -> CodedText:
    return coded_text(cur, 35, what)


# --- GNSS ---


def geo_coordinate(cur: Cursor, what: str = "coordinate") -> float | None:
    """Signed ±DDDMM.M x 10 as decimal degrees; 0x7FFFFF means unknown."""
    raw = cur.s24(what)
    if raw == 0x7FFFFF:
        return None
    sign = -1 if raw < 0 else 1
    magnitude = abs(raw)
    degrees, tenth_minutes = divmod(magnitude, 1000)
    return sign * round(degrees + tenth_minutes / 600, 6)
