"""Builders for synthetic card and vehicle unit downloads."""

import pytest

from tachoparse.core.base.cursor import Cursor
from tachoparse.core.document import parse_card, parse_vehicle_unit  # noqa: F401  (fills the dispatch table)

# 2020-01-01T00:00:00Z
T0 = 1577836800

DRIVER = "DF00000123456 01"
WORKSHOP = "F123456789012301"
CONTROL = "F987654321098701"
COMPANY = "F555555555555501"
VIN = "WDB9634031L123456"


def u16(value):
    return value.to_bytes(2, "big")


def u24(value):
    return value.to_bytes(3, "big")


def u32(value):
    return value.to_bytes(4, "big")


def text(value, width):
    return value.encode("latin-1").ljust(width, b" ")


def coded(value, width=35, code_page=1):
    return bytes([code_page]) + text(value, width)


def ef(fid, appendix, body):
    """One card elementary file: fid, appendix byte, u16 size, body."""
    return u16(fid) + bytes([appendix]) + u16(len(body)) + body


def vu_array(record_type, size, records):
    """One Gen2 record array: type byte, u16 record size, u16 count, records."""
    return bytes([record_type]) + u16(size) + u16(len(records)) + b"".join(records)


def signature_array(length=64):
    return vu_array(0x08, length, [b"\x5A" * length])


def icc_body():
    """EF ICC: clock stop, extended serial number, approval, personaliser, embedder, IC id."""
    return (
        b"\x01"
        + u32(0x00012345) + b"\x03\x21" + b"\x01" + b"\x10"
        + text("APPR0001", 8)
        + b"\x10"
        + text("DE", 2) + b"\x00\x42" + b"\x07"
        + b"\xAB\xCD"
    )


def ic_body():
    return b"\x11\x22\x33\x44\x55\x66\x77\x88"


def app_id_gen1():
    return b"\x01" + b"\x00\x02" + b"\x0C" + b"\x0C" + u16(13776) + u16(84) + b"\x70"


def app_id_gen2(version=b"\x01\x00"):
    return (
        b"\x01" + version + b"\x18" + b"\x18"
        + u16(13776) + u16(200) + u16(112) + u16(252) + u16(56) + u16(200)
    )


def identification_body():
    card = (
        b"\x0D"  # D
        + text("DF00000123456", 14) + b"0" + b"1"
        + coded("KBA", 35)
        + u32(T0) + u32(T0) + u32(T0 + 5 * 365 * 86400)
    )
    holder = coded("MUSTERMANN") + coded("ERIKA") + b"\x19\x80\x06\x15" + text("de", 2)
    return card + holder


def daily_record(previous, date_seconds, changes, distance=120, presence=b"\x00\x07"):
    length = 12 + 2 * len(changes)
    body = u16(previous) + u16(length) + u32(date_seconds) + presence + u16(distance)
    return body + b"".join(u16(c) for c in changes)


@pytest.fixture
def gen2_card():
    """ICC, IC and a Gen2 application identification."""
    return ef(0x0002, 0, icc_body()) + ef(0x0005, 0, ic_body()) + ef(0x0501, 2, app_id_gen2())


@pytest.fixture
def gen1_card():
    return ef(0x0002, 0, icc_body()) + ef(0x0005, 0, ic_body()) + ef(0x0501, 0, app_id_gen1())


def decode_exact(decode, data):
    """Decode one record and check it used every byte it was given."""
    cur = Cursor(data)
    value = decode(cur)
    assert cur.at_end(), f"{cur.remaining} bytes left after {decode.__name__}"
    return value


# --- Identifiers ---

def full_card(number=DRIVER, card_type=1, nation=0x0D):
    """FullCardNumber: card type, issuing nation, 16 character card number."""
    return bytes([card_type, nation]) + text(number, 16)


def card_and_generation(number=DRIVER, card_type=1, generation=2):
    return full_card(number, card_type) + bytes([generation])


def _card(gen2, number=DRIVER, card_type=1):
    return card_and_generation(number, card_type) if gen2 else full_card(number, card_type)


def _no_card(gen2):
    return bytes(19 if gen2 else 18)


def registration(value="B-XY 123", nation=0x0D):
    return bytes([nation]) + coded(value, 13)


def serial(number=0x12345, equipment=6, manufacturer=0xA1):
    return u32(number) + b"\x03\x21" + bytes([equipment, manufacturer])


# --- Vehicle unit records, Gen1 layout unless gen2 is set ---

def vu_fault(gen2=False):
    body = (
        b"\x31\x00" + u32(T0) + u32(T0 + 60)
        + _card(gen2) + _no_card(gen2) + _no_card(gen2) + _no_card(gen2)
    )
    return body + (b"\xA1\x01\x02\x03" if gen2 else b"")


def vu_event(gen2=False):
    body = (
        b"\x07\x07" + u32(T0) + u32(T0 + 600)
        + _card(gen2) + _no_card(gen2) + _card(gen2) + _no_card(gen2)
        + b"\x02"
    )
    return body + (b"\xA1\x01\x02\x03" if gen2 else b"")


def over_speeding_control():
    return u32(T0) + u32(T0 - 3600) + b"\x01"


def over_speeding_event(gen2=False):
    return b"\x07\x00" + u32(T0) + u32(T0 + 120) + bytes([95, 88]) + _card(gen2) + b"\x01"


def time_adjustment(gen2=False):
    return u32(T0) + u32(T0 + 30) + coded("WERKSTATT") + coded("HAUPTSTR 1") + _card(gen2, WORKSHOP, 2)


def company_locks(gen2=False):
    return u32(T0) + u32(0) + coded("SPEDITION") + coded("HAFENWEG 2") + _card(gen2, COMPANY, 4)


def control_activity(gen2=False):
    return b"\xC0" + u32(T0) + _card(gen2, CONTROL, 3) + u32(T0 - 86400) + u32(T0)


def download_activity(gen2=False):
    return u32(T0) + _card(gen2, COMPANY, 4) + coded("SPEDITION")


def vu_identification(gen2=False):
    body = (
        coded("CONTINENTAL") + coded("VILLINGEN") + text("1381.1234567890", 16)
        + serial() + text("R3.2", 4) + u32(T0) + u32(T0)
    )
    if gen2:
        return body + text("e1-84 G2", 16) + b"\x02\x01"
    return body + text("e1-84", 8)


def sensor_paired(gen2=False):
    return serial(0x777, equipment=7, manufacturer=0xA2) + text("e1-174", 16 if gen2 else 8) + u32(T0)


def seal():
    return b"\x07" + u16(0x1234) + b"SEAL0001"


def calibration(gen2=False):
    body = (
        b"\x03" + coded("WERKSTATT") + coded("HAUPTSTR 1") + full_card(WORKSHOP, 2)
        + u32(T0 + 365 * 86400) + text(VIN, 17) + registration()
        + u16(8000) + u16(8050) + u16(3200) + text("315/80 R 22.5", 15) + bytes([90])
        + u24(1000) + u24(1005) + u32(T0) + u32(T0 + 10) + u32(T0 + 730 * 86400)
    )
    return body + (seal() * 5 if gen2 else b"")


def vu_card_record():
    return card_and_generation() + serial(0x4321, equipment=1, manufacturer=0x10) + b"\x01\x00"


def its_consent():
    return card_and_generation() + b"\x01"


def power_supply_interruption():
    return b"\x08\x00" + u32(T0) + u32(T0 + 300) + card_and_generation() + bytes(19) * 3 + b"\x00"
