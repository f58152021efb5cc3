"""Field decoders and their sentinel values."""

from datetime import date, datetime, timezone

import pytest

from tachoparse.core.base import primitives as p
from tachoparse.core.base import records as r
from tachoparse.core.base import tables
from tachoparse.core.base.cursor import Cursor


class TestSentinels:
    """Not-available encodings decode to None"""

    def test_bcd_digits(self):
        """BCD 00 01 23 decodes to 123"""
        assert p.bcd(Cursor(b"\x00\x01\x23"), 3) == 123

    def test_bcd_all_ff_is_absent(self):
        """BCD FF FF FF decodes to None, never to a number"""
        assert p.bcd(Cursor(b"\xFF\xFF\xFF"), 3) is None

    def test_time_real(self):
        """TimeReal counts seconds from the UTC epoch"""
        value = p.time_real(Cursor((1_000_000).to_bytes(4, "big")))
        assert value == datetime(1970, 1, 12, 13, 46, 40, tzinfo=timezone.utc)

    @pytest.mark.parametrize("raw", [b"\x00\x00\x00\x00", b"\xFF\xFF\xFF\xFF"])
    def test_time_real_unset(self, raw):
        """TimeReal zero and all-FF are unset"""
        assert p.time_real(Cursor(raw)) is None

    def test_odometer_unset(self):
        """Odometer FFFFFF is unavailable"""
        assert p.odometer(Cursor(b"\xFF\xFF\xFF")) is None
        assert p.odometer(Cursor(b"\x01\x00\x00")) == 65536

    def test_datef(self):
        """Datef is BCD yyyymmdd, zeros mean unset"""
        assert p.datef(Cursor(b"\x19\x80\x06\x15")) == date(1980, 6, 15)
        assert p.datef(Cursor(b"\x00\x00\x00\x00")) is None

    def test_month_year(self):
        """MonthYear gives a four digit year"""
        assert p.month_year(Cursor(b"\x03\x21")) == (3, 2021)


class TestText:
    """IA5 and code-paged strings"""

    def test_ia5_trims_padding(self):
        """Trailing spaces and nulls are removed"""
        assert p.ia5(Cursor(b"AB12  \x00\x00"), 8) == "AB12"

    def test_ia5_all_ff_is_empty(self):
        """An all-FF field is an empty string"""
        assert p.ia5(Cursor(b"\xFF" * 5), 5) == ""

    def test_latin2(self):
        """Code page 2 selects ISO-8859-2"""
        value = p.coded_text(Cursor(b"\x02\xA3\xF3d\xBC"), 4)
        assert value.code_page == 2
        assert value.text == "Łódź"

    def test_koi8_r(self):
        """Code page 85 selects KOI8-R"""
        assert p.decode_text(85, b"\xF0\xD2\xC9") == "При"

    def test_unknown_code_page_falls_back(self):
        """Unknown pages decode as Latin-1 and keep the raw page"""
        value = p.coded_text(Cursor(b"\x63Caf\xE9"), 4)
        assert value.code_page == 0x63
        assert value.text == "Café"

    def test_leading_spaces_kept(self):
        """Only trailing padding is removed"""
        assert p.decode_text(1, b"  B 12 \x00\x00") == "  B 12"


class TestCoordinates:
    """GNSS coordinate conversion"""

    def test_positive(self):
        """+5130.0 (51 degrees 30 minutes) is 51.5"""
        assert p.geo_coordinate(Cursor((51300).to_bytes(3, "big"))) == 51.5

    def test_negative(self):
        """Negative values keep their sign"""
        raw = (-1150).to_bytes(3, "big", signed=True)
        assert p.geo_coordinate(Cursor(raw)) == -1.25

    def test_unknown(self):
        """7FFFFF is an unknown position"""
        assert p.geo_coordinate(Cursor(b"\x7F\xFF\xFF")) is None


class TestCodes:
    """Enumeration lookups never fail"""

    def test_known_nation(self):
        """Nation 0x0D is Germany"""
        assert tables.nation(0x0D).name == "Germany"

    def test_unknown_value_is_kept(self):
        """Missing values are flagged, not rejected"""
        code = tables.nation(0xEE)
        assert code.value == 0xEE
        assert not code.recognized

    def test_event_fault_ranges(self):
        """Unmapped event codes are RFU below 0x80, manufacturer specific above"""
        assert tables.event_fault_gen1(0x7E).name.startswith("RFU")
        assert tables.event_fault_gen1(0x90).name.startswith("Manufacturer specific")


class TestRecords:
    """Shared record layouts"""

    def test_activity_change_bits(self):
        """Slot, crew, card, activity and minutes are unpacked"""
        # co-driver, crew, card not inserted, driving, 08:30
        value = 0x8000 | 0x4000 | 0x2000 | (3 << 11) | 510
        change = r.activity_change(Cursor(value.to_bytes(2, "big")))
        assert change.slot.name == "co-driver"
        assert change.crew
        assert not change.card_inserted
        assert change.activity.name == "driving"
        assert change.time == "08:30"

    def test_driver_card_number(self):
        """Driver card numbers split off replacement and renewal indexes"""
        number = r.card_number(Cursor(b"DF00000123456 01"))
        assert number.identification == "DF00000123456"
        assert number.replacement_index == "0"
        assert number.renewal_index == "1"

    def test_workshop_card_number(self):
        """Other card types carry a consecutive index"""
        number = r.card_number(Cursor(b"F123456789012301"), 2)
        assert number.identification == "F123456789012"
        assert number.consecutive_index == "3"
        assert str(number) == "F123456789012301"

    def test_empty_full_card_number(self):
        """An all-zero card slot is None"""
        assert r.full_card_number(Cursor(bytes(18)), tables.EQUIPMENT_TYPES_GEN1) is None
