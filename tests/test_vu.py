"""Vehicle unit block decoding."""

import logging
from datetime import datetime, timezone

import pytest

from conftest import (
    T0,
    VIN,
    calibration,
    coded,
    company_locks,
    control_activity,
    download_activity,
    its_consent,
    over_speeding_control,
    over_speeding_event,
    power_supply_interruption,
    registration,
    sensor_paired,
    signature_array,
    text,
    time_adjustment,
    u16,
    u24,
    u32,
    vu_array,
    vu_card_record,
    vu_event,
    vu_fault,
    vu_identification,
)
from tachoparse.core.base.errors import (
    ClassificationError,
    InvalidRepeatCountError,
    RecordShapeError,
    TruncationError,
    UnknownTagError,
    UnsupportedGenerationError,
)
from tachoparse.core.base.logging import TRACE
from tachoparse.core.base.types import Generation
from tachoparse.core.document import parse, parse_vehicle_unit
from tachoparse.core.gen2 import records as g2
from tachoparse.core.gen2v2 import records as v2

NEW_YEAR = datetime(2020, 1, 1, tzinfo=timezone.utc)


def _speed_block(start, speeds):
    return u32(start) + bytes(speeds).ljust(60, b"\x00")


def _block(trep, *arrays):
    return bytes([0x76, trep]) + b"".join(arrays)


class TestGen1:
    """First generation blocks"""

    def _speed(self, blocks):
        return b"\x76\x04" + u16(len(blocks)) + b"".join(blocks) + b"\xAA" * 128

    def _activities(self):
        changes = [u16(0x1800 | 60), u16(0x0000 | 120)]
        return (
            b"\x76\x02" + u32(T0) + u24(45000)
            + u16(0) + u16(len(changes)) + b"".join(changes) + b"\x00" + u16(0)
            + b"\xBB" * 128
        )

    def test_detailed_speed(self):
        """Speed blocks decode one speed per second"""
        doc = parse_vehicle_unit(self._speed([_speed_block(T0, [50, 51, 52])]))
        assert doc.generation is Generation.GEN1
        block = doc.detailed_speed[0].speed_blocks[0]
        assert block.begin_time.year == 2020
        assert block.speeds[:4] == [50, 51, 52, 0]
        assert len(block.speeds) == 60
        assert doc.detailed_speed[0].signature == b"\xAA" * 128

    def test_blocks_in_file_order(self):
        """Repeated block kinds are kept in order"""
        data = self._activities() + self._speed([]) + self._activities()
        doc = parse_vehicle_unit(data)
        assert len(doc.activities) == 2
        assert doc.activities[0].odometer_midnight == 45000
        assert [c.activity.name for c in doc.activities[0].activity_changes] == ["driving", "break/rest"]
        assert doc.detailed_speed[0].speed_blocks == []

    def test_overview(self):
        """TREP 01 is consumed exactly, so the next block still decodes"""
        data = (
            b"\x76\x01" + b"\xC1" * 194 + b"\xC2" * 194
            + text(VIN, 17) + registration() + u32(T0)
            + u32(T0 - 86400) + u32(T0) + b"\x10"
            + download_activity()
            + b"\x01" + company_locks()
            + b"\x02" + control_activity() + control_activity()
            + b"\xAA" * 128
        )
        doc = parse_vehicle_unit(data + self._speed([]))
        overview = doc.overview
        assert overview.member_state_certificate == b"\xC1" * 194
        assert overview.vin == VIN
        assert overview.registration.number.text == "B-XY 123"
        assert overview.current_date_time == NEW_YEAR
        assert overview.downloadable_period.min_downloadable_time.day == 31
        assert overview.card_slots_status.driver.name == "no card inserted"
        assert overview.card_slots_status.co_driver.name == "driver card inserted"
        assert overview.download_activity.company_or_workshop_name.text == "SPEDITION"
        assert overview.company_locks[0].company_name.text == "SPEDITION"
        assert len(overview.control_activities) == 2
        assert overview.signature == b"\xAA" * 128
        assert len(doc.detailed_speed) == 1

    def test_events_and_faults(self):
        """TREP 03 counts each record list and ends on the signature"""
        data = (
            b"\x76\x03"
            + b"\x01" + vu_fault()
            + b"\x02" + vu_event() + vu_event()
            + over_speeding_control()
            + b"\x01" + over_speeding_event()
            + b"\x01" + time_adjustment()
            + b"\xAB" * 128
        )
        doc = parse_vehicle_unit(data + self._speed([]))
        block = doc.events_and_faults[0]
        assert block.faults[0].fault_type.name == "VU internal fault"
        assert [e.similar_events for e in block.events] == [2, 2]
        assert block.over_speeding_control.overspeed_events_since == 1
        assert block.over_speeding_events[0].average_speed == 88
        assert block.time_adjustments[0].workshop_name.text == "WERKSTATT"
        assert block.signature == b"\xAB" * 128
        assert len(doc.detailed_speed) == 1

    def test_technical_data(self):
        """TREP 05 holds the VU identity, the paired sensor and calibrations"""
        data = (
            b"\x76\x05" + vu_identification() + sensor_paired()
            + b"\x01" + calibration()
            + b"\xAC" * 128
        )
        doc = parse_vehicle_unit(data + self._speed([]))
        block = doc.technical_data[0]
        assert block.vu_identification.approval_number == "e1-84"
        assert block.vu_identification.software.version == "R3.2"
        assert block.sensor_paired.serial_number.serial_number == 0x777
        assert block.calibrations[0].vin == VIN
        assert block.calibrations[0].old_odometer == 1000
        assert block.signature == b"\xAC" * 128
        assert len(doc.detailed_speed) == 1

    def test_unknown_trep(self):
        """Gen1 blocks have no length, so an unknown TREP stops the parse"""
        with pytest.raises(ClassificationError):
            parse_vehicle_unit(self._speed([]) + b"\x76\x07" + bytes(10))

    def test_missing_marker(self):
        """Every block starts with 76"""
        with pytest.raises(RecordShapeError) as err:
            parse_vehicle_unit(self._speed([]) + b"\x77\x04")
        assert err.value.offset == 2 + 2 + 128

    def test_truncated_signature(self):
        """A block cut short inside its signature is truncated"""
        with pytest.raises(TruncationError):
            parse_vehicle_unit(self._speed([])[:-1])

    def test_count_too_large(self):
        """A count implying more bytes than remain is rejected"""
        with pytest.raises(InvalidRepeatCountError):
            parse_vehicle_unit(b"\x76\x04" + u16(500) + bytes(200))


class TestGen2:
    """Record array blocks"""

    def test_detailed_speed(self):
        """A speed block array followed by the signature"""
        data = _block(0x24, vu_array(0x12, 64, [_speed_block(T0, [80] * 60)]), signature_array(64))
        doc = parse_vehicle_unit(data)
        assert doc.generation is Generation.GEN2
        assert doc.detailed_speed[0].speed_blocks[0].speeds == [80] * 60
        assert doc.detailed_speed[0].signature == b"\x5A" * 64

    def _activities(self, *extra):
        return _block(
            0x22,
            vu_array(0x06, 4, [u32(T0)]),
            vu_array(0x05, 3, [u24(120000)]),
            vu_array(0x0D, 131, []),
            vu_array(0x01, 2, [u16(0x1000 | 30), u16(0x1800 | 45)]),
            *extra,
            vu_array(0x09, 5, [u32(T0) + b"\x01"]),
            signature_array(72),
        )

    def test_activities(self):
        """Record arrays fill the matching fields"""
        doc = parse_vehicle_unit(self._activities())
        block = doc.activities[0]
        assert block.date_of_day_downloaded[0].year == 2020
        assert block.odometer_midnight == [120000]
        assert block.card_iw == []
        assert [c.time for c in block.activity_changes] == ["00:30", "00:45"]
        assert block.specific_conditions[0].condition.name == "Out of scope - begin"
        assert len(block.signature) == 72

    def test_unknown_record_type(self, caplog):
        """Unknown record arrays are skipped by size and count"""
        with caplog.at_level(logging.WARNING):
            doc = parse_vehicle_unit(self._activities(vu_array(0x60, 3, [b"abc", b"def"])))
        assert len(doc.activities[0].activity_changes) == 2
        assert "skipping record array" in caplog.text

    def test_skipped_array_hexdump(self, caplog):
        """At TRACE level the bytes of a skipped array are dumped"""
        with caplog.at_level(TRACE):
            parse_vehicle_unit(self._activities(vu_array(0x60, 3, [b"\xAB\xCD\xEF"])))
        assert "AB CD EF" in caplog.text

    def test_overview(self):
        """TREP 21 collects vehicle identity and download history arrays"""
        data = _block(
            0x21,
            vu_array(0x04, 3, [b"\x01\x02\x03"]),
            vu_array(0x0F, 3, [b"\x04\x05\x06"]),
            vu_array(0x0A, 17, [text(VIN, 17)]),
            vu_array(0x0B, 14, [coded("B-XY 123", 13)]),
            vu_array(0x03, 4, [u32(T0)]),
            vu_array(0x13, 8, [u32(T0 - 86400) + u32(T0)]),
            vu_array(0x02, 1, [b"\x01"]),
            vu_array(0x14, 59, [download_activity(gen2=True)]),
            vu_array(0x10, 99, [company_locks(gen2=True)]),
            vu_array(0x11, 32, [control_activity(gen2=True)] * 2),
            signature_array(),
        )
        doc = parse_vehicle_unit(data)
        overview = doc.overview
        assert overview.vu_certificate == [b"\x04\x05\x06"]
        assert overview.vin == [VIN]
        assert overview.registration_number[0].text == "B-XY 123"
        assert overview.current_date_time == [NEW_YEAR]
        assert overview.downloadable_period[0].max_downloadable_time == NEW_YEAR
        assert overview.card_slots_status[0].driver.name == "driver card inserted"
        assert overview.download_activity[0].company_or_workshop_name.text == "SPEDITION"
        assert overview.company_locks[0].lock_out_time is None
        assert len(overview.control_activities) == 2
        assert overview.signature == b"\x5A" * 64

    def test_events_and_faults(self):
        """TREP 23 fills every event and fault list"""
        data = _block(
            0x23,
            vu_array(0x18, 90, [vu_fault(gen2=True)]),
            vu_array(0x15, 91, [vu_event(gen2=True)]),
            vu_array(0x1A, 9, [over_speeding_control()]),
            vu_array(0x1B, 32, [over_speeding_event(gen2=True)]),
            vu_array(0x1E, 99, [time_adjustment(gen2=True)]),
            vu_array(0x1D, 8, [u32(T0) + u32(T0 + 5)]),
            signature_array(),
        )
        block = parse_vehicle_unit(data).events_and_faults[0]
        assert block.faults[0].manufacturer_specific.error_code == b"\x01\x02\x03"
        assert block.events[0].event_type.name == "Over speeding"
        assert block.over_speeding_control[0].overspeed_events_since == 1
        assert block.over_speeding_events[0].max_speed == 95
        assert block.time_adjustments[0].workshop_address.text == "HAUPTSTR 1"
        assert block.gnss_time_adjustments[0].new_time.second == 5

    def test_technical_data(self):
        """TREP 25 fills identity, sensors, calibrations and cards"""
        data = _block(
            0x25,
            vu_array(0x19, 126, [vu_identification(gen2=True)]),
            vu_array(0x20, 28, [sensor_paired(gen2=True)]),
            vu_array(0x21, 28, [sensor_paired(gen2=True)]),
            vu_array(0x0C, 222, [calibration(gen2=True)]),
            vu_array(0x0E, 29, [vu_card_record(), vu_card_record()]),
            vu_array(0x17, 20, [its_consent()]),
            vu_array(0x1F, 87, [power_supply_interruption()]),
            signature_array(),
        )
        block = parse_vehicle_unit(data).technical_data[0]
        assert block.vu_identification[0].generation.name == "Generation 2"
        assert block.sensors_paired[0].approval_number == "e1-174"
        assert block.external_gnss_coupled[0].coupling_date == NEW_YEAR
        assert len(block.calibrations[0].seals) == 5
        assert len(block.cards) == 2
        assert block.its_consents[0].consent
        assert block.power_supply_interruptions[0].end_time.minute == 5

    def test_unknown_record_type_strict(self):
        """Strict mode refuses unknown record arrays"""
        with pytest.raises(UnknownTagError):
            parse_vehicle_unit(self._activities(vu_array(0x60, 3, [b"abc"])), strict=True)

    def test_record_not_in_block(self, caplog):
        """A known record type outside its block is skipped"""
        with caplog.at_level(logging.WARNING):
            doc = parse_vehicle_unit(self._activities(vu_array(0x18, 90, [bytes(90)])))
        assert doc.activities[0].signature is not None
        assert "skipping record array" in caplog.text

    def test_record_size_mismatch(self):
        """A known record type with the wrong size is a shape error"""
        data = _block(0x22, vu_array(0x05, 4, [b"\x00\x00\x00\x01"]), signature_array())
        with pytest.raises(RecordShapeError) as err:
            parse_vehicle_unit(data)
        assert err.value.offset == 2

    def test_record_type_zero(self):
        """Record type 00 is never valid"""
        with pytest.raises(RecordShapeError):
            parse_vehicle_unit(_block(0x22, vu_array(0x00, 1, [b"\x00"])))

    def test_array_past_end(self):
        """An array larger than the rest of the file is rejected"""
        data = _block(0x22, b"\x05" + u16(3) + u16(100) + bytes(9))
        with pytest.raises(InvalidRepeatCountError):
            parse_vehicle_unit(data)

    def test_several_signatures(self, caplog):
        """Only the last signature record is kept"""
        data = _block(0x24, vu_array(0x08, 64, [b"\x01" * 64, b"\x02" * 64]))
        with caplog.at_level(logging.WARNING):
            doc = parse_vehicle_unit(data)
        assert doc.detailed_speed[0].signature == b"\x02" * 64
        assert "keeping the last" in caplog.text

    def test_unknown_trep_skipped(self, caplog):
        """Unknown Gen2 blocks are walked to their signature and skipped"""
        speed = _block(0x24, vu_array(0x12, 64, []), signature_array())
        unknown = _block(0x26, vu_array(0x40, 2, [b"\x00\x00"]), signature_array())
        with caplog.at_level(logging.WARNING):
            doc = parse_vehicle_unit(speed + unknown + speed)
        assert len(doc.detailed_speed) == 2
        assert "skipping unknown block" in caplog.text

    def test_unknown_trep_strict(self):
        """Strict mode refuses unknown blocks"""
        speed = _block(0x24, vu_array(0x12, 64, []), signature_array())
        unknown = _block(0x26, signature_array())
        with pytest.raises(UnknownTagError):
            parse_vehicle_unit(speed + unknown, strict=True)

    def test_later_generation_block(self):
        """A V2 block in a Gen2 download is an unsupported generation"""
        speed = _block(0x24, vu_array(0x12, 64, []), signature_array())
        with pytest.raises(UnsupportedGenerationError):
            parse_vehicle_unit(speed + _block(0x32, signature_array()))

    def test_card_rejected(self, gen2_card):
        """parse_vehicle_unit refuses a card file"""
        with pytest.raises(ClassificationError):
            parse_vehicle_unit(gen2_card)


class TestGen2V2:
    """Version 2 blocks"""

    def test_overview(self):
        """The V2 overview carries a full vehicle registration"""
        vin = text("WDB9634031L123456", 17)
        registration = b"\x0D" + coded("B-XY 123", 13)
        data = _block(
            0x31,
            vu_array(0x04, 5, [b"\x01\x02\x03\x04\x05"]),
            vu_array(0x0F, 3, [b"\x06\x07\x08"]),
            vu_array(0x0A, 17, [vin]),
            vu_array(0x24, 15, [registration]),
            vu_array(0x03, 4, [u32(T0)]),
            signature_array(),
        )
        doc = parse(data)
        assert doc.generation is Generation.GEN2V2
        assert doc.overview.vin == ["WDB9634031L123456"]
        assert doc.overview.registration[0].number.text == "B-XY 123"
        assert doc.overview.registration[0].nation.name == "Germany"
        assert doc.overview.member_state_certificate == [b"\x01\x02\x03\x04\x05"]

    def test_overview_keeps_registration_number(self):
        """A bare registration number array still lands next to the full registration"""
        data = _block(
            0x31,
            vu_array(0x0B, 14, [coded("B-XY 123", 13)]),
            vu_array(0x24, 15, [registration("M-AB 42", nation=0x01)]),
            signature_array(),
        )
        overview = parse_vehicle_unit(data).overview
        assert overview.registration_number[0].text == "B-XY 123"
        assert overview.registration[0].number.text == "M-AB 42"
        assert overview.registration[0].nation.name == "Austria"

    def test_technical_data(self):
        """V2 identification and calibration carry their trailers"""
        data = _block(
            0x35,
            vu_array(0x19, 138, [vu_identification(gen2=True) + text("EU-MAP-23", 12)]),
            vu_array(0x0C, 228, [calibration(gen2=True) + b"\x02\x0D" + u32(T0)]),
            vu_array(0x17, 20, [its_consent()]),
            signature_array(),
        )
        doc = parse_vehicle_unit(data)
        assert doc.generation is Generation.GEN2V2
        block = doc.technical_data[0]
        [ident] = block.vu_identification
        assert isinstance(ident, v2.VuIdentification)
        assert ident.digital_map_version == "EU-MAP-23"
        assert ident.approval_number == "e1-84 G2"
        [record] = block.calibrations
        assert isinstance(record, v2.CalibrationRecord)
        assert record.by_default_load_type.name == "Passengers"
        assert record.calibration_country.name == "Germany"
        assert record.calibration_country_timestamp == NEW_YEAR
        assert record.seals[0].seal_identifier == b"SEAL0001"
        assert block.its_consents[0].consent

    def test_technical_data_gen2_sizes(self):
        """A V2 block may still send the Gen2 record sizes"""
        data = _block(
            0x35,
            vu_array(0x19, 126, [vu_identification(gen2=True)]),
            vu_array(0x0C, 222, [calibration(gen2=True)]),
            signature_array(),
        )
        block = parse_vehicle_unit(data).technical_data[0]
        assert type(block.vu_identification[0]) is g2.VuIdentification
        assert type(block.calibrations[0]) is g2.CalibrationRecord

    def test_calibration_size_between_layouts(self):
        """A calibration size that is neither layout is a shape error"""
        data = _block(0x35, vu_array(0x0C, 224, [calibration(gen2=True) + b"\x00\x00"]), signature_array())
        with pytest.raises(RecordShapeError) as err:
            parse_vehicle_unit(data)
        assert "222 or 228 bytes" in str(err.value)

    def test_border_crossing(self):
        """Border crossings are decoded in V2 activity blocks"""
        gnss = u32(T0) + b"\x03" + u24(51300) + u24(0x7FFFFF) + b"\x00"
        crossing = bytes(38) + b"\x0D\x01" + gnss + u24(99)
        data = _block(0x32, vu_array(0x22, 55, [crossing]), signature_array())
        doc = parse_vehicle_unit(data)
        record = doc.activities[0].border_crossings[0]
        assert record.driver_card is None
        assert record.country_entered.name == "Austria"
        assert record.gnss_place_auth.coordinates.longitude is None
        assert record.gnss_place_auth.authentication_status.name == "Not authenticated"
        assert record.odometer == 99

    def test_gen2_blocks_allowed(self):
        """Gen2 blocks may follow a V2 overview"""
        overview = _block(0x31, signature_array())
        speed = _block(0x24, vu_array(0x12, 64, [_speed_block(T0, [])]), signature_array())
        doc = parse_vehicle_unit(overview + speed)
        assert len(doc.detailed_speed[0].speed_blocks) == 1
