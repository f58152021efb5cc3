"""Vehicle unit and card record layouts, one record at a time."""

from datetime import datetime, timezone

import pytest

from conftest import (
    T0,
    VIN,
    calibration,
    company_locks,
    control_activity,
    decode_exact,
    download_activity,
    its_consent,
    over_speeding_control,
    over_speeding_event,
    power_supply_interruption,
    registration,
    sensor_paired,
    text,
    time_adjustment,
    u24,
    u32,
    vu_card_record,
    vu_event,
    vu_fault,
    vu_identification,
)
from tachoparse.core.base import records as r
from tachoparse.core.base.dispatch import Length
from tachoparse.core.gen1 import records as g1
from tachoparse.core.gen2 import records as g2
from tachoparse.core.gen2v2 import records as v2

NEW_YEAR = datetime(2020, 1, 1, tzinfo=timezone.utc)


class TestGen1VuRecords:
    """Gen1 vehicle unit records"""

    def test_fault(self):
        """VuFaultRecord is 82 bytes with four card slots"""
        data = vu_fault()
        assert len(data) == 82
        record = decode_exact(g1.fault_record, data)
        assert record.fault_type.name == "VU internal fault"
        assert record.record_purpose.value == 0
        assert record.begin_time == NEW_YEAR
        assert record.end_time.minute == 1
        assert record.driver_card_begin.card_number.identification == "DF00000123456"
        assert record.co_driver_card_begin is None
        assert record.co_driver_card_end is None

    def test_event(self):
        """VuEventRecord is 83 bytes and ends with the similar events count"""
        data = vu_event()
        assert len(data) == 83
        record = decode_exact(g1.event_record, data)
        assert record.event_type.name == "Over speeding"
        assert record.record_purpose.name == "An active/on-going event or fault"
        assert record.driver_card_end.issuing_nation.name == "Germany"
        assert record.similar_events == 2

    def test_over_speeding_control(self):
        """VuOverSpeedingControlData is 9 bytes"""
        record = decode_exact(g1.over_speeding_control, over_speeding_control())
        assert record.last_overspeed_control_time == NEW_YEAR
        assert record.first_overspeed_since.hour == 23
        assert record.overspeed_events_since == 1

    def test_over_speeding_event(self):
        """VuOverSpeedingEventRecord is 31 bytes"""
        data = over_speeding_event()
        assert len(data) == 31
        record = decode_exact(g1.over_speeding_event_record, data)
        assert record.max_speed == 95
        assert record.average_speed == 88
        assert record.driver_card_begin.card_type.name == "Driver card"
        assert record.similar_events == 1

    def test_time_adjustment(self):
        """VuTimeAdjustmentRecord is 98 bytes"""
        data = time_adjustment()
        assert len(data) == 98
        record = decode_exact(g1.time_adjustment_record, data)
        assert record.new_time.second == 30
        assert record.workshop_name.text == "WERKSTATT"
        assert record.workshop_address.text == "HAUPTSTR 1"
        assert record.workshop_card_number.card_number.consecutive_index == "3"

    def test_company_locks(self):
        """VuCompanyLocksRecord is 98 bytes, an open lock has no lock out time"""
        data = company_locks()
        assert len(data) == 98
        record = decode_exact(g1.company_locks_record, data)
        assert record.lock_in_time == NEW_YEAR
        assert record.lock_out_time is None
        assert record.company_address.text == "HAFENWEG 2"
        assert record.company_card_number.card_type.name == "Company card"

    def test_control_activity(self):
        """VuControlActivityRecord is 31 bytes"""
        data = control_activity()
        assert len(data) == 31
        record = decode_exact(g1.control_activity_record, data)
        assert record.control_type.card_downloading
        assert record.control_type.vu_downloading
        assert not record.control_type.printing
        assert record.control_card_number.card_type.name == "Control card"
        assert record.download_period_end == NEW_YEAR

    def test_download_activity(self):
        """VuDownloadActivityData is 58 bytes"""
        data = download_activity()
        assert len(data) == 58
        record = decode_exact(g1.download_activity, data)
        assert record.full_card_number.card_number.identification == "F555555555555"
        assert record.company_or_workshop_name.text == "SPEDITION"

    def test_vu_identification(self):
        """VuIdentification is 116 bytes with an 8 byte approval number"""
        data = vu_identification()
        assert len(data) == 116
        record = decode_exact(g1.vu_identification, data)
        assert record.manufacturer_name.text == "CONTINENTAL"
        assert record.part_number == "1381.1234567890"
        assert record.serial_number.serial_number == 0x12345
        assert record.serial_number.manufacturer.name == "Continental Automotive Technologies"
        assert record.software.version == "R3.2"
        assert record.approval_number == "e1-84"

    def test_sensor_paired(self):
        """SensorPaired is 20 bytes"""
        data = sensor_paired()
        assert len(data) == 20
        record = decode_exact(g1.sensor_paired, data)
        assert record.serial_number.equipment_type.name == "Motion sensor"
        assert record.approval_number == "e1-174"
        assert record.pairing_date == NEW_YEAR

    def test_calibration(self):
        """VuCalibrationRecord is 167 bytes"""
        data = calibration()
        assert len(data) == 167
        record = decode_exact(g1.calibration_record, data)
        assert record.purpose.name == "Installation"
        assert record.workshop_card_number.card_type.name == "Workshop card"
        assert record.vin == VIN
        assert record.registration.number.text == "B-XY 123"
        assert record.k_constant_of_recording_equipment == 8050
        assert record.tyre_size == "315/80 R 22.5"
        assert record.authorised_speed == 90
        assert record.new_odometer == 1005
        assert record.next_calibration_date.year == 2021


class TestGen2VuRecords:
    """Gen2 vehicle unit records"""

    def test_fault(self):
        """Gen2 faults carry card generations and manufacturer data in 90 bytes"""
        data = vu_fault(gen2=True)
        assert len(data) == 90
        record = decode_exact(g2.fault_record, data)
        assert record.fault_type.name == "VU internal fault"
        assert record.driver_card_begin.generation.name == "Generation 2"
        assert record.co_driver_card_begin is None
        assert record.manufacturer_specific.manufacturer.name == "Continental Automotive Technologies"
        assert record.manufacturer_specific.error_code == b"\x01\x02\x03"

    def test_event(self):
        """Gen2 events are 91 bytes"""
        data = vu_event(gen2=True)
        assert len(data) == 91
        record = decode_exact(g2.event_record, data)
        assert record.driver_card_end.full_card_number.card_number.renewal_index == "1"
        assert record.similar_events == 2
        assert record.manufacturer_specific.error_code == b"\x01\x02\x03"

    def test_over_speeding_event(self):
        """Gen2 over speeding events are 32 bytes"""
        data = over_speeding_event(gen2=True)
        assert len(data) == 32
        record = decode_exact(g2.over_speeding_event_record, data)
        assert record.max_speed == 95
        assert record.driver_card_begin.generation.value == 2
        assert record.similar_events == 1

    def test_time_adjustment(self):
        """Gen2 time adjustments are 99 bytes"""
        data = time_adjustment(gen2=True)
        assert len(data) == 99
        record = decode_exact(g2.time_adjustment_record, data)
        assert record.workshop_card.full_card_number.card_number.consecutive_index == "3"

    def test_overview_records(self):
        """Company locks, controls and downloads grow by one generation byte"""
        locks = decode_exact(g2.company_locks_record, company_locks(gen2=True))
        control = decode_exact(g2.control_activity_record, control_activity(gen2=True))
        download = decode_exact(g2.download_activity, download_activity(gen2=True))
        assert locks.company_card.full_card_number.card_type.name == "Company card"
        assert control.control_type.calibration_checking is False
        assert control.control_card.full_card_number.card_type.name == "Control card"
        assert download.company_or_workshop_name.text == "SPEDITION"

    def test_vu_identification(self):
        """Gen2 VuIdentification is 126 bytes with generation and ability"""
        data = vu_identification(gen2=True)
        assert len(data) == 126
        record = decode_exact(g2.vu_identification, data)
        assert record.approval_number == "e1-84 G2"
        assert record.generation.name == "Generation 2"
        assert record.supports_gen2

    def test_sensor_paired(self):
        """Gen2 SensorPairedRecord is 28 bytes"""
        data = sensor_paired(gen2=True)
        assert len(data) == 28
        record = decode_exact(g2.sensor_paired_record, data)
        assert record.serial_number.manufacturer.name == "Stoneridge Electronics AB"
        assert record.approval_number == "e1-174"

    def test_calibration(self):
        """Gen2 calibrations append five 11 byte seal records"""
        data = calibration(gen2=True)
        assert len(data) == 222
        record = decode_exact(g2.calibration_record, data)
        assert record.purpose.name == "Installation"
        assert len(record.seals) == 5
        assert record.seals[0].equipment_type.name == "Motion sensor"
        assert record.seals[0].manufacturer_code == 0x1234
        assert record.seals[4].seal_identifier == b"SEAL0001"

    def test_card_record(self):
        """A 29 byte VuCardRecord has no trailing card number"""
        record = decode_exact(g2.card_record, vu_card_record())
        assert record.card_extended_serial_number.serial_number == 0x4321
        assert record.card_structure_version.major == 1
        assert record.card_number is None

    def test_card_record_with_number(self):
        """Longer VuCardRecords carry the card number"""
        record = decode_exact(g2.card_record, vu_card_record() + text("DF00000123456 01", 16))
        assert record.card_number.identification == "DF00000123456"

    def test_its_consent(self):
        """VuITSConsentRecord is 20 bytes"""
        data = its_consent()
        assert len(data) == 20
        assert decode_exact(g2.its_consent_record, data).consent

    def test_power_supply_interruption(self):
        """VuPowerSupplyInterruptionRecord is 87 bytes"""
        data = power_supply_interruption()
        assert len(data) == 87
        record = decode_exact(g2.power_supply_interruption_record, data)
        assert record.event_type.name == "Power supply interruption"
        assert record.driver_card_begin is not None
        assert record.driver_card_end is None
        assert record.similar_events == 0


class TestGen2V2VuRecords:
    """Version 2 records that grew a trailer"""

    def test_vu_identification(self):
        """The 138 byte layout adds the digital map version"""
        data = vu_identification(gen2=True) + text("EU-MAP-23", 12)
        assert len(data) == v2.VU_IDENTIFICATION_SIZE
        record = decode_exact(v2.vu_identification, data)
        assert isinstance(record, v2.VuIdentification)
        assert record.digital_map_version == "EU-MAP-23"
        assert record.software.version == "R3.2"

    def test_vu_identification_gen2_layout(self):
        """A 126 byte identification decodes as the Gen2 record"""
        record = decode_exact(v2.vu_identification, vu_identification(gen2=True))
        assert type(record) is g2.VuIdentification

    def test_calibration(self):
        """The 228 byte layout adds load type and calibration country"""
        data = calibration(gen2=True) + b"\x01" + b"\x11" + u32(T0)
        assert len(data) == v2.CALIBRATION_SIZE
        record = decode_exact(v2.calibration_record, data)
        assert isinstance(record, v2.CalibrationRecord)
        assert record.by_default_load_type.name == "Goods"
        assert record.calibration_country.name == "France"
        assert record.calibration_country_timestamp == NEW_YEAR
        assert len(record.seals) == 5

    def test_calibration_gen2_layout(self):
        """A 222 byte calibration decodes as the Gen2 record"""
        record = decode_exact(v2.calibration_record, calibration(gen2=True))
        assert type(record) is g2.CalibrationRecord

    @pytest.mark.parametrize("size, accepted", [(126, True), (138, True), (130, False), (222, False)])
    def test_one_of_length(self, size, accepted):
        """A choice policy accepts only the listed sizes"""
        length = Length.one_of(126, 138)
        assert length.accepts(size) is accepted
        assert str(length) == "126 or 138 bytes"


class TestCardRecords:
    """Card records shared by the Gen1 files"""

    def test_vehicle_record(self):
        """CardVehicleRecord is 31 bytes"""
        data = u24(1000) + u24(1500) + u32(T0) + u32(T0 + 3600) + registration() + b"\x00\x42"
        assert len(data) == 31
        record = decode_exact(g1.card_vehicle_record, data)
        assert record.odometer_end == 1500
        assert record.last_use.hour == 1
        assert record.registration.nation.name == "Germany"
        assert record.vu_data_block_counter == 42

    def test_place_record(self):
        """PlaceRecord is 10 bytes"""
        record = decode_exact(g1.place_record, u32(T0) + b"\x01\x0D\x05" + u24(2000))
        assert record.entry_type.value == 1
        assert record.country.name == "Germany"
        assert record.region == 5
        assert record.odometer == 2000

    def test_event_record(self):
        """CardEventRecord is 24 bytes"""
        record = decode_exact(g1.card_event_record, b"\x02" + u32(T0) + u32(T0 + 60) + registration())
        assert record.type.name == "Card conflict"
        assert record.vehicle.number.text == "B-XY 123"

    def test_current_usage(self):
        """CurrentUsage is 19 bytes"""
        record = decode_exact(r.current_usage, u32(T0) + registration("M-AB 42"))
        assert record.session_open_time == NEW_YEAR
        assert record.session_open_vehicle.number.text == "M-AB 42"
