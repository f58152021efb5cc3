"""Second generation record layouts (driver card and vehicle unit)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from tachoparse.core.base import primitives as p
from tachoparse.core.base import records as r
from tachoparse.core.base import tables
from tachoparse.core.base.cursor import Cursor
from tachoparse.core.base.primitives import CodedText
from tachoparse.core.base.tables import Code
from tachoparse.core.gen1 import records as g1

EQUIPMENT = tables.EQUIPMENT_TYPES_GEN2

EVENT_GROUPS = 11
FAULT_GROUPS = 2
SIGNATURE_MIN = 64
SIGNATURE_MAX = 132


def full_card_number(cur: Cursor) -> r.FullCardNumber | None:
    return r.full_card_number(cur, EQUIPMENT)


def card_number_and_generation(cur: Cursor) -> r.FullCardNumberAndGeneration | None:
    return r.full_card_number_and_generation(cur, EQUIPMENT)


# ---------------------------------------------------------------------------
# GNSS
# ---------------------------------------------------------------------------

@dataclass
class GeoCoordinates:
    latitude: float | None
    longitude: float | None


@dataclass
class GNSSPlaceRecord:
    """GNSSPlaceRecord (11 bytes)."""

    time_stamp: datetime | None
    accuracy: int
    coordinates: GeoCoordinates


def gnss_place_record(cur: Cursor) -> GNSSPlaceRecord:
    time_stamp = p.time_real(cur, "GNSS time stamp")
    accuracy = cur.u8("GNSS accuracy")
    latitude = p.geo_coordinate(cur, "latitude")
    longitude = p.geo_coordinate(cur, "longitude")
    return GNSSPlaceRecord(time_stamp, accuracy, GeoCoordinates(latitude, longitude))


# ---------------------------------------------------------------------------
# Card records
# ---------------------------------------------------------------------------

@dataclass
class ApplicationIdentification:
    """DriverCardApplicationIdentification, second generation (17 bytes)."""

    type_of_tachograph_card: Code
    card_structure_version: g1.CardStructureVersion
    events_per_type: int
    faults_per_type: int
    activity_structure_length: int
    vehicle_records: int
    place_records: int
    gnss_ad_records: int
    specific_condition_records: int
    vehicle_unit_records: int


def application_identification(cur: Cursor) -> ApplicationIdentification:
    return ApplicationIdentification(
        type_of_tachograph_card=tables.lookup(EQUIPMENT, cur.u8("card type"), "RFU"),
        card_structure_version=g1.card_structure_version(cur),
        events_per_type=cur.u8("events per type"),
        faults_per_type=cur.u8("faults per type"),
        activity_structure_length=cur.u16("activity structure length"),
        vehicle_records=cur.u16("vehicle records"),
        place_records=cur.u16("place records"),
        gnss_ad_records=cur.u16("GNSS AD records"),
        specific_condition_records=cur.u16("specific condition records"),
        vehicle_unit_records=cur.u16("vehicle unit records"),
    )


def card_event_record(cur: Cursor) -> r.CardEventFaultRecord:
    return r.card_event_fault_record(cur, tables.event_fault_gen2)


@dataclass
class CardVehicleRecord:
    """CardVehicleRecord, second generation (48 bytes)."""

    odometer_begin: int | None
    odometer_end: int | None
    first_use: datetime | None
    last_use: datetime | None
    registration: r.VehicleRegistration
    vu_data_block_counter: int | None
    vin: str


def card_vehicle_record(cur: Cursor) -> CardVehicleRecord:
    return CardVehicleRecord(
        odometer_begin=p.odometer(cur, "vehicle odometer begin"),
        odometer_end=p.odometer(cur, "vehicle odometer end"),
        first_use=p.time_real(cur, "vehicle first use"),
        last_use=p.time_real(cur, "vehicle last use"),
        registration=r.vehicle_registration(cur),
        vu_data_block_counter=p.bcd(cur, 2, "VU data block counter"),
        vin=p.ia5(cur, 17, "VIN"),
    )


@dataclass
class PlaceRecord:
    """PlaceRecord, second generation (21 bytes)."""

    entry_time: datetime | None
    entry_type: Code
    country: Code
    region: int
    odometer: int | None
    gnss_place: GNSSPlaceRecord


def place_record(cur: Cursor) -> PlaceRecord:
    return PlaceRecord(
        entry_time=p.time_real(cur, "place entry time"),
        entry_type=p.code(cur, tables.ENTRY_TYPES, "entry type"),
        country=tables.nation(cur.u8("daily work period country")),
        region=cur.u8("daily work period region"),
        odometer=p.odometer(cur, "place odometer"),
        gnss_place=gnss_place_record(cur),
    )


def control_type(cur: Cursor) -> g1.ControlType:
    value = cur.u8("control type")
    return g1.ControlType(
        bool(value & 0x80), bool(value & 0x40), bool(value & 0x20), bool(value & 0x10), bool(value & 0x08),
    )


def card_control_activity_record(cur: Cursor) -> g1.CardControlActivityRecord:
    return g1.card_control_activity_record(cur, control_type, EQUIPMENT)


@dataclass
class CardVehicleUnitRecord:
    """CardVehicleUnitRecord (10 bytes)."""

    time_stamp: datetime | None
    manufacturer: Code
    device_id: int
    software_version: str


def card_vehicle_unit_record(cur: Cursor) -> CardVehicleUnitRecord:
    return CardVehicleUnitRecord(
        time_stamp=p.time_real(cur, "vehicle unit time stamp"),
        manufacturer=tables.manufacturer(cur.u8("manufacturer code")),
        device_id=cur.u8("device id"),
        software_version=p.ia5(cur, 4, "VU software version"),
    )


@dataclass
class GNSSAccumulatedDrivingRecord:
    """GNSSAccumulatedDrivingRecord (18 bytes)."""

    time_stamp: datetime | None
    gnss_place: GNSSPlaceRecord
    odometer: int | None


def gnss_accumulated_driving_record(cur: Cursor) -> GNSSAccumulatedDrivingRecord:
    return GNSSAccumulatedDrivingRecord(
        p.time_real(cur, "GNSS AD time stamp"), gnss_place_record(cur), p.odometer(cur, "GNSS AD odometer"),
    )


@dataclass
class PointedRecords:
    """A newest record pointer followed by a cyclic array, in storage order."""

    newest_record_pointer: int
    records: list = field(default_factory=list)


def pointed_records(cur: Cursor, size: int, decode, what: str) -> PointedRecords:
    pointer = cur.u16(f"{what} pointer newest record")
    return PointedRecords(pointer, cur.repeat(cur.remaining // size, size, decode, what))


# ---------------------------------------------------------------------------
# Vehicle unit records
# ---------------------------------------------------------------------------

@dataclass
class DownloadActivity:
    """VuDownloadActivityData, second generation (59 bytes)."""

    downloading_time: datetime | None
    card_number_and_generation: r.FullCardNumberAndGeneration | None
    company_or_workshop_name: CodedText


def download_activity(cur: Cursor) -> DownloadActivity:
    return DownloadActivity(
        p.time_real(cur, "downloading time"),
        card_number_and_generation(cur),
        p.name(cur, "company or workshop name"),
    )


@dataclass
class CompanyLocksRecord:
    """VuCompanyLocksRecord, second generation (99 bytes)."""

    lock_in_time: datetime | None
    lock_out_time: datetime | None
    company_name: CodedText
    company_address: CodedText
    company_card: r.FullCardNumberAndGeneration | None


def company_locks_record(cur: Cursor) -> CompanyLocksRecord:
    return CompanyLocksRecord(
        lock_in_time=p.time_real(cur, "lock in time"),
        lock_out_time=p.time_real(cur, "lock out time"),
        company_name=p.name(cur, "company name"),
        company_address=p.address(cur, "company address"),
        company_card=card_number_and_generation(cur),
    )


@dataclass
class ControlActivityRecord:
    """VuControlActivityRecord, second generation (32 bytes)."""

    control_type: g1.ControlType
    control_time: datetime | None
    control_card: r.FullCardNumberAndGeneration | None
    download_period_begin: datetime | None
    download_period_end: datetime | None


def control_activity_record(cur: Cursor) -> ControlActivityRecord:
    return ControlActivityRecord(
        control_type=control_type(cur),
        control_time=p.time_real(cur, "control time"),
        control_card=card_number_and_generation(cur),
        download_period_begin=p.time_real(cur, "download period begin"),
        download_period_end=p.time_real(cur, "download period end"),
    )


@dataclass
class PreviousVehicleInfo:
    """PreviousVehicleInfo, second generation (20 bytes)."""

    registration: r.VehicleRegistration
    card_withdrawal_time: datetime | None
    vu_generation: Code


@dataclass
class CardIWRecord:
    """VuCardIWRecord, second generation (131 bytes)."""

    holder_name: r.HolderName
    card_number_and_generation: r.FullCardNumberAndGeneration | None
    card_expiry_date: datetime | None
    card_insertion_time: datetime | None
    odometer_at_insertion: int | None
    card_slot: Code
    card_withdrawal_time: datetime | None
    odometer_at_withdrawal: int | None
    previous_vehicle: PreviousVehicleInfo
    manual_input: Code


def card_iw_record(cur: Cursor) -> CardIWRecord:
    return CardIWRecord(
        holder_name=r.holder_name(cur),
        card_number_and_generation=card_number_and_generation(cur),
        card_expiry_date=p.time_real(cur, "card expiry date"),
        card_insertion_time=p.time_real(cur, "card insertion time"),
        odometer_at_insertion=p.odometer(cur, "odometer at insertion"),
        card_slot=p.code(cur, tables.CARD_SLOTS, "card slot number"),
        card_withdrawal_time=p.time_real(cur, "card withdrawal time"),
        odometer_at_withdrawal=p.odometer(cur, "odometer at withdrawal"),
        previous_vehicle=PreviousVehicleInfo(
            r.vehicle_registration(cur),
            p.time_real(cur, "previous card withdrawal time"),
            p.code(cur, tables.GENERATIONS, "previous VU generation"),
        ),
        manual_input=p.code(cur, tables.MANUAL_INPUT, "manual input flag"),
    )


@dataclass
class PlaceDailyWorkPeriodRecord:
    """VuPlaceDailyWorkPeriodRecord, second generation (40 bytes)."""

    card_number_and_generation: r.FullCardNumberAndGeneration | None
    place: PlaceRecord


def place_daily_work_period_record(cur: Cursor) -> PlaceDailyWorkPeriodRecord:
    return PlaceDailyWorkPeriodRecord(card_number_and_generation(cur), place_record(cur))


@dataclass
class GNSSADRecord:
    """VuGNSSADRecord, second generation (56 bytes)."""

    time_stamp: datetime | None
    driver_card: r.FullCardNumberAndGeneration | None
    co_driver_card: r.FullCardNumberAndGeneration | None
    gnss_place: GNSSPlaceRecord
    odometer: int | None


def gnss_ad_record(cur: Cursor) -> GNSSADRecord:
    return GNSSADRecord(
        time_stamp=p.time_real(cur, "GNSS AD time stamp"),
        driver_card=card_number_and_generation(cur),
        co_driver_card=card_number_and_generation(cur),
        gnss_place=gnss_place_record(cur),
        odometer=p.odometer(cur, "GNSS AD odometer"),
    )


@dataclass
class ManufacturerSpecificData:
    """ManufacturerSpecificEventFaultData (4 bytes)."""

    manufacturer: Code
    error_code: bytes


def manufacturer_specific_data(cur: Cursor) -> ManufacturerSpecificData:
    return ManufacturerSpecificData(
        tables.manufacturer(cur.u8("manufacturer code")), cur.read(3, "manufacturer specific error code"),
    )


@dataclass
class FaultRecord:
    """VuFaultRecord, second generation (90 bytes)."""

    fault_type: Code
    record_purpose: Code
    begin_time: datetime | None
    end_time: datetime | None
    driver_card_begin: r.FullCardNumberAndGeneration | None
    co_driver_card_begin: r.FullCardNumberAndGeneration | None
    driver_card_end: r.FullCardNumberAndGeneration | None
    co_driver_card_end: r.FullCardNumberAndGeneration | None
    manufacturer_specific: ManufacturerSpecificData


def fault_record(cur: Cursor) -> FaultRecord:
    return FaultRecord(
        fault_type=tables.event_fault_gen2(cur.u8("fault type")),
        record_purpose=tables.record_purpose(cur.u8("fault record purpose")),
        begin_time=p.time_real(cur, "fault begin time"),
        end_time=p.time_real(cur, "fault end time"),
        driver_card_begin=card_number_and_generation(cur),
        co_driver_card_begin=card_number_and_generation(cur),
        driver_card_end=card_number_and_generation(cur),
        co_driver_card_end=card_number_and_generation(cur),
        manufacturer_specific=manufacturer_specific_data(cur),
    )


@dataclass
class EventRecord:
    """VuEventRecord, second generation (91 bytes)."""

    event_type: Code
    record_purpose: Code
    begin_time: datetime | None
    end_time: datetime | None
    driver_card_begin: r.FullCardNumberAndGeneration | None
    co_driver_card_begin: r.FullCardNumberAndGeneration | None
    driver_card_end: r.FullCardNumberAndGeneration | None
    co_driver_card_end: r.FullCardNumberAndGeneration | None
    similar_events: int
    manufacturer_specific: ManufacturerSpecificData


def event_record(cur: Cursor) -> EventRecord:
    return EventRecord(
        event_type=tables.event_fault_gen2(cur.u8("event type")),
        record_purpose=tables.record_purpose(cur.u8("event record purpose")),
        begin_time=p.time_real(cur, "event begin time"),
        end_time=p.time_real(cur, "event end time"),
        driver_card_begin=card_number_and_generation(cur),
        co_driver_card_begin=card_number_and_generation(cur),
        driver_card_end=card_number_and_generation(cur),
        co_driver_card_end=card_number_and_generation(cur),
        similar_events=cur.u8("similar events number"),
        manufacturer_specific=manufacturer_specific_data(cur),
    )


@dataclass
class OverSpeedingEventRecord:
    """VuOverSpeedingEventRecord, second generation (32 bytes)."""

    event_type: Code
    record_purpose: Code
    begin_time: datetime | None
    end_time: datetime | None
    max_speed: int
    average_speed: int
    driver_card_begin: r.FullCardNumberAndGeneration | None
    similar_events: int


def over_speeding_event_record(cur: Cursor) -> OverSpeedingEventRecord:
    return OverSpeedingEventRecord(
        event_type=tables.event_fault_gen2(cur.u8("event type")),
        record_purpose=tables.record_purpose(cur.u8("event record purpose")),
        begin_time=p.time_real(cur, "overspeed begin time"),
        end_time=p.time_real(cur, "overspeed end time"),
        max_speed=cur.u8("max speed value"),
        average_speed=cur.u8("average speed value"),
        driver_card_begin=card_number_and_generation(cur),
        similar_events=cur.u8("similar events number"),
    )


@dataclass
class TimeAdjustmentRecord:
    """VuTimeAdjustmentRecord, second generation (99 bytes)."""

    old_time: datetime | None
    new_time: datetime | None
    workshop_name: CodedText
    workshop_address: CodedText
    workshop_card: r.FullCardNumberAndGeneration | None


def time_adjustment_record(cur: Cursor) -> TimeAdjustmentRecord:
    return TimeAdjustmentRecord(
        old_time=p.time_real(cur, "old time value"),
        new_time=p.time_real(cur, "new time value"),
        workshop_name=p.name(cur, "workshop name"),
        workshop_address=p.address(cur, "workshop address"),
        workshop_card=card_number_and_generation(cur),
    )


@dataclass
class TimeAdjustmentGNSSRecord:
    """VuTimeAdjustmentGNSSRecord (8 bytes)."""

    old_time: datetime | None
    new_time: datetime | None


def time_adjustment_gnss_record(cur: Cursor) -> TimeAdjustmentGNSSRecord:
    return TimeAdjustmentGNSSRecord(p.time_real(cur, "old time value"), p.time_real(cur, "new time value"))


@dataclass
class VuIdentification:
    """VuIdentification, second generation (126 bytes)."""

    manufacturer_name: CodedText
    manufacturer_address: CodedText
    part_number: str
    serial_number: r.ExtendedSerialNumber
    software: r.VuSoftwareIdentification
    manufacturing_date: datetime | None
    approval_number: str
    generation: Code
    ability: int

    @property
    def supports_gen2(self) -> bool:
        return bool(self.ability & 0x01)


def vu_identification_fields(cur: Cursor) -> dict:
    return dict(
        manufacturer_name=p.name(cur, "VU manufacturer name"),
        manufacturer_address=p.address(cur, "VU manufacturer address"),
        part_number=p.ia5(cur, 16, "VU part number"),
        serial_number=r.extended_serial_number(cur, EQUIPMENT),
        software=r.vu_software_identification(cur),
        manufacturing_date=p.time_real(cur, "VU manufacturing date"),
        approval_number=p.ia5(cur, 16, "VU approval number"),
        generation=p.code(cur, tables.GENERATIONS, "VU generation"),
        ability=cur.u8("VU ability"),
    )


def vu_identification(cur: Cursor) -> VuIdentification:
    return VuIdentification(**vu_identification_fields(cur))


@dataclass
class SensorPairedRecord:
    """SensorPairedRecord (28 bytes)."""

    serial_number: r.ExtendedSerialNumber
    approval_number: str
    pairing_date: datetime | None


def sensor_paired_record(cur: Cursor) -> SensorPairedRecord:
    return SensorPairedRecord(
        r.extended_serial_number(cur, EQUIPMENT),
        p.ia5(cur, 16, "sensor approval number"),
        p.time_real(cur, "sensor pairing date"),
    )


@dataclass
class SensorExternalGNSSCoupledRecord:
    """SensorExternalGNSSCoupledRecord (28 bytes)."""

    serial_number: r.ExtendedSerialNumber
    approval_number: str
    coupling_date: datetime | None


def sensor_external_gnss_coupled_record(cur: Cursor) -> SensorExternalGNSSCoupledRecord:
    return SensorExternalGNSSCoupledRecord(
        r.extended_serial_number(cur, EQUIPMENT),
        p.ia5(cur, 16, "external GNSS approval number"),
        p.time_real(cur, "external GNSS coupling date"),
    )


SEALS = 5


@dataclass
class SealRecord:
    """SealRecord (11 bytes)."""

    equipment_type: Code
    manufacturer_code: int
    seal_identifier: bytes


def seal_record(cur: Cursor) -> SealRecord:
    return SealRecord(
        tables.lookup(EQUIPMENT, cur.u8("sealed equipment type"), "RFU"),
        cur.u16("seal manufacturer code"),
        cur.read(8, "seal identifier"),
    )


@dataclass
class CalibrationRecord:
    """VuCalibrationRecord, second generation (222 bytes)."""

    purpose: Code
    workshop_name: CodedText
    workshop_address: CodedText
    workshop_card_number: r.FullCardNumber | None
    workshop_card_expiry_date: datetime | None
    vin: str
    registration: r.VehicleRegistration
    w_vehicle_characteristic_constant: int
    k_constant_of_recording_equipment: int
    l_tyre_circumference: int
    tyre_size: str
    authorised_speed: int
    old_odometer: int | None
    new_odometer: int | None
    old_time: datetime | None
    new_time: datetime | None
    next_calibration_date: datetime | None
    seals: list[SealRecord] = field(default_factory=list)


def calibration_fields(cur: Cursor) -> dict:
    fields = g1.calibration_fields(cur, tables.CALIBRATION_PURPOSES_GEN2, full_card_number)
    fields["seals"] = cur.repeat(SEALS, 11, seal_record, "seal records")
    return fields


def calibration_record(cur: Cursor) -> CalibrationRecord:
    return CalibrationRecord(**calibration_fields(cur))


@dataclass
class CardRecord:
    """VuCardRecord: a card seen by the VU."""

    card_number_and_generation: r.FullCardNumberAndGeneration | None
    card_extended_serial_number: r.ExtendedSerialNumber
    card_structure_version: g1.CardStructureVersion
    card_number: r.CardNumber | None = None


def card_record(cur: Cursor) -> CardRecord:
    number_and_generation = card_number_and_generation(cur)
    serial = r.extended_serial_number(cur, EQUIPMENT)
    version = g1.card_structure_version(cur)
    record = CardRecord(number_and_generation, serial, version)
    if cur.remaining >= 16:
        card_type = None
        if number_and_generation is not None:
            card_type = number_and_generation.full_card_number.card_type.value
        record.card_number = r.card_number(cur, card_type)
    return record


@dataclass
class ITSConsentRecord:
    """VuITSConsentRecord (20 bytes)."""

    card_number_and_generation: r.FullCardNumberAndGeneration | None
    consent: bool


def its_consent_record(cur: Cursor) -> ITSConsentRecord:
    return ITSConsentRecord(card_number_and_generation(cur), cur.u8("ITS consent") != 0)


@dataclass
class PowerSupplyInterruptionRecord:
    """VuPowerSupplyInterruptionRecord (87 bytes)."""

    event_type: Code
    record_purpose: Code
    begin_time: datetime | None
    end_time: datetime | None
    driver_card_begin: r.FullCardNumberAndGeneration | None
    driver_card_end: r.FullCardNumberAndGeneration | None
    co_driver_card_begin: r.FullCardNumberAndGeneration | None
    co_driver_card_end: r.FullCardNumberAndGeneration | None
    similar_events: int


def power_supply_interruption_record(cur: Cursor) -> PowerSupplyInterruptionRecord:
    return PowerSupplyInterruptionRecord(
        event_type=tables.event_fault_gen2(cur.u8("event type")),
        record_purpose=tables.record_purpose(cur.u8("event record purpose")),
        begin_time=p.time_real(cur, "interruption begin time"),
        end_time=p.time_real(cur, "interruption end time"),
        driver_card_begin=card_number_and_generation(cur),
        driver_card_end=card_number_and_generation(cur),
        co_driver_card_begin=card_number_and_generation(cur),
        co_driver_card_end=card_number_and_generation(cur),
        similar_events=cur.u8("similar events number"),
    )
