"""First generation record layouts (driver card and vehicle unit)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from tachoparse.core.base import primitives as p
from tachoparse.core.base import records as r
from tachoparse.core.base import tables
from tachoparse.core.base.cursor import Cursor
from tachoparse.core.base.primitives import CodedText
from tachoparse.core.base.tables import Code

EQUIPMENT = tables.EQUIPMENT_TYPES_GEN1

CERTIFICATE_SIZE = 194
SIGNATURE_SIZE = 128
EVENT_GROUPS = 6
FAULT_GROUPS = 2
EVENT_FAULT_SIZE = 24


def full_card_number(cur: Cursor) -> r.FullCardNumber | None:
    return r.full_card_number(cur, EQUIPMENT)


# ---------------------------------------------------------------------------
# Card records
# ---------------------------------------------------------------------------

@dataclass
class CardStructureVersion:
    major: int
    minor: int


def card_structure_version(cur: Cursor) -> CardStructureVersion:
    return CardStructureVersion(cur.u8("structure version major"), cur.u8("structure version minor"))


@dataclass
class ApplicationIdentification:
    """DriverCardApplicationIdentification (10 bytes)."""

    type_of_tachograph_card: Code
    card_structure_version: CardStructureVersion
    events_per_type: int
    faults_per_type: int
    activity_structure_length: int
    vehicle_records: int
    place_records: int


def application_identification(cur: Cursor) -> ApplicationIdentification:
    return ApplicationIdentification(
        type_of_tachograph_card=tables.lookup(EQUIPMENT, cur.u8("card type"), "RFU"),
        card_structure_version=card_structure_version(cur),
        events_per_type=cur.u8("events per type"),
        faults_per_type=cur.u8("faults per type"),
        activity_structure_length=cur.u16("activity structure length"),
        vehicle_records=cur.u16("vehicle records"),
        place_records=cur.u8("place records"),
    )


def card_event_record(cur: Cursor) -> r.CardEventFaultRecord:
    return r.card_event_fault_record(cur, tables.event_fault_gen1)


def event_fault_groups(cur: Cursor, groups: int, decode) -> list[list[r.CardEventFaultRecord]]:
    """Split an event or fault file into its per-type groups of equal size."""
    per_group = cur.remaining // (groups * EVENT_FAULT_SIZE)
    return [cur.repeat(per_group, EVENT_FAULT_SIZE, decode, "event/fault records") for _ in range(groups)]


@dataclass
class CardVehicleRecord:
    """CardVehicleRecord (31 bytes)."""

    odometer_begin: int | None
    odometer_end: int | None
    first_use: datetime | None
    last_use: datetime | None
    registration: r.VehicleRegistration
    vu_data_block_counter: int | None


def card_vehicle_record(cur: Cursor) -> CardVehicleRecord:
    return CardVehicleRecord(
        odometer_begin=p.odometer(cur, "vehicle odometer begin"),
        odometer_end=p.odometer(cur, "vehicle odometer end"),
        first_use=p.time_real(cur, "vehicle first use"),
        last_use=p.time_real(cur, "vehicle last use"),
        registration=r.vehicle_registration(cur),
        vu_data_block_counter=p.bcd(cur, 2, "VU data block counter"),
    )


@dataclass
class CardVehiclesUsed:
    """EF Vehicles_Used: newest record pointer and the cyclic array."""

    newest_record_pointer: int
    records: list = field(default_factory=list)


@dataclass
class PlaceRecord:
    """PlaceRecord (10 bytes)."""

    entry_time: datetime | None
    entry_type: Code
    country: Code
    region: int
    odometer: int | None


def place_record(cur: Cursor) -> PlaceRecord:
    return PlaceRecord(
        entry_time=p.time_real(cur, "place entry time"),
        entry_type=p.code(cur, tables.ENTRY_TYPES, "entry type"),
        country=tables.nation(cur.u8("daily work period country")),
        region=cur.u8("daily work period region"),
        odometer=p.odometer(cur, "place odometer"),
    )


@dataclass
class CardPlaces:
    """EF Places: newest record pointer and the cyclic array."""

    newest_record_pointer: int
    records: list = field(default_factory=list)


@dataclass
class ControlType:
    """ControlType bit field."""

    card_downloading: bool
    vu_downloading: bool
    printing: bool
    display: bool
    calibration_checking: bool | None = None


def control_type(cur: Cursor) -> ControlType:
    value = cur.u8("control type")
    return ControlType(bool(value & 0x80), bool(value & 0x40), bool(value & 0x20), bool(value & 0x10))


@dataclass
class CardControlActivityRecord:
    """CardControlActivityDataRecord (46 bytes)."""

    control_type: ControlType
    control_time: datetime | None
    control_card_number: r.FullCardNumber | None
    control_vehicle: r.VehicleRegistration
    download_period_begin: datetime | None
    download_period_end: datetime | None


def card_control_activity_record(cur: Cursor, decode_type=control_type, equipment=EQUIPMENT) -> CardControlActivityRecord:
    return CardControlActivityRecord(
        control_type=decode_type(cur),
        control_time=p.time_real(cur, "control time"),
        control_card_number=r.full_card_number(cur, equipment),
        control_vehicle=r.vehicle_registration(cur),
        download_period_begin=p.time_real(cur, "control download period begin"),
        download_period_end=p.time_real(cur, "control download period end"),
    )


# ---------------------------------------------------------------------------
# Vehicle unit records
# ---------------------------------------------------------------------------

@dataclass
class DownloadablePeriod:
    """VuDownloadablePeriod (8 bytes)."""

    min_downloadable_time: datetime | None
    max_downloadable_time: datetime | None


def downloadable_period(cur: Cursor) -> DownloadablePeriod:
    return DownloadablePeriod(p.time_real(cur, "min downloadable time"), p.time_real(cur, "max downloadable time"))


@dataclass
class CardSlotsStatus:
    """CardSlotsStatus: high nibble co-driver, low nibble driver."""

    driver: Code
    co_driver: Code


def card_slots_status(cur: Cursor) -> CardSlotsStatus:
    value = cur.u8("card slots status")
    return CardSlotsStatus(
        driver=tables.lookup(tables.SLOT_STATUS, value & 0x0F, "RFU"),
        co_driver=tables.lookup(tables.SLOT_STATUS, value >> 4, "RFU"),
    )


@dataclass
class DownloadActivity:
    """VuDownloadActivityData (58 bytes)."""

    downloading_time: datetime | None
    full_card_number: r.FullCardNumber | None
    company_or_workshop_name: CodedText


def download_activity(cur: Cursor) -> DownloadActivity:
    return DownloadActivity(
        p.time_real(cur, "downloading time"), full_card_number(cur), p.name(cur, "company or workshop name"),
    )


@dataclass
class CompanyLocksRecord:
    """VuCompanyLocksRecord (98 bytes)."""

    lock_in_time: datetime | None
    lock_out_time: datetime | None
    company_name: CodedText
    company_address: CodedText
    company_card_number: r.FullCardNumber | None


def company_locks_record(cur: Cursor) -> CompanyLocksRecord:
    return CompanyLocksRecord(
        lock_in_time=p.time_real(cur, "lock in time"),
        lock_out_time=p.time_real(cur, "lock out time"),
        company_name=p.name(cur, "company name"),
        company_address=p.address(cur, "company address"),
        company_card_number=full_card_number(cur),
    )


@dataclass
class ControlActivityRecord:
    """VuControlActivityRecord (31 bytes)."""

    control_type: ControlType
    control_time: datetime | None
    control_card_number: r.FullCardNumber | None
    download_period_begin: datetime | None
    download_period_end: datetime | None


def control_activity_record(cur: Cursor) -> ControlActivityRecord:
    return ControlActivityRecord(
        control_type=control_type(cur),
        control_time=p.time_real(cur, "control time"),
        control_card_number=full_card_number(cur),
        download_period_begin=p.time_real(cur, "download period begin"),
        download_period_end=p.time_real(cur, "download period end"),
    )


@dataclass
class PreviousVehicleInfo:
    """PreviousVehicleInfo (19 bytes)."""

    registration: r.VehicleRegistration
    card_withdrawal_time: datetime | None


@dataclass
class CardIWRecord:
    """VuCardIWRecord (129 bytes)."""

    holder_name: r.HolderName
    full_card_number: r.FullCardNumber | None
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
        full_card_number=full_card_number(cur),
        card_expiry_date=p.time_real(cur, "card expiry date"),
        card_insertion_time=p.time_real(cur, "card insertion time"),
        odometer_at_insertion=p.odometer(cur, "odometer at insertion"),
        card_slot=p.code(cur, tables.CARD_SLOTS, "card slot number"),
        card_withdrawal_time=p.time_real(cur, "card withdrawal time"),
        odometer_at_withdrawal=p.odometer(cur, "odometer at withdrawal"),
        previous_vehicle=PreviousVehicleInfo(
            r.vehicle_registration(cur), p.time_real(cur, "previous card withdrawal time"),
        ),
        manual_input=p.code(cur, tables.MANUAL_INPUT, "manual input flag"),
    )


@dataclass
class PlaceDailyWorkPeriodRecord:
    """VuPlaceDailyWorkPeriodRecord (28 bytes)."""

    full_card_number: r.FullCardNumber | None
    place: PlaceRecord


def place_daily_work_period_record(cur: Cursor) -> PlaceDailyWorkPeriodRecord:
    return PlaceDailyWorkPeriodRecord(full_card_number(cur), place_record(cur))


@dataclass
class FaultRecord:
    """VuFaultRecord (82 bytes)."""

    fault_type: Code
    record_purpose: Code
    begin_time: datetime | None
    end_time: datetime | None
    driver_card_begin: r.FullCardNumber | None
    co_driver_card_begin: r.FullCardNumber | None
    driver_card_end: r.FullCardNumber | None
    co_driver_card_end: r.FullCardNumber | None


def fault_record(cur: Cursor) -> FaultRecord:
    return FaultRecord(
        fault_type=tables.event_fault_gen1(cur.u8("fault type")),
        record_purpose=tables.record_purpose(cur.u8("fault record purpose")),
        begin_time=p.time_real(cur, "fault begin time"),
        end_time=p.time_real(cur, "fault end time"),
        driver_card_begin=full_card_number(cur),
        co_driver_card_begin=full_card_number(cur),
        driver_card_end=full_card_number(cur),
        co_driver_card_end=full_card_number(cur),
    )


@dataclass
class EventRecord:
    """VuEventRecord (83 bytes)."""

    event_type: Code
    record_purpose: Code
    begin_time: datetime | None
    end_time: datetime | None
    driver_card_begin: r.FullCardNumber | None
    co_driver_card_begin: r.FullCardNumber | None
    driver_card_end: r.FullCardNumber | None
    co_driver_card_end: r.FullCardNumber | None
    similar_events: int


def event_record(cur: Cursor) -> EventRecord:
    return EventRecord(
        event_type=tables.event_fault_gen1(cur.u8("event type")),
        record_purpose=tables.record_purpose(cur.u8("event record purpose")),
        begin_time=p.time_real(cur, "event begin time"),
        end_time=p.time_real(cur, "event end time"),
        driver_card_begin=full_card_number(cur),
        co_driver_card_begin=full_card_number(cur),
        driver_card_end=full_card_number(cur),
        co_driver_card_end=full_card_number(cur),
        similar_events=cur.u8("similar events number"),
    )


@dataclass
class OverSpeedingControl:
    """VuOverSpeedingControlData (9 bytes)."""

    last_overspeed_control_time: datetime | None
    first_overspeed_since: datetime | None
    overspeed_events_since: int


def over_speeding_control(cur: Cursor) -> OverSpeedingControl:
    return OverSpeedingControl(
        p.time_real(cur, "last overspeed control time"),
        p.time_real(cur, "first overspeed since"),
        cur.u8("number of overspeed since"),
    )


@dataclass
class OverSpeedingEventRecord:
    """VuOverSpeedingEventRecord (31 bytes)."""

    event_type: Code
    record_purpose: Code
    begin_time: datetime | None
    end_time: datetime | None
    max_speed: int
    average_speed: int
    driver_card_begin: r.FullCardNumber | None
    similar_events: int


def over_speeding_event_record(cur: Cursor) -> OverSpeedingEventRecord:
    return OverSpeedingEventRecord(
        event_type=tables.event_fault_gen1(cur.u8("event type")),
        record_purpose=tables.record_purpose(cur.u8("event record purpose")),
        begin_time=p.time_real(cur, "overspeed begin time"),
        end_time=p.time_real(cur, "overspeed end time"),
        max_speed=cur.u8("max speed value"),
        average_speed=cur.u8("average speed value"),
        driver_card_begin=full_card_number(cur),
        similar_events=cur.u8("similar events number"),
    )


@dataclass
class TimeAdjustmentRecord:
    """VuTimeAdjustmentRecord (98 bytes)."""

    old_time: datetime | None
    new_time: datetime | None
    workshop_name: CodedText
    workshop_address: CodedText
    workshop_card_number: r.FullCardNumber | None


def time_adjustment_record(cur: Cursor) -> TimeAdjustmentRecord:
    return TimeAdjustmentRecord(
        old_time=p.time_real(cur, "old time value"),
        new_time=p.time_real(cur, "new time value"),
        workshop_name=p.name(cur, "workshop name"),
        workshop_address=p.address(cur, "workshop address"),
        workshop_card_number=full_card_number(cur),
    )


SPEEDS_PER_BLOCK = 60


@dataclass
class DetailedSpeedBlock:
    """VuDetailedSpeedBlock (64 bytes): one minute of per-second speeds."""

    begin_time: datetime | None
    speeds: list[int]


def detailed_speed_block(cur: Cursor) -> DetailedSpeedBlock:
    begin = p.time_real(cur, "speed block begin date")
    return DetailedSpeedBlock(begin, list(cur.read(SPEEDS_PER_BLOCK, "speeds per second")))


@dataclass
class VuIdentification:
    """VuIdentification (116 bytes)."""

    manufacturer_name: CodedText
    manufacturer_address: CodedText
    part_number: str
    serial_number: r.ExtendedSerialNumber
    software: r.VuSoftwareIdentification
    manufacturing_date: datetime | None
    approval_number: str


def vu_identification(cur: Cursor) -> VuIdentification:
    return VuIdentification(
        manufacturer_name=p.name(cur, "VU manufacturer name"),
        manufacturer_address=p.address(cur, "VU manufacturer address"),
        part_number=p.ia5(cur, 16, "VU part number"),
        serial_number=r.extended_serial_number(cur, EQUIPMENT),
        software=r.vu_software_identification(cur),
        manufacturing_date=p.time_real(cur, "VU manufacturing date"),
        approval_number=p.ia5(cur, 8, "VU approval number"),
    )


@dataclass
class SensorPaired:
    """SensorPaired (20 bytes)."""

    serial_number: r.ExtendedSerialNumber
    approval_number: str
    pairing_date: datetime | None


def sensor_paired(cur: Cursor) -> SensorPaired:
    return SensorPaired(
        r.extended_serial_number(cur, EQUIPMENT),
        p.ia5(cur, 8, "sensor approval number"),
        p.time_real(cur, "sensor pairing date"),
    )


@dataclass
class CalibrationRecord:
    """VuCalibrationRecord (167 bytes)."""

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


def calibration_fields(cur: Cursor, purposes: dict[int, str], card_number) -> dict:
    """Fields shared by every generation's calibration record."""
    return dict(
        purpose=p.code(cur, purposes, "calibration purpose"),
        workshop_name=p.name(cur, "workshop name"),
        workshop_address=p.address(cur, "workshop address"),
        workshop_card_number=card_number(cur),
        workshop_card_expiry_date=p.time_real(cur, "workshop card expiry date"),
        vin=p.ia5(cur, 17, "VIN"),
        registration=r.vehicle_registration(cur),
        w_vehicle_characteristic_constant=cur.u16("w constant"),
        k_constant_of_recording_equipment=cur.u16("k constant"),
        l_tyre_circumference=cur.u16("l tyre circumference"),
        tyre_size=p.ia5(cur, 15, "tyre size"),
        authorised_speed=cur.u8("authorised speed"),
        old_odometer=p.odometer(cur, "old odometer value"),
        new_odometer=p.odometer(cur, "new odometer value"),
        old_time=p.time_real(cur, "old time value"),
        new_time=p.time_real(cur, "new time value"),
        next_calibration_date=p.time_real(cur, "next calibration date"),
    )


def calibration_record(cur: Cursor) -> CalibrationRecord:
    return CalibrationRecord(**calibration_fields(cur, tables.CALIBRATION_PURPOSES_GEN1, full_card_number))
