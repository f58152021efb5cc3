"""Second generation vehicle unit download blocks.

A Gen2 block is a run of record arrays. Each array starts with a 5 byte
header (record type, record size, number of records) and the block ends
with the signature array. Records are decoded one slice at a time, so a
record decoder can never read into its neighbour.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from tachoparse.core.base import primitives as p
from tachoparse.core.base import records as r
from tachoparse.core.base.cursor import Cursor
from tachoparse.core.base.dispatch import TABLE, Length, Namespace, Tag, decodes
from tachoparse.core.base.errors import InvalidRepeatCountError, RecordShapeError, UnknownTagError
from tachoparse.core.base.logging import PROTOCOL, log_hex
from tachoparse.core.base.primitives import CodedText
from tachoparse.core.base.types import Generation
from tachoparse.core.gen1 import records as g1
from tachoparse.core.gen2 import records as g2

lg = logging.getLogger(__name__)

GEN2 = Generation.GEN2

TREP_OVERVIEW = 0x21
TREP_ACTIVITIES = 0x22
TREP_EVENTS_AND_FAULTS = 0x23
TREP_DETAILED_SPEED = 0x24
TREP_TECHNICAL_DATA = 0x25

# Record types
ACTIVITY_CHANGE_INFO = 0x01
CARD_SLOTS_STATUS = 0x02
CURRENT_DATE_TIME = 0x03
MEMBER_STATE_CERTIFICATE = 0x04
ODOMETER_VALUE_MIDNIGHT = 0x05
DATE_OF_DAY_DOWNLOADED = 0x06
SENSOR_PAIRED = 0x07
SIGNATURE = 0x08
SPECIFIC_CONDITION = 0x09
VEHICLE_IDENTIFICATION_NUMBER = 0x0A
VEHICLE_REGISTRATION_NUMBER = 0x0B
VU_CALIBRATION = 0x0C
VU_CARD_IW = 0x0D
VU_CARD = 0x0E
VU_CERTIFICATE = 0x0F
VU_COMPANY_LOCKS = 0x10
VU_CONTROL_ACTIVITY = 0x11
VU_DETAILED_SPEED_BLOCK = 0x12
VU_DOWNLOADABLE_PERIOD = 0x13
VU_DOWNLOAD_ACTIVITY_DATA = 0x14
VU_EVENT = 0x15
VU_GNSS_AD = 0x16
VU_ITS_CONSENT = 0x17
VU_FAULT = 0x18
VU_IDENTIFICATION = 0x19
VU_OVER_SPEEDING_CONTROL_DATA = 0x1A
VU_OVER_SPEEDING_EVENT = 0x1B
VU_PLACE_DAILY_WORK_PERIOD = 0x1C
VU_TIME_ADJUSTMENT_GNSS = 0x1D
VU_TIME_ADJUSTMENT = 0x1E
VU_POWER_SUPPLY_INTERRUPTION = 0x1F
SENSOR_PAIRED_RECORD = 0x20
SENSOR_EXTERNAL_GNSS_COUPLED = 0x21

RECORD_HEADER = 5


# ---------------------------------------------------------------------------
# Record registrations
# ---------------------------------------------------------------------------

def _bytes(cur: Cursor) -> bytes:
    return cur.rest("opaque record")


_RECORDS: list[tuple[int, str, Length, Any]] = [
    (ACTIVITY_CHANGE_INFO, "activity change", Length.exact(2), r.activity_change),
    (CARD_SLOTS_STATUS, "card slots status", Length.exact(1), g1.card_slots_status),
    (CURRENT_DATE_TIME, "current date time", Length.exact(4), p.time_real),
    (MEMBER_STATE_CERTIFICATE, "member state certificate", Length.any(), _bytes),
    (ODOMETER_VALUE_MIDNIGHT, "odometer value midnight", Length.exact(3), p.odometer),
    (DATE_OF_DAY_DOWNLOADED, "date of day downloaded", Length.exact(4), p.time_real),
    (SENSOR_PAIRED, "sensor paired", Length.exact(28), g2.sensor_paired_record),
    (SIGNATURE, "signature", Length.between(g2.SIGNATURE_MIN, g2.SIGNATURE_MAX), _bytes),
    (SPECIFIC_CONDITION, "specific condition", Length.exact(5), r.specific_condition_record),
    (VEHICLE_IDENTIFICATION_NUMBER, "VIN", Length.exact(17), lambda cur: p.ia5(cur, 17, "VIN")),
    (VEHICLE_REGISTRATION_NUMBER, "registration number", Length.exact(14), r.vehicle_registration_number),
    (VU_CALIBRATION, "calibration", Length.at_least(222), g2.calibration_record),
    (VU_CARD_IW, "card insertion/withdrawal", Length.exact(131), g2.card_iw_record),
    (VU_CARD, "card", Length.at_least(29), g2.card_record),
    (VU_CERTIFICATE, "VU certificate", Length.any(), _bytes),
    (VU_COMPANY_LOCKS, "company locks", Length.exact(99), g2.company_locks_record),
    (VU_CONTROL_ACTIVITY, "control activity", Length.exact(32), g2.control_activity_record),
    (VU_DETAILED_SPEED_BLOCK, "detailed speed block", Length.exact(64), g1.detailed_speed_block),
    (VU_DOWNLOADABLE_PERIOD, "downloadable period", Length.exact(8), g1.downloadable_period),
    (VU_DOWNLOAD_ACTIVITY_DATA, "download activity", Length.exact(59), g2.download_activity),
    (VU_EVENT, "event", Length.exact(91), g2.event_record),
    (VU_GNSS_AD, "GNSS accumulated driving", Length.exact(56), g2.gnss_ad_record),
    (VU_ITS_CONSENT, "ITS consent", Length.exact(20), g2.its_consent_record),
    (VU_FAULT, "fault", Length.exact(90), g2.fault_record),
    (VU_IDENTIFICATION, "VU identification", Length.at_least(126), g2.vu_identification),
    (VU_OVER_SPEEDING_CONTROL_DATA, "over speeding control", Length.exact(9), g1.over_speeding_control),
    (VU_OVER_SPEEDING_EVENT, "over speeding event", Length.exact(32), g2.over_speeding_event_record),
    (VU_PLACE_DAILY_WORK_PERIOD, "place daily work period", Length.exact(40), g2.place_daily_work_period_record),
    (VU_TIME_ADJUSTMENT_GNSS, "GNSS time adjustment", Length.exact(8), g2.time_adjustment_gnss_record),
    (VU_TIME_ADJUSTMENT, "time adjustment", Length.exact(99), g2.time_adjustment_record),
    (VU_POWER_SUPPLY_INTERRUPTION, "power supply interruption", Length.exact(87),
     g2.power_supply_interruption_record),
    (SENSOR_PAIRED_RECORD, "sensor paired", Length.exact(28), g2.sensor_paired_record),
    (SENSOR_EXTERNAL_GNSS_COUPLED, "external GNSS coupled", Length.exact(28),
     g2.sensor_external_gnss_coupled_record),
]

for _record_type, _name, _length, _decode in _RECORDS:
    decodes(Namespace.VU_RECORD, _record_type, GEN2, name=_name, length=_length)(_decode)


# ---------------------------------------------------------------------------
# Record array walker
# ---------------------------------------------------------------------------

def _array_header(cur: Cursor) -> tuple[int, int, int, int]:
    start = cur.offset
    record_type = cur.u8("record type")
    size = cur.u16("record size")
    count = cur.u16("number of records")
    lg.trace("record array %02X at 0x%X: %d x %d bytes", record_type, start, count, size)
    if record_type == 0x00:
        raise RecordShapeError("record type 0x00 is not valid", offset=start, tag=cur.tag)
    return start, record_type, size, count


def _skip_array(cur: Cursor, start: int, size: int, count: int, tag: Tag) -> None:
    if size * count > cur.remaining:
        raise InvalidRepeatCountError(
            f"{count} records of {size} bytes exceed {cur.remaining} remaining", offset=start, tag=tag,
        )
    log_hex(lg, "  ", cur.read(size * count, "skipped record array"))


def record_arrays(cur: Cursor, generation: Generation, block: Any, layout: dict[int, str], strict: bool) -> Any:
    """Fill block's list fields from record arrays until the signature array.

    layout maps each record type the block may hold to the field that
    receives its records. Unknown record types are skipped by their
    declared size unless strict is set.
    """
    block_tag = cur.tag
    while True:
        start, record_type, size, count = _array_header(cur)
        tag = Tag(Namespace.VU_RECORD, record_type, generation)
        spec = TABLE.resolve(tag)
        target = SIGNATURE if record_type == SIGNATURE else layout.get(record_type)

        if spec is None or target is None:
            if strict:
                raise UnknownTagError(f"record type {record_type:02X} not expected in block", offset=start, tag=tag)
            lg.warning("skipping record array %s at 0x%X (%d x %d bytes)", tag, start, count, size)
            _skip_array(cur, start, size, count, tag)
            continue

        if count and not spec.length.accepts(size):
            raise RecordShapeError(
                f"{spec.name} record size {size}, expected {spec.length}", offset=start, tag=tag,
            )
        cur.tag = tag
        try:
            records = cur.repeat(count, size, spec.decode, spec.name)
        finally:
            cur.tag = block_tag

        if record_type == SIGNATURE:
            if len(records) > 1:
                lg.warning("signature array holds %d records, keeping the last", len(records))
            block.signature = records[-1] if records else None
            return block
        getattr(block, target).extend(records)


def skip_block(cur: Cursor, generation: Generation) -> None:
    """Step over a whole block by walking its array headers to the signature."""
    while True:
        start, record_type, size, count = _array_header(cur)
        _skip_array(cur, start, size, count, Tag(Namespace.VU_RECORD, record_type, generation))
        if record_type == SIGNATURE:
            return


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------

@dataclass
class OverviewBlock:
    """TREP 21."""

    member_state_certificate: list[bytes] = field(default_factory=list)
    vu_certificate: list[bytes] = field(default_factory=list)
    vin: list[str] = field(default_factory=list)
    registration_number: list[CodedText] = field(default_factory=list)
    current_date_time: list[datetime | None] = field(default_factory=list)
    downloadable_period: list[g1.DownloadablePeriod] = field(default_factory=list)
    card_slots_status: list[g1.CardSlotsStatus] = field(default_factory=list)
    download_activity: list[g2.DownloadActivity] = field(default_factory=list)
    company_locks: list[g2.CompanyLocksRecord] = field(default_factory=list)
    control_activities: list[g2.ControlActivityRecord] = field(default_factory=list)
    signature: bytes | None = None


OVERVIEW: dict[int, str] = {
    MEMBER_STATE_CERTIFICATE: "member_state_certificate",
    VU_CERTIFICATE: "vu_certificate",
    VEHICLE_IDENTIFICATION_NUMBER: "vin",
    VEHICLE_REGISTRATION_NUMBER: "registration_number",
    CURRENT_DATE_TIME: "current_date_time",
    VU_DOWNLOADABLE_PERIOD: "downloadable_period",
    CARD_SLOTS_STATUS: "card_slots_status",
    VU_DOWNLOAD_ACTIVITY_DATA: "download_activity",
    VU_COMPANY_LOCKS: "company_locks",
    VU_CONTROL_ACTIVITY: "control_activities",
}


@dataclass
class ActivitiesBlock:
    """TREP 22."""

    date_of_day_downloaded: list[datetime | None] = field(default_factory=list)
    odometer_midnight: list[int | None] = field(default_factory=list)
    card_iw: list[g2.CardIWRecord] = field(default_factory=list)
    activity_changes: list[r.ActivityChange] = field(default_factory=list)
    places: list[g2.PlaceDailyWorkPeriodRecord] = field(default_factory=list)
    gnss_accumulated_driving: list[g2.GNSSADRecord] = field(default_factory=list)
    specific_conditions: list[r.SpecificConditionRecord] = field(default_factory=list)
    signature: bytes | None = None


ACTIVITIES: dict[int, str] = {
    DATE_OF_DAY_DOWNLOADED: "date_of_day_downloaded",
    ODOMETER_VALUE_MIDNIGHT: "odometer_midnight",
    VU_CARD_IW: "card_iw",
    ACTIVITY_CHANGE_INFO: "activity_changes",
    VU_PLACE_DAILY_WORK_PERIOD: "places",
    VU_GNSS_AD: "gnss_accumulated_driving",
    SPECIFIC_CONDITION: "specific_conditions",
}


@dataclass
class EventsAndFaultsBlock:
    """TREP 23."""

    faults: list[g2.FaultRecord] = field(default_factory=list)
    events: list[g2.EventRecord] = field(default_factory=list)
    over_speeding_control: list[g1.OverSpeedingControl] = field(default_factory=list)
    over_speeding_events: list[g2.OverSpeedingEventRecord] = field(default_factory=list)
    time_adjustments: list[g2.TimeAdjustmentRecord] = field(default_factory=list)
    gnss_time_adjustments: list[g2.TimeAdjustmentGNSSRecord] = field(default_factory=list)
    signature: bytes | None = None


EVENTS_AND_FAULTS: dict[int, str] = {
    VU_FAULT: "faults",
    VU_EVENT: "events",
    VU_OVER_SPEEDING_CONTROL_DATA: "over_speeding_control",
    VU_OVER_SPEEDING_EVENT: "over_speeding_events",
    VU_TIME_ADJUSTMENT: "time_adjustments",
    VU_TIME_ADJUSTMENT_GNSS: "gnss_time_adjustments",
}


@dataclass
class DetailedSpeedBlock:
    """TREP 24."""

    speed_blocks: list[g1.DetailedSpeedBlock] = field(default_factory=list)
    signature: bytes | None = None


DETAILED_SPEED: dict[int, str] = {
    VU_DETAILED_SPEED_BLOCK: "speed_blocks",
}


@dataclass
class TechnicalDataBlock:
    """TREP 25."""

    vu_identification: list[g2.VuIdentification] = field(default_factory=list)
    sensors_paired: list[g2.SensorPairedRecord] = field(default_factory=list)
    external_gnss_coupled: list[g2.SensorExternalGNSSCoupledRecord] = field(default_factory=list)
    calibrations: list[g2.CalibrationRecord] = field(default_factory=list)
    cards: list[g2.CardRecord] = field(default_factory=list)
    its_consents: list[g2.ITSConsentRecord] = field(default_factory=list)
    power_supply_interruptions: list[g2.PowerSupplyInterruptionRecord] = field(default_factory=list)
    signature: bytes | None = None


TECHNICAL_DATA: dict[int, str] = {
    VU_IDENTIFICATION: "vu_identification",
    SENSOR_PAIRED: "sensors_paired",
    SENSOR_PAIRED_RECORD: "sensors_paired",
    SENSOR_EXTERNAL_GNSS_COUPLED: "external_gnss_coupled",
    VU_CALIBRATION: "calibrations",
    VU_CARD: "cards",
    VU_ITS_CONSENT: "its_consents",
    VU_POWER_SUPPLY_INTERRUPTION: "power_supply_interruptions",
}


# ---------------------------------------------------------------------------
# Block registrations
# ---------------------------------------------------------------------------

BLOCKS: list[tuple[int, str, type, dict[int, str]]] = [
    (TREP_OVERVIEW, "overview", OverviewBlock, OVERVIEW),
    (TREP_ACTIVITIES, "activities", ActivitiesBlock, ACTIVITIES),
    (TREP_EVENTS_AND_FAULTS, "events_and_faults", EventsAndFaultsBlock, EVENTS_AND_FAULTS),
    (TREP_DETAILED_SPEED, "detailed_speed", DetailedSpeedBlock, DETAILED_SPEED),
    (TREP_TECHNICAL_DATA, "technical_data", TechnicalDataBlock, TECHNICAL_DATA),
]


def block_decoder(generation: Generation, name: str, block_cls: type, layout: dict[int, str]):
    """Build the decoder for one record-array block kind."""

    def decode(cur: Cursor, strict: bool = False) -> Any:
        block = record_arrays(cur, generation, block_cls(), layout, strict)
        lg.log(PROTOCOL, "%s %s: %s", generation.label, name, _summary(block))
        return block

    return decode


def _summary(block: Any) -> str:
    counts = [f"{k}={len(v)}" for k, v in vars(block).items() if isinstance(v, list) and v]
    return ", ".join(counts) or "empty"


for _trep, _name, _cls, _layout in BLOCKS:
    decodes(Namespace.VU_BLOCK, _trep, GEN2, name=_name)(block_decoder(GEN2, _name, _cls, _layout))
