"""First generation vehicle unit download blocks.

Gen1 blocks carry no overall length, so each assembler must consume its
block exactly; the next TREP starts right after the trailing signature.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from tachoparse.core.base import primitives as p
from tachoparse.core.base import records as r
from tachoparse.core.base.cursor import Cursor
from tachoparse.core.base.dispatch import Namespace, decodes
from tachoparse.core.base.types import Generation
from tachoparse.core.gen1 import records as g1

GEN1 = Generation.GEN1

TREP_OVERVIEW = 0x01
TREP_ACTIVITIES = 0x02
TREP_EVENTS_AND_FAULTS = 0x03
TREP_DETAILED_SPEED = 0x04
TREP_TECHNICAL_DATA = 0x05


def _signature(cur: Cursor) -> bytes:
    return cur.read(g1.SIGNATURE_SIZE, "signature")


@dataclass
class OverviewBlock:
    """TREP 01: certificates, vehicle identity and download history."""

    member_state_certificate: bytes
    vu_certificate: bytes
    vin: str
    registration: r.VehicleRegistration
    current_date_time: datetime | None
    downloadable_period: g1.DownloadablePeriod
    card_slots_status: g1.CardSlotsStatus
    download_activity: g1.DownloadActivity
    company_locks: list[g1.CompanyLocksRecord] = field(default_factory=list)
    control_activities: list[g1.ControlActivityRecord] = field(default_factory=list)
    signature: bytes = b""


@decodes(Namespace.VU_BLOCK, TREP_OVERVIEW, GEN1, name="overview")
def overview(cur: Cursor, strict: bool = False) -> OverviewBlock:
    return OverviewBlock(
        member_state_certificate=cur.read(g1.CERTIFICATE_SIZE, "member state certificate"),
        vu_certificate=cur.read(g1.CERTIFICATE_SIZE, "VU certificate"),
        vin=p.ia5(cur, 17, "VIN"),
        registration=r.vehicle_registration(cur),
        current_date_time=p.time_real(cur, "current date time"),
        downloadable_period=g1.downloadable_period(cur),
        card_slots_status=g1.card_slots_status(cur),
        download_activity=g1.download_activity(cur),
        company_locks=cur.repeat(cur.u8("number of locks"), 98, g1.company_locks_record, "company locks"),
        control_activities=cur.repeat(cur.u8("number of controls"), 31, g1.control_activity_record, "controls"),
        signature=_signature(cur),
    )


@dataclass
class ActivitiesBlock:
    """TREP 02: one downloaded day."""

    date: datetime | None
    odometer_midnight: int | None
    card_iw: list[g1.CardIWRecord] = field(default_factory=list)
    activity_changes: list[r.ActivityChange] = field(default_factory=list)
    places: list[g1.PlaceDailyWorkPeriodRecord] = field(default_factory=list)
    specific_conditions: list[r.SpecificConditionRecord] = field(default_factory=list)
    signature: bytes = b""


@decodes(Namespace.VU_BLOCK, TREP_ACTIVITIES, GEN1, name="activities")
def activities(cur: Cursor, strict: bool = False) -> ActivitiesBlock:
    return ActivitiesBlock(
        date=p.time_real(cur, "date of day downloaded"),
        odometer_midnight=p.odometer(cur, "odometer value midnight"),
        card_iw=cur.repeat(cur.u16("number of card IW records"), 129, g1.card_iw_record, "card IW records"),
        activity_changes=cur.repeat(cur.u16("number of activity changes"), 2, r.activity_change, "activity changes"),
        places=cur.repeat(cur.u8("number of place records"), 28, g1.place_daily_work_period_record, "places"),
        specific_conditions=cur.repeat(
            cur.u16("number of specific conditions"), 5, r.specific_condition_record, "specific conditions",
        ),
        signature=_signature(cur),
    )


@dataclass
class EventsAndFaultsBlock:
    """TREP 03."""

    faults: list[g1.FaultRecord] = field(default_factory=list)
    events: list[g1.EventRecord] = field(default_factory=list)
    over_speeding_control: g1.OverSpeedingControl | None = None
    over_speeding_events: list[g1.OverSpeedingEventRecord] = field(default_factory=list)
    time_adjustments: list[g1.TimeAdjustmentRecord] = field(default_factory=list)
    signature: bytes = b""


@decodes(Namespace.VU_BLOCK, TREP_EVENTS_AND_FAULTS, GEN1, name="events_and_faults")
def events_and_faults(cur: Cursor, strict: bool = False) -> EventsAndFaultsBlock:
    return EventsAndFaultsBlock(
        faults=cur.repeat(cur.u8("number of faults"), 82, g1.fault_record, "faults"),
        events=cur.repeat(cur.u8("number of events"), 83, g1.event_record, "events"),
        over_speeding_control=g1.over_speeding_control(cur),
        over_speeding_events=cur.repeat(
            cur.u8("number of overspeed events"), 31, g1.over_speeding_event_record, "overspeed events",
        ),
        time_adjustments=cur.repeat(
            cur.u8("number of time adjustments"), 98, g1.time_adjustment_record, "time adjustments",
        ),
        signature=_signature(cur),
    )


@dataclass
class DetailedSpeedBlock:
    """TREP 04."""

    speed_blocks: list[g1.DetailedSpeedBlock] = field(default_factory=list)
    signature: bytes = b""


@decodes(Namespace.VU_BLOCK, TREP_DETAILED_SPEED, GEN1, name="detailed_speed")
def detailed_speed(cur: Cursor, strict: bool = False) -> DetailedSpeedBlock:
    blocks = cur.repeat(cur.u16("number of speed blocks"), 64, g1.detailed_speed_block, "speed blocks")
    return DetailedSpeedBlock(blocks, _signature(cur))


@dataclass
class TechnicalDataBlock:
    """TREP 05: VU identity, paired sensor and calibrations."""

    vu_identification: g1.VuIdentification
    sensor_paired: g1.SensorPaired
    calibrations: list[g1.CalibrationRecord] = field(default_factory=list)
    signature: bytes = b""


@decodes(Namespace.VU_BLOCK, TREP_TECHNICAL_DATA, GEN1, name="technical_data")
def technical_data(cur: Cursor, strict: bool = False) -> TechnicalDataBlock:
    return TechnicalDataBlock(
        vu_identification=g1.vu_identification(cur),
        sensor_paired=g1.sensor_paired(cur),
        calibrations=cur.repeat(cur.u8("number of calibrations"), 167, g1.calibration_record, "calibrations"),
        signature=_signature(cur),
    )
