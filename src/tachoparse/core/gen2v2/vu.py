"""Second generation version 2 vehicle unit download blocks.

Version 2 blocks use the Gen2 record array framing. Record types that
changed layout are registered for GEN2V2 here; every other type resolves
to its Gen2 decoder.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from tachoparse.core.base import records as r
from tachoparse.core.base.dispatch import Length, Namespace, decodes
from tachoparse.core.base.primitives import CodedText
from tachoparse.core.base.types import Generation
from tachoparse.core.gen1 import records as g1
from tachoparse.core.gen2 import records as g2
from tachoparse.core.gen2 import vu as vu2
from tachoparse.core.gen2v2 import records as v2

GEN2V2 = Generation.GEN2V2

TREP_OVERVIEW = 0x31
TREP_ACTIVITIES = 0x32
TREP_EVENTS_AND_FAULTS = 0x33
TREP_TECHNICAL_DATA = 0x35

VU_BORDER_CROSSING = 0x22
VU_LOAD_UNLOAD = 0x23
VEHICLE_REGISTRATION_IDENTIFICATION = 0x24

_CALIBRATION = Length.one_of(v2.CALIBRATION_GEN2_SIZE, v2.CALIBRATION_SIZE)
_VU_IDENTIFICATION = Length.one_of(v2.VU_IDENTIFICATION_GEN2_SIZE, v2.VU_IDENTIFICATION_SIZE)

_RECORDS = [
    (vu2.VU_CALIBRATION, "calibration", _CALIBRATION, v2.calibration_record),
    (vu2.VU_GNSS_AD, "GNSS accumulated driving", Length.exact(57), v2.gnss_ad_record),
    (vu2.VU_IDENTIFICATION, "VU identification", _VU_IDENTIFICATION, v2.vu_identification),
    (vu2.VU_PLACE_DAILY_WORK_PERIOD, "place daily work period", Length.exact(41), v2.place_daily_work_period_record),
    (VU_BORDER_CROSSING, "border crossing", Length.exact(55), v2.border_crossing_record),
    (VU_LOAD_UNLOAD, "load/unload", Length.exact(58), v2.load_unload_record),
    (VEHICLE_REGISTRATION_IDENTIFICATION, "vehicle registration", Length.exact(15), r.vehicle_registration),
]

for _record_type, _name, _length, _decode in _RECORDS:
    decodes(Namespace.VU_RECORD, _record_type, GEN2V2, name=_name, length=_length)(_decode)


@dataclass
class OverviewBlock:
    """TREP 31."""

    member_state_certificate: list[bytes] = field(default_factory=list)
    vu_certificate: list[bytes] = field(default_factory=list)
    vin: list[str] = field(default_factory=list)
    registration_number: list[CodedText] = field(default_factory=list)
    registration: list[r.VehicleRegistration] = field(default_factory=list)
    current_date_time: list[datetime | None] = field(default_factory=list)
    downloadable_period: list[g1.DownloadablePeriod] = field(default_factory=list)
    card_slots_status: list[g1.CardSlotsStatus] = field(default_factory=list)
    download_activity: list[g2.DownloadActivity] = field(default_factory=list)
    company_locks: list[g2.CompanyLocksRecord] = field(default_factory=list)
    control_activities: list[g2.ControlActivityRecord] = field(default_factory=list)
    signature: bytes | None = None


OVERVIEW: dict[int, str] = {
    **vu2.OVERVIEW,
    VEHICLE_REGISTRATION_IDENTIFICATION: "registration",
}


@dataclass
class ActivitiesBlock:
    """TREP 32."""

    date_of_day_downloaded: list[datetime | None] = field(default_factory=list)
    odometer_midnight: list[int | None] = field(default_factory=list)
    card_iw: list[g2.CardIWRecord] = field(default_factory=list)
    activity_changes: list[r.ActivityChange] = field(default_factory=list)
    places: list[v2.PlaceDailyWorkPeriodRecord] = field(default_factory=list)
    gnss_accumulated_driving: list[v2.GNSSADRecord] = field(default_factory=list)
    specific_conditions: list[r.SpecificConditionRecord] = field(default_factory=list)
    border_crossings: list[v2.BorderCrossingRecord] = field(default_factory=list)
    load_unload_operations: list[v2.LoadUnloadRecord] = field(default_factory=list)
    signature: bytes | None = None


ACTIVITIES: dict[int, str] = {
    **vu2.ACTIVITIES,
    VU_BORDER_CROSSING: "border_crossings",
    VU_LOAD_UNLOAD: "load_unload_operations",
}


@dataclass
class TechnicalDataBlock:
    """TREP 35."""

    vu_identification: list[v2.VuIdentification | g2.VuIdentification] = field(default_factory=list)
    sensors_paired: list[g2.SensorPairedRecord] = field(default_factory=list)
    external_gnss_coupled: list[g2.SensorExternalGNSSCoupledRecord] = field(default_factory=list)
    calibrations: list[v2.CalibrationRecord | g2.CalibrationRecord] = field(default_factory=list)
    cards: list[g2.CardRecord] = field(default_factory=list)
    its_consents: list[g2.ITSConsentRecord] = field(default_factory=list)
    power_supply_interruptions: list[g2.PowerSupplyInterruptionRecord] = field(default_factory=list)
    signature: bytes | None = None


# Events and faults keep the Gen2 shape.
BLOCKS = [
    (TREP_OVERVIEW, "overview", OverviewBlock, OVERVIEW),
    (TREP_ACTIVITIES, "activities", ActivitiesBlock, ACTIVITIES),
    (TREP_EVENTS_AND_FAULTS, "events_and_faults", vu2.EventsAndFaultsBlock, vu2.EVENTS_AND_FAULTS),
    (TREP_TECHNICAL_DATA, "technical_data", TechnicalDataBlock, vu2.TECHNICAL_DATA),
]

for _trep, _name, _cls, _layout in BLOCKS:
    decodes(Namespace.VU_BLOCK, _trep, GEN2V2, name=_name)(vu2.block_decoder(GEN2V2, _name, _cls, _layout))
