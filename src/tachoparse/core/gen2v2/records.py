"""Second generation version 2 record layouts.

Version 2 adds border crossings, load/unload operations and the
authentication status of GNSS positions. Most records are a Gen2 record
with a GNSSPlaceAuthRecord in place of the plain GNSS place.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from tachoparse.core.base import primitives as p
from tachoparse.core.base import records as r
from tachoparse.core.base import tables
from tachoparse.core.base.cursor import Cursor
from tachoparse.core.base.primitives import CodedText
from tachoparse.core.base.tables import Code
from tachoparse.core.gen2 import records as g2

MAP_VERSION_SIZE = 12
VU_IDENTIFICATION_GEN2_SIZE = 126
VU_IDENTIFICATION_SIZE = VU_IDENTIFICATION_GEN2_SIZE + MAP_VERSION_SIZE
CALIBRATION_GEN2_SIZE = 222
CALIBRATION_SIZE = CALIBRATION_GEN2_SIZE + 6


@dataclass
class GNSSPlaceAuthRecord:
    """GNSSPlaceAuthRecord (12 bytes)."""

    time_stamp: datetime | None
    accuracy: int
    coordinates: g2.GeoCoordinates
    authentication_status: Code


def gnss_place_auth_record(cur: Cursor) -> GNSSPlaceAuthRecord:
    place = g2.gnss_place_record(cur)
    return GNSSPlaceAuthRecord(
        place.time_stamp,
        place.accuracy,
        place.coordinates,
        p.code(cur, tables.AUTHENTICATION_STATUS, "authentication status"),
    )


# ---------------------------------------------------------------------------
# Card records
# ---------------------------------------------------------------------------

@dataclass
class ApplicationIdentification:
    """DriverCardApplicationIdentificationV2 (10 bytes)."""

    length_of_following_data: int
    border_crossing_records: int
    load_unload_records: int
    load_type_entry_records: int
    vu_configuration_length: int


def application_identification(cur: Cursor) -> ApplicationIdentification:
    return ApplicationIdentification(
        length_of_following_data=cur.u16("length of following data"),
        border_crossing_records=cur.u16("border crossing records"),
        load_unload_records=cur.u16("load/unload records"),
        load_type_entry_records=cur.u16("load type entry records"),
        vu_configuration_length=cur.u16("VU configuration length range"),
    )


@dataclass
class AuthStatusRecord:
    """PlaceAuthStatusRecord and GNSSAuthStatusADRecord (5 bytes)."""

    time_stamp: datetime | None
    authentication_status: Code


def auth_status_record(cur: Cursor) -> AuthStatusRecord:
    return AuthStatusRecord(
        p.time_real(cur, "authentication time stamp"),
        p.code(cur, tables.AUTHENTICATION_STATUS, "authentication status"),
    )


@dataclass
class CardBorderCrossingRecord:
    """CardBorderCrossingRecord (17 bytes)."""

    country_left: Code
    country_entered: Code
    gnss_place_auth: GNSSPlaceAuthRecord
    odometer: int | None


def card_border_crossing_record(cur: Cursor) -> CardBorderCrossingRecord:
    return CardBorderCrossingRecord(
        country_left=tables.nation(cur.u8("country left")),
        country_entered=tables.nation(cur.u8("country entered")),
        gnss_place_auth=gnss_place_auth_record(cur),
        odometer=p.odometer(cur, "border crossing odometer"),
    )


@dataclass
class CardLoadUnloadRecord:
    """CardLoadUnloadRecord (20 bytes)."""

    time_stamp: datetime | None
    operation_type: Code
    gnss_place_auth: GNSSPlaceAuthRecord
    odometer: int | None


def card_load_unload_record(cur: Cursor) -> CardLoadUnloadRecord:
    return CardLoadUnloadRecord(
        time_stamp=p.time_real(cur, "load/unload time stamp"),
        operation_type=p.code(cur, tables.OPERATION_TYPES, "operation type"),
        gnss_place_auth=gnss_place_auth_record(cur),
        odometer=p.odometer(cur, "load/unload odometer"),
    )


@dataclass
class CardLoadTypeEntryRecord:
    """CardLoadTypeEntryRecord (5 bytes)."""

    time_stamp: datetime | None
    load_type_entered: Code


def card_load_type_entry_record(cur: Cursor) -> CardLoadTypeEntryRecord:
    return CardLoadTypeEntryRecord(
        p.time_real(cur, "load type entry time stamp"), p.code(cur, tables.LOAD_TYPES, "load type entered"),
    )


# ---------------------------------------------------------------------------
# Vehicle unit records
# ---------------------------------------------------------------------------

@dataclass
class PlaceAuthRecord:
    """PlaceAuthRecord (22 bytes)."""

    entry_time: datetime | None
    entry_type: Code
    country: Code
    region: int
    odometer: int | None
    gnss_place_auth: GNSSPlaceAuthRecord


def place_auth_record(cur: Cursor) -> PlaceAuthRecord:
    return PlaceAuthRecord(
        entry_time=p.time_real(cur, "place entry time"),
        entry_type=p.code(cur, tables.ENTRY_TYPES, "entry type"),
        country=tables.nation(cur.u8("daily work period country")),
        region=cur.u8("daily work period region"),
        odometer=p.odometer(cur, "place odometer"),
        gnss_place_auth=gnss_place_auth_record(cur),
    )


@dataclass
class PlaceDailyWorkPeriodRecord:
    """VuPlaceDailyWorkPeriodRecord, version 2 (41 bytes)."""

    card_number_and_generation: r.FullCardNumberAndGeneration | None
    place: PlaceAuthRecord


def place_daily_work_period_record(cur: Cursor) -> PlaceDailyWorkPeriodRecord:
    return PlaceDailyWorkPeriodRecord(g2.card_number_and_generation(cur), place_auth_record(cur))


@dataclass
class GNSSADRecord:
    """VuGNSSADRecord, version 2 (57 bytes)."""

    time_stamp: datetime | None
    driver_card: r.FullCardNumberAndGeneration | None
    co_driver_card: r.FullCardNumberAndGeneration | None
    gnss_place_auth: GNSSPlaceAuthRecord
    odometer: int | None


def gnss_ad_record(cur: Cursor) -> GNSSADRecord:
    return GNSSADRecord(
        time_stamp=p.time_real(cur, "GNSS AD time stamp"),
        driver_card=g2.card_number_and_generation(cur),
        co_driver_card=g2.card_number_and_generation(cur),
        gnss_place_auth=gnss_place_auth_record(cur),
        odometer=p.odometer(cur, "GNSS AD odometer"),
    )


@dataclass
class BorderCrossingRecord:
    """VuBorderCrossingRecord (55 bytes)."""

    driver_card: r.FullCardNumberAndGeneration | None
    co_driver_card: r.FullCardNumberAndGeneration | None
    country_left: Code
    country_entered: Code
    gnss_place_auth: GNSSPlaceAuthRecord
    odometer: int | None


def border_crossing_record(cur: Cursor) -> BorderCrossingRecord:
    return BorderCrossingRecord(
        driver_card=g2.card_number_and_generation(cur),
        co_driver_card=g2.card_number_and_generation(cur),
        country_left=tables.nation(cur.u8("country left")),
        country_entered=tables.nation(cur.u8("country entered")),
        gnss_place_auth=gnss_place_auth_record(cur),
        odometer=p.odometer(cur, "border crossing odometer"),
    )


@dataclass
class LoadUnloadRecord:
    """VuLoadUnloadRecord (58 bytes)."""

    time_stamp: datetime | None
    operation_type: Code
    driver_card: r.FullCardNumberAndGeneration | None
    co_driver_card: r.FullCardNumberAndGeneration | None
    gnss_place_auth: GNSSPlaceAuthRecord
    odometer: int | None


def load_unload_record(cur: Cursor) -> LoadUnloadRecord:
    return LoadUnloadRecord(
        time_stamp=p.time_real(cur, "load/unload time stamp"),
        operation_type=p.code(cur, tables.OPERATION_TYPES, "operation type"),
        driver_card=g2.card_number_and_generation(cur),
        co_driver_card=g2.card_number_and_generation(cur),
        gnss_place_auth=gnss_place_auth_record(cur),
        odometer=p.odometer(cur, "load/unload odometer"),
    )


@dataclass
class VuIdentification:
    """VuIdentification, version 2 (138 bytes)."""

    manufacturer_name: CodedText
    manufacturer_address: CodedText
    part_number: str
    serial_number: r.ExtendedSerialNumber
    software: r.VuSoftwareIdentification
    manufacturing_date: datetime | None
    approval_number: str
    generation: Code
    ability: int
    digital_map_version: str

    @property
    def supports_gen2(self) -> bool:
        return bool(self.ability & 0x01)


def vu_identification(cur: Cursor) -> VuIdentification | g2.VuIdentification:
    """A version 2 VU may still send the 126 byte Gen2 layout."""
    if cur.remaining == VU_IDENTIFICATION_GEN2_SIZE:
        return g2.vu_identification(cur)
    fields = g2.vu_identification_fields(cur)
    return VuIdentification(**fields, digital_map_version=p.ia5(cur, MAP_VERSION_SIZE, "digital map version"))


@dataclass
class CalibrationRecord:
    """VuCalibrationRecord, version 2 (228 bytes)."""

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
    seals: list[g2.SealRecord]
    by_default_load_type: Code
    calibration_country: Code
    calibration_country_timestamp: datetime | None


def calibration_record(cur: Cursor) -> CalibrationRecord | g2.CalibrationRecord:
    if cur.remaining == CALIBRATION_GEN2_SIZE:
        return g2.calibration_record(cur)
    return CalibrationRecord(
        **g2.calibration_fields(cur),
        by_default_load_type=p.code(cur, tables.LOAD_TYPES, "by default load type"),
        calibration_country=tables.nation(cur.u8("calibration country")),
        calibration_country_timestamp=p.time_real(cur, "calibration country timestamp"),
    )
