"""Second generation driver card elementary files."""

from __future__ import annotations

from dataclasses import dataclass

from tachoparse.core.base import records as r
from tachoparse.core.base.cursor import Cursor
from tachoparse.core.base.dispatch import Length, Namespace, decodes
from tachoparse.core.base.types import Generation
from tachoparse.core.gen1 import card as c1
from tachoparse.core.gen1 import records as g1
from tachoparse.core.gen2 import records as g2

GEN2 = Generation.GEN2

EF_VEHICLE_UNITS_USED = 0x0523
EF_GNSS_PLACES = 0x0524
EF_CARD_MA_CERTIFICATE = 0xC100
EF_CARD_SIGN_CERTIFICATE = 0xC101
EF_LINK_CERTIFICATE = 0xC109


@dataclass
class CardGen2Blocks:
    """Files of the second generation tachograph application."""

    application_identification: g2.ApplicationIdentification | None = None
    application_identification_signature: bytes | None = None
    card_ma_certificate: bytes | None = None
    card_sign_certificate: bytes | None = None
    ca_certificate: bytes | None = None
    link_certificate: bytes | None = None
    identification: r.Identification | None = None
    identification_signature: bytes | None = None
    card_download: r.CardDownload | None = None
    card_download_signature: bytes | None = None
    driving_licence_info: r.DrivingLicenceInfo | None = None
    driving_licence_info_signature: bytes | None = None
    events_data: list[list[r.CardEventFaultRecord]] | None = None
    events_data_signature: bytes | None = None
    faults_data: list[list[r.CardEventFaultRecord]] | None = None
    faults_data_signature: bytes | None = None
    driver_activity_data: r.DriverActivityData | None = None
    driver_activity_data_signature: bytes | None = None
    vehicles_used: g2.PointedRecords | None = None
    vehicles_used_signature: bytes | None = None
    places: g2.PointedRecords | None = None
    places_signature: bytes | None = None
    current_usage: r.CurrentUsage | None = None
    current_usage_signature: bytes | None = None
    control_activity_data: g1.CardControlActivityRecord | None = None
    control_activity_data_signature: bytes | None = None
    specific_conditions: g2.PointedRecords | None = None
    specific_conditions_signature: bytes | None = None
    vehicle_units_used: g2.PointedRecords | None = None
    vehicle_units_used_signature: bytes | None = None
    gnss_accumulated_driving: g2.PointedRecords | None = None
    gnss_accumulated_driving_signature: bytes | None = None


@decodes(Namespace.CARD, c1.EF_ICC, GEN2, name="card_icc_identification", length=Length.exact(25), group="common")
def icc(cur: Cursor) -> r.CardIccIdentification:
    return r.card_icc_identification(cur, g2.EQUIPMENT)


@decodes(Namespace.CARD, c1.EF_IC, GEN2, name="card_chip_identification", length=Length.exact(8), group="common")
def ic(cur: Cursor) -> r.CardChipIdentification:
    return r.card_chip_identification(cur)


@decodes(Namespace.CARD, c1.EF_APPLICATION_IDENTIFICATION, GEN2,
         name="application_identification", length=Length.exact(17), group="gen2")
def application_identification(cur: Cursor) -> g2.ApplicationIdentification:
    return g2.application_identification(cur)


@decodes(Namespace.CARD, EF_CARD_MA_CERTIFICATE, GEN2, name="card_ma_certificate", group="gen2")
@decodes(Namespace.CARD, EF_CARD_SIGN_CERTIFICATE, GEN2, name="card_sign_certificate", group="gen2")
@decodes(Namespace.CARD, c1.EF_CA_CERTIFICATE, GEN2, name="ca_certificate", group="gen2")
@decodes(Namespace.CARD, EF_LINK_CERTIFICATE, GEN2, name="link_certificate", group="gen2")
def certificate(cur: Cursor) -> bytes:
    return cur.rest("certificate")


@decodes(Namespace.CARD, c1.EF_IDENTIFICATION, GEN2, name="identification", length=Length.exact(143), group="gen2")
def identification(cur: Cursor) -> r.Identification:
    return r.identification(cur)


@decodes(Namespace.CARD, c1.EF_CARD_DOWNLOAD, GEN2, name="card_download", length=Length.exact(4), group="gen2")
def card_download(cur: Cursor) -> r.CardDownload:
    return r.card_download(cur)


@decodes(Namespace.CARD, c1.EF_DRIVING_LICENCE_INFO, GEN2,
         name="driving_licence_info", length=Length.exact(53), group="gen2")
def driving_licence_info(cur: Cursor) -> r.DrivingLicenceInfo:
    return r.driving_licence_info(cur)


@decodes(Namespace.CARD, c1.EF_EVENTS_DATA, GEN2, name="events_data",
         length=Length.step(g2.EVENT_GROUPS * g1.EVENT_FAULT_SIZE), group="gen2")
def events_data(cur: Cursor) -> list[list[r.CardEventFaultRecord]]:
    return g1.event_fault_groups(cur, g2.EVENT_GROUPS, g2.card_event_record)


@decodes(Namespace.CARD, c1.EF_FAULTS_DATA, GEN2, name="faults_data",
         length=Length.step(g2.FAULT_GROUPS * g1.EVENT_FAULT_SIZE), group="gen2")
def faults_data(cur: Cursor) -> list[list[r.CardEventFaultRecord]]:
    return g1.event_fault_groups(cur, g2.FAULT_GROUPS, g2.card_event_record)


@decodes(Namespace.CARD, c1.EF_DRIVER_ACTIVITY_DATA, GEN2,
         name="driver_activity_data", length=Length.at_least(4), group="gen2")
def driver_activity_data(cur: Cursor) -> r.DriverActivityData:
    return r.driver_activity_data(cur)


@decodes(Namespace.CARD, c1.EF_VEHICLES_USED, GEN2,
         name="vehicles_used", length=Length.step(48, header=2), group="gen2")
def vehicles_used(cur: Cursor) -> g2.PointedRecords:
    return g2.pointed_records(cur, 48, g2.card_vehicle_record, "vehicle records")


@decodes(Namespace.CARD, c1.EF_PLACES, GEN2, name="places", length=Length.step(21, header=2), group="gen2")
def places(cur: Cursor) -> g2.PointedRecords:
    return g2.pointed_records(cur, 21, g2.place_record, "place records")


@decodes(Namespace.CARD, c1.EF_CURRENT_USAGE, GEN2, name="current_usage", length=Length.exact(19), group="gen2")
def current_usage(cur: Cursor) -> r.CurrentUsage:
    return r.current_usage(cur)


@decodes(Namespace.CARD, c1.EF_CONTROL_ACTIVITY_DATA, GEN2,
         name="control_activity_data", length=Length.exact(46), group="gen2")
def control_activity_data(cur: Cursor) -> g1.CardControlActivityRecord:
    return g2.card_control_activity_record(cur)


@decodes(Namespace.CARD, c1.EF_SPECIFIC_CONDITIONS, GEN2,
         name="specific_conditions", length=Length.step(5, header=2), group="gen2")
def specific_conditions(cur: Cursor) -> g2.PointedRecords:
    return g2.pointed_records(cur, 5, r.specific_condition_record, "specific condition records")


@decodes(Namespace.CARD, EF_VEHICLE_UNITS_USED, GEN2,
         name="vehicle_units_used", length=Length.step(10, header=2), group="gen2")
def vehicle_units_used(cur: Cursor) -> g2.PointedRecords:
    return g2.pointed_records(cur, 10, g2.card_vehicle_unit_record, "vehicle unit records")


@decodes(Namespace.CARD, EF_GNSS_PLACES, GEN2,
         name="gnss_accumulated_driving", length=Length.step(18, header=2), group="gen2")
def gnss_accumulated_driving(cur: Cursor) -> g2.PointedRecords:
    return g2.pointed_records(cur, 18, g2.gnss_accumulated_driving_record, "GNSS accumulated driving records")
