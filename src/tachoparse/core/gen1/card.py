"""First generation driver card elementary files."""

from __future__ import annotations

from dataclasses import dataclass

from tachoparse.core.base import records as r
from tachoparse.core.base.cursor import Cursor
from tachoparse.core.base.dispatch import Length, Namespace, decodes
from tachoparse.core.base.types import Generation
from tachoparse.core.gen1 import records as g1

GEN1 = Generation.GEN1

# Elementary file identifiers
EF_ICC = 0x0002
EF_IC = 0x0005
EF_APPLICATION_IDENTIFICATION = 0x0501
EF_EVENTS_DATA = 0x0502
EF_FAULTS_DATA = 0x0503
EF_DRIVER_ACTIVITY_DATA = 0x0504
EF_VEHICLES_USED = 0x0505
EF_PLACES = 0x0506
EF_CURRENT_USAGE = 0x0507
EF_CONTROL_ACTIVITY_DATA = 0x0508
EF_CARD_DOWNLOAD = 0x050E
EF_IDENTIFICATION = 0x0520
EF_DRIVING_LICENCE_INFO = 0x0521
EF_SPECIFIC_CONDITIONS = 0x0522
EF_CARD_CERTIFICATE = 0xC100
EF_CA_CERTIFICATE = 0xC108


# ---------------------------------------------------------------------------
# Block group
# ---------------------------------------------------------------------------

@dataclass
class CardGen1Blocks:
    """Files of the first generation tachograph application.

    Every file is None until its payload is met in the stream. Signatures
    are kept as raw bytes and never verified.
    """

    application_identification: g1.ApplicationIdentification | None = None
    application_identification_signature: bytes | None = None
    card_certificate: bytes | None = None
    member_state_certificate: bytes | None = None
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
    vehicles_used: g1.CardVehiclesUsed | None = None
    vehicles_used_signature: bytes | None = None
    places: g1.CardPlaces | None = None
    places_signature: bytes | None = None
    current_usage: r.CurrentUsage | None = None
    current_usage_signature: bytes | None = None
    control_activity_data: g1.CardControlActivityRecord | None = None
    control_activity_data_signature: bytes | None = None
    specific_conditions: list[r.SpecificConditionRecord] | None = None
    specific_conditions_signature: bytes | None = None


# ---------------------------------------------------------------------------
# File decoders
# ---------------------------------------------------------------------------

@decodes(Namespace.CARD, EF_ICC, GEN1, name="card_icc_identification", length=Length.exact(25), group="common")
def icc(cur: Cursor) -> r.CardIccIdentification:
    return r.card_icc_identification(cur, g1.EQUIPMENT)


@decodes(Namespace.CARD, EF_IC, GEN1, name="card_chip_identification", length=Length.exact(8), group="common")
def ic(cur: Cursor) -> r.CardChipIdentification:
    return r.card_chip_identification(cur)


@decodes(Namespace.CARD, EF_APPLICATION_IDENTIFICATION, GEN1,
         name="application_identification", length=Length.exact(10), group="gen1")
def application_identification(cur: Cursor) -> g1.ApplicationIdentification:
    return g1.application_identification(cur)


@decodes(Namespace.CARD, EF_CARD_CERTIFICATE, GEN1,
         name="card_certificate", length=Length.exact(g1.CERTIFICATE_SIZE), group="gen1")
@decodes(Namespace.CARD, EF_CA_CERTIFICATE, GEN1,
         name="member_state_certificate", length=Length.exact(g1.CERTIFICATE_SIZE), group="gen1")
def certificate(cur: Cursor) -> bytes:
    return cur.rest("certificate")


@decodes(Namespace.CARD, EF_IDENTIFICATION, GEN1, name="identification", length=Length.exact(143), group="gen1")
def identification(cur: Cursor) -> r.Identification:
    return r.identification(cur)


@decodes(Namespace.CARD, EF_CARD_DOWNLOAD, GEN1, name="card_download", length=Length.exact(4), group="gen1")
def card_download(cur: Cursor) -> r.CardDownload:
    return r.card_download(cur)


@decodes(Namespace.CARD, EF_DRIVING_LICENCE_INFO, GEN1,
         name="driving_licence_info", length=Length.exact(53), group="gen1")
def driving_licence_info(cur: Cursor) -> r.DrivingLicenceInfo:
    return r.driving_licence_info(cur)


@decodes(Namespace.CARD, EF_EVENTS_DATA, GEN1, name="events_data",
         length=Length.step(g1.EVENT_GROUPS * g1.EVENT_FAULT_SIZE), group="gen1")
def events_data(cur: Cursor) -> list[list[r.CardEventFaultRecord]]:
    return g1.event_fault_groups(cur, g1.EVENT_GROUPS, g1.card_event_record)


@decodes(Namespace.CARD, EF_FAULTS_DATA, GEN1, name="faults_data",
         length=Length.step(g1.FAULT_GROUPS * g1.EVENT_FAULT_SIZE), group="gen1")
def faults_data(cur: Cursor) -> list[list[r.CardEventFaultRecord]]:
    return g1.event_fault_groups(cur, g1.FAULT_GROUPS, g1.card_event_record)


@decodes(Namespace.CARD, EF_DRIVER_ACTIVITY_DATA, GEN1,
         name="driver_activity_data", length=Length.at_least(4), group="gen1")
def driver_activity_data(cur: Cursor) -> r.DriverActivityData:
    return r.driver_activity_data(cur)


@decodes(Namespace.CARD, EF_VEHICLES_USED, GEN1, name="vehicles_used", length=Length.step(31, header=2), group="gen1")
def vehicles_used(cur: Cursor) -> g1.CardVehiclesUsed:
    pointer = cur.u16("vehicle pointer newest record")
    return g1.CardVehiclesUsed(pointer, cur.repeat(cur.remaining // 31, 31, g1.card_vehicle_record, "vehicle records"))


@decodes(Namespace.CARD, EF_PLACES, GEN1, name="places", length=Length.step(10, header=1), group="gen1")
def places(cur: Cursor) -> g1.CardPlaces:
    pointer = cur.u8("place pointer newest record")
    return g1.CardPlaces(pointer, cur.repeat(cur.remaining // 10, 10, g1.place_record, "place records"))


@decodes(Namespace.CARD, EF_CURRENT_USAGE, GEN1, name="current_usage", length=Length.exact(19), group="gen1")
def current_usage(cur: Cursor) -> r.CurrentUsage:
    return r.current_usage(cur)


@decodes(Namespace.CARD, EF_CONTROL_ACTIVITY_DATA, GEN1,
         name="control_activity_data", length=Length.exact(46), group="gen1")
def control_activity_data(cur: Cursor) -> g1.CardControlActivityRecord:
    return g1.card_control_activity_record(cur)


@decodes(Namespace.CARD, EF_SPECIFIC_CONDITIONS, GEN1, name="specific_conditions", length=Length.step(5), group="gen1")
def specific_conditions(cur: Cursor) -> list[r.SpecificConditionRecord]:
    return cur.repeat(cur.remaining // 5, 5, r.specific_condition_record, "specific condition records")
