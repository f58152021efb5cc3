"""Driver card elementary files added by second generation version 2.

A version 2 card still carries every Gen2 file; those resolve to the
Gen2 decoders through the generation lineage and land in the Gen2 group.
"""

from __future__ import annotations

from dataclasses import dataclass

from tachoparse.core.base.cursor import Cursor
from tachoparse.core.base.dispatch import Length, Namespace, decodes
from tachoparse.core.base.types import Generation
from tachoparse.core.gen2 import records as g2
from tachoparse.core.gen2v2 import records as v2

GEN2V2 = Generation.GEN2V2

EF_APPLICATION_IDENTIFICATION_V2 = 0x0525
EF_PLACES_AUTHENTICATION = 0x0526
EF_GNSS_PLACES_AUTHENTICATION = 0x0527
EF_BORDER_CROSSINGS = 0x0528
EF_LOAD_UNLOAD_OPERATIONS = 0x0529
EF_LOAD_TYPE_ENTRIES = 0x0530
EF_VU_CONFIGURATIONS = 0x0531


@dataclass
class CardGen2V2Blocks:
    """Files only present on version 2 cards."""

    application_identification: v2.ApplicationIdentification | None = None
    application_identification_signature: bytes | None = None
    places_authentication: g2.PointedRecords | None = None
    places_authentication_signature: bytes | None = None
    gnss_places_authentication: g2.PointedRecords | None = None
    gnss_places_authentication_signature: bytes | None = None
    border_crossings: g2.PointedRecords | None = None
    border_crossings_signature: bytes | None = None
    load_unload_operations: g2.PointedRecords | None = None
    load_unload_operations_signature: bytes | None = None
    load_type_entries: g2.PointedRecords | None = None
    load_type_entries_signature: bytes | None = None
    vu_configurations: bytes | None = None
    vu_configurations_signature: bytes | None = None


@decodes(Namespace.CARD, EF_APPLICATION_IDENTIFICATION_V2, GEN2V2,
         name="application_identification", length=Length.exact(10), group="gen2v2")
def application_identification(cur: Cursor) -> v2.ApplicationIdentification:
    return v2.application_identification(cur)


@decodes(Namespace.CARD, EF_PLACES_AUTHENTICATION, GEN2V2,
         name="places_authentication", length=Length.step(5, header=2), group="gen2v2")
def places_authentication(cur: Cursor) -> g2.PointedRecords:
    return g2.pointed_records(cur, 5, v2.auth_status_record, "place authentication records")


@decodes(Namespace.CARD, EF_GNSS_PLACES_AUTHENTICATION, GEN2V2,
         name="gnss_places_authentication", length=Length.step(5, header=2), group="gen2v2")
def gnss_places_authentication(cur: Cursor) -> g2.PointedRecords:
    return g2.pointed_records(cur, 5, v2.auth_status_record, "GNSS authentication records")


@decodes(Namespace.CARD, EF_BORDER_CROSSINGS, GEN2V2,
         name="border_crossings", length=Length.step(17, header=2), group="gen2v2")
def border_crossings(cur: Cursor) -> g2.PointedRecords:
    return g2.pointed_records(cur, 17, v2.card_border_crossing_record, "border crossing records")


@decodes(Namespace.CARD, EF_LOAD_UNLOAD_OPERATIONS, GEN2V2,
         name="load_unload_operations", length=Length.step(20, header=2), group="gen2v2")
def load_unload_operations(cur: Cursor) -> g2.PointedRecords:
    return g2.pointed_records(cur, 20, v2.card_load_unload_record, "load/unload records")


@decodes(Namespace.CARD, EF_LOAD_TYPE_ENTRIES, GEN2V2,
         name="load_type_entries", length=Length.step(5, header=2), group="gen2v2")
def load_type_entries(cur: Cursor) -> g2.PointedRecords:
    return g2.pointed_records(cur, 5, v2.card_load_type_entry_record, "load type entry records")


@decodes(Namespace.CARD, EF_VU_CONFIGURATIONS, GEN2V2, name="vu_configurations", group="gen2v2")
def vu_configurations(cur: Cursor) -> bytes:
    return cur.rest("VU configuration")
