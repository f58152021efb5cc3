"""Whole-file decoding: card EF streams and vehicle unit TREP streams.

Importing this module imports every generation module, which fills the
dispatch table, and then freezes it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from typing import Any

from tachoparse.core.base import records as r
from tachoparse.core.base.cursor import Cursor
from tachoparse.core.base.detector import TREP_MARKER, detect_file_type, trep_generation
from tachoparse.core.base.dispatch import TABLE, DecoderSpec, Length, Namespace, Tag
from tachoparse.core.base.errors import (
    ClassificationError,
    RecordShapeError,
    UnknownTagError,
    UnsupportedGenerationError,
)
from tachoparse.core.base.logging import PROTOCOL, log_hex
from tachoparse.core.base.types import DeviceClass, Generation
from tachoparse.core.gen1 import card as c1
from tachoparse.core.gen1 import records as g1
from tachoparse.core.gen1 import vu as vu1  # noqa: F401
from tachoparse.core.gen2 import card as c2
from tachoparse.core.gen2 import records as g2
from tachoparse.core.gen2 import vu as vu2
from tachoparse.core.gen2v2 import card as c3
from tachoparse.core.gen2v2 import vu as vu3  # noqa: F401

lg = logging.getLogger(__name__)

TABLE.freeze()

__all__ = [
    "CardDocument",
    "VehicleUnitDocument",
    "detect_file_type",
    "parse",
    "parse_card",
    "parse_vehicle_unit",
]

# Card file appendix byte
GEN1_DATA = 0x00
GEN1_SIGNATURE = 0x01
GEN2_DATA = 0x02
GEN2_SIGNATURE = 0x03

GEN1_SIGNATURE_LENGTH = Length.exact(g1.SIGNATURE_SIZE)
GEN2_SIGNATURE_LENGTH = Length.between(g2.SIGNATURE_MIN, g2.SIGNATURE_MAX)


@dataclass
class CardDocument:
    """A decoded driver card download."""

    generation: Generation
    card_icc_identification: r.CardIccIdentification | None = None
    card_chip_identification: r.CardChipIdentification | None = None
    gen1: c1.CardGen1Blocks = field(default_factory=c1.CardGen1Blocks)
    gen2: c2.CardGen2Blocks | None = None
    gen2v2: c3.CardGen2V2Blocks | None = None


@dataclass
class VehicleUnitDocument:
    """A decoded vehicle unit download, blocks kept in file order per kind."""

    generation: Generation
    overview: Any = None
    activities: list = field(default_factory=list)
    events_and_faults: list = field(default_factory=list)
    detailed_speed: list = field(default_factory=list)
    technical_data: list = field(default_factory=list)


def _has_slot(target: Any, name: str) -> bool:
    return any(f.name == name for f in fields(target))


# ---------------------------------------------------------------------------
# Card
# ---------------------------------------------------------------------------

def _card_target(doc: CardDocument, spec: DecoderSpec) -> Any:
    if spec.group == "common":
        return doc
    target = getattr(doc, spec.group)
    if target is None:
        raise UnsupportedGenerationError(
            f"{spec.name} needs {spec.tag.generation.label}, card is {doc.generation.label}", tag=spec.tag,
        )
    return target


def _resolve_card(tag: Tag, start: int, strict: bool) -> DecoderSpec | None:
    spec = TABLE.resolve(tag)
    if spec is not None:
        return spec
    known = TABLE.generations(Namespace.CARD, tag.identifier)
    if known and min(known) > tag.generation:
        raise UnsupportedGenerationError(
            f"EF {tag.identifier:04X} is defined from {min(known).label} on", offset=start, tag=tag,
        )
    if strict:
        raise UnknownTagError(f"unknown EF {tag.identifier:04X}", offset=start, tag=tag)
    return None


def _store_card_data(doc: CardDocument, spec: DecoderSpec, body: Cursor, start: int) -> None:
    if not spec.length.accepts(body.remaining):
        raise RecordShapeError(
            f"{spec.name} is {body.remaining} bytes, expected {spec.length}", offset=start, tag=spec.tag,
        )
    target = _card_target(doc, spec)
    value = spec.decode(body)
    if not body.at_end():
        lg.warning("%s: %d trailing bytes ignored at 0x%X", spec.tag, body.remaining, body.offset)
    if getattr(target, spec.name) is not None:
        lg.warning("%s: duplicate %s, keeping the later one", spec.tag, spec.name)
    setattr(target, spec.name, value)


def _store_card_signature(
    doc: CardDocument, spec: DecoderSpec, body: Cursor, start: int, generation: Generation, strict: bool,
) -> None:
    length = GEN1_SIGNATURE_LENGTH if generation is Generation.GEN1 else GEN2_SIGNATURE_LENGTH
    if not length.accepts(body.remaining):
        raise RecordShapeError(
            f"signature of {spec.name} is {body.remaining} bytes, expected {length}", offset=start, tag=spec.tag,
        )
    target = _card_target(doc, spec)
    slot = f"{spec.name}_signature"
    if not _has_slot(target, slot):
        if strict:
            raise UnknownTagError(f"{spec.name} has no signature", offset=start, tag=spec.tag)
        lg.warning("%s: unexpected signature skipped", spec.tag)
        log_hex(lg, "  ", body.rest("skipped signature"))
        return
    if getattr(target, slot) is not None:
        lg.warning("%s: duplicate signature of %s, keeping the later one", spec.tag, spec.name)
    setattr(target, slot, body.rest("signature"))


def _appendix_generation(doc: CardDocument, appendix: int) -> Generation | None:
    if appendix in (GEN1_DATA, GEN1_SIGNATURE):
        return Generation.GEN1
    if appendix in (GEN2_DATA, GEN2_SIGNATURE):
        return doc.generation
    return None


def _card_stream(cur: Cursor, doc: CardDocument, strict: bool) -> None:
    while not cur.at_end():
        start = cur.offset
        fid = cur.u16("file identifier")
        appendix = cur.u8("appendix")
        size = cur.u16("file size")
        generation = _appendix_generation(doc, appendix)
        tag = Tag(Namespace.CARD, fid, generation) if generation is not None else None
        body = cur.take(size, f"EF {fid:04X} body", tag=tag)

        if tag is None:
            if strict:
                raise UnknownTagError(f"unknown appendix {appendix:02X} for EF {fid:04X}", offset=start)
            lg.warning("skipping EF %04X with unknown appendix %02X at 0x%X", fid, appendix, start)
            log_hex(lg, "  ", body.rest("skipped EF"))
            continue
        if appendix in (GEN2_DATA, GEN2_SIGNATURE) and doc.generation is Generation.GEN1:
            raise UnsupportedGenerationError(
                f"EF {fid:04X} has Gen2 appendix {appendix} in a Gen1 card", offset=start, tag=tag,
            )

        spec = _resolve_card(tag, start, strict)
        if spec is None:
            lg.warning("skipping unknown %s at 0x%X (%d bytes)", tag, start, size)
            log_hex(lg, "  ", body.rest("skipped EF"))
            continue

        signature = appendix in (GEN1_SIGNATURE, GEN2_SIGNATURE)
        lg.log(PROTOCOL, "%s %s%s, %d bytes", tag, spec.name, " signature" if signature else "", size)
        if signature:
            _store_card_signature(doc, spec, body, start, generation, strict)
        else:
            _store_card_data(doc, spec, body, start)


def parse_card(buffer: bytes | bytearray | memoryview, *, strict: bool = False) -> CardDocument:
    """Decode a driver card download file."""
    file_type = detect_file_type(buffer)
    if file_type.device is not DeviceClass.CARD:
        raise ClassificationError(f"expected a card file, found {file_type}", offset=0)

    doc = CardDocument(file_type.generation)
    if file_type.generation >= Generation.GEN2:
        doc.gen2 = c2.CardGen2Blocks()
    if file_type.generation is Generation.GEN2V2:
        doc.gen2v2 = c3.CardGen2V2Blocks()
    _card_stream(Cursor(buffer), doc, strict)
    return doc


# ---------------------------------------------------------------------------
# Vehicle unit
# ---------------------------------------------------------------------------

def _vu_stream(cur: Cursor, doc: VehicleUnitDocument, strict: bool) -> None:
    while not cur.at_end():
        start = cur.offset
        marker = cur.u8("TREP marker")
        if marker != TREP_MARKER:
            raise RecordShapeError(f"expected TREP marker 76, found {marker:02X}", offset=start)
        trep = cur.u8("TREP")
        generation = trep_generation(trep)
        if generation is None:
            raise ClassificationError(f"TREP {trep:02X} belongs to no known generation", offset=start + 1)
        if generation > doc.generation:
            raise UnsupportedGenerationError(
                f"{generation.label} block TREP {trep:02X} in a {doc.generation.label} download", offset=start,
            )

        tag = Tag(Namespace.VU_BLOCK, trep, generation)
        spec = TABLE.resolve(tag)
        if spec is None:
            if generation is Generation.GEN1:
                raise ClassificationError(f"unknown Gen1 TREP {trep:02X}", offset=start + 1, tag=tag)
            if strict:
                raise UnknownTagError(f"unknown TREP {trep:02X}", offset=start + 1, tag=tag)
            lg.warning("skipping unknown block %s at 0x%X", tag, start)
            cur.tag = tag
            vu2.skip_block(cur, generation)
            cur.tag = None
            continue

        lg.log(PROTOCOL, "%s %s at 0x%X", tag, spec.name, start)
        cur.tag = tag
        block = spec.decode(cur, strict)
        cur.tag = None

        if spec.name == "overview":
            if doc.overview is not None:
                lg.warning("%s: duplicate overview, keeping the later one", tag)
            doc.overview = block
        else:
            getattr(doc, spec.name).append(block)


def parse_vehicle_unit(buffer: bytes | bytearray | memoryview, *, strict: bool = False) -> VehicleUnitDocument:
    """Decode a vehicle unit download file."""
    file_type = detect_file_type(buffer)
    if file_type.device is not DeviceClass.VEHICLE_UNIT:
        raise ClassificationError(f"expected a vehicle unit file, found {file_type}", offset=0)

    doc = VehicleUnitDocument(file_type.generation)
    _vu_stream(Cursor(buffer), doc, strict)
    return doc


def parse(buffer: bytes | bytearray | memoryview, *, strict: bool = False) -> CardDocument | VehicleUnitDocument:
    """Detect the file type and decode accordingly."""
    if detect_file_type(buffer).device is DeviceClass.CARD:
        return parse_card(buffer, strict=strict)
    return parse_vehicle_unit(buffer, strict=strict)
