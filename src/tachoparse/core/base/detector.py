"""Device class and generation detection from the leading bytes of a file."""

from __future__ import annotations

import logging

from tachoparse.core.base.errors import ClassificationError
from tachoparse.core.base.logging import PROTOCOL
from tachoparse.core.base.types import DeviceClass, FileType, Generation

lg = logging.getLogger(__name__)

TREP_MARKER = 0x76

EF_ICC = 0x0002
EF_APPLICATION_IDENTIFICATION = 0x0501
EF_APPLICATION_IDENTIFICATION_V2 = 0x0525

HEADER_SIZE = 5
GEN1_DATA = 0x00
GEN2_DATA = 0x02

VU_TREPS: dict[int, Generation] = {
    **{trep: Generation.GEN1 for trep in range(0x01, 0x06)},
    **{trep: Generation.GEN2 for trep in range(0x21, 0x26)},
    **{trep: Generation.GEN2V2 for trep in range(0x31, 0x36)},
}


def trep_generation(trep: int) -> Generation | None:
    """Generation family a TREP value belongs to, known block or not."""
    family = trep >> 4
    if family == 0x0:
        return Generation.GEN1
    if family == 0x2:
        return Generation.GEN2
    if family == 0x3:
        return Generation.GEN2V2
    return None


def _card_headers(buffer: bytes | memoryview):
    """Yield (fid, appendix, body offset, size) for each card EF header.

    Stops quietly at the first header that does not fit; full decoding
    reports truncation later with a proper offset.
    """
    offset = 0
    end = len(buffer)
    while offset + HEADER_SIZE <= end:
        fid = int.from_bytes(buffer[offset : offset + 2], "big")
        appendix = buffer[offset + 2]
        size = int.from_bytes(buffer[offset + 3 : offset + 5], "big")
        body = offset + HEADER_SIZE
        if body + size > end:
            return
        yield fid, appendix, body, size
        offset = body + size


def _card_generation(buffer: bytes | memoryview) -> Generation:
    found: Generation | None = None
    for fid, appendix, body, size in _card_headers(buffer):
        if fid == EF_APPLICATION_IDENTIFICATION_V2 and appendix == GEN2_DATA:
            return Generation.GEN2V2
        if fid != EF_APPLICATION_IDENTIFICATION or size < 3:
            continue
        if appendix == GEN2_DATA:
            version = bytes(buffer[body + 1 : body + 3])
            if version == b"\x01\x01":
                return Generation.GEN2V2
            found = Generation.GEN2
        elif appendix == GEN1_DATA and found is None:
            found = Generation.GEN1
    if found is None:
        raise ClassificationError("card file has no application identification", offset=0)
    return found


def detect_file_type(buffer: bytes | bytearray | memoryview) -> FileType:
    """Classify a buffer as card or vehicle unit and find its generation."""
    if len(buffer) < 2:
        raise ClassificationError(f"file too short to classify: {len(buffer)} bytes", offset=0)

    if buffer[0] == TREP_MARKER:
        generation = VU_TREPS.get(buffer[1])
        if generation is None:
            raise ClassificationError(f"unknown leading TREP 0x{buffer[1]:02X}", offset=1)
        result = FileType(DeviceClass.VEHICLE_UNIT, generation)
    elif int.from_bytes(buffer[:2], "big") == EF_ICC and len(buffer) >= HEADER_SIZE and buffer[2] <= 0x03:
        result = FileType(DeviceClass.CARD, _card_generation(buffer))
    else:
        lead = bytes(buffer[:4]).hex(" ").upper()
        raise ClassificationError(f"unrecognised leading bytes {lead}", offset=0)

    lg.log(PROTOCOL, "detected %s", result)
    return result
