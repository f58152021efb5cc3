"""Human-readable summaries of decoded downloads."""

from __future__ import annotations

from dataclasses import fields
from datetime import date, datetime
from typing import Any

from cryptography.hazmat.primitives import hashes

from tachoparse.core.base.primitives import CodedText
from tachoparse.core.base.records import CardActivityDailyRecord, DriverActivityData, Identification
from tachoparse.core.base.tables import Code
from tachoparse.core.document import CardDocument, VehicleUnitDocument

FINGERPRINT_BYTES = 8


# --- Helpers ---

def _fingerprint(data: bytes) -> str:
    """Leading bytes of the SHA-256 digest, for telling blobs apart."""
    digest = hashes.Hash(hashes.SHA256())
    digest.update(data)
    return digest.finalize()[:FINGERPRINT_BYTES].hex(" ").upper()


def _blob(data: bytes) -> str:
    return f"{len(data):4d} bytes  SHA-256 {_fingerprint(data)}"


def _text(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, Code):
        return value.name
    if isinstance(value, CodedText):
        return value.text
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S UTC")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _rows(rows: list[tuple[str, Any]]) -> str:
    w = max(len(label) for label, _ in rows)
    return "\n".join(f"  {label:<{w}}  {_text(value)}" for label, value in rows)


def _count(value: Any) -> int | None:
    if isinstance(value, list):
        return len(value)
    if isinstance(value, DriverActivityData):
        return len(value.days)
    records = getattr(value, "records", None)
    if isinstance(records, list):
        return len(records)
    return None


def _first(value: Any) -> Any:
    """Gen2 blocks hold record arrays where Gen1 holds a single value."""
    if isinstance(value, list):
        return value[0] if value else None
    return value


# --- Card sections ---

def _identification(doc: CardDocument) -> Identification | None:
    for group in (doc.gen2, doc.gen1):
        if group is not None and group.identification is not None:
            return group.identification
    return None


def format_identification(ident: Identification) -> str:
    card, holder = ident.card, ident.holder
    return _rows([
        ("Card Number", card.card_number),
        ("Issuing Nation", card.issuing_nation),
        ("Issuing Authority", card.issuing_authority),
        ("Issue Date", card.issue_date),
        ("Validity Begin", card.validity_begin),
        ("Expiry Date", card.expiry_date),
        ("Surname", holder.surname),
        ("First Names", holder.first_names),
        ("Birth Date", holder.birth_date),
        ("Language", holder.preferred_language),
    ])


def format_files(group: Any) -> str:
    lines = []
    for f in fields(group):
        value = getattr(group, f.name)
        if value is None or f.name.endswith("_signature") or isinstance(value, bytes):
            continue
        count = _count(value)
        suffix = f"  ({count} records)" if count is not None else ""
        signed = "  signed" if getattr(group, f"{f.name}_signature", None) is not None else ""
        lines.append(f"  {f.name}{suffix}{signed}")
    return "\n".join(lines)


def format_blobs(group: Any) -> str:
    lines = []
    for f in fields(group):
        value = getattr(group, f.name)
        if isinstance(value, bytes):
            lines.append(f"  {f.name:<42s}{_blob(value)}")
    return "\n".join(lines)


def format_day(day: CardActivityDailyRecord) -> str:
    head = f"  {_text(day.date)}  distance {day.day_distance} km  presence {_text(day.daily_presence_counter)}"
    changes = [f"    {c.time}  {c.slot.name:<10s} {c.activity.name}" for c in day.changes]
    return "\n".join([head, *changes])


def format_card(doc: CardDocument) -> str:
    """Sectioned summary of a card download."""
    sections = [f"--- File ---\n  card {doc.generation.label}"]

    ident = _identification(doc)
    if ident is not None:
        sections.append(f"--- Identification ---\n{format_identification(ident)}")

    licence = doc.gen1.driving_licence_info
    if doc.gen2 is not None and doc.gen2.driving_licence_info is not None:
        licence = doc.gen2.driving_licence_info
    if licence is not None:
        sections.append("--- Driving Licence ---\n" + _rows([
            ("Number", licence.licence_number),
            ("Issuing Nation", licence.issuing_nation),
            ("Issuing Authority", licence.issuing_authority),
        ]))

    if doc.card_icc_identification is not None:
        serial = doc.card_icc_identification.extended_serial_number
        sections.append("--- Chip ---\n" + _rows([
            ("Serial Number", serial.serial_number),
            ("Manufacturer", serial.manufacturer),
            ("Approval Number", doc.card_icc_identification.approval_number),
        ]))

    for label, group in (("Gen1", doc.gen1), ("Gen2", doc.gen2), ("Gen2V2", doc.gen2v2)):
        if group is None:
            continue
        files = format_files(group)
        if files:
            sections.append(f"--- {label} Files ---\n{files}")
        blobs = format_blobs(group)
        if blobs:
            sections.append(f"--- {label} Certificates and Signatures ---\n{blobs}")

    activity = doc.gen2.driver_activity_data if doc.gen2 is not None else None
    activity = activity or doc.gen1.driver_activity_data
    if activity is not None and activity.days:
        sections.append(f"--- Last Activity Day ---\n{format_day(activity.days[-1])}")

    return "\n\n".join(sections)


# --- Vehicle unit sections ---

def format_vehicle_unit(doc: VehicleUnitDocument) -> str:
    """Sectioned summary of a vehicle unit download."""
    sections = [f"--- File ---\n  vehicle-unit {doc.generation.label}"]

    overview = doc.overview
    if overview is not None:
        registration = _first(getattr(overview, "registration", None))
        number = getattr(registration, "number", None)
        if registration is None:
            number = _first(getattr(overview, "registration_number", None))
        period = _first(overview.downloadable_period)
        sections.append("--- Vehicle ---\n" + _rows([
            ("VIN", _first(overview.vin)),
            ("Registration", number),
            ("Current Time", _first(overview.current_date_time)),
            ("Data From", getattr(period, "min_downloadable_time", None)),
            ("Data Until", getattr(period, "max_downloadable_time", None)),
        ]))

    technical = doc.technical_data[0] if doc.technical_data else None
    ident = _first(getattr(technical, "vu_identification", None))
    if ident is not None:
        sections.append("--- Vehicle Unit ---\n" + _rows([
            ("Manufacturer", ident.manufacturer_name),
            ("Part Number", ident.part_number),
            ("Serial Number", ident.serial_number.serial_number),
            ("Software", ident.software.version),
            ("Approval Number", ident.approval_number),
        ]))

    blocks = [
        ("overview", 1 if overview is not None else 0),
        ("activities", len(doc.activities)),
        ("events_and_faults", len(doc.events_and_faults)),
        ("detailed_speed", len(doc.detailed_speed)),
        ("technical_data", len(doc.technical_data)),
    ]
    sections.append("--- Blocks ---\n" + "\n".join(f"  {name:<20s}{n}" for name, n in blocks))

    signatures = []
    for name, _ in blocks:
        found = [overview] if name == "overview" else getattr(doc, name)
        for i, block in enumerate(b for b in found if b is not None):
            if block.signature:
                signatures.append(f"  {name}[{i}]".ljust(26) + _blob(block.signature))
    if signatures:
        sections.append("--- Signatures ---\n" + "\n".join(signatures))

    return "\n\n".join(sections)
