"""Record shapes whose layout is the same in every generation.

Where only a coded table differs between generations (equipment types,
event types) the table is passed in by the generation module.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime

from tachoparse.core.base import primitives as p
from tachoparse.core.base import tables
from tachoparse.core.base.cursor import Cursor
from tachoparse.core.base.errors import RecordShapeError
from tachoparse.core.base.primitives import CodedText
from tachoparse.core.base.tables import Code


# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------

@dataclass
class VehicleRegistration:
    """VehicleRegistrationIdentification (15 bytes)."""

    nation: Code
    number: CodedText


def vehicle_registration(cur: Cursor) -> VehicleRegistration:
    nation = tables.nation(cur.u8("registering nation"))
    return VehicleRegistration(nation=nation, number=p.coded_text(cur, 13, "registration number"))


def vehicle_registration_number(cur: Cursor) -> CodedText:
    """VehicleRegistrationNumber (14 bytes) without a nation."""
    return p.coded_text(cur, 13, "registration number")


@dataclass
class CardNumber:
    """CardNumber (16 bytes); driver cards have no consecutive index."""

    identification: str
    consecutive_index: str | None = None
    replacement_index: str | None = None
    renewal_index: str | None = None

    def __str__(self) -> str:
        return "".join(
            part for part in (
                self.identification, self.consecutive_index, self.replacement_index, self.renewal_index,
            ) if part
        )


def card_number(cur: Cursor, card_type: int | None = tables.DRIVER_CARD) -> CardNumber:
    if card_type == tables.DRIVER_CARD:
        return CardNumber(
            identification=p.ia5(cur, 14, "driver identification"),
            replacement_index=p.ia5(cur, 1, "replacement index"),
            renewal_index=p.ia5(cur, 1, "renewal index"),
        )
    if card_type in (2, 3, 4):
        return CardNumber(
            identification=p.ia5(cur, 13, "owner identification"),
            consecutive_index=p.ia5(cur, 1, "consecutive index"),
            replacement_index=p.ia5(cur, 1, "replacement index"),
            renewal_index=p.ia5(cur, 1, "renewal index"),
        )
    return CardNumber(identification=p.ia5(cur, 16, "card number"))


@dataclass
class FullCardNumber:
    """FullCardNumber (18 bytes)."""

    card_type: Code
    issuing_nation: Code
    card_number: CardNumber


def _absent(raw: bytes) -> bool:
    return all(b == 0x00 for b in raw) or all(b == 0xFF for b in raw)


def full_card_number(cur: Cursor, equipment: dict[int, str]) -> FullCardNumber | None:
    """Decode a FullCardNumber, or None when the slot holds no card."""
    raw = cur.read(18, "FullCardNumber")
    if _absent(raw):
        return None
    sub = Cursor(raw)
    card_type = tables.lookup(equipment, sub.u8("card type"), "RFU")
    issuing = tables.nation(sub.u8("issuing member state"))
    return FullCardNumber(card_type, issuing, card_number(sub, card_type.value))


@dataclass
class FullCardNumberAndGeneration:
    """FullCardNumberAndGeneration (19 bytes)."""

    full_card_number: FullCardNumber
    generation: Code


def full_card_number_and_generation(cur: Cursor, equipment: dict[int, str]) -> FullCardNumberAndGeneration | None:
    number = full_card_number(cur, equipment)
    generation = p.code(cur, tables.GENERATIONS, "generation")
    if number is None:
        return None
    return FullCardNumberAndGeneration(number, generation)


@dataclass
class ExtendedSerialNumber:
    """ExtendedSerialNumber (8 bytes)."""

    serial_number: int
    month: int | None
    year: int | None
    equipment_type: Code
    manufacturer: Code


def extended_serial_number(cur: Cursor, equipment: dict[int, str]) -> ExtendedSerialNumber:
    serial = cur.u32("serial number")
    month, year = p.month_year(cur)
    equipment_type = tables.lookup(equipment, cur.u8("equipment type"), "RFU")
    return ExtendedSerialNumber(serial, month, year, equipment_type, tables.manufacturer(cur.u8("manufacturer")))


# ---------------------------------------------------------------------------
# Card and chip identification
# ---------------------------------------------------------------------------

@dataclass
class EmbedderIcAssemblerId:
    """EmbedderIcAssemblerId (5 bytes)."""

    country_code: str
    module_embedder: int | None
    manufacturer_information: int


@dataclass
class CardIccIdentification:
    """EF ICC (25 bytes)."""

    clock_stop: int
    extended_serial_number: ExtendedSerialNumber
    approval_number: str
    personaliser: Code
    embedder_ic_assembler_id: EmbedderIcAssemblerId
    ic_identifier: bytes


def card_icc_identification(cur: Cursor, equipment: dict[int, str]) -> CardIccIdentification:
    return CardIccIdentification(
        clock_stop=cur.u8("clock stop"),
        extended_serial_number=extended_serial_number(cur, equipment),
        approval_number=p.ia5(cur, 8, "card approval number"),
        personaliser=tables.manufacturer(cur.u8("card personaliser")),
        embedder_ic_assembler_id=EmbedderIcAssemblerId(
            country_code=p.ia5(cur, 2, "embedder country"),
            module_embedder=p.bcd(cur, 2, "module embedder"),
            manufacturer_information=cur.u8("manufacturer information"),
        ),
        ic_identifier=cur.read(2, "IC identifier"),
    )


@dataclass
class CardChipIdentification:
    """EF IC (8 bytes)."""

    ic_serial_number: bytes
    ic_manufacturing_references: bytes


def card_chip_identification(cur: Cursor) -> CardChipIdentification:
    return CardChipIdentification(
        ic_serial_number=cur.read(4, "IC serial number"),
        ic_manufacturing_references=cur.read(4, "IC manufacturing references"),
    )


@dataclass
class CardIdentification:
    """CardIdentification (65 bytes)."""

    issuing_nation: Code
    card_number: CardNumber
    issuing_authority: CodedText
    issue_date: datetime | None
    validity_begin: datetime | None
    expiry_date: datetime | None


@dataclass
class DriverCardHolderIdentification:
    """DriverCardHolderIdentification (78 bytes)."""

    surname: CodedText
    first_names: CodedText
    birth_date: date | None
    preferred_language: str


@dataclass
class Identification:
    """EF Identification of a driver card (143 bytes)."""

    card: CardIdentification
    holder: DriverCardHolderIdentification


def identification(cur: Cursor) -> Identification:
    card = CardIdentification(
        issuing_nation=tables.nation(cur.u8("issuing member state")),
        card_number=card_number(cur, tables.DRIVER_CARD),
        issuing_authority=p.name(cur, "issuing authority"),
        issue_date=p.time_real(cur, "card issue date"),
        validity_begin=p.time_real(cur, "card validity begin"),
        expiry_date=p.time_real(cur, "card expiry date"),
    )
    holder = DriverCardHolderIdentification(
        surname=p.name(cur, "holder surname"),
        first_names=p.name(cur, "holder first names"),
        birth_date=p.datef(cur, "holder birth date"),
        preferred_language=p.ia5(cur, 2, "preferred language"),
    )
    return Identification(card, holder)


@dataclass
class HolderName:
    """HolderName (72 bytes)."""

    surname: CodedText
    first_names: CodedText


def holder_name(cur: Cursor) -> HolderName:
    return HolderName(p.name(cur, "holder surname"), p.name(cur, "holder first names"))


# ---------------------------------------------------------------------------
# Small card files
# ---------------------------------------------------------------------------

@dataclass
class CardDownload:
    """EF Card_Download of a driver card (4 bytes)."""

    last_card_download: datetime | None


def card_download(cur: Cursor) -> CardDownload:
    return CardDownload(p.time_real(cur, "last card download"))


@dataclass
class DrivingLicenceInfo:
    """EF Driving_Licence_Info (53 bytes)."""

    issuing_authority: CodedText
    issuing_nation: Code
    licence_number: str


def driving_licence_info(cur: Cursor) -> DrivingLicenceInfo:
    return DrivingLicenceInfo(
        issuing_authority=p.name(cur, "licence issuing authority"),
        issuing_nation=tables.nation(cur.u8("licence issuing nation")),
        licence_number=p.ia5(cur, 16, "driving licence number"),
    )


@dataclass
class CurrentUsage:
    """EF Current_Usage (19 bytes)."""

    session_open_time: datetime | None
    session_open_vehicle: VehicleRegistration


def current_usage(cur: Cursor) -> CurrentUsage:
    return CurrentUsage(p.time_real(cur, "session open time"), vehicle_registration(cur))


@dataclass
class SpecificConditionRecord:
    """SpecificConditionRecord (5 bytes)."""

    entry_time: datetime | None
    condition: Code


def specific_condition_record(cur: Cursor) -> SpecificConditionRecord:
    return SpecificConditionRecord(
        p.time_real(cur, "condition entry time"),
        p.code(cur, tables.SPECIFIC_CONDITIONS, "specific condition type"),
    )


@dataclass
class CardEventFaultRecord:
    """CardEventRecord or CardFaultRecord (24 bytes)."""

    type: Code
    begin_time: datetime | None
    end_time: datetime | None
    vehicle: VehicleRegistration


def card_event_fault_record(cur: Cursor, lookup) -> CardEventFaultRecord:
    return CardEventFaultRecord(
        type=lookup(cur.u8("event/fault type")),
        begin_time=p.time_real(cur, "event/fault begin time"),
        end_time=p.time_real(cur, "event/fault end time"),
        vehicle=vehicle_registration(cur),
    )


@dataclass
class VuSoftwareIdentification:
    """VuSoftwareIdentification (8 bytes)."""

    version: str
    installation_date: datetime | None


def vu_software_identification(cur: Cursor) -> VuSoftwareIdentification:
    return VuSoftwareIdentification(
        p.ia5(cur, 4, "software version"), p.time_real(cur, "software installation date"),
    )


# ---------------------------------------------------------------------------
# Activity
# ---------------------------------------------------------------------------

@dataclass
class ActivityChange:
    """ActivityChangeInfo (2 bytes, bit packed)."""

    slot: Code
    crew: bool
    card_inserted: bool
    activity: Code
    minutes: int

    @property
    def time(self) -> str:
        return f"{self.minutes // 60:02d}:{self.minutes % 60:02d}"


def activity_change(cur: Cursor) -> ActivityChange:
    value = cur.u16("activity change")
    return ActivityChange(
        slot=tables.lookup(tables.CARD_SLOTS, value >> 15),
        crew=bool(value & 0x4000),
        card_inserted=not value & 0x2000,
        activity=tables.lookup(tables.ACTIVITIES, (value >> 11) & 0x03),
        minutes=value & 0x07FF,
    )


DAILY_HEADER = 12


@dataclass
class CardActivityDailyRecord:
    """One day of driver activity as stored on a card."""

    previous_length: int
    length: int
    date: datetime | None
    daily_presence_counter: int | None
    day_distance: int
    changes: list[ActivityChange] = field(default_factory=list)


def card_activity_daily_record(cur: Cursor) -> CardActivityDailyRecord:
    previous_length = cur.u16("previous record length")
    length = cur.u16("record length")
    record_date = p.time_real(cur, "activity record date")
    presence = p.bcd(cur, 2, "daily presence counter")
    distance = cur.u16("activity day distance")
    changes = cur.repeat((length - DAILY_HEADER) // 2, 2, activity_change, "activity changes")
    return CardActivityDailyRecord(previous_length, length, record_date, presence, distance, changes)


@dataclass
class DriverActivityData:
    """EF Driver_Activity_Data: cyclic buffer of daily records."""

    oldest_day_pointer: int
    newest_day_pointer: int
    days: list[CardActivityDailyRecord] = field(default_factory=list)


def _ring_u16(cur: Cursor, start: int, size: int, position: int) -> int:
    hi = cur.at(start + position % size, 1, "activity record length").u8()
    lo = cur.at(start + (position + 1) % size, 1, "activity record length").u8()
    return hi << 8 | lo


def _ring_record(cur: Cursor, start: int, size: int, position: int, length: int) -> Cursor:
    """Cursor over one daily record; only a record that wraps is copied."""
    if position + length <= size:
        return cur.at(start + position, length, "activity daily record")
    head = cur.at(start + position, size - position).rest("activity daily record")
    tail = cur.at(start, length - len(head)).rest("activity daily record")
    return Cursor(head + tail, tag=cur.tag)


def driver_activity_data(cur: Cursor) -> DriverActivityData:
    """Walk the cyclic buffer from the oldest record to the newest.

    Records may wrap past the end of the buffer. A zero length marks an
    empty or unused buffer and ends the walk.
    """
    oldest = cur.u16("oldest day record pointer")
    newest = cur.u16("newest day record pointer")
    start = cur.offset
    size = cur.remaining
    data = DriverActivityData(oldest, newest)
    if size == 0:
        return data
    if oldest >= size or newest >= size:
        raise RecordShapeError(
            f"activity pointers {oldest}/{newest} outside buffer of {size} bytes",
            offset=start, tag=cur.tag,
        )

    position = oldest
    for _ in range(size // DAILY_HEADER + 1):
        length = _ring_u16(cur, start, size, position + 2)
        if length == 0:
            break
        if length < DAILY_HEADER or length > size:
            raise RecordShapeError(
                f"activity record length {length} invalid", offset=start + position, tag=cur.tag,
            )
        data.days.append(card_activity_daily_record(_ring_record(cur, start, size, position, length)))
        if position == newest:
            break
        position = (position + length) % size
    cur.skip(size, "activity buffer")
    return data
