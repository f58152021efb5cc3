"""Enumeration lookup tables for coded byte values."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Code:
    """A coded byte value and its name.

    Values missing from a table still decode: they carry recognized=False
    and a catch-all name so vendor codes never abort a parse.
    """

    value: int
    name: str
    recognized: bool = True

    def __str__(self) -> str:
        return self.name


def lookup(table: dict[int, str], value: int, unknown: str = "Unrecognized") -> Code:
    name = table.get(value)
    if name is None:
        return Code(value, f"{unknown} (0x{value:02X})", recognized=False)
    return Code(value, name)


def _event_fault(table: dict[int, str], value: int) -> Code:
    if value in table:
        return Code(value, table[value])
    if value >= 0x80:
        return Code(value, f"Manufacturer specific (0x{value:02X})", recognized=False)
    return Code(value, f"RFU (0x{value:02X})", recognized=False)


# --- Nations ---

NATIONS: dict[int, str] = {
    0x00: "No information available",
    0x01: "Austria",
    0x02: "Albania",
    0x03: "Andorra",
    0x04: "Armenia",
    0x05: "Azerbaijan",
    0x06: "Belgium",
    0x07: "Bulgaria",
    0x08: "Bosnia Herzegovina",
    0x09: "Belarus",
    0x0A: "Switzerland",
    0x0B: "Cyprus",
    0x0C: "Czech Republic",
    0x0D: "Germany",
    0x0E: "Denmark",
    0x0F: "Spain",
    0x10: "Estonia",
    0x11: "France",
    0x12: "Finland",
    0x13: "Liechtenstein",
    0x14: "Faroe Islands",
    0x15: "United Kingdom",
    0x16: "Georgia",
    0x17: "Greece",
    0x18: "Hungary",
    0x19: "Croatia",
    0x1A: "Italy",
    0x1B: "Ireland",
    0x1C: "Iceland",
    0x1D: "Kazakhstan",
    0x1E: "Luxembourg",
    0x1F: "Lithuania",
    0x20: "Latvia",
    0x21: "Malta",
    0x22: "Monaco",
    0x23: "Moldova",
    0x24: "North Macedonia",
    0x25: "Norway",
    0x26: "Netherlands",
    0x27: "Portugal",
    0x28: "Poland",
    0x29: "Romania",
    0x2A: "San Marino",
    0x2B: "Russia",
    0x2C: "Sweden",
    0x2D: "Slovakia",
    0x2E: "Slovenia",
    0x2F: "Turkmenistan",
    0x30: "Türkiye",
    0x31: "Ukraine",
    0x32: "Vatican City",
    0x34: "Montenegro",
    0x35: "Serbia",
    0x36: "Uzbekistan",
    0x37: "Tajikistan",
    0x38: "Kyrgyz Republic",
    0xFD: "European Community",
    0xFE: "Rest of Europe",
    0xFF: "Rest of the World",
}


def nation(value: int) -> Code:
    return lookup(NATIONS, value, "RFU")


# --- Manufacturers ---

MANUFACTURERS: dict[int, str] = {
    0x00: "No information available",
    0x01: "Reserved value",
    0x10: "Actia S.A.",
    0x11: "Security Printing and Systems Ltd.",
    0x12: "Austria Card Plastikkarten und Ausweissysteme GmbH",
    0x13: "Agencija za komercijalnu djelatnost d.o.o (AKD)",
    0x14: "ALIK Automotive GmbH",
    0x15: "ASELSAN",
    0x16: "Asia Tacho Kart LLC",
    0x17: "Real Casa de la Moneda",
    0x18: "BARBÉ S.R.L.",
    0x19: "BogArt Sp. z o.o.",
    0x20: "CETIS d.d.",
    0x21: "certSIGN",
    0x22: "RUE Cryptotech",
    0x23: "Centr Modernizatcii Transporta OOO (CMT - LLC)",
    0x24: "Pars Ar-Ge Ltd",
    0x25: "Cardplus Sverige AB",
    0x28: "Datakom",
    0x29: "DVLA",
    0x30: "IDEMIA The Netherlands BV",
    0x32: "EFKON AG",
    0x35: "Eurocard LLC",
    0x38: "Fábrica Nacional de Moneda y Timbre",
    0x39: "First Print Yard",
    0x40: "Giesecke & Devrient GmbH",
    0x43: "Giesecke & Devrient GB Ltd.",
    0x44: "Giesecke & Devrient sa/nv",
    0x45: "GrafoCARD",
    0x48: "Hungarian Banknote Printing Co. Ltd.",
    0x49: "Haug GmbH",
    0x4A: "Hegard Sp. z o.o.",
    0x50: "Imprimerie Nationale",
    0x51: "Imprensa Nacional-Casa da Moeda, SA",
    0x52: "InfoCamere S.C.p.A",
    0x53: "Intellic Germany GmbH - ZF Group CVS",
    0x55: "INTELLIGENT TELEMATICS SYSTEMS FOR TRANSPORT (its-t.llc)",
    0x60: "Kraftfahrt-Bundesamt (KBA)",
    0x61: "KazTACHOnet LLP",
    0x68: "LESIKAR a.s.",
    0x69: "LEDA-SL",
    0x78: "NAP automotive Produkte GmbH",
    0x79: "NATIONAL BANK OF SERBIA",
    0x81: "Morpho e-documents",
    0x82: "ORGA Zelenograd ZAO",
    0x84: "ORGA Kartensysteme GmbH",
    0x88: "Asseco - Central Europe a.s.",
    0x89: "Polska Wytwórnia Papierów Wartosciowych S.A. - PWPW S.A.",
    0x8A: "Papiery Powlekane Pasaco Sp. z o.o.",
    0x98: "TahoNetSoft",
    0xA1: "Continental Automotive Technologies",
    0xA2: "Stoneridge Electronics AB",
    0xA3: "Thales",
    0xA4: "3M Security Printing and Systems Ltd.",
    0xA5: "STMicroelectronics - Incard Division",
    0xA6: "STÁTNÍ TISKÁRNA CENIN, státní podnik",
    0xAB: "T-Systems International GmbH",
    0xAC: "Thales DIS Schweiz AG",
    0xAD: "Trüb Baltic AS",
    0xAE: "TEMPEST a.s.",
    0xAF: "Trueb - DEMAX PLC",
    0xB0: "TAYROL LIMITED",
    0xB1: 'UŽDAROJI AKCINĖ BENDROVĖ "LODVILA"',
    0xD8: "Union of Chambers and Commodity Exchanges of Turkey - TOBB",
    0xE0: "Turker Roll Paper Trade",
}


def manufacturer(value: int) -> Code:
    return lookup(MANUFACTURERS, value, "Unknown manufacturer")


# --- Equipment ---

EQUIPMENT_TYPES_GEN1: dict[int, str] = {
    0: "Reserved",
    1: "Driver card",
    2: "Workshop card",
    3: "Control card",
    4: "Company card",
    5: "Manufacturing card",
    6: "Vehicle unit",
    7: "Motion sensor",
}

EQUIPMENT_TYPES_GEN2: dict[int, str] = {
    **EQUIPMENT_TYPES_GEN1,
    8: "GNSS facility",
    9: "Remote communication device",
    10: "ITS interface module",
    11: "Plaque",
    12: "M1/N1 adapter",
    13: "European root CA",
    14: "Member state CA",
    15: "External GNSS connection",
    16: "Unused",
    17: "Driver card sign",
    18: "Workshop card sign",
    19: "Vehicle unit sign",
}

DRIVER_CARD = 1


# --- Events and faults ---

EVENT_FAULT_TYPES_GEN1: dict[int, str] = {
    0x00: "No further details",
    0x01: "Insertion of a non valid card",
    0x02: "Card conflict",
    0x03: "Time overlap",
    0x04: "Driving without an appropriate card",
    0x05: "Card insertion while driving",
    0x06: "Last card session not correctly closed",
    0x07: "Over speeding",
    0x08: "Power supply interruption",
    0x09: "Motion data error",
    0x10: "VU security breach attempt, no further details",
    0x11: "Motion sensor authentication failure",
    0x12: "Tachograph card authentication failure",
    0x13: "Unauthorised change of motion sensor",
    0x14: "Card data input integrity error",
    0x15: "Stored user data integrity error",
    0x16: "Internal data transfer error",
    0x17: "Unauthorised case opening",
    0x18: "Hardware sabotage",
    0x20: "Sensor security breach attempt, no further details",
    0x21: "Sensor authentication failure",
    0x22: "Sensor stored data integrity error",
    0x23: "Sensor internal data transfer error",
    0x24: "Sensor unauthorised case opening",
    0x25: "Sensor hardware sabotage",
    0x30: "Recording equipment fault, no further details",
    0x31: "VU internal fault",
    0x32: "Printer fault",
    0x33: "Display fault",
    0x34: "Downloading fault",
    0x35: "Sensor fault",
    0x40: "Card fault, no further details",
}

EVENT_FAULT_TYPES_GEN2: dict[int, str] = {
    **EVENT_FAULT_TYPES_GEN1,
    0x0A: "Vehicle motion conflict",
    0x0B: "Time conflict",
    0x0C: "Communication error with the remote communication facility",
    0x0D: "Absence of position information from GNSS receiver",
    0x0E: "Communication error with the external GNSS facility",
    0x19: "Tamper detection of GNSS",
    0x1A: "External GNSS facility authentication failure",
    0x1B: "External GNSS facility certificate expired",
    0x36: "Internal GNSS receiver",
    0x37: "External GNSS facility",
    0x38: "Remote communication facility",
    0x39: "ITS interface",
}


def event_fault_gen1(value: int) -> Code:
    return _event_fault(EVENT_FAULT_TYPES_GEN1, value)


def event_fault_gen2(value: int) -> Code:
    return _event_fault(EVENT_FAULT_TYPES_GEN2, value)


RECORD_PURPOSES: dict[int, str] = {
    0x00: "One of the 10 most recent (or last) events or faults",
    0x01: "The longest event for one of the last 10 days of occurrence",
    0x02: "One of the 5 longest events over the last 365 days",
    0x03: "The last event for one of the last 10 days of occurrence",
    0x04: "The most serious event for one of the last 10 days of occurrence",
    0x05: "One of the 5 most serious events over the last 365 days",
    0x06: "The first event or fault having occurred after the last calibration",
    0x07: "An active/on-going event or fault",
}


def record_purpose(value: int) -> Code:
    return _event_fault(RECORD_PURPOSES, value)


# --- Calibration ---

CALIBRATION_PURPOSES_GEN1: dict[int, str] = {
    0x00: "Reserved value",
    0x01: "Activation",
    0x02: "First installation",
    0x03: "Installation",
    0x04: "Periodic inspection",
}

CALIBRATION_PURPOSES_GEN2: dict[int, str] = {
    **CALIBRATION_PURPOSES_GEN1,
    0x05: "Entry of VRN by company",
    0x06: "Time adjustment without calibration",
}


# --- Activity and places ---

SPECIFIC_CONDITIONS: dict[int, str] = {
    0x01: "Out of scope - begin",
    0x02: "Out of scope - end",
    0x03: "Ferry/Train crossing - begin",
    0x04: "Ferry/Train crossing - end",
}

ENTRY_TYPES: dict[int, str] = {
    0x00: "Begin, related time = card insertion time or time of entry",
    0x01: "End, related time = card withdrawal time or time of entry",
    0x02: "Begin, related time manually entered (start time)",
    0x03: "End, related time manually entered (end of work period)",
    0x04: "Begin, related time assumed by VU",
    0x05: "End, related time assumed by VU",
}

ACTIVITIES: dict[int, str] = {
    0: "break/rest",
    1: "availability",
    2: "work",
    3: "driving",
}

SLOT_STATUS: dict[int, str] = {
    0: "no card inserted",
    1: "driver card inserted",
    2: "workshop card inserted",
    3: "control card inserted",
    4: "company card inserted",
}

CARD_SLOTS: dict[int, str] = {
    0: "driver",
    1: "co-driver",
}

MANUAL_INPUT: dict[int, str] = {
    0: "no entry",
    1: "manual entries",
}

GENERATIONS: dict[int, str] = {
    0x01: "Generation 1",
    0x02: "Generation 2",
}


# --- Gen2 version 2 ---

OPERATION_TYPES: dict[int, str] = {
    0x01: "Load operation",
    0x02: "Unload operation",
    0x03: "Simultaneous load/unload operation",
}

LOAD_TYPES: dict[int, str] = {
    0x00: "Not defined",
    0x01: "Goods",
    0x02: "Passengers",
}

AUTHENTICATION_STATUS: dict[int, str] = {
    0x00: "Not authenticated",
    0x01: "Authenticated",
}
