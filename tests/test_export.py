"""JSON export and text summaries."""

import json

from conftest import T0, ef, identification_body, signature_array, u32, vu_array
from tachoparse.app.display import format_card, format_vehicle_unit
from tachoparse.app.export import to_dict, to_json
from tachoparse.core.document import parse_card, parse_vehicle_unit


def _speed_file():
    block = u32(T0) + bytes([60] * 60)
    return b"\x76\x24" + vu_array(0x12, 64, [block]) + signature_array()


class TestExport:
    """to_dict and to_json"""

    def test_card_tree(self, gen2_card):
        """Codes, times and bytes are converted, absent files stay null"""
        tree = to_dict(parse_card(gen2_card + ef(0x0520, 2, identification_body())))
        assert tree["generation"] == "Gen2"
        assert tree["gen2"]["driving_licence_info"] is None
        assert tree["gen2v2"] is None
        app = tree["gen2"]["application_identification"]
        assert app["type_of_tachograph_card"] == {"value": 1, "name": "Driver card"}
        card = tree["gen2"]["identification"]["card"]
        assert card["issue_date"] == "2020-01-01T00:00:00+00:00"
        assert card["issuing_authority"] == {"code_page": 1, "text": "KBA"}
        assert tree["card_chip_identification"]["ic_serial_number"] == "11223344"

    def test_json_round_trips(self):
        """to_json output parses back to the same tree"""
        doc = parse_vehicle_unit(_speed_file())
        assert json.loads(to_json(doc)) == to_dict(doc)
        assert json.loads(to_json(doc))["detailed_speed"][0]["signature"] == "5A" * 64


class TestDisplay:
    """Text summaries"""

    def test_card_summary(self, gen2_card):
        """The card summary names the holder and lists files"""
        data = gen2_card + ef(0x0520, 2, identification_body()) + ef(0x0520, 3, b"\x01" * 64)
        text = format_card(parse_card(data))
        assert "--- File ---\n  card Gen2" in text
        assert "MUSTERMANN" in text
        assert "identification  signed" in text
        assert "identification_signature" in text
        assert "SHA-256" in text

    def test_vehicle_unit_summary(self):
        """The VU summary counts blocks and fingerprints signatures"""
        text = format_vehicle_unit(parse_vehicle_unit(_speed_file()))
        assert "detailed_speed      1" in text
        assert "--- Signatures ---" in text
        assert "detailed_speed[0]" in text
