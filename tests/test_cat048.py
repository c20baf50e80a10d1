import pytest

from asterix_decoder.config import DecoderSettings
from asterix_decoder.decoders.cat048_decoder import Cat048Decoder
from asterix_decoder.decoders.field_cursor import FieldCursor
from asterix_decoder.decoders.fspec_parser import parse_fspec
from asterix_decoder.models.cat048_record import RawCat048Record
from asterix_decoder.models.message import RawMessage
from asterix_decoder.models.mode_s import Bds40, UnknownBds
from asterix_decoder.types.enums import CAT048ItemType, DecodeFailure, IA5Table


def fspec_bytes(frns):
    """FSPEC announcing exactly `frns`, with FX set on every octet but the last."""
    n_octets = max((frn - 1) // 7 + 1 for frn in frns) if frns else 1
    octets = [0] * n_octets
    for frn in frns:
        octets[(frn - 1) // 7] |= 1 << (7 - (frn - 1) % 7)
    for index in range(n_octets - 1):
        octets[index] |= 0x01
    return bytes(octets)


def message(payload: bytes, category: int = 48) -> RawMessage:
    return RawMessage(category=category, declared_length=len(payload) + 3, payload=payload)


# BDS 4,0 with BPS = 1013.2 hPa (raw 2132 in bits 28-39, status bit 27)
BDS_40_BLOCK = b"\x40" + (((1 << 29) | (2132 << 17))).to_bytes(7, byteorder="big")

FULL_ITEMS = [
    (1, b"\x19\xC9"),  # I048/010 SAC=25 SIC=201
    (2, b"\x4E\x20\x00"),  # I048/140 40000 s
    (3, b"\xA0"),  # I048/020 TYP=5
    (4, b"\x10\x00\x40\x00"),  # I048/040 rho 16 NM, theta 90 deg
    (5, b"\x0A\x3C"),  # I048/070 5074
    (6, b"\x05\x78"),  # I048/090 FL 350
    (8, b"\x34\x4B\xC2"),  # I048/220
    (9, b"\x23\x41\x41\x41\x00\x00"),  # I048/240
    (10, b"\x01" + BDS_40_BLOCK),  # I048/250
    (11, b"\x01\x23"),  # I048/161
    (13, b"\x08\x00\x80\x00"),  # I048/200
    (14, b"\x40"),  # I048/170
    (21, b"\x24\xE0"),  # I048/230
]


def build_record(items):
    return fspec_bytes([frn for frn, _ in items]) + b"".join(data for _, data in items)


class TestCat048Decoder:
    @pytest.fixture
    def decoder(self):
        return Cat048Decoder()

    def test_all_decoder_methods_exist(self, decoder):
        """Test that all CAT048ItemType values have corresponding decoder methods"""
        for item_type in CAT048ItemType:
            decoder_func = decoder.decoder_map.get(item_type)
            assert decoder_func is not None, f"No decoder for {item_type}"

    def test_decode_full_record(self, decoder):
        result = decoder.decode_message(message(build_record(FULL_ITEMS)))

        assert result.ok
        assert result.decoded_count == 1
        record = result.records[0]
        assert isinstance(record, RawCat048Record)
        assert not record.truncated

        assert (record.sac, record.sic) == (25, 201)
        assert record.time_of_day_raw == 40000 * 128
        assert record.typ == 5
        assert record.sim == 0
        assert record.tst is None
        assert record.rho_raw == 0x1000
        assert record.theta_raw == 0x4000
        assert record.mode_3a == "5074"
        assert record.mode_3a_v == 0
        assert record.flight_level_quarters == 1400
        assert record.aircraft_address == "344BC2"
        assert record.aircraft_identification == "H4EAPP"
        assert record.track_number == 291
        assert record.ground_speed_raw == 0x0800
        assert record.heading_raw == 0x8000
        assert record.rad == 2
        assert record.cnf == 0
        assert record.com == 1
        assert record.stat == 1
        assert (record.mssc, record.arc, record.aic) == (1, 1, 1)

        assert len(record.mode_s_blocks) == 1
        block = record.mode_s_blocks[0]
        assert isinstance(block, Bds40)
        assert block.barometric_pressure_setting_hpa == pytest.approx(1013.2)

    def test_items_record_offsets_and_lengths(self, decoder):
        payload = build_record(FULL_ITEMS[:3])
        record = decoder.decode_message(message(payload)).records[0]

        assert [item.frn for item in record.items] == [1, 2, 3]
        assert [item.item_type for item in record.items] == [
            CAT048ItemType.DATA_SOURCE_IDENTIFIER,
            CAT048ItemType.TIME_OF_DAY,
            CAT048ItemType.TARGET_REPORT_DESCRIPTOR,
        ]
        assert [item.length for item in record.items] == [2, 3, 1]
        assert record.items[0].item_offset == 1

    def test_target_report_descriptor_extension(self, decoder):
        payload = build_record([(3, b"\x21\x80")])
        record = decoder.decode_message(message(payload)).records[0]
        assert record.typ == 1
        assert record.tst == 1
        assert record.err == 0

    @pytest.mark.parametrize(
        "raw,quarters",
        [
            (b"\x05\x78", 1400),
            (b"\x3F\xFF", -1),
            (b"\x20\x00", -8192),
            (b"\xC0\x05", 5),  # V and G bits do not leak into the value
            (b"\x00\x00", 0),
        ],
    )
    def test_flight_level_sign_extension(self, decoder, raw, quarters):
        record = decoder.decode_message(message(build_record([(6, raw)]))).records[0]
        assert record.flight_level_quarters == quarters

    def test_flight_level_validity_bits(self, decoder):
        record = decoder.decode_message(message(build_record([(6, b"\xC0\x05")]))).records[0]
        assert record.flight_level_v == 1
        assert record.flight_level_g == 1

    def test_track_number_spare_bits_masked(self, decoder):
        record = decoder.decode_message(message(build_record([(11, b"\xF1\x23")]))).records[0]
        assert record.track_number == 0x123

    def test_compact_identification_table(self):
        decoder = Cat048Decoder(DecoderSettings(ia5_table=IA5Table.COMPACT))
        # "AB12" with digits at codes 32-41
        value = 0
        for code in (1, 2, 33, 34, 0, 0, 0, 0):
            value = (value << 6) | code
        payload = build_record([(9, value.to_bytes(6, byteorder="big"))])
        record = decoder.decode_message(message(payload)).records[0]
        assert record.aircraft_identification == "AB12"

    def test_truncated_item_keeps_earlier_fields(self, decoder):
        """A field crossing the record end stops the record; decoded fields stay."""
        payload = fspec_bytes([1, 2]) + b"\x19\xC9" + b"\x4E\x20"

        result = decoder.decode_message(message(payload))

        assert result.failure is DecodeFailure.FIELD_OUT_OF_BOUNDS
        assert "I048/140" in result.detail
        record = result.records[0]
        assert record.truncated
        assert (record.sac, record.sic) == (25, 201)
        assert record.time_of_day_raw is None
        assert [item.frn for item in record.items] == [1]

    def test_every_cut_point_is_handled(self, decoder):
        """Cutting the payload anywhere never raises and never invents fields."""
        payload = build_record(FULL_ITEMS)
        full = decoder.decode_message(message(payload)).records[0]

        for cut in range(len(payload)):
            result = decoder.decode_message(message(payload[:cut]))
            if cut == 0:
                assert result.ok
                assert result.records == []
                continue
            assert not result.ok
            assert len(result.records) <= 1
            for record in result.records:
                assert record.truncated
                # Every decoded item is a prefix of the full decode
                assert record.items == full.items[:len(record.items)]
                if record.sac is not None:
                    assert record.sac == full.sac

    def test_multiple_records_in_one_message(self, decoder):
        first = build_record([(1, b"\x19\xC9"), (11, b"\x00\x01")])
        second = build_record([(1, b"\x19\xC9"), (11, b"\x00\x02")])

        result = decoder.decode_message(message(first + second))

        assert result.ok
        assert [r.track_number for r in result.records] == [1, 2]
        assert result.records[1].items[0].item_offset == len(first) + 2

    def test_empty_fspec_record(self, decoder):
        result = decoder.decode_message(message(b"\x00" + build_record([(1, b"\x01\x02")])))
        assert result.ok
        assert len(result.records) == 2
        assert result.records[0].items == ()

    def test_malformed_fspec_after_record(self, decoder):
        """A record whose FSPEC runs off the end aborts the message, earlier records stay."""
        payload = build_record([(1, b"\x19\xC9")]) + b"\x01\x01"

        result = decoder.decode_message(message(payload))

        assert result.failure is DecodeFailure.MALFORMED_FSPEC
        assert len(result.records) == 1
        assert result.records[0].sac == 25

    def test_unknown_frn(self, decoder):
        # FRN 29 is beyond the CAT048 catalog
        payload = fspec_bytes([1, 29]) + b"\x19\xC9" + b"\x00" * 4

        result = decoder.decode_message(message(payload))

        assert result.failure is DecodeFailure.UNKNOWN_ITEM
        assert "29" in result.detail
        record = result.records[0]
        assert record.sac == 25
        assert record.truncated

    def test_skipped_items_consume_their_structure(self, decoder):
        """Compound, variable and explicit items are skipped with their real length."""
        items = [
            (7, b"\xA0\x10\x20"),  # I048/130: SRL, SAM
            (11, b"\x00\x07"),
            (16, b"\x03\x04"),  # I048/030: two octets
            (20, b"\xC0" + b"\x01\x02" + b"\x01" + b"\x00" * 6),  # I048/120: CAL, RDS x1
            (27, b"\x03\xAA\xBB"),  # SP
            (28, b"\x02\xCC"),  # RE
        ]

        result = decoder.decode_message(message(build_record(items)))

        assert result.ok
        record = result.records[0]
        assert record.track_number == 7
        assert [item.length for item in record.items] == [3, 2, 2, 10, 3, 2]

    def test_mode_s_repetition_overflow(self, decoder):
        """REP above what fits keeps the whole blocks and truncates the record."""
        payload = fspec_bytes([10]) + b"\x02" + BDS_40_BLOCK + b"\x50\x00"

        result = decoder.decode_message(message(payload))

        assert result.failure is DecodeFailure.FIELD_OUT_OF_BOUNDS
        record = result.records[0]
        assert record.truncated
        assert len(record.mode_s_blocks) == 1
        assert isinstance(record.mode_s_blocks[0], Bds40)

    def test_unknown_mode_s_register(self, decoder):
        payload = build_record([(10, b"\x01\x30" + b"\x00" * 7)])
        record = decoder.decode_message(message(payload)).records[0]
        assert record.mode_s_blocks == (UnknownBds(raw=b"\x30" + b"\x00" * 7, bds1=3, bds2=0),)

    def test_wrong_category(self, decoder):
        result = decoder.decode_message(message(build_record(FULL_ITEMS[:1]), category=21))
        assert result.failure is DecodeFailure.UNKNOWN_CATEGORY
        assert result.records == []

    def test_decode_record_direct(self, decoder):
        payload = build_record(FULL_ITEMS[:1])
        cursor = FieldCursor(payload, position=1)
        fspec = parse_fspec(FieldCursor(payload))
        record, failure, detail = decoder.decode_record(cursor, fspec)

        assert failure is None and detail is None
        assert record.sac == 25
        assert cursor.at_end()
