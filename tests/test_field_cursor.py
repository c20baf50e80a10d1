import pytest

from asterix_decoder.decoders.field_cursor import FieldCursor, sign_extend
from asterix_decoder.types.errors import FieldOutOfBoundsError, UndefinedSubfieldError


class TestFieldCursor:
    def test_sequential_reads(self):
        cursor = FieldCursor(b"\x2A\x01\x02\xFF\xFE\x00\x01\x02")

        assert cursor.read_u8() == 0x2A
        assert cursor.read_uint(2) == 0x0102
        assert cursor.read_int(2) == -2
        assert cursor.read_bytes(3) == b"\x00\x01\x02"
        assert cursor.at_end()
        assert cursor.remaining == 0

    def test_failed_read_does_not_advance(self):
        """A read crossing record_end raises and leaves the position untouched."""
        cursor = FieldCursor(b"\x01\x02\x03")
        cursor.skip(2)

        with pytest.raises(FieldOutOfBoundsError) as excinfo:
            cursor.read_uint(2, "I048/161")

        assert cursor.position == 2
        assert excinfo.value.needed == 2
        assert excinfo.value.available == 1
        assert excinfo.value.position == 2
        assert "I048/161" in str(excinfo.value)

    def test_record_end_bounds_reads(self):
        """record_end is exclusive even when the underlying buffer is longer."""
        cursor = FieldCursor(b"\x00" * 10, position=2, record_end=4)

        assert cursor.has(2)
        assert not cursor.has(3)
        cursor.read_bytes(2)
        with pytest.raises(FieldOutOfBoundsError):
            cursor.read_u8()

    def test_invalid_start_position(self):
        with pytest.raises(ValueError):
            FieldCursor(b"\x00", position=5)

    @pytest.mark.parametrize(
        "data,length",
        [
            (b"\x00", 1),
            (b"\x01\x00", 2),
            (b"\x03\x05\x02\xFF", 3),
        ],
    )
    def test_fx_octets(self, data, length):
        cursor = FieldCursor(data)
        assert cursor.fx_length() == length
        assert cursor.position == 0
        assert cursor.read_fx_octets() == data[:length]
        assert cursor.position == length

    def test_fx_chain_past_end(self):
        cursor = FieldCursor(b"\x01\x01")
        with pytest.raises(FieldOutOfBoundsError):
            cursor.read_fx_octets()
        assert cursor.position == 0

    def test_explicit_item(self):
        cursor = FieldCursor(b"\x03\xAA\xBB\xCC")
        assert cursor.read_explicit() == b"\x03\xAA\xBB"
        assert cursor.position == 3

    def test_explicit_zero_length(self):
        cursor = FieldCursor(b"\x00\x01")
        with pytest.raises(FieldOutOfBoundsError):
            cursor.read_explicit()

    def test_repetitive_item(self):
        cursor = FieldCursor(b"\x02" + b"\x11" * 3 + b"\x22" * 3)
        assert cursor.read_repetitive(3) == [b"\x11" * 3, b"\x22" * 3]
        assert cursor.at_end()

    def test_repetitive_overflow_is_all_or_nothing(self):
        cursor = FieldCursor(b"\x03" + b"\x11" * 8)
        with pytest.raises(FieldOutOfBoundsError):
            cursor.read_repetitive(3)
        assert cursor.position == 0

    def test_compound_one_octet_subfields(self):
        """I048/130 with SRL and SAM present: primary + 2 subfields."""
        cursor = FieldCursor(b"\xA0\x10\x20\x99")
        raw, primary_len = cursor.read_compound((1,) * 7)
        assert raw == b"\xA0\x10\x20"
        assert primary_len == 1

    def test_compound_with_repetitive_subfield(self):
        """I048/120 with CAL (2 octets) and RDS (REP=2, 6-octet blocks)."""
        data = b"\xC0" + b"\x01\x02" + b"\x02" + b"\x00" * 12 + b"\xEE"
        cursor = FieldCursor(data)
        assert cursor.compound_length((2, ('rep', 6))) == 16
        cursor.read_compound((2, ('rep', 6)))
        assert cursor.read_u8() == 0xEE

    def test_compound_with_fx_subfield_and_extended_primary(self):
        # Primary: TIS present, FX; second primary octet empty. TIS: two FX octets
        data = b"\x81\x00" + b"\x01\x00"
        cursor = FieldCursor(data)
        raw, primary_len = cursor.read_compound(('fx', ('rep', 15)))
        assert primary_len == 2
        assert raw == data

    def test_compound_unknown_subfield(self):
        # Bit for a third subfield set but only two are defined
        cursor = FieldCursor(b"\x20\x00\x00")
        with pytest.raises(UndefinedSubfieldError) as excinfo:
            cursor.read_compound((1, 1))
        assert excinfo.value.subfield == 3
        assert cursor.position == 0


@pytest.mark.parametrize(
    "raw,bits,expected",
    [
        (0x2005, 14, -8187),
        (0x0005, 14, 5),
        (0x3FFF, 14, -1),
        (0x1FFF, 14, 8191),
        (0x200, 10, -512),
        (0x1FF, 10, 511),
    ],
)
def test_sign_extend(raw, bits, expected):
    assert sign_extend(raw, bits) == expected
