import pytest

from asterix_decoder.decoders.ia5 import decode_ia5, ia5_char
from asterix_decoder.types.enums import IA5Table


def _pack(codes):
    value = 0
    for code in codes:
        value = (value << 6) | code
    return value.to_bytes(len(codes) * 6 // 8, byteorder="big")


def _icao_codes(text):
    codes = []
    for char in text:
        if char.isalpha():
            codes.append(ord(char) - ord("A") + 1)
        elif char.isdigit():
            codes.append(ord(char))
        else:
            codes.append(32)
    return codes


def test_golden_identification():
    """Reference fixture for the 6-bit packing across byte boundaries."""
    assert decode_ia5(bytes([0x23, 0x41, 0x41, 0x41, 0x00, 0x00])) == "H4EAPP"


def test_golden_identification_is_stable():
    data = bytes([0x23, 0x41, 0x41, 0x41, 0x00, 0x00])
    assert decode_ia5(data) == decode_ia5(bytes(data))


@pytest.mark.parametrize("callsign", ["RYR1234", "VLG87K", "IBE3162", "A", "12345678"])
def test_icao_callsigns(callsign):
    data = _pack(_icao_codes(callsign.ljust(8)))
    assert decode_ia5(data) == callsign


def test_leading_and_trailing_spaces_trimmed():
    data = _pack(_icao_codes("  ABC   "))
    assert decode_ia5(data) == "ABC"


def test_compact_digit_table():
    # "AB12" with digits at codes 32-41
    data = _pack([1, 2, 33, 34, 0, 0, 0, 0])
    assert decode_ia5(data, IA5Table.COMPACT) == "AB12"
    # The same codes are spaces in the ICAO table
    assert decode_ia5(data, IA5Table.ICAO) == "AB"


@pytest.mark.parametrize(
    "code,table,expected",
    [
        (1, IA5Table.ICAO, "A"),
        (26, IA5Table.ICAO, "Z"),
        (48, IA5Table.ICAO, "0"),
        (57, IA5Table.ICAO, "9"),
        (32, IA5Table.ICAO, " "),
        (0, IA5Table.ICAO, " "),
        (27, IA5Table.ICAO, " "),
        (63, IA5Table.ICAO, " "),
        (32, IA5Table.COMPACT, "0"),
        (41, IA5Table.COMPACT, "9"),
        (48, IA5Table.COMPACT, " "),
    ],
)
def test_character_mapping(code, table, expected):
    assert ia5_char(code, table) == expected
