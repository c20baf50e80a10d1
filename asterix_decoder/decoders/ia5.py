from asterix_decoder.types.enums import IA5Table

CHAR_BITS = 6


def ia5_char(code: int, table: IA5Table = IA5Table.ICAO) -> str:
    """Map one 6-bit IA-5 code to a character. Unmapped codes become a space."""
    if 1 <= code <= 26:
        return chr(ord('A') + code - 1)
    if table is IA5Table.ICAO and 48 <= code <= 57:
        return chr(code)
    if table is IA5Table.COMPACT and 32 <= code <= 41:
        return chr(ord('0') + code - 32)
    return ' '


def decode_ia5(data: bytes, table: IA5Table = IA5Table.ICAO) -> str:
    """
    Decode packed 6-bit IA-5 characters (MSB first across byte boundaries).
    6 bytes give 8 characters. Leading and trailing spaces are trimmed.
    """
    value = int.from_bytes(data, byteorder='big')
    n_chars = (len(data) * 8) // CHAR_BITS

    chars = []
    for i in range(n_chars):
        # Extract 6 bits for each character (from MSB to LSB)
        shift = (len(data) * 8) - CHAR_BITS * (i + 1)
        chars.append(ia5_char((value >> shift) & 0x3F, table))

    return "".join(chars).strip()
