from asterix_decoder.decoders.field_cursor import FieldCursor
from asterix_decoder.models.fspec import Fspec
from asterix_decoder.types.errors import MalformedFSPECError


def parse_fspec(cursor: FieldCursor) -> Fspec:
    """
    Parse the Field Specification at the cursor.
    Each octet gives 7 presence bits (bits 8-2, FRN order); bit 1 is FX.
    Raises MalformedFSPECError if the buffer ends while FX still asks for more.
    """
    bits = []
    octets = 0

    while True:
        if cursor.at_end():
            partial = Fspec(bits=tuple(bits), octets_consumed=octets)
            raise MalformedFSPECError(
                f"FSPEC extension chain runs past the end of the record after {octets} octet(s)",
                partial=partial,
            )

        octet = cursor.read_u8("FSPEC")
        octets += 1

        # Extract field indicators (bits 7-1, bit 0 is FX)
        for bit in range(7, 0, -1):
            bits.append(bool(octet & (1 << bit)))

        # FX bit 0 means this is the last FSPEC octet
        if not (octet & 0x01):
            return Fspec(bits=tuple(bits), octets_consumed=octets)
