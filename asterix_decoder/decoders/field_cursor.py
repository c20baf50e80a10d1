"""
Bounds-checked reader over one message payload.

Every read checks ``position + needed <= record_end`` first. A read that would
cross the boundary raises FieldOutOfBoundsError and leaves the position where
it was, so the caller can keep the fields already decoded.
"""
from typing import List, Optional, Sequence, Tuple

from asterix_decoder.types.errors import FieldOutOfBoundsError, UndefinedSubfieldError


def sign_extend(raw: int, bits: int) -> int:
    """Two's complement value of a `bits`-wide field."""
    if raw & (1 << (bits - 1)):
        return raw - (1 << bits)
    return raw


class FieldCursor:
    def __init__(self, data: bytes, position: int = 0, record_end: Optional[int] = None):
        self.data = data
        self.position = position
        self.record_end = len(data) if record_end is None else min(record_end, len(data))
        if not 0 <= self.position <= self.record_end:
            raise ValueError(f"position {position} outside [0, {self.record_end}]")

    @property
    def remaining(self) -> int:
        return self.record_end - self.position

    def has(self, needed: int) -> bool:
        return self.position + needed <= self.record_end

    def at_end(self) -> bool:
        return self.position >= self.record_end

    def _require(self, needed: int, item: Optional[str] = None) -> None:
        if not self.has(needed):
            raise FieldOutOfBoundsError(needed, self.remaining, self.position, item)

    # ========== PRIMITIVE READS ==========
    def read_bytes(self, size: int, item: Optional[str] = None) -> bytes:
        self._require(size, item)
        chunk = bytes(self.data[self.position:self.position + size])
        self.position += size
        return chunk

    def read_u8(self, item: Optional[str] = None) -> int:
        self._require(1, item)
        value = self.data[self.position]
        self.position += 1
        return value

    def read_uint(self, size: int, item: Optional[str] = None) -> int:
        """Unsigned big-endian integer of `size` bytes."""
        return int.from_bytes(self.read_bytes(size, item), byteorder='big')

    def read_int(self, size: int, item: Optional[str] = None) -> int:
        """Two's complement big-endian integer of `size` bytes."""
        return int.from_bytes(self.read_bytes(size, item), byteorder='big', signed=True)

    def peek_u8(self, offset: int = 0, item: Optional[str] = None) -> int:
        if not self.has(offset + 1):
            raise FieldOutOfBoundsError(offset + 1, self.remaining, self.position, item)
        return self.data[self.position + offset]

    def skip(self, size: int, item: Optional[str] = None) -> None:
        self._require(size, item)
        self.position += size

    # ========== STRUCTURED ITEMS ==========
    def fx_length(self, item: Optional[str] = None) -> int:
        """Length of an FX-extended item starting at the cursor, without consuming it."""
        length = 0
        while True:
            octet = self.peek_u8(length, item)
            length += 1
            if not (octet & 0x01):  # FX bit is 0
                return length

    def read_fx_octets(self, item: Optional[str] = None) -> bytes:
        """Read octets until one has FX = 0."""
        return self.read_bytes(self.fx_length(item), item)

    def read_explicit(self, item: Optional[str] = None) -> bytes:
        """Explicit-length item: first octet is the total length, itself included."""
        length = self.peek_u8(0, item)
        if length < 1:
            raise FieldOutOfBoundsError(1, self.remaining, self.position, item)
        return self.read_bytes(length, item)

    def read_repetitive(self, size: int, item: Optional[str] = None) -> List[bytes]:
        """REP octet followed by REP fixed-size blocks, all or nothing."""
        rep = self.peek_u8(0, item)
        self._require(1 + rep * size, item)
        self.position += 1
        return [self.read_bytes(size, item) for _ in range(rep)]

    def compound_length(self, subfield_sizes: Sequence, item: Optional[str] = None) -> int:
        """
        Length of a compound item: FX-extended primary subfield plus the present subfields.
        `subfield_sizes` holds, per presence bit, either a fixed size in bytes, the
        string 'fx' for an FX-extended subfield or ('rep', n) for a repetitive one.
        """
        primary_len = self.fx_length(item)
        total = primary_len
        index = 0
        for octet_index in range(primary_len):
            octet = self.peek_u8(octet_index, item)
            for bit in range(7, 0, -1):
                present = octet & (1 << bit)
                if present:
                    if index >= len(subfield_sizes):
                        raise UndefinedSubfieldError(index + 1, self.position, item)
                    total += self._subfield_length(subfield_sizes[index], total, item)
                index += 1
        return total

    def _subfield_length(self, size, offset: int, item: Optional[str] = None) -> int:
        if size == 'fx':
            length = 0
            while True:
                octet = self.peek_u8(offset + length, item)
                length += 1
                if not (octet & 0x01):
                    return length
        if isinstance(size, tuple):
            _, block = size
            return 1 + self.peek_u8(offset, item) * block
        return size

    def read_compound(self, subfield_sizes: Sequence, item: Optional[str] = None) -> Tuple[bytes, int]:
        """Read a whole compound item. Returns (item bytes, primary subfield length)."""
        total = self.compound_length(subfield_sizes, item)
        primary_len = self.fx_length(item)
        return self.read_bytes(total, item), primary_len
