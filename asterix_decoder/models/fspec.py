from dataclasses import dataclass
from typing import Iterator, Tuple

BITS_PER_OCTET = 7


@dataclass(frozen=True)
class Fspec:
    """Field Specification: one presence flag per FRN, FRN 1 first."""
    bits: Tuple[bool, ...]
    octets_consumed: int

    @property
    def bit_count(self) -> int:
        return len(self.bits)

    def is_set(self, frn: int) -> bool:
        """True when the item with this FRN (1-based) is present."""
        return 1 <= frn <= len(self.bits) and self.bits[frn - 1]

    def present_frns(self) -> Iterator[int]:
        for index, present in enumerate(self.bits, start=1):
            if present:
                yield index
