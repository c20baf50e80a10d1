from typing import Optional


class AsterixDecodeError(Exception):
    """Base class for every structural decode failure."""


class TruncatedStreamError(AsterixDecodeError):
    """Fewer bytes remain than a frame declares."""

    def __init__(self, fragment, available: int, declared_length: Optional[int] = None):
        # RawMessage stub carrying the category and whatever payload bytes were present
        self.fragment = fragment
        self.available = available
        self.declared_length = declared_length
        if declared_length is None:
            reason = f"header cut after {available} byte(s)"
        else:
            reason = f"declares {declared_length} byte(s), only {available} left"
        super().__init__(f"block at offset {fragment.block_offset} {reason}")


class MalformedFSPECError(AsterixDecodeError):
    """FSPEC extension chain ran past the end of the buffer."""

    def __init__(self, message: str, partial=None):
        super().__init__(message)
        # Fspec holding the octets read before the buffer ran out
        self.partial = partial


class FieldOutOfBoundsError(AsterixDecodeError):
    """A read would cross the record boundary."""

    def __init__(self, needed: int, available: int, position: int, item: Optional[str] = None):
        self.needed = needed
        self.available = available
        self.position = position
        self.item = item
        where = f" ({item})" if item else ""
        super().__init__(
            f"need {needed} byte(s) at offset {position}, only {available} left{where}"
        )


class UnknownItemError(AsterixDecodeError):
    """FSPEC announces an FRN the catalog has no layout for."""

    def __init__(self, frn: int, category: int):
        self.frn = frn
        self.category = category
        super().__init__(f"CAT{category:03d} FRN {frn} has no catalog entry")


class UndefinedSubfieldError(AsterixDecodeError):
    """A compound item's primary subfield flags a spare bit, so the item length is unknown."""

    def __init__(self, subfield: int, position: int, item: Optional[str] = None):
        self.subfield = subfield
        self.position = position
        self.item = item
        where = f" ({item})" if item else ""
        super().__init__(f"presence bit for undefined subfield {subfield} set at offset {position}{where}")
