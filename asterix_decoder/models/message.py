from dataclasses import dataclass, field
from typing import List, Optional, Union

from asterix_decoder.types.enums import Category, DecodeFailure

HEADER_LENGTH = 3  # category (1) + length (2)


@dataclass(frozen=True)
class RawMessage:
    """One framed ASTERIX data block: category, declared length and payload."""
    category: int
    declared_length: int  # Includes the 3-byte header
    payload: bytes
    block_offset: int = 0  # Position of the block in the source buffer

    def __post_init__(self):
        if len(self.payload) != self.declared_length - HEADER_LENGTH:
            raise ValueError(
                f"payload length {len(self.payload)} does not match declared length "
                f"{self.declared_length} - {HEADER_LENGTH}"
            )

    @property
    def category_type(self) -> Optional[Category]:
        return Category.from_byte(self.category)

    def to_bytes(self) -> bytes:
        return bytes([self.category]) + self.declared_length.to_bytes(2, byteorder="big") + self.payload


@dataclass
class MessageDecodeResult:
    """Outcome of decoding one message: the records that decoded plus the stop reason."""
    message: RawMessage
    records: List[Union["RawCat048Record", "RawCat021Record"]] = field(default_factory=list)
    failure: Optional[DecodeFailure] = None
    detail: Optional[str] = None

    @property
    def decoded_count(self) -> int:
        return len(self.records)

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def category(self) -> int:
        return self.message.category
