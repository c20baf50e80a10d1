from dataclasses import dataclass
from typing import Union

from asterix_decoder.types.enums import CAT021ItemType, CAT048ItemType


@dataclass(frozen=True)
class Item:
    """Where one data item sat inside the message payload."""
    item_offset: int
    length: int
    frn: int
    item_type: Union[CAT021ItemType, CAT048ItemType]
