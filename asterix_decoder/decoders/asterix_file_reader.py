import logging
import mmap
from typing import Callable, Iterator, Optional

from asterix_decoder.models.message import HEADER_LENGTH, RawMessage
from asterix_decoder.types.errors import TruncatedStreamError

logger = logging.getLogger(__name__)


def _fragment(buffer, position: int) -> RawMessage:
    """Stub message holding the torn block's category and the payload bytes present."""
    payload = bytes(buffer[position + HEADER_LENGTH:])
    return RawMessage(
        category=buffer[position],
        declared_length=HEADER_LENGTH + len(payload),
        payload=payload,
        block_offset=position,
    )


def read_message_at(buffer, position: int) -> Optional[RawMessage]:
    """
    Frame the data block starting at `position`.
    Returns None at the end of the buffer or when the declared length is below the header size.
    Raises TruncatedStreamError when the header or the declared payload does not fit.
    """
    size = len(buffer)
    if position >= size:
        return None

    # 1 byte category + 2 bytes length
    if position + HEADER_LENGTH > size:
        raise TruncatedStreamError(_fragment(buffer, position), size - position)

    category = buffer[position]
    length = int.from_bytes(buffer[position + 1:position + 3], byteorder="big")

    if length < HEADER_LENGTH:
        logger.warning("Block at offset %d declares length %d < %d", position, length, HEADER_LENGTH)
        return None

    if position + length > size:
        raise TruncatedStreamError(_fragment(buffer, position), size - position, length)

    payload = bytes(buffer[position + HEADER_LENGTH:position + length])
    return RawMessage(category=category, declared_length=length, payload=payload, block_offset=position)


def iter_messages(buffer, start: int = 0,
                  on_truncated: Optional[Callable[[TruncatedStreamError], None]] = None) -> Iterator[RawMessage]:
    """
    Lazily split a byte buffer into data blocks. Any category is framed.
    A torn tail ends the stream; `on_truncated` receives it when given.
    """
    position = start
    while True:
        try:
            message = read_message_at(buffer, position)
        except TruncatedStreamError as e:
            logger.debug("%s; treated as end of stream", e)
            if on_truncated is not None:
                on_truncated(e)
            return
        if message is None:
            return
        yield message
        position += message.declared_length


class AsterixFileReader:
    def __init__(self, file_path: str):
        self.file_path = file_path

    def read_messages(self, on_truncated: Optional[Callable[[TruncatedStreamError], None]] = None
                      ) -> Iterator[RawMessage]:
        """Efficiently read ASTERIX data blocks using memory mapping."""
        with open(self.file_path, 'rb') as file:
            # mmap refuses empty files
            if not file.seek(0, 2):
                return
            with mmap.mmap(file.fileno(), 0, access=mmap.ACCESS_READ) as mmapped_file:
                yield from iter_messages(mmapped_file, on_truncated=on_truncated)

    def read_message_at_position(self, start_position: int) -> Optional[RawMessage]:
        """Read a specific data block at given byte position in file."""
        with open(self.file_path, 'rb') as file:
            with mmap.mmap(file.fileno(), 0, access=mmap.ACCESS_READ) as mmapped_file:
                if start_position > len(mmapped_file) - HEADER_LENGTH:
                    raise ValueError("Position beyond file size")
                return read_message_at(mmapped_file, start_position)
