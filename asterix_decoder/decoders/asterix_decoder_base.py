from abc import ABC, abstractmethod
import logging
from typing import Callable, Dict, Optional, Type

from asterix_decoder.config import DEFAULT_SETTINGS, DecoderSettings
from asterix_decoder.decoders.field_cursor import FieldCursor
from asterix_decoder.decoders.fspec_parser import parse_fspec
from asterix_decoder.decoders.mode_s_decoder import ModeSDecoder
from asterix_decoder.models.fspec import Fspec
from asterix_decoder.models.item import Item
from asterix_decoder.models.message import MessageDecodeResult, RawMessage
from asterix_decoder.types.enums import Category, DecodeFailure
from asterix_decoder.types.errors import (
    FieldOutOfBoundsError,
    MalformedFSPECError,
    UndefinedSubfieldError,
    UnknownItemError,
)


class AsterixDecoderBase(ABC):
    """
    Shared record loop for one ASTERIX category.

    Subclasses fill `decoder_map` with one method per item type. Each method takes
    the cursor and a dict of raw values, consumes exactly its item and stores what
    it decoded under the raw record's field names.
    """
    category: Category
    item_enum: Type
    record_class: Type

    def __init__(self, settings: Optional[DecoderSettings] = None) -> None:
        # Initialize a per-instance logger; subclasses should call super().__init__()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.settings = settings or DEFAULT_SETTINGS
        self.mode_s_decoder = ModeSDecoder(self.settings.bds_code_octet)
        self.decoder_map: Dict[object, Callable[[FieldCursor, dict], None]] = {}
        self._register_decoders()

    def decode_message(self, message: RawMessage) -> MessageDecodeResult:
        """Decode every record of a data block until the payload is used up or a record fails."""
        result = MessageDecodeResult(message=message)
        if message.category != self.category.value:
            result.failure = DecodeFailure.UNKNOWN_CATEGORY
            result.detail = f"{self.__class__.__name__} cannot decode category {message.category}"
            return result

        cursor = FieldCursor(message.payload)
        self.logger.debug(
            "Starting decode_message: offset=%s, payload_len=%s", message.block_offset, len(message.payload)
        )

        while not cursor.at_end():
            record_start = cursor.position
            try:
                fspec = parse_fspec(cursor)
            except MalformedFSPECError as e:
                self.logger.warning("Malformed FSPEC at offset %d: %s", record_start, e)
                result.failure = DecodeFailure.MALFORMED_FSPEC
                result.detail = str(e)
                break

            self.logger.debug("Parsed FSPEC: %d octet(s), FRNs=%s", fspec.octets_consumed, list(fspec.present_frns()))
            record, failure, detail = self.decode_record(cursor, fspec)
            result.records.append(record)

            if failure is not None:
                result.failure = failure
                result.detail = detail
                break

        return result

    def decode_record(self, cursor: FieldCursor, fspec: Fspec):
        """
        Decode the items announced by `fspec`, in FRN order.
        Returns (raw record, failure or None, detail or None).
        """
        values = {}
        items = []
        failure = None
        detail = None

        for frn in fspec.present_frns():
            try:
                item_type = self._item_type(frn)
            except UnknownItemError as e:
                self.logger.warning("%s", e)
                failure, detail = DecodeFailure.UNKNOWN_ITEM, str(e)
                break

            decoder_func = self.decoder_map[item_type]
            start = cursor.position
            try:
                decoder_func(cursor, values)
            except FieldOutOfBoundsError as e:
                self.logger.warning("Truncated %s (FRN %d): %s", item_type.name, frn, e)
                failure, detail = DecodeFailure.FIELD_OUT_OF_BOUNDS, str(e)
                break
            except UndefinedSubfieldError as e:
                self.logger.warning("Unknown layout in %s (FRN %d): %s", item_type.name, frn, e)
                failure, detail = DecodeFailure.UNKNOWN_ITEM, str(e)
                break

            items.append(Item(item_offset=start, length=cursor.position - start, frn=frn, item_type=item_type))

        return self.record_class(**values, items=tuple(items), truncated=failure is not None), failure, detail

    def _item_type(self, frn: int):
        try:
            item_type = self.item_enum(frn)
        except ValueError:
            raise UnknownItemError(frn, self.category.value) from None
        if item_type not in self.decoder_map:
            raise UnknownItemError(frn, self.category.value)
        return item_type

    @abstractmethod
    def _register_decoders(self) -> None:
        """Populate `decoder_map`."""

    # ========== SHARED SKIP HELPERS ==========
    @staticmethod
    def _skip_fixed(size: int, name: str) -> Callable[[FieldCursor, dict], None]:
        def skip(cursor: FieldCursor, values: dict) -> None:
            cursor.skip(size, name)
        skip.__doc__ = f"{name} - {size} byte(s) fixed - SKIP"
        return skip

    @staticmethod
    def _skip_variable(name: str) -> Callable[[FieldCursor, dict], None]:
        def skip(cursor: FieldCursor, values: dict) -> None:
            cursor.read_fx_octets(name)
        skip.__doc__ = f"{name} - variable length (FX) - SKIP"
        return skip

    @staticmethod
    def _skip_compound(subfield_sizes, name: str) -> Callable[[FieldCursor, dict], None]:
        def skip(cursor: FieldCursor, values: dict) -> None:
            cursor.read_compound(subfield_sizes, name)
        skip.__doc__ = f"{name} - compound - SKIP"
        return skip

    @staticmethod
    def _skip_repetitive(size: int, name: str) -> Callable[[FieldCursor, dict], None]:
        def skip(cursor: FieldCursor, values: dict) -> None:
            cursor.read_repetitive(size, name)
        skip.__doc__ = f"{name} - repetitive {size}-byte blocks - SKIP"
        return skip

    @staticmethod
    def _skip_explicit(name: str) -> Callable[[FieldCursor, dict], None]:
        def skip(cursor: FieldCursor, values: dict) -> None:
            cursor.read_explicit(name)
        skip.__doc__ = f"{name} - explicit length - SKIP"
        return skip

    # ========== SHARED FIELD HELPERS ==========
    @staticmethod
    def _mode_3a_octal(code: int) -> str:
        # Bits 12-1: A4 A2 A1 B4 B2 B1 C4 C2 C1 D4 D2 D1
        a = (code >> 9) & 0x07
        b = (code >> 6) & 0x07
        c = (code >> 3) & 0x07
        d = code & 0x07
        return f"{a}{b}{c}{d}"

    def _read_mode_s(self, cursor: FieldCursor, values: dict, name: str) -> None:
        """Shared body of I048/250 and I021/250."""
        start = cursor.position
        blocks, rep = self.mode_s_decoder.read_blocks(cursor)
        values["mode_s_blocks"] = tuple(blocks)
        if len(blocks) < rep:
            raise FieldOutOfBoundsError(1 + rep * 8, cursor.record_end - start, start, name)
