"""
Mode S MB Data sub-decoder (I048/250, I021/250).

Only BDS 4,0 / 5,0 / 6,0 are decoded. Any other register keeps its raw bytes.
Bit numbers in the comments follow the MB field numbering, bit 1 being the MSB
of the 56-bit message.
"""
import logging
from typing import List, Tuple

from asterix_decoder.decoders.field_cursor import FieldCursor, sign_extend as _signed
from asterix_decoder.models.mode_s import Bds40, Bds50, Bds60, ModeSBlock, UnknownBds
from asterix_decoder.types.enums import BdsCodeOctet

BLOCK_SIZE = 8
BPS_MIN_HPA = 800.0
BPS_MAX_HPA = 1200.0


class ModeSDecoder:
    def __init__(self, bds_code_octet: BdsCodeOctet = BdsCodeOctet.LEADING):
        self.bds_code_octet = bds_code_octet
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def split_block(self, block: bytes) -> Tuple[int, int, bytes]:
        """Return (BDS1, BDS2, 7-byte MB data) for one 8-byte block."""
        if len(block) != BLOCK_SIZE:
            raise ValueError(f"Mode S block must be {BLOCK_SIZE} bytes, got {len(block)}")
        if self.bds_code_octet is BdsCodeOctet.LEADING:
            bds_code, mb_data = block[0], block[1:8]
        else:
            mb_data, bds_code = block[0:7], block[7]
        return (bds_code >> 4) & 0x0F, bds_code & 0x0F, bytes(mb_data)

    def decode_block(self, block: bytes) -> ModeSBlock:
        bds1, bds2, mb_data = self.split_block(block)
        raw = bytes(block)

        if (bds1, bds2) == (4, 0):
            return self._decode_bds_40(raw, mb_data)
        if (bds1, bds2) == (5, 0):
            return self._decode_bds_50(raw, mb_data)
        if (bds1, bds2) == (6, 0):
            return self._decode_bds_60(raw, mb_data)
        return UnknownBds(raw=raw, bds1=bds1, bds2=bds2)

    def read_blocks(self, cursor: FieldCursor) -> Tuple[List[ModeSBlock], int]:
        """
        Read REP and up to REP blocks. Returns (blocks, declared REP).
        When REP announces more blocks than the record holds, only the whole
        blocks that fit are decoded and consumed.
        """
        rep = cursor.read_u8("MB_DATA REP")
        available = cursor.remaining // BLOCK_SIZE
        if rep > available:
            self.logger.warning(
                "Mode S REP=%d but only %d block(s) left before record end", rep, available
            )

        blocks = []
        for _ in range(min(rep, available)):
            blocks.append(self.decode_block(cursor.read_bytes(BLOCK_SIZE, "MB_DATA")))
        return blocks, rep

    # ========== REGISTERS ==========
    def _decode_bds_40(self, raw: bytes, mb_data: bytes) -> Bds40:
        """BDS 4,0 - Selected vertical intention"""
        mb = int.from_bytes(mb_data, byteorder='big')

        mcp_alt = None
        if (mb >> 55) & 0x01:  # bit 1: status
            value = (mb >> 43) & 0x0FFF  # bits 2-13
            if value:
                mcp_alt = value * 16  # LSB = 16 ft

        fms_alt = None
        if (mb >> 42) & 0x01:  # bit 14: status
            value = (mb >> 30) & 0x0FFF  # bits 15-26
            if value:
                fms_alt = value * 16

        bps = None
        if (mb >> 29) & 0x01:  # bit 27: status
            value = (mb >> 17) & 0x0FFF  # bits 28-39
            if value:
                setting = round(value * 0.1 + 800.0, 1)  # LSB = 0.1 mb, offset 800 mb
                if BPS_MIN_HPA <= setting <= BPS_MAX_HPA:
                    bps = setting

        return Bds40(
            raw=raw,
            mcp_fcu_selected_altitude_ft=mcp_alt,
            fms_selected_altitude_ft=fms_alt,
            barometric_pressure_setting_hpa=bps,
        )

    def _decode_bds_50(self, raw: bytes, mb_data: bytes) -> Bds50:
        """BDS 5,0 - Track and turn report"""
        mb = int.from_bytes(mb_data, byteorder='big')

        roll = None
        if (mb >> 55) & 0x01:  # bit 1
            value = _signed((mb >> 45) & 0x03FF, 10)  # bits 2-11: sign + 9 data
            if value:
                roll = value * 45.0 / 256.0

        track = None
        if (mb >> 44) & 0x01:  # bit 12
            value = (mb >> 33) & 0x07FF  # bits 13-23, read as 0..2047 so the angle lands in [0, 360)
            if value:
                track = value * 90.0 / 512.0

        # 0 kt is a valid ground speed
        ground_speed = None
        if (mb >> 32) & 0x01:  # bit 24
            ground_speed = float(((mb >> 22) & 0x03FF) * 2)  # bits 25-34, LSB = 2 kt

        rate = None
        if (mb >> 21) & 0x01:  # bit 35
            value = _signed((mb >> 11) & 0x03FF, 10)  # bits 36-45
            if value:
                rate = value * 8.0 / 256.0

        tas = None
        if (mb >> 10) & 0x01:  # bit 46
            value = mb & 0x03FF  # bits 47-56
            if value:
                tas = float(value * 2)

        return Bds50(
            raw=raw,
            roll_angle_deg=roll,
            true_track_angle_deg=track,
            ground_speed_kt=ground_speed,
            track_angle_rate_deg_s=rate,
            true_airspeed_kt=tas,
        )

    def _decode_bds_60(self, raw: bytes, mb_data: bytes) -> Bds60:
        """BDS 6,0 - Heading and speed report"""
        mb = int.from_bytes(mb_data, byteorder='big')

        # 0 deg is a valid magnetic heading
        heading = None
        if (mb >> 55) & 0x01:  # bit 1
            heading = ((mb >> 44) & 0x07FF) * 90.0 / 512.0  # bits 2-12

        ias = None
        if (mb >> 43) & 0x01:  # bit 13
            value = (mb >> 33) & 0x03FF  # bits 14-23, LSB = 1 kt
            if value:
                ias = value

        mach = None
        if (mb >> 32) & 0x01:  # bit 24
            value = (mb >> 22) & 0x03FF  # bits 25-34
            if value:
                mach = round(value * 0.008, 3)

        baro_rate = None
        if (mb >> 21) & 0x01:  # bit 35
            value = _signed((mb >> 11) & 0x03FF, 10)  # bits 36-45
            if value:
                baro_rate = value * 32  # LSB = 32 ft/min

        ivv = None
        if (mb >> 10) & 0x01:  # bit 46
            value = _signed(mb & 0x03FF, 10)  # bits 47-56
            if value:
                ivv = value * 32

        return Bds60(
            raw=raw,
            magnetic_heading_deg=heading,
            indicated_airspeed_kt=ias,
            mach=mach,
            barometric_altitude_rate_ft_min=baro_rate,
            inertial_vertical_velocity_ft_min=ivv,
        )
