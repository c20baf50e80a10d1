import pytest

from asterix_decoder.decoders.field_cursor import FieldCursor
from asterix_decoder.decoders.mode_s_decoder import ModeSDecoder
from asterix_decoder.models.mode_s import Bds40, Bds50, Bds60, UnknownBds, register_label
from asterix_decoder.types.enums import BdsCodeOctet


def _mb(*fields):
    """Build the 56-bit MB field from (value, first_bit, last_bit), bit 1 = MSB."""
    value = 0
    for raw, first_bit, last_bit in fields:
        width = last_bit - first_bit + 1
        value |= (raw & ((1 << width) - 1)) << (56 - last_bit)
    return value.to_bytes(7, byteorder="big")


def _block(bds_code: int, mb: bytes) -> bytes:
    return bytes([bds_code]) + mb


class TestModeSDecoder:
    @pytest.fixture
    def decoder(self):
        return ModeSDecoder()

    def test_bds_40(self, decoder):
        """Selected altitudes in 16 ft steps and pressure setting 0.1 hPa above 800."""
        mb = _mb(
            (1, 1, 1), (2250, 2, 13),  # MCP/FCU 36000 ft
            (1, 14, 14), (2000, 15, 26),  # FMS 32000 ft
            (1, 27, 27), (2132, 28, 39),  # BPS 1013.2 hPa
        )
        block = decoder.decode_block(_block(0x40, mb))

        assert isinstance(block, Bds40)
        assert block.mcp_fcu_selected_altitude_ft == 36000
        assert block.fms_selected_altitude_ft == 32000
        assert block.barometric_pressure_setting_hpa == pytest.approx(1013.2)

    def test_bds_40_status_bits_gate_fields(self, decoder):
        mb = _mb((2250, 2, 13), (2000, 15, 26), (2132, 28, 39))
        block = decoder.decode_block(_block(0x40, mb))

        assert block.mcp_fcu_selected_altitude_ft is None
        assert block.fms_selected_altitude_ft is None
        assert block.barometric_pressure_setting_hpa is None

    def test_bds_40_zero_pressure_setting_is_absent(self, decoder):
        block = decoder.decode_block(_block(0x40, _mb((1, 27, 27), (0, 28, 39))))
        assert block.barometric_pressure_setting_hpa is None

    def test_bds_40_pressure_setting_above_range_is_absent(self, decoder):
        # 4095 * 0.1 + 800 = 1209.5 hPa
        block = decoder.decode_block(_block(0x40, _mb((1, 27, 27), (4095, 28, 39))))
        assert block.barometric_pressure_setting_hpa is None

    def test_bds_50(self, decoder):
        mb = _mb(
            (1, 1, 1), (-20, 2, 11),  # roll
            (1, 12, 12), (1024, 13, 23),  # true track 180 deg
            (1, 24, 24), (0, 25, 34),  # ground speed 0 kt
            (1, 35, 35), (0, 36, 45),  # track angle rate 0
            (1, 46, 46), (225, 47, 56),  # TAS 450 kt
        )
        block = decoder.decode_block(_block(0x50, mb))

        assert isinstance(block, Bds50)
        assert block.roll_angle_deg == pytest.approx(-20 * 45.0 / 256.0)
        assert block.true_track_angle_deg == pytest.approx(180.0)
        # 0 is a valid ground speed
        assert block.ground_speed_kt == 0.0
        # but 0 means not available for every other field
        assert block.track_angle_rate_deg_s is None
        assert block.true_airspeed_kt == 450.0

    def test_bds_50_negative_track_angle_rate(self, decoder):
        block = decoder.decode_block(_block(0x50, _mb((1, 35, 35), (-64, 36, 45))))
        assert block.track_angle_rate_deg_s == pytest.approx(-2.0)

    def test_bds_60(self, decoder):
        mb = _mb(
            (1, 1, 1), (0, 2, 12),  # magnetic heading 0 deg
            (1, 13, 13), (250, 14, 23),  # IAS
            (1, 24, 24), (100, 25, 34),  # Mach 0.8
            (1, 35, 35), (-32, 36, 45),  # -1024 ft/min
            (0, 46, 46), (10, 47, 56),  # IVV status off
        )
        block = decoder.decode_block(_block(0x60, mb))

        assert isinstance(block, Bds60)
        # 0 is a valid magnetic heading
        assert block.magnetic_heading_deg == 0.0
        assert block.indicated_airspeed_kt == 250
        assert block.mach == pytest.approx(0.8)
        assert block.barometric_altitude_rate_ft_min == -1024
        assert block.inertial_vertical_velocity_ft_min is None

    def test_bds_60_heading_and_vertical_velocity(self, decoder):
        mb = _mb((1, 1, 1), (1536, 2, 12), (1, 46, 46), (20, 47, 56))
        block = decoder.decode_block(_block(0x60, mb))
        assert block.magnetic_heading_deg == pytest.approx(270.0)
        assert block.inertial_vertical_velocity_ft_min == 640

    @pytest.mark.parametrize(
        "code,expected_type,label",
        [
            (0x40, Bds40, "BDS 4.0"),
            (0x50, Bds50, "BDS 5.0"),
            (0x60, Bds60, "BDS 6.0"),
            (0x41, UnknownBds, "BDS 4.1"),
            (0x20, UnknownBds, "BDS 2.0"),
            (0x00, UnknownBds, "BDS 0.0"),
        ],
    )
    def test_dispatch_on_bds_code(self, decoder, code, expected_type, label):
        """Each block is routed by its BDS code to exactly one register type."""
        raw = _block(code, b"\xFF" * 7)
        block = decoder.decode_block(raw)
        assert type(block) is expected_type
        assert block.raw == raw
        assert register_label(block) == label

    def test_trailing_bds_code(self):
        decoder = ModeSDecoder(BdsCodeOctet.TRAILING)
        mb = _mb((1, 1, 1), (2250, 2, 13))
        block = decoder.decode_block(mb + b"\x40")
        assert isinstance(block, Bds40)
        assert block.mcp_fcu_selected_altitude_ft == 36000

    def test_block_size_checked(self, decoder):
        with pytest.raises(ValueError):
            decoder.decode_block(b"\x40\x00")

    def test_read_blocks(self, decoder):
        data = b"\x02" + _block(0x40, bytes(7)) + _block(0x60, bytes(7)) + b"\x99"
        cursor = FieldCursor(data)

        blocks, rep = decoder.read_blocks(cursor)

        assert rep == 2
        assert [register_label(b) for b in blocks] == ["BDS 4.0", "BDS 6.0"]
        assert cursor.position == 17

    def test_read_blocks_repetition_exceeds_record(self, decoder):
        """Declared repetitions beyond the record truncate the block list only."""
        data = b"\x03" + _block(0x50, bytes(7)) + _block(0x60, bytes(7)) + b"\x00\x00"
        cursor = FieldCursor(data)

        blocks, rep = decoder.read_blocks(cursor)

        assert rep == 3
        assert len(blocks) == 2
        assert cursor.position == 17
