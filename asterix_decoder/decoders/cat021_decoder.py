from asterix_decoder.decoders.asterix_decoder_base import AsterixDecoderBase
from asterix_decoder.decoders.field_cursor import FieldCursor, sign_extend
from asterix_decoder.decoders.ia5 import decode_ia5
from asterix_decoder.models.cat021_record import RawCat021Record
from asterix_decoder.types.enums import CAT021ItemType, Category

# I021/220: WS, WD, TMP (2 octets each), TRB (1 octet)
MET_INFORMATION_SUBFIELDS = (2, 2, 2, 1)
# I021/110: TIS (FX-extended), TID (REP + 15-octet blocks)
TRAJECTORY_INTENT_SUBFIELDS = ('fx', ('rep', 15))
# I021/295: 23 one-octet data ages
DATA_AGES_SUBFIELDS = (1,) * 23

IDENTIFICATION_SEGMENT = 6


class Cat021Decoder(AsterixDecoderBase):
    category = Category.CAT021
    item_enum = CAT021ItemType
    record_class = RawCat021Record

    def _register_decoders(self) -> None:
        self.decoder_map = {
            # Decoded items
            CAT021ItemType.DATA_SOURCE_IDENTIFICATION: self._decode_data_source,  # FRN 1
            CAT021ItemType.TARGET_REPORT_DESCRIPTOR: self._decode_target_report_descriptor,  # FRN 2
            CAT021ItemType.TRACK_NUMBER: self._decode_track_number,  # FRN 3
            CAT021ItemType.POSITION_WGS84: self._decode_position_wgs84,  # FRN 6
            CAT021ItemType.POSITION_WGS84_HIGH_RES: self._decode_position_wgs84_high_res,  # FRN 7
            CAT021ItemType.TARGET_ADDRESS: self._decode_target_address,  # FRN 11
            CAT021ItemType.TIME_MESSAGE_RECEPTION_POSITION: self._decode_time_message_reception_position,  # FRN 12
            CAT021ItemType.GEOMETRIC_HEIGHT: self._decode_geometric_height,  # FRN 16
            CAT021ItemType.MODE_3A_CODE: self._decode_mode_3a_code,  # FRN 19
            CAT021ItemType.FLIGHT_LEVEL: self._decode_flight_level,  # FRN 21
            CAT021ItemType.MAGNETIC_HEADING: self._decode_magnetic_heading,  # FRN 22
            CAT021ItemType.BAROMETRIC_VERTICAL_RATE: self._decode_barometric_vertical_rate,  # FRN 24
            CAT021ItemType.AIRBORNE_GROUND_VECTOR: self._decode_airborne_ground_vector,  # FRN 26
            CAT021ItemType.TARGET_IDENTIFICATION: self._decode_target_identification,  # FRN 29
            CAT021ItemType.EMITTER_CATEGORY: self._decode_emitter_category,  # FRN 30
            CAT021ItemType.MODE_S_MB_DATA: self._decode_mode_s_mb_data,  # FRN 39
            CAT021ItemType.RESERVED_EXPANSION_FIELD: self._decode_reserved_expansion_field,  # FRN 48 (RE-BPS)

            # Skipped items
            CAT021ItemType.SERVICE_IDENTIFICATION: self._skip_fixed(1, "I021/015"),
            CAT021ItemType.TIME_APPLICABILITY_POSITION: self._skip_fixed(3, "I021/071"),
            CAT021ItemType.TIME_APPLICABILITY_VELOCITY: self._skip_fixed(3, "I021/072"),
            CAT021ItemType.AIR_SPEED: self._skip_fixed(2, "I021/150"),
            CAT021ItemType.TRUE_AIRSPEED: self._skip_fixed(2, "I021/151"),
            CAT021ItemType.TIME_MESSAGE_RECEPTION_POSITION_HIGH_PRECISION: self._skip_fixed(4, "I021/074"),
            CAT021ItemType.TIME_MESSAGE_RECEPTION_VELOCITY: self._skip_fixed(3, "I021/075"),
            CAT021ItemType.TIME_MESSAGE_RECEPTION_VELOCITY_HIGH_PRECISION: self._skip_fixed(4, "I021/076"),
            CAT021ItemType.QUALITY_INDICATORS: self._skip_variable("I021/090"),
            CAT021ItemType.MOPS_VERSION: self._skip_fixed(1, "I021/210"),
            CAT021ItemType.ROLL_ANGLE: self._skip_fixed(2, "I021/230"),
            CAT021ItemType.TARGET_STATUS: self._skip_fixed(1, "I021/200"),
            CAT021ItemType.GEOMETRIC_VERTICAL_RATE: self._skip_fixed(2, "I021/157"),
            CAT021ItemType.TRACK_ANGLE_RATE: self._skip_fixed(2, "I021/165"),
            CAT021ItemType.TIME_ASTERIX_REPORT_TRANSMISSION: self._skip_fixed(3, "I021/077"),
            CAT021ItemType.MET_INFORMATION: self._skip_compound(MET_INFORMATION_SUBFIELDS, "I021/220"),
            CAT021ItemType.SELECTED_ALTITUDE: self._skip_fixed(2, "I021/146"),
            CAT021ItemType.FINAL_STATE_SELECTED_ALTITUDE: self._skip_fixed(2, "I021/148"),
            CAT021ItemType.TRAJECTORY_INTENT: self._skip_compound(TRAJECTORY_INTENT_SUBFIELDS, "I021/110"),
            CAT021ItemType.SERVICE_MANAGEMENT: self._skip_fixed(1, "I021/016"),
            CAT021ItemType.AIRCRAFT_OPERATIONAL_STATUS: self._skip_fixed(1, "I021/008"),
            CAT021ItemType.SURFACE_CAPABILITIES: self._skip_variable("I021/271"),
            CAT021ItemType.MESSAGE_AMPLITUDE: self._skip_fixed(1, "I021/132"),
            CAT021ItemType.ACAS_RESOLUTION_ADVISORY: self._skip_fixed(7, "I021/260"),
            CAT021ItemType.RECEIVER_ID: self._skip_fixed(1, "I021/400"),
            CAT021ItemType.DATA_AGES: self._skip_compound(DATA_AGES_SUBFIELDS, "I021/295"),
            CAT021ItemType.SPECIAL_PURPOSE_FIELD: self._skip_explicit("I021/SP"),
        }

    # ========== DECODERS ==========
    def _decode_data_source(self, cursor: FieldCursor, values: dict) -> None:
        """I021/010 - Data Source Identification"""
        raw = cursor.read_bytes(2, "I021/010")
        values["sac"] = raw[0]
        values["sic"] = raw[1]

    def _decode_target_report_descriptor(self, cursor: FieldCursor, values: dict) -> None:
        """I021/040 - Target Report Descriptor"""
        octets = cursor.read_fx_octets("I021/040")

        first_octet = octets[0]
        values["atp"] = (first_octet >> 5) & 0x07  # Address type, 2 = surface vehicle
        values["arc"] = (first_octet >> 3) & 0x03  # Altitude reporting capability
        values["rc"] = (first_octet >> 2) & 0x01
        values["rab"] = (first_octet >> 1) & 0x01

        if len(octets) >= 2:
            second_octet = octets[1]
            values["dcr"] = (second_octet >> 7) & 0x01
            values["gbs"] = (second_octet >> 6) & 0x01  # Ground bit set
            values["sim"] = (second_octet >> 5) & 0x01
            values["tst"] = (second_octet >> 4) & 0x01
            values["saa"] = (second_octet >> 3) & 0x01
            values["cl"] = (second_octet >> 1) & 0x03

    def _decode_track_number(self, cursor: FieldCursor, values: dict) -> None:
        """I021/161 - Track Number"""
        values["track_number"] = cursor.read_uint(2, "I021/161") & 0x0FFF

    def _decode_position_wgs84(self, cursor: FieldCursor, values: dict) -> None:
        """I021/130 - Position in WGS-84 Co-ordinates (LSB = 180/2^23 deg)"""
        raw = cursor.read_bytes(6, "I021/130")
        values["latitude_raw"] = int.from_bytes(raw[0:3], byteorder='big', signed=True)
        values["longitude_raw"] = int.from_bytes(raw[3:6], byteorder='big', signed=True)

    def _decode_position_wgs84_high_res(self, cursor: FieldCursor, values: dict) -> None:
        """I021/131 - High-Resolution Position in WGS-84 (LSB = 180/2^30 deg)"""
        raw = cursor.read_bytes(8, "I021/131")
        values["latitude_high_res_raw"] = int.from_bytes(raw[0:4], byteorder='big', signed=True)
        values["longitude_high_res_raw"] = int.from_bytes(raw[4:8], byteorder='big', signed=True)

    def _decode_target_address(self, cursor: FieldCursor, values: dict) -> None:
        """I021/080 - Target Address"""
        values["target_address"] = f"{cursor.read_uint(3, 'I021/080'):06X}"

    def _decode_time_message_reception_position(self, cursor: FieldCursor, values: dict) -> None:
        """I021/073 - Time of Message Reception for Position"""
        values["time_reception_position_raw"] = cursor.read_uint(3, "I021/073")

    def _decode_geometric_height(self, cursor: FieldCursor, values: dict) -> None:
        """I021/140 - Geometric Height (LSB = 6.25 ft)"""
        values["geometric_height_raw"] = cursor.read_int(2, "I021/140")

    def _decode_mode_3a_code(self, cursor: FieldCursor, values: dict) -> None:
        """I021/070 - Mode 3A Code"""
        values["mode_3a"] = self._mode_3a_octal(cursor.read_uint(2, "I021/070") & 0x0FFF)

    def _decode_flight_level(self, cursor: FieldCursor, values: dict) -> None:
        """I021/145 - Flight Level (16-bit two's complement, LSB = 1/4 FL)"""
        values["flight_level_quarters"] = cursor.read_int(2, "I021/145")

    def _decode_magnetic_heading(self, cursor: FieldCursor, values: dict) -> None:
        """I021/152 - Magnetic Heading (LSB = 360/2^16 deg)"""
        values["magnetic_heading_raw"] = cursor.read_uint(2, "I021/152")

    def _decode_barometric_vertical_rate(self, cursor: FieldCursor, values: dict) -> None:
        """I021/155 - Barometric Vertical Rate (LSB = 6.25 ft/min)"""
        # bit 16 is the range-exceeded flag
        values["barometric_vertical_rate_raw"] = sign_extend(cursor.read_uint(2, "I021/155") & 0x7FFF, 15)

    def _decode_airborne_ground_vector(self, cursor: FieldCursor, values: dict) -> None:
        """I021/160 - Airborne Ground Vector (4 bytes)"""
        raw = cursor.read_uint(4, "I021/160")
        # bit 32 is the range-exceeded flag
        values["ground_speed_raw"] = (raw >> 16) & 0x7FFF  # LSB = 2^-14 NM/s
        values["track_angle_raw"] = raw & 0xFFFF  # LSB = 360/2^16 deg

    def _decode_target_identification(self, cursor: FieldCursor, values: dict) -> None:
        """I021/170 - Target Identification (6 bytes, optionally extended)"""
        segments = [cursor.read_bytes(IDENTIFICATION_SEGMENT, "I021/170")]

        if self.settings.cat021_identification_extensions:
            # Another 6-octet segment follows while the last octet's LSB is set
            while segments[-1][-1] & 0x01:
                segments.append(cursor.read_bytes(IDENTIFICATION_SEGMENT, "I021/170"))

        table = self.settings.ia5_table
        values["target_identification"] = " ".join(
            part for part in (decode_ia5(segment, table) for segment in segments) if part
        )

    def _decode_emitter_category(self, cursor: FieldCursor, values: dict) -> None:
        """I021/020 - Emitter Category"""
        values["emitter_category"] = cursor.read_u8("I021/020")

    def _decode_mode_s_mb_data(self, cursor: FieldCursor, values: dict) -> None:
        """I021/250 - Mode S MB Data"""
        self._read_mode_s(cursor, values, "I021/250")

    def _decode_reserved_expansion_field(self, cursor: FieldCursor, values: dict) -> None:
        """I021/RE - Reserved Expansion Field
        LEN, FX-extended items indicator, then BPS (2 bytes, LSB = 0.1 hPa above 800)
        when bit 8 of the first indicator octet is set.
        """
        raw = cursor.read_explicit("I021/RE")
        indicator_len = 0
        for octet in raw[1:]:
            indicator_len += 1
            if not (octet & 0x01):
                break
        else:
            # Indicator chain never terminates inside the field
            return

        bps_start = 1 + indicator_len
        if raw[1] & 0x80 and len(raw) >= bps_start + 2:
            bps_raw = int.from_bytes(raw[bps_start:bps_start + 2], byteorder='big')
            values["barometric_pressure_setting_raw"] = bps_raw & 0x0FFF
