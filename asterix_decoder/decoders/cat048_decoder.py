from asterix_decoder.decoders.asterix_decoder_base import AsterixDecoderBase
from asterix_decoder.decoders.field_cursor import FieldCursor, sign_extend
from asterix_decoder.decoders.ia5 import decode_ia5
from asterix_decoder.models.cat048_record import RawCat048Record
from asterix_decoder.types.enums import CAT048ItemType, Category

"""
Inside I048/250 "Mode S MB Data" only BDS 4,0, 5,0 and 6,0 are decoded.
Every other item of the UAP is either decoded or skipped with its real structure.
"""

# I048/130: primary subfield + SRL, SRR, SAM, PRL, PAM, RPD, APD (1 octet each)
RADAR_PLOT_SUBFIELDS = (1, 1, 1, 1, 1, 1, 1)
# I048/120: CAL (2 octets), RDS (REP + 6-octet blocks)
RADIAL_DOPPLER_SUBFIELDS = (2, ('rep', 6))


class Cat048Decoder(AsterixDecoderBase):
    category = Category.CAT048
    item_enum = CAT048ItemType
    record_class = RawCat048Record

    def _register_decoders(self) -> None:
        # Map FSPEC bits (item types) to decoding methods
        self.decoder_map = {
            CAT048ItemType.DATA_SOURCE_IDENTIFIER: self._decode_data_source,
            CAT048ItemType.TIME_OF_DAY: self._decode_time_of_day,
            CAT048ItemType.TARGET_REPORT_DESCRIPTOR: self._decode_target_report_descriptor,
            CAT048ItemType.MEASURED_POSITION_POLAR: self._decode_measured_position_polar,
            CAT048ItemType.MODE_3A_CODE: self._decode_mode_3a_code,
            CAT048ItemType.FLIGHT_LEVEL: self._decode_flight_level,
            CAT048ItemType.RADAR_PLOT_CHARACTERISTICS: self._skip_compound(RADAR_PLOT_SUBFIELDS, "I048/130"),
            CAT048ItemType.AIRCRAFT_ADDRESS: self._decode_aircraft_address,
            CAT048ItemType.AIRCRAFT_IDENTIFICATION: self._decode_aircraft_identification,
            CAT048ItemType.MODE_S_MB_DATA: self._decode_mode_s_mb_data,
            CAT048ItemType.TRACK_NUMBER: self._decode_track_number,
            CAT048ItemType.CALCULATED_POSITION_CARTESIAN: self._skip_fixed(4, "I048/042"),
            CAT048ItemType.TRACK_VELOCITY_POLAR: self._decode_track_velocity_polar,
            CAT048ItemType.TRACK_STATUS: self._decode_track_status,
            CAT048ItemType.TRACK_QUALITY: self._skip_fixed(4, "I048/210"),
            CAT048ItemType.WARNING_ERROR_CONDITIONS: self._skip_variable("I048/030"),
            CAT048ItemType.MODE_3A_CONFIDENCE: self._skip_fixed(2, "I048/080"),
            CAT048ItemType.MODE_C_CODE_CONFIDENCE: self._skip_fixed(4, "I048/100"),
            CAT048ItemType.HEIGHT_3D_RADAR: self._decode_height_3d_radar,
            CAT048ItemType.RADIAL_DOPPLER_SPEED: self._skip_compound(RADIAL_DOPPLER_SUBFIELDS, "I048/120"),
            CAT048ItemType.COMMUNICATIONS_ACAS: self._decode_communications_acas,
            CAT048ItemType.ACAS_RESOLUTION_ADVISORY: self._skip_fixed(7, "I048/260"),
            CAT048ItemType.MODE_1_CODE: self._skip_fixed(1, "I048/055"),
            CAT048ItemType.MODE_2_CODE: self._skip_fixed(2, "I048/050"),
            CAT048ItemType.MODE_1_CONFIDENCE: self._skip_fixed(1, "I048/065"),
            CAT048ItemType.MODE_2_CONFIDENCE: self._skip_fixed(2, "I048/060"),
            CAT048ItemType.SPECIAL_PURPOSE_FIELD: self._skip_explicit("I048/SP"),
            CAT048ItemType.RESERVED_EXPANSION_FIELD: self._skip_explicit("I048/RE"),
        }

    # ========== DECODER METHODS ==========
    def _decode_data_source(self, cursor: FieldCursor, values: dict) -> None:
        """I048/010 - Data Source Identifier (2 bytes)"""
        raw = cursor.read_bytes(2, "I048/010")
        values["sac"] = raw[0]  # System Area Code
        values["sic"] = raw[1]  # System Identification Code

    def _decode_time_of_day(self, cursor: FieldCursor, values: dict) -> None:
        """I048/140 - Time of Day (3 bytes)
        Number of 1/128 s elapsed since last midnight.
        """
        values["time_of_day_raw"] = cursor.read_uint(3, "I048/140")

    def _decode_target_report_descriptor(self, cursor: FieldCursor, values: dict) -> None:
        """I048/020 - Target Report Descriptor (Variable length)"""
        octets = cursor.read_fx_octets("I048/020")

        first_octet = octets[0]
        values["typ"] = (first_octet >> 5) & 0x07  # bits 8-6
        values["sim"] = (first_octet >> 4) & 0x01  # bit 5
        values["rdp"] = (first_octet >> 3) & 0x01  # bit 4
        values["spi"] = (first_octet >> 2) & 0x01  # bit 3
        values["rab"] = (first_octet >> 1) & 0x01  # bit 2

        # First extension
        if len(octets) >= 2:
            second_octet = octets[1]
            values["tst"] = (second_octet >> 7) & 0x01  # Real=0, Test=1
            values["err"] = (second_octet >> 6) & 0x01  # Extended Range
            values["xpp"] = (second_octet >> 5) & 0x01  # X-Pulse present
            values["me"] = (second_octet >> 4) & 0x01  # Military emergency
            values["mi"] = (second_octet >> 3) & 0x01  # Military identification
            values["foe_fri"] = (second_octet >> 1) & 0x03  # IFF Mode 4

    def _decode_measured_position_polar(self, cursor: FieldCursor, values: dict) -> None:
        """I048/040 - Measured Position in Polar Coordinates (4 bytes)
        RHO LSB = 1/256 NM, THETA LSB = 360/2^16 deg.
        """
        raw = cursor.read_bytes(4, "I048/040")
        values["rho_raw"] = int.from_bytes(raw[0:2], byteorder='big')
        values["theta_raw"] = int.from_bytes(raw[2:4], byteorder='big')

    def _decode_mode_3a_code(self, cursor: FieldCursor, values: dict) -> None:
        """I048/070 - Mode-3/A Code in Octal Representation (2 bytes fixed)"""
        raw = cursor.read_uint(2, "I048/070")

        values["mode_3a_v"] = (raw >> 15) & 0x01  # bit 16: V - Validated
        values["mode_3a_g"] = (raw >> 14) & 0x01  # bit 15: G - Garbled
        values["mode_3a_l"] = (raw >> 13) & 0x01  # bit 14: L - Derived from reply or smoothed
        # bit 13 is spare
        values["mode_3a"] = self._mode_3a_octal(raw & 0x0FFF)

    def _decode_flight_level(self, cursor: FieldCursor, values: dict) -> None:
        """I048/090 - Flight Level in Binary Representation (2 bytes fixed)"""
        raw = cursor.read_uint(2, "I048/090")

        values["flight_level_v"] = (raw >> 15) & 0x01  # bit 16: V
        values["flight_level_g"] = (raw >> 14) & 0x01  # bit 15: G
        # 14-bit two's complement, LSB = 1/4 FL
        values["flight_level_quarters"] = sign_extend(raw & 0x3FFF, 14)

    def _decode_aircraft_address(self, cursor: FieldCursor, values: dict) -> None:
        """I048/220 - Aircraft Address (3 bytes fixed)"""
        values["aircraft_address"] = f"{cursor.read_uint(3, 'I048/220'):06X}"

    def _decode_aircraft_identification(self, cursor: FieldCursor, values: dict) -> None:
        """I048/240 - Aircraft Identification (6 bytes fixed)
        8 characters of 6 bits each, as reported by the Mode S transponder.
        """
        raw = cursor.read_bytes(6, "I048/240")
        values["aircraft_identification"] = decode_ia5(raw, self.settings.ia5_table)

    def _decode_mode_s_mb_data(self, cursor: FieldCursor, values: dict) -> None:
        """I048/250 - Mode S MB Data (Repetitive, 8-byte blocks)"""
        self._read_mode_s(cursor, values, "I048/250")

    def _decode_track_number(self, cursor: FieldCursor, values: dict) -> None:
        """I048/161 - Track Number (2 bytes fixed)"""
        # Bits 16-13 are spare
        values["track_number"] = cursor.read_uint(2, "I048/161") & 0x0FFF

    def _decode_track_velocity_polar(self, cursor: FieldCursor, values: dict) -> None:
        """I048/200 - Calculated Track Velocity in Polar Representation (4 bytes fixed)
        Ground speed LSB = 2^-14 NM/s, heading LSB = 360/2^16 deg. Kept unconverted.
        """
        raw = cursor.read_bytes(4, "I048/200")
        values["ground_speed_raw"] = int.from_bytes(raw[0:2], byteorder='big')
        values["heading_raw"] = int.from_bytes(raw[2:4], byteorder='big')

    def _decode_track_status(self, cursor: FieldCursor, values: dict) -> None:
        """I048/170 - Track Status (Variable length)"""
        octets = cursor.read_fx_octets("I048/170")

        first_octet = octets[0]
        values["cnf"] = (first_octet >> 7) & 0x01  # 0=Confirmed, 1=Tentative
        values["rad"] = (first_octet >> 5) & 0x03  # 0=Combined, 1=PSR, 2=SSR/Mode S, 3=Invalid
        values["dou"] = (first_octet >> 4) & 0x01
        values["mah"] = (first_octet >> 3) & 0x01
        values["cdm"] = (first_octet >> 1) & 0x03  # 0=Maintaining, 1=Climbing, 2=Descending, 3=Unknown

        if len(octets) >= 2:
            second_octet = octets[1]
            values["tre"] = (second_octet >> 7) & 0x01
            values["gho"] = (second_octet >> 6) & 0x01
            values["sup"] = (second_octet >> 5) & 0x01
            values["tcc"] = (second_octet >> 4) & 0x01

    def _decode_height_3d_radar(self, cursor: FieldCursor, values: dict) -> None:
        """I048/110 - Height Measured by 3D Radar (2 bytes fixed, LSB = 25 ft)"""
        values["height_3d_raw"] = sign_extend(cursor.read_uint(2, "I048/110") & 0x3FFF, 14)

    def _decode_communications_acas(self, cursor: FieldCursor, values: dict) -> None:
        """I048/230 - Communications/ACAS Capability and Flight Status (2 bytes fixed)"""
        raw = cursor.read_bytes(2, "I048/230")
        byte1, byte2 = raw[0], raw[1]

        values["com"] = (byte1 >> 5) & 0x07  # bits 16-14
        values["stat"] = (byte1 >> 2) & 0x07  # bits 13-11
        values["si"] = (byte1 >> 1) & 0x01  # bit 10
        # bit 9 is spare
        values["mssc"] = (byte2 >> 7) & 0x01  # bit 8
        values["arc"] = (byte2 >> 6) & 0x01  # bit 7: 0=100 ft, 1=25 ft resolution
        values["aic"] = (byte2 >> 5) & 0x01  # bit 6
        values["b1a"] = (byte2 >> 4) & 0x01  # bit 5: BDS 1,0 bit 16
        values["b1b"] = byte2 & 0x0F  # bits 4-1: BDS 1,0 bits 37-40
