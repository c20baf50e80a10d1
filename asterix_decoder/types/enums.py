from enum import Enum, IntEnum


class CAT021ItemType(IntEnum):
    """CAT021 ADS-B target report items keyed by FRN."""

    DATA_SOURCE_IDENTIFICATION = 1  # I021/010, fixed(2)
    TARGET_REPORT_DESCRIPTOR = 2  # I021/040, fx
    TRACK_NUMBER = 3  # I021/161, fixed(2)
    SERVICE_IDENTIFICATION = 4  # I021/015, fixed(1)
    TIME_APPLICABILITY_POSITION = 5  # I021/071, fixed(3)
    POSITION_WGS84 = 6  # I021/130, fixed(6)
    POSITION_WGS84_HIGH_RES = 7  # I021/131, fixed(8)
    TIME_APPLICABILITY_VELOCITY = 8  # I021/072, fixed(3)
    AIR_SPEED = 9  # I021/150, fixed(2)
    TRUE_AIRSPEED = 10  # I021/151, fixed(2)
    TARGET_ADDRESS = 11  # I021/080, fixed(3)
    TIME_MESSAGE_RECEPTION_POSITION = 12  # I021/073, fixed(3)
    TIME_MESSAGE_RECEPTION_POSITION_HIGH_PRECISION = 13  # I021/074, fixed(4)
    TIME_MESSAGE_RECEPTION_VELOCITY = 14  # I021/075, fixed(3)
    TIME_MESSAGE_RECEPTION_VELOCITY_HIGH_PRECISION = 15  # I021/076, fixed(4)
    GEOMETRIC_HEIGHT = 16  # I021/140, fixed(2)
    QUALITY_INDICATORS = 17  # I021/090, fx
    MOPS_VERSION = 18  # I021/210, fixed(1)
    MODE_3A_CODE = 19  # I021/070, fixed(2)
    ROLL_ANGLE = 20  # I021/230, fixed(2)
    FLIGHT_LEVEL = 21  # I021/145, fixed(2)
    MAGNETIC_HEADING = 22  # I021/152, fixed(2)
    TARGET_STATUS = 23  # I021/200, fixed(1)
    BAROMETRIC_VERTICAL_RATE = 24  # I021/155, fixed(2)
    GEOMETRIC_VERTICAL_RATE = 25  # I021/157, fixed(2)
    AIRBORNE_GROUND_VECTOR = 26  # I021/160, fixed(4)
    TRACK_ANGLE_RATE = 27  # I021/165, fixed(2)
    TIME_ASTERIX_REPORT_TRANSMISSION = 28  # I021/077, fixed(3)
    TARGET_IDENTIFICATION = 29  # I021/170, fixed(6)
    EMITTER_CATEGORY = 30  # I021/020, fixed(1)
    MET_INFORMATION = 31  # I021/220, compound
    SELECTED_ALTITUDE = 32  # I021/146, fixed(2)
    FINAL_STATE_SELECTED_ALTITUDE = 33  # I021/148, fixed(2)
    TRAJECTORY_INTENT = 34  # I021/110, compound
    SERVICE_MANAGEMENT = 35  # I021/016, fixed(1)
    AIRCRAFT_OPERATIONAL_STATUS = 36  # I021/008, fixed(1)
    SURFACE_CAPABILITIES = 37  # I021/271, fx
    MESSAGE_AMPLITUDE = 38  # I021/132, fixed(1)
    MODE_S_MB_DATA = 39  # I021/250, repetitive
    ACAS_RESOLUTION_ADVISORY = 40  # I021/260, fixed(7)
    RECEIVER_ID = 41  # I021/400, fixed(1)
    DATA_AGES = 42  # I021/295, compound
    RESERVED_EXPANSION_FIELD = 48  # RE (BPS), explicit
    SPECIAL_PURPOSE_FIELD = 49  # SP, explicit


class CAT048ItemType(IntEnum):
    """CAT048 monoradar target report items keyed by FRN."""

    DATA_SOURCE_IDENTIFIER = 1  # I048/010, fixed(2)
    TIME_OF_DAY = 2  # I048/140, fixed(3)
    TARGET_REPORT_DESCRIPTOR = 3  # I048/020, fx
    MEASURED_POSITION_POLAR = 4  # I048/040, fixed(4)
    MODE_3A_CODE = 5  # I048/070, fixed(2)
    FLIGHT_LEVEL = 6  # I048/090, fixed(2)
    RADAR_PLOT_CHARACTERISTICS = 7  # I048/130, compound
    AIRCRAFT_ADDRESS = 8  # I048/220, fixed(3)
    AIRCRAFT_IDENTIFICATION = 9  # I048/240, fixed(6)
    MODE_S_MB_DATA = 10  # I048/250, repetitive
    TRACK_NUMBER = 11  # I048/161, fixed(2)
    CALCULATED_POSITION_CARTESIAN = 12  # I048/042, fixed(4)
    TRACK_VELOCITY_POLAR = 13  # I048/200, fixed(4)
    TRACK_STATUS = 14  # I048/170, fx
    TRACK_QUALITY = 15  # I048/210, fixed(4)
    WARNING_ERROR_CONDITIONS = 16  # I048/030, fx
    MODE_3A_CONFIDENCE = 17  # I048/080, fixed(2)
    MODE_C_CODE_CONFIDENCE = 18  # I048/100, fixed(4)
    HEIGHT_3D_RADAR = 19  # I048/110, fixed(2)
    RADIAL_DOPPLER_SPEED = 20  # I048/120, compound
    COMMUNICATIONS_ACAS = 21  # I048/230, fixed(2)
    ACAS_RESOLUTION_ADVISORY = 22  # I048/260, fixed(7)
    MODE_1_CODE = 23  # I048/055, fixed(1)
    MODE_2_CODE = 24  # I048/050, fixed(2)
    MODE_1_CONFIDENCE = 25  # I048/065, fixed(1)
    MODE_2_CONFIDENCE = 26  # I048/060, fixed(2)
    SPECIAL_PURPOSE_FIELD = 27  # SP, explicit
    RESERVED_EXPANSION_FIELD = 28  # RE, explicit


class Category(Enum):
    """Categories this package can decode."""
    CAT021 = 21
    CAT048 = 48

    @classmethod
    def from_byte(cls, value: int):
        """Return the Category for a category octet, or None when not supported."""
        try:
            return cls(value)
        except ValueError:
            return None


class DecodeFailure(Enum):
    """Reason a message decode stopped early."""
    TRUNCATED_STREAM = "truncated_stream"
    MALFORMED_FSPEC = "malformed_fspec"
    UNKNOWN_CATEGORY = "unknown_category"
    FIELD_OUT_OF_BOUNDS = "field_out_of_bounds"
    UNKNOWN_ITEM = "unknown_item"


class IA5Table(Enum):
    """Digit placement in the 6-bit IA-5 character set."""
    ICAO = "icao"  # digits at codes 48-57, space at 32
    COMPACT = "compact"  # digits at codes 32-41


class BdsCodeOctet(Enum):
    """Octet of an 8-byte Mode-S block carrying the BDS1/BDS2 nibbles."""
    LEADING = "leading"
    TRAILING = "trailing"


class BpsHoldScope(Enum):
    """Scope of the CAT021 hold-last barometric pressure setting."""
    GLOBAL = "global"
    AIRCRAFT = "aircraft"
