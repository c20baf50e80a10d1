"""
Turn raw decoded records into physically scaled, QNH-corrected, positioned records.

CAT048 records are independent of each other. CAT021 records share one piece of
state: the last valid barometric pressure setting, held by a
BarometricSettingTracker and used when a report carries none.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Union

from asterix_decoder.config import DEFAULT_SETTINGS, DecoderSettings
from asterix_decoder.models.cat021_record import Cat021Record, RawCat021Record
from asterix_decoder.models.cat048_record import Cat048Record, RawCat048Record
from asterix_decoder.models.message import MessageDecodeResult
from asterix_decoder.models.mode_s import Bds40, Bds50, Bds60, register_label
from asterix_decoder.types.enums import Category
from asterix_decoder.utils.coordinate_transformer import CoordinateTransform, CoordinateTransformer
from asterix_decoder.utils.qnh_corrector import BarometricSettingTracker, QNHCorrector

NM_TO_METERS = 1852.0
GROUND_FLIGHT_LEVEL_MAX = 14.0
ATP_SURFACE_VEHICLE = 2

# I048/230 STAT
FLIGHT_STATUS_DESCRIPTIONS = {
    0: "No alert, no SPI, aircraft airborne",
    1: "No alert, no SPI, aircraft on ground",
    2: "Alert, no SPI, aircraft airborne",
    3: "Alert, no SPI, aircraft on ground",
    4: "Alert, SPI, aircraft airborne or on ground",
    5: "No alert, SPI, aircraft airborne or on ground",
    6: "Not assigned",
    7: "Unknown",
}


def format_time_of_day(total_seconds: float) -> str:
    """Seconds since midnight as HH:MM:SS.mmm"""
    hours = int(total_seconds // 3600)
    minutes = int((total_seconds % 3600) // 60)
    seconds = int(total_seconds % 60)
    milliseconds = int(round((total_seconds - int(total_seconds)) * 1000))
    if milliseconds == 1000:
        milliseconds = 999
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{milliseconds:03d}"


def ground_speed_knots(raw: Optional[int]) -> Optional[float]:
    # LSB = 2^-14 NM/s
    return None if raw is None else raw * (2 ** -14) * 3600


def angle_degrees(raw: Optional[int]) -> Optional[float]:
    # LSB = 360/2^16 deg
    return None if raw is None else (raw * 360.0 / 65536.0) % 360.0


def mode_s_fields(blocks) -> dict:
    """Flatten BDS 4,0 / 5,0 / 6,0 blocks. The first block that reports a field wins."""
    fields = {}

    def put(name, value):
        if value is not None and fields.get(name) is None:
            fields[name] = value

    for block in blocks:
        if isinstance(block, Bds40):
            put("mcp_fcu_selected_altitude_ft", block.mcp_fcu_selected_altitude_ft)
            put("fms_selected_altitude_ft", block.fms_selected_altitude_ft)
            put("barometric_pressure_hpa", block.barometric_pressure_setting_hpa)
        elif isinstance(block, Bds50):
            put("roll_angle_deg", block.roll_angle_deg)
            put("true_track_angle_deg", block.true_track_angle_deg)
            put("bds_ground_speed_kt", block.ground_speed_kt)
            put("track_angle_rate_deg_s", block.track_angle_rate_deg_s)
            put("true_airspeed_kt", block.true_airspeed_kt)
        elif isinstance(block, Bds60):
            put("magnetic_heading_deg", block.magnetic_heading_deg)
            put("indicated_airspeed_kt", block.indicated_airspeed_kt)
            put("mach", block.mach)
            put("barometric_altitude_rate_ft_min", block.barometric_altitude_rate_ft_min)
            put("inertial_vertical_velocity_ft_min", block.inertial_vertical_velocity_ft_min)
    return fields


@dataclass
class DerivedRecords:
    """Derived records per category, in decode order."""
    cat048: List[Cat048Record] = field(default_factory=list)
    cat021: List[Cat021Record] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.cat048) + len(self.cat021)

    def all(self) -> List[Union[Cat048Record, Cat021Record]]:
        return [*self.cat048, *self.cat021]


class DerivedValueProcessor:
    def __init__(self, settings: Optional[DecoderSettings] = None,
                 coordinate_transform: Optional[CoordinateTransform] = None):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.settings = settings or DEFAULT_SETTINGS
        self.coordinate_transform = coordinate_transform or CoordinateTransformer(self.settings.radar_position)
        self.qnh_corrector = QNHCorrector(self.settings.transition_altitude_ft)
        self.bps_tracker = BarometricSettingTracker(self.settings.bps_hold_scope)

    def reset(self) -> None:
        """Forget the held CAT021 barometric setting."""
        self.bps_tracker.reset()

    def _qnh_actual(self, qnh: Optional[float]) -> Optional[float]:
        return qnh if qnh is not None else self.settings.qnh_actual

    # ========== CAT048 ==========
    def process_cat048(self, raw: RawCat048Record, qnh: Optional[float] = None) -> Cat048Record:
        time_of_day_s = None if raw.time_of_day_raw is None else raw.time_of_day_raw / 128.0

        rho_nm = None if raw.rho_raw is None else raw.rho_raw / 256.0
        theta_deg = None if raw.theta_raw is None else raw.theta_raw * 360.0 / 65536.0
        latitude = longitude = None
        if rho_nm and theta_deg is not None:
            position = self.coordinate_transform.polar_to_geodetic(
                rho_nm * NM_TO_METERS, math.radians(theta_deg), self.settings.radar_position
            )
            if position is not None:
                latitude, longitude = position

        flight_level = None if raw.flight_level_quarters is None else raw.flight_level_quarters / 4.0
        altitude_ft = None if flight_level is None else flight_level * 100.0

        bds = mode_s_fields(raw.mode_s_blocks)
        effective_qnh = self.qnh_corrector.effective_qnh(bds.get("barometric_pressure_hpa"), self._qnh_actual(qnh))
        corrected_altitude_ft, corrected = self.qnh_corrector.correct(altitude_ft, effective_qnh)

        return Cat048Record(
            sac=raw.sac,
            sic=raw.sic,
            time_of_day_s=time_of_day_s,
            time=None if time_of_day_s is None else format_time_of_day(time_of_day_s),
            rho_nm=rho_nm,
            theta_deg=theta_deg,
            latitude=latitude,
            longitude=longitude,
            mode_3a=raw.mode_3a,
            flight_level=flight_level,
            altitude_ft=altitude_ft,
            corrected_altitude_ft=corrected_altitude_ft,
            qnh_corrected=corrected,
            aircraft_address=raw.aircraft_address,
            aircraft_identification=raw.aircraft_identification,
            track_number=raw.track_number,
            ground_speed_kt=ground_speed_knots(raw.ground_speed_raw),
            heading_deg=angle_degrees(raw.heading_raw),
            height_3d_ft=None if raw.height_3d_raw is None else raw.height_3d_raw * 25.0,
            typ=raw.typ,
            sim=raw.sim,
            flight_status=raw.stat,
            flight_status_description=FLIGHT_STATUS_DESCRIPTIONS.get(raw.stat),
            mode_s_registers=tuple(register_label(block) for block in raw.mode_s_blocks),
            **bds,
        )

    # ========== CAT021 ==========
    def process_cat021(self, raw: RawCat021Record, qnh: Optional[float] = None) -> Cat021Record:
        time_of_day_s = (
            None if raw.time_reception_position_raw is None else raw.time_reception_position_raw / 128.0
        )

        # High resolution position wins over the 3-byte one
        if raw.latitude_high_res_raw is not None:
            latitude = raw.latitude_high_res_raw * (180.0 / 2 ** 30)
            longitude = raw.longitude_high_res_raw * (180.0 / 2 ** 30)
        elif raw.latitude_raw is not None:
            latitude = raw.latitude_raw * (180.0 / 2 ** 23)
            longitude = raw.longitude_raw * (180.0 / 2 ** 23)
        else:
            latitude = longitude = None

        flight_level = None if raw.flight_level_quarters is None else raw.flight_level_quarters / 4.0
        altitude_ft = None if flight_level is None else flight_level * 100.0

        bds = mode_s_fields(raw.mode_s_blocks)
        # Only BDS 5,0 / 6,0 kinematics are carried on the CAT021 record
        bds_kinematics = {
            name: bds.get(name)
            for name in ("roll_angle_deg", "true_track_angle_deg", "bds_ground_speed_kt",
                         "true_airspeed_kt", "indicated_airspeed_kt", "mach")
        }

        reported_bps = None
        if raw.barometric_pressure_setting_raw is not None:
            reported_bps = round(raw.barometric_pressure_setting_raw * 0.1 + 800.0, 1)
        if not QNHCorrector.is_valid_setting(reported_bps):
            reported_bps = bds.get("barometric_pressure_hpa")

        held_bps = self.bps_tracker.last(raw.target_address)
        effective_qnh = self.qnh_corrector.effective_qnh(reported_bps, self._qnh_actual(qnh), held_bps)
        self.bps_tracker.update(raw.target_address, reported_bps)
        corrected_altitude_ft, corrected = self.qnh_corrector.correct(altitude_ft, effective_qnh)

        on_ground = (
            raw.gbs == 1
            or raw.atp == ATP_SURFACE_VEHICLE
            or (flight_level is not None and flight_level <= GROUND_FLIGHT_LEVEL_MAX)
        )

        return Cat021Record(
            sac=raw.sac,
            sic=raw.sic,
            time_of_day_s=time_of_day_s,
            time=None if time_of_day_s is None else format_time_of_day(time_of_day_s),
            latitude=latitude,
            longitude=longitude,
            mode_3a=raw.mode_3a,
            flight_level=flight_level,
            altitude_ft=altitude_ft,
            corrected_altitude_ft=corrected_altitude_ft,
            qnh_corrected=corrected,
            barometric_pressure_hpa=reported_bps,
            effective_qnh_hpa=effective_qnh,
            target_address=raw.target_address,
            target_identification=raw.target_identification,
            track_number=raw.track_number,
            on_ground=on_ground,
            atp=raw.atp,
            gbs=raw.gbs,
            sim=raw.sim,
            tst=raw.tst,
            ground_speed_kt=ground_speed_knots(raw.ground_speed_raw),
            track_angle_deg=angle_degrees(raw.track_angle_raw),
            magnetic_heading_deg=angle_degrees(raw.magnetic_heading_raw),
            geometric_height_ft=None if raw.geometric_height_raw is None else raw.geometric_height_raw * 6.25,
            barometric_vertical_rate_ft_min=(
                None if raw.barometric_vertical_rate_raw is None else raw.barometric_vertical_rate_raw * 6.25
            ),
            emitter_category=raw.emitter_category,
            mode_s_registers=tuple(register_label(block) for block in raw.mode_s_blocks),
            **bds_kinematics,
        )

    # ========== BATCH ==========
    def process_result(self, result: MessageDecodeResult,
                       qnh: Optional[float] = None) -> List[Union[Cat048Record, Cat021Record]]:
        """Derive every record of one decoded message. Unknown categories give nothing."""
        category = Category.from_byte(result.category)
        if category is Category.CAT048:
            return [self.process_cat048(raw, qnh) for raw in result.records]
        if category is Category.CAT021:
            return [self.process_cat021(raw, qnh) for raw in result.records]
        return []

    def process_results(self, results: Iterable[MessageDecodeResult],
                        qnh: Optional[float] = None) -> DerivedRecords:
        derived = DerivedRecords()
        for result in results:
            category = Category.from_byte(result.category)
            records = self.process_result(result, qnh)
            if category is Category.CAT048:
                derived.cat048.extend(records)
            elif category is Category.CAT021:
                derived.cat021.extend(records)
        self.logger.info("Derived %d CAT048 and %d CAT021 record(s)", len(derived.cat048), len(derived.cat021))
        return derived
