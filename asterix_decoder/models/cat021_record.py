from dataclasses import dataclass, field
from typing import Optional, Tuple

from asterix_decoder.models.item import Item
from asterix_decoder.models.mode_s import ModeSBlock


@dataclass(frozen=True)
class RawCat021Record:
    """CAT021 values as transmitted, in native units. None means not transmitted."""
    # I021/010
    sac: Optional[int] = None
    sic: Optional[int] = None
    # I021/040
    atp: Optional[int] = None
    arc: Optional[int] = None
    rc: Optional[int] = None
    rab: Optional[int] = None
    dcr: Optional[int] = None
    gbs: Optional[int] = None
    sim: Optional[int] = None
    tst: Optional[int] = None
    saa: Optional[int] = None
    cl: Optional[int] = None
    # I021/161
    track_number: Optional[int] = None
    # I021/130 - 180/2^23 deg
    latitude_raw: Optional[int] = None
    longitude_raw: Optional[int] = None
    # I021/131 - 180/2^30 deg
    latitude_high_res_raw: Optional[int] = None
    longitude_high_res_raw: Optional[int] = None
    # I021/080
    target_address: Optional[str] = None
    # I021/073 - 1/128 s since midnight
    time_reception_position_raw: Optional[int] = None
    # I021/140 - 6.25 ft
    geometric_height_raw: Optional[int] = None
    # I021/070
    mode_3a: Optional[str] = None
    # I021/145 - quarters of FL
    flight_level_quarters: Optional[int] = None
    # I021/152 - 360/2^16 deg
    magnetic_heading_raw: Optional[int] = None
    # I021/155 - 6.25 ft/min
    barometric_vertical_rate_raw: Optional[int] = None
    # I021/160 - 2^-14 NM/s, 360/2^16 deg
    ground_speed_raw: Optional[int] = None
    track_angle_raw: Optional[int] = None
    # I021/170
    target_identification: Optional[str] = None
    # I021/020
    emitter_category: Optional[int] = None
    # I021/250
    mode_s_blocks: Tuple[ModeSBlock, ...] = ()
    # RE - 0.1 hPa above 800
    barometric_pressure_setting_raw: Optional[int] = None

    items: Tuple[Item, ...] = ()
    truncated: bool = False


@dataclass(frozen=True)
class Cat021Record:
    """Physically scaled CAT021 record. None means not transmitted or invalid."""
    sac: Optional[int] = None
    sic: Optional[int] = None
    time_of_day_s: Optional[float] = None
    time: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    mode_3a: Optional[str] = None
    flight_level: Optional[float] = None
    altitude_ft: Optional[float] = None
    corrected_altitude_ft: Optional[float] = None
    qnh_corrected: bool = False
    barometric_pressure_hpa: Optional[float] = None
    effective_qnh_hpa: Optional[float] = None
    target_address: Optional[str] = None
    target_identification: Optional[str] = None
    track_number: Optional[int] = None
    on_ground: bool = False
    atp: Optional[int] = None
    gbs: Optional[int] = None
    sim: Optional[int] = None
    tst: Optional[int] = None
    ground_speed_kt: Optional[float] = None
    track_angle_deg: Optional[float] = None
    magnetic_heading_deg: Optional[float] = None
    geometric_height_ft: Optional[float] = None
    barometric_vertical_rate_ft_min: Optional[float] = None
    emitter_category: Optional[int] = None
    mode_s_registers: Tuple[str, ...] = ()
    roll_angle_deg: Optional[float] = None
    true_track_angle_deg: Optional[float] = None
    bds_ground_speed_kt: Optional[float] = None
    true_airspeed_kt: Optional[float] = None
    indicated_airspeed_kt: Optional[int] = None
    mach: Optional[float] = None
    category: int = field(default=21, init=False)
