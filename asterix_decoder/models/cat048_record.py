from dataclasses import dataclass, field
from typing import Optional, Tuple

from asterix_decoder.models.item import Item
from asterix_decoder.models.mode_s import ModeSBlock


@dataclass(frozen=True)
class RawCat048Record:
    """CAT048 values as transmitted, in native units. None means not transmitted."""
    # I048/010
    sac: Optional[int] = None
    sic: Optional[int] = None
    # I048/140 - 1/128 s since midnight
    time_of_day_raw: Optional[int] = None
    # I048/020
    typ: Optional[int] = None
    sim: Optional[int] = None
    rdp: Optional[int] = None
    spi: Optional[int] = None
    rab: Optional[int] = None
    tst: Optional[int] = None
    err: Optional[int] = None
    xpp: Optional[int] = None
    me: Optional[int] = None
    mi: Optional[int] = None
    foe_fri: Optional[int] = None
    # I048/040 - rho in 1/256 NM, theta in 360/2^16 deg
    rho_raw: Optional[int] = None
    theta_raw: Optional[int] = None
    # I048/070
    mode_3a_v: Optional[int] = None
    mode_3a_g: Optional[int] = None
    mode_3a_l: Optional[int] = None
    mode_3a: Optional[str] = None
    # I048/090 - quarters of FL, sign extended
    flight_level_v: Optional[int] = None
    flight_level_g: Optional[int] = None
    flight_level_quarters: Optional[int] = None
    # I048/220
    aircraft_address: Optional[str] = None
    # I048/240
    aircraft_identification: Optional[str] = None
    # I048/250
    mode_s_blocks: Tuple[ModeSBlock, ...] = ()
    # I048/161
    track_number: Optional[int] = None
    # I048/200 - ground speed 2^-14 NM/s, heading 360/2^16 deg
    ground_speed_raw: Optional[int] = None
    heading_raw: Optional[int] = None
    # I048/170
    cnf: Optional[int] = None
    rad: Optional[int] = None
    dou: Optional[int] = None
    mah: Optional[int] = None
    cdm: Optional[int] = None
    tre: Optional[int] = None
    gho: Optional[int] = None
    sup: Optional[int] = None
    tcc: Optional[int] = None
    # I048/110 - 25 ft
    height_3d_raw: Optional[int] = None
    # I048/230
    com: Optional[int] = None
    stat: Optional[int] = None
    si: Optional[int] = None
    mssc: Optional[int] = None
    arc: Optional[int] = None
    aic: Optional[int] = None
    b1a: Optional[int] = None
    b1b: Optional[int] = None

    items: Tuple[Item, ...] = ()
    truncated: bool = False


@dataclass(frozen=True)
class Cat048Record:
    """Physically scaled CAT048 record. None means not transmitted or invalid."""
    sac: Optional[int] = None
    sic: Optional[int] = None
    time_of_day_s: Optional[float] = None
    time: Optional[str] = None
    rho_nm: Optional[float] = None
    theta_deg: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    mode_3a: Optional[str] = None
    flight_level: Optional[float] = None
    altitude_ft: Optional[float] = None
    corrected_altitude_ft: Optional[float] = None
    qnh_corrected: bool = False
    barometric_pressure_hpa: Optional[float] = None
    aircraft_address: Optional[str] = None
    aircraft_identification: Optional[str] = None
    track_number: Optional[int] = None
    ground_speed_kt: Optional[float] = None
    heading_deg: Optional[float] = None
    height_3d_ft: Optional[float] = None
    typ: Optional[int] = None
    sim: Optional[int] = None
    flight_status: Optional[int] = None
    flight_status_description: Optional[str] = None
    mode_s_registers: Tuple[str, ...] = ()
    mcp_fcu_selected_altitude_ft: Optional[int] = None
    fms_selected_altitude_ft: Optional[int] = None
    roll_angle_deg: Optional[float] = None
    true_track_angle_deg: Optional[float] = None
    bds_ground_speed_kt: Optional[float] = None
    track_angle_rate_deg_s: Optional[float] = None
    true_airspeed_kt: Optional[float] = None
    magnetic_heading_deg: Optional[float] = None
    indicated_airspeed_kt: Optional[int] = None
    mach: Optional[float] = None
    barometric_altitude_rate_ft_min: Optional[int] = None
    inertial_vertical_velocity_ft_min: Optional[int] = None
    category: int = field(default=48, init=False)
