"""
Mode-S MB data blocks (I048/250, I021/250).

Each 8-byte block is decoded into exactly one of the register-specific types
below. Absent fields are None; a register type only carries the fields that
register defines.
"""
from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Bds40:
    """BDS 4,0 - Selected vertical intention"""
    raw: bytes
    mcp_fcu_selected_altitude_ft: Optional[int] = None
    fms_selected_altitude_ft: Optional[int] = None
    barometric_pressure_setting_hpa: Optional[float] = None

    register = (4, 0)


@dataclass(frozen=True)
class Bds50:
    """BDS 5,0 - Track and turn report"""
    raw: bytes
    roll_angle_deg: Optional[float] = None
    true_track_angle_deg: Optional[float] = None
    ground_speed_kt: Optional[float] = None
    track_angle_rate_deg_s: Optional[float] = None
    true_airspeed_kt: Optional[float] = None

    register = (5, 0)


@dataclass(frozen=True)
class Bds60:
    """BDS 6,0 - Heading and speed report"""
    raw: bytes
    magnetic_heading_deg: Optional[float] = None
    indicated_airspeed_kt: Optional[int] = None
    mach: Optional[float] = None
    barometric_altitude_rate_ft_min: Optional[int] = None
    inertial_vertical_velocity_ft_min: Optional[int] = None

    register = (6, 0)


@dataclass(frozen=True)
class UnknownBds:
    """Any other register: raw bytes only."""
    raw: bytes
    bds1: int
    bds2: int

    @property
    def register(self) -> Tuple[int, int]:
        return self.bds1, self.bds2


ModeSBlock = Union[Bds40, Bds50, Bds60, UnknownBds]


def register_label(block: ModeSBlock) -> str:
    bds1, bds2 = block.register
    return f"BDS {bds1}.{bds2}"
