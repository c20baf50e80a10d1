import logging
import math
import numpy as np
from typing import Dict, Optional, Protocol, Tuple
from dataclasses import dataclass

from asterix_decoder.config import BARCELONA_RADAR, RadarPosition

logger = logging.getLogger(__name__)

# WGS-84 ellipsoid
SEMI_MAJOR_AXIS_M = 6378137.0
SEMI_MINOR_AXIS_M = 6356752.3142
ECCENTRICITY_SQ = 0.00669437999013

NM_TO_METERS = 1852.0


@dataclass(frozen=True)
class SiteFrame:
    """Local East-North-Up frame of one radar site, expressed in ECEF."""
    rotation: np.ndarray  # rows are the east, north and up unit vectors
    origin: np.ndarray  # ECEF position of the antenna


class CoordinateTransform(Protocol):
    """Service turning radar slant-polar measurements into geodetic positions."""

    def polar_to_geodetic(self, rho_m: float, theta_rad: float,
                          radar_position: RadarPosition) -> Optional[Tuple[float, float]]:
        ...


def prime_vertical_radius(lat: float) -> float:
    return SEMI_MAJOR_AXIS_M / math.sqrt(1.0 - ECCENTRICITY_SQ * math.sin(lat) ** 2)


def geodetic_to_ecef(lat: float, lon: float, height: float) -> np.ndarray:
    nu = prime_vertical_radius(lat)
    horizontal = (nu + height) * math.cos(lat)
    return np.array([
        horizontal * math.cos(lon),
        horizontal * math.sin(lon),
        (nu * (1.0 - ECCENTRICITY_SQ) + height) * math.sin(lat),
    ])


class CoordinateTransformer:
    """
    Projects monoradar plots onto the WGS-84 ellipsoid.

    The chain is slant polar -> site ENU -> ECEF -> geodetic. Site frames
    are built once per radar position and reused, so a single transformer
    can serve recordings that mix several radars.
    """

    TOLERANCE_RAD = 1e-12
    MAX_ITERATIONS = 50
    POLAR_AXIS_EPSILON_M = 1e-10

    def __init__(self, radar_position: RadarPosition = BARCELONA_RADAR):
        self.radar_position = radar_position
        self._frames: Dict[RadarPosition, SiteFrame] = {}
        self.frame_for(radar_position)

    def frame_for(self, radar_position: RadarPosition) -> SiteFrame:
        frame = self._frames.get(radar_position)
        if frame is not None:
            return frame

        lat = math.radians(radar_position.lat_deg)
        lon = math.radians(radar_position.lon_deg)
        sin_lat, cos_lat = math.sin(lat), math.cos(lat)
        sin_lon, cos_lon = math.sin(lon), math.cos(lon)
        rotation = np.array([
            (-sin_lon, cos_lon, 0.0),
            (-sin_lat * cos_lon, -sin_lat * sin_lon, cos_lat),
            (cos_lat * cos_lon, cos_lat * sin_lon, sin_lat),
        ])
        frame = SiteFrame(rotation=rotation, origin=geodetic_to_ecef(lat, lon, radar_position.height_m))
        self._frames[radar_position] = frame
        logger.debug("Built site frame for radar at %.4f, %.4f",
                     radar_position.lat_deg, radar_position.lon_deg)
        return frame

    @staticmethod
    def slant_to_enu(rho_m: float, theta_rad: float, elevation_rad: float = 0.0) -> np.ndarray:
        """Azimuth is measured from North, clockwise."""
        ground = rho_m * math.cos(elevation_rad)
        return np.array([
            ground * math.sin(theta_rad),
            ground * math.cos(theta_rad),
            rho_m * math.sin(elevation_rad),
        ])

    def enu_to_ecef(self, enu: np.ndarray, radar_position: Optional[RadarPosition] = None) -> np.ndarray:
        frame = self.frame_for(radar_position or self.radar_position)
        return frame.rotation.T @ enu + frame.origin

    def ecef_to_geodetic(self, ecef: np.ndarray) -> Tuple[float, float, float]:
        """ECEF metres to (lat rad, lon rad, height m) by fixed-point iteration on latitude."""
        x, y, z = (float(v) for v in ecef)
        p = math.hypot(x, y)

        if p < self.POLAR_AXIS_EPSILON_M:
            lat = math.copysign(math.pi / 2.0, z)
            return lat, 0.0, abs(z) - SEMI_MINOR_AXIS_M

        lat = math.atan2(z, p * (1.0 - ECCENTRICITY_SQ))
        for _ in range(self.MAX_ITERATIONS):
            nu = prime_vertical_radius(lat)
            refined = math.atan2(z + ECCENTRICITY_SQ * nu * math.sin(lat), p)
            converged = abs(refined - lat) <= self.TOLERANCE_RAD
            lat = refined
            if converged:
                break

        height = p / math.cos(lat) - prime_vertical_radius(lat)
        return lat, math.atan2(y, x), height

    def polar_to_geodetic(self, rho_m: float, theta_rad: float,
                          radar_position: Optional[RadarPosition] = None) -> Optional[Tuple[float, float]]:
        """
        Slant range (m) and azimuth (rad) to (latitude_deg, longitude_deg).
        Degenerate geometry yields None rather than an exception.
        """
        if not (math.isfinite(rho_m) and math.isfinite(theta_rad)):
            return None
        try:
            ecef = self.enu_to_ecef(self.slant_to_enu(rho_m, theta_rad), radar_position)
            lat, lon, _ = self.ecef_to_geodetic(ecef)
        except (ValueError, ZeroDivisionError, OverflowError) as e:
            logger.debug("Geodetic conversion failed for rho=%s theta=%s: %s", rho_m, theta_rad, e)
            return None

        lat_deg, lon_deg = math.degrees(lat), math.degrees(lon)
        if not (math.isfinite(lat_deg) and math.isfinite(lon_deg)):
            return None
        return lat_deg, lon_deg

    def polar_to_wgs84(self, rho_nm: float, theta_deg: float) -> Optional[Tuple[float, float]]:
        """Same as polar_to_geodetic, with the radar units of I048/040 (NM, degrees)."""
        return self.polar_to_geodetic(rho_nm * NM_TO_METERS, math.radians(theta_deg))
