import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from asterix_decoder.types.enums import BdsCodeOctet, BpsHoldScope, IA5Table

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATEFMT = "%H:%M:%S"


@dataclass(frozen=True)
class RadarPosition:
    """WGS-84 position of a radar antenna"""
    lat_deg: float
    lon_deg: float
    height_m: float


# Barcelona radar: 41° 18' 02.5284" N, 02° 06' 07.4095" E, 2.007m terrain + 25.25m antenna
BARCELONA_RADAR = RadarPosition(lat_deg=41.300702333, lon_deg=2.102058194, height_m=27.257)


@dataclass(frozen=True)
class DecoderSettings:
    """Knobs shared by the record decoders and the derived-value processor."""
    qnh_actual: Optional[float] = None  # hPa, None = not supplied by the caller
    transition_altitude_ft: float = 6000.0
    ia5_table: IA5Table = IA5Table.ICAO
    bds_code_octet: BdsCodeOctet = BdsCodeOctet.LEADING
    bps_hold_scope: BpsHoldScope = BpsHoldScope.GLOBAL
    cat021_identification_extensions: bool = False
    radar_position: RadarPosition = field(default=BARCELONA_RADAR)


DEFAULT_SETTINGS = DecoderSettings()


def configure_logging(level: Union[int, str] = logging.WARNING) -> None:
    """Console logging for command line use. Library code never calls this."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
    logging.getLogger("asterix_decoder").setLevel(level)
