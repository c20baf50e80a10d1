from typing import Dict, Optional, Tuple

from asterix_decoder.types.enums import BpsHoldScope


class QNHCorrector:
    """Apply QNH correction to altitude (ft) strictly below the transition altitude.

    corrected = altitude_ft + (qnh - 1013.25) * 30
    At or above the transition altitude the indicated altitude is returned unmodified.
    """
    TRANSITION_ALTITUDE_FT = 6000.0
    QNH_STD = 1013.25
    FT_PER_HPA = 30.0
    BPS_MIN = 800.0
    BPS_MAX = 1200.0

    def __init__(self, transition_altitude_ft: Optional[float] = None):
        self.transition_altitude_ft = (
            self.TRANSITION_ALTITUDE_FT if transition_altitude_ft is None else transition_altitude_ft
        )

    @classmethod
    def is_valid_setting(cls, bps_hpa: Optional[float]) -> bool:
        """True for a reported barometric setting inside [800, 1200] hPa."""
        return bps_hpa is not None and cls.BPS_MIN <= bps_hpa <= cls.BPS_MAX

    def needs_correction(self, altitude_ft: Optional[float]) -> bool:
        return altitude_ft is not None and altitude_ft < self.transition_altitude_ft

    def correct(self, altitude_ft: Optional[float], qnh_hpa: float) -> Tuple[Optional[float], bool]:
        """Return (altitude in ft, whether the QNH correction was applied)."""
        if altitude_ft is None:
            return None, False
        if not self.needs_correction(altitude_ft):
            return altitude_ft, False
        return altitude_ft + (qnh_hpa - self.QNH_STD) * self.FT_PER_HPA, True

    def effective_qnh(self, reported_bps: Optional[float] = None, qnh_actual: Optional[float] = None,
                      held_bps: Optional[float] = None) -> float:
        """
        Pick the QNH to correct with: a valid reported setting first, then the
        caller's actual QNH, then the last valid setting held, then standard.
        """
        if self.is_valid_setting(reported_bps):
            return reported_bps
        if qnh_actual is not None:
            return qnh_actual
        if self.is_valid_setting(held_bps):
            return held_bps
        return self.QNH_STD


class BarometricSettingTracker:
    """Last valid barometric pressure setting seen in CAT021 reports.

    GLOBAL keeps one value for the whole run; AIRCRAFT keeps one per target address.
    """

    def __init__(self, scope: BpsHoldScope = BpsHoldScope.GLOBAL):
        self.scope = scope
        self._last_global: Optional[float] = None
        self._last_by_address: Dict[str, float] = {}

    def update(self, target_address: Optional[str], bps_hpa: Optional[float]) -> None:
        if not QNHCorrector.is_valid_setting(bps_hpa):
            return
        if self.scope is BpsHoldScope.GLOBAL:
            self._last_global = bps_hpa
        elif target_address:
            self._last_by_address[target_address] = bps_hpa

    def last(self, target_address: Optional[str] = None) -> Optional[float]:
        if self.scope is BpsHoldScope.GLOBAL:
            return self._last_global
        if not target_address:
            return None
        return self._last_by_address.get(target_address)

    def reset(self) -> None:
        self._last_global = None
        self._last_by_address.clear()
