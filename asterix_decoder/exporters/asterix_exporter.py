import pandas as pd
from typing import Iterable, Union

from asterix_decoder.models.cat021_record import Cat021Record
from asterix_decoder.models.cat048_record import Cat048Record

FEET_TO_METERS = 0.3048


def _meters(feet):
    return None if feet is None else feet * FEET_TO_METERS


def _registers(record):
    return " ".join(record.mode_s_registers) if record.mode_s_registers else None


class AsterixExporter:
    """
    Unified tabular view of derived CAT021 and CAT048 records.
    One row per record, in the order given, with shared and category-specific columns.
    Absent values become <NA> / NaN.
    """

    ALL_COLUMNS = [
        # Common identification
        'CAT',  # ASTERIX Category (21 or 48)
        'SAC',  # System Area Code
        'SIC',  # System Identification Code
        'Time',  # Formatted time (HH:MM:SS.mmm)
        'Time_sec',  # Time in seconds from midnight

        # Position
        'LAT',  # Latitude (degrees)
        'LON',  # Longitude (degrees)
        'H(m)',  # Height in meters (QNH-corrected below transition altitude)
        'H(ft)',  # Height in feet (QNH-corrected below transition altitude)
        'QNH_corrected',  # Whether H was QNH-corrected
        'RHO',  # Slant range (NM) - CAT048 only
        'THETA',  # Azimuth angle (degrees) - CAT048 only
        'Mode3/A',  # Mode 3/A code (octal)

        # Aircraft identification
        'FL',  # Flight Level
        'TA',  # Target Address (24-bit ICAO address, hex)
        'TI',  # Target Identification (callsign)
        'BP',  # Reported barometric pressure setting (hPa)
        'QNH',  # QNH used for the correction (hPa) - CAT021 only
        'ModeS',  # BDS registers present

        # BDS 4,0 - Selected vertical intention
        'MCP_ALT',  # MCP/FCU selected altitude (ft)
        'FMS_ALT',  # FMS selected altitude (ft)

        # BDS 5,0 - Track and Turn Report
        'RA',  # Roll Angle (deg)
        'TTA',  # True Track Angle (deg)
        'GS(kt)',  # Ground speed (I048/200 or I021/160)
        'GS_BDS(kt)',  # Ground Speed from BDS 5,0 (aircraft)
        'TAR',  # Track Angle Rate (deg/s)
        'TAS',  # True Airspeed (kt)

        # BDS 6,0 - Heading and Speed Report
        'HDG',  # Heading / track angle (deg) - surveillance-measured
        'MG_HDG',  # Magnetic Heading (deg) - aircraft-reported
        'IAS',  # Indicated Airspeed (kt)
        'MACH',  # Mach Number
        'BAR',  # Barometric Altitude Rate (ft/min)
        'IVV',  # Inertial Vertical Velocity (ft/min)

        # Track/Status
        'TN',  # Track Number
        'TST',  # Test Target
        'TYP',  # Detection type - CAT048 only
        'SIM',  # Simulated target indicator (0/1)
        'H_3D(ft)',  # Height measured by 3D radar - CAT048 only
        'GH(ft)',  # Geometric height - CAT021 only
        'BVR',  # Barometric vertical rate (ft/min) - CAT021 only
        'EC',  # Emitter category - CAT021 only

        # CAT021-specific fields
        'ATP',  # Address Type
        'GBS',  # Ground Bit Set
        'ON_GROUND',  # Ground/airborne classification

        'STAT_code',  # Flight status code - I048/230
        'STAT',  # Flight status description - I048/230
    ]

    CAT048_GETTERS = {
        'SAC': lambda r: r.sac,
        'SIC': lambda r: r.sic,
        'Time': lambda r: r.time,
        'Time_sec': lambda r: r.time_of_day_s,
        'LAT': lambda r: r.latitude,
        'LON': lambda r: r.longitude,
        'H(m)': lambda r: _meters(r.corrected_altitude_ft),
        'H(ft)': lambda r: r.corrected_altitude_ft,
        'QNH_corrected': lambda r: r.qnh_corrected,
        'RHO': lambda r: r.rho_nm,
        'THETA': lambda r: r.theta_deg,
        'Mode3/A': lambda r: r.mode_3a,
        'FL': lambda r: r.flight_level,
        'TA': lambda r: r.aircraft_address,
        'TI': lambda r: r.aircraft_identification,
        'BP': lambda r: r.barometric_pressure_hpa,
        'ModeS': _registers,
        'MCP_ALT': lambda r: r.mcp_fcu_selected_altitude_ft,
        'FMS_ALT': lambda r: r.fms_selected_altitude_ft,
        'RA': lambda r: r.roll_angle_deg,
        'TTA': lambda r: r.true_track_angle_deg,
        'GS(kt)': lambda r: r.ground_speed_kt,
        'GS_BDS(kt)': lambda r: r.bds_ground_speed_kt,
        'TAR': lambda r: r.track_angle_rate_deg_s,
        'TAS': lambda r: r.true_airspeed_kt,
        'HDG': lambda r: r.heading_deg,
        'MG_HDG': lambda r: r.magnetic_heading_deg,
        'IAS': lambda r: r.indicated_airspeed_kt,
        'MACH': lambda r: r.mach,
        'BAR': lambda r: r.barometric_altitude_rate_ft_min,
        'IVV': lambda r: r.inertial_vertical_velocity_ft_min,
        'TN': lambda r: r.track_number,
        'TYP': lambda r: r.typ,
        'SIM': lambda r: r.sim,
        'H_3D(ft)': lambda r: r.height_3d_ft,
        'STAT_code': lambda r: r.flight_status,
        'STAT': lambda r: r.flight_status_description,
    }

    CAT021_GETTERS = {
        'SAC': lambda r: r.sac,
        'SIC': lambda r: r.sic,
        'Time': lambda r: r.time,
        'Time_sec': lambda r: r.time_of_day_s,
        'LAT': lambda r: r.latitude,
        'LON': lambda r: r.longitude,
        'H(m)': lambda r: _meters(r.corrected_altitude_ft),
        'H(ft)': lambda r: r.corrected_altitude_ft,
        'QNH_corrected': lambda r: r.qnh_corrected,
        'Mode3/A': lambda r: r.mode_3a,
        'FL': lambda r: r.flight_level,
        'TA': lambda r: r.target_address,
        'TI': lambda r: r.target_identification,
        'BP': lambda r: r.barometric_pressure_hpa,
        'QNH': lambda r: r.effective_qnh_hpa,
        'ModeS': _registers,
        'RA': lambda r: r.roll_angle_deg,
        'TTA': lambda r: r.true_track_angle_deg,
        'GS(kt)': lambda r: r.ground_speed_kt,
        'GS_BDS(kt)': lambda r: r.bds_ground_speed_kt,
        'TAS': lambda r: r.true_airspeed_kt,
        'HDG': lambda r: r.track_angle_deg,
        'MG_HDG': lambda r: r.magnetic_heading_deg,
        'IAS': lambda r: r.indicated_airspeed_kt,
        'MACH': lambda r: r.mach,
        'TN': lambda r: r.track_number,
        'TST': lambda r: r.tst,
        'SIM': lambda r: r.sim,
        'GH(ft)': lambda r: r.geometric_height_ft,
        'BVR': lambda r: r.barometric_vertical_rate_ft_min,
        'EC': lambda r: r.emitter_category,
        'ATP': lambda r: r.atp,
        'GBS': lambda r: r.gbs,
        'ON_GROUND': lambda r: r.on_ground,
    }

    INT_COLUMNS = [
        'CAT', 'SAC', 'SIC', 'TN', 'TST', 'TYP', 'SIM', 'EC', 'ATP', 'GBS', 'STAT_code',
        'MCP_ALT', 'FMS_ALT', 'IAS', 'BAR', 'IVV',
    ]
    FLOAT_COLUMNS = [
        'Time_sec', 'LAT', 'LON', 'H(m)', 'H(ft)', 'RHO', 'THETA', 'FL', 'BP', 'QNH',
        'RA', 'TTA', 'GS(kt)', 'GS_BDS(kt)', 'TAR', 'TAS', 'HDG', 'MG_HDG', 'MACH',
        'H_3D(ft)', 'GH(ft)', 'BVR',
    ]
    BOOL_COLUMNS = ['QNH_corrected', 'ON_GROUND']

    @staticmethod
    def records_to_dataframe(records: Iterable[Union[Cat048Record, Cat021Record]]) -> pd.DataFrame:
        # Build by columns to avoid expensive list-of-dicts
        columns = AsterixExporter.ALL_COLUMNS
        data_cols = {col: [] for col in columns}

        for record in records:
            if isinstance(record, Cat048Record):
                getters = AsterixExporter.CAT048_GETTERS
            elif isinstance(record, Cat021Record):
                getters = AsterixExporter.CAT021_GETTERS
            else:
                raise TypeError(f"Unsupported record type: {type(record).__name__}")

            for col in columns:
                if col == 'CAT':
                    data_cols[col].append(record.category)
                else:
                    getter = getters.get(col)
                    data_cols[col].append(getter(record) if getter else None)

        df = pd.DataFrame(data_cols, columns=columns)
        return AsterixExporter._apply_dtypes(df)

    @staticmethod
    def _apply_dtypes(df: pd.DataFrame) -> pd.DataFrame:
        """Nullable integers and booleans, float64 for measurements."""
        for col in AsterixExporter.INT_COLUMNS:
            df[col] = pd.to_numeric(df[col], errors='coerce').astype('Int64')
        for col in AsterixExporter.FLOAT_COLUMNS:
            df[col] = pd.to_numeric(df[col], errors='coerce').astype('float64')
        for col in AsterixExporter.BOOL_COLUMNS:
            df[col] = df[col].astype('boolean')
        return df
