import pandas as pd
from typing import Optional


class AsterixFilter:
    """
    Filters over the DataFrame built by AsterixExporter.
    Works with any mix of categories; filters return the input unchanged when
    the columns they need are missing.
    """
    LAT_MIN = 40.9
    LAT_MAX = 41.7
    LON_MIN = 1.5
    LON_MAX = 2.6

    @staticmethod
    def filter_by_geographic_bounds(df: pd.DataFrame,
                                    min_lat: float = LAT_MIN,
                                    max_lat: float = LAT_MAX,
                                    min_lon: float = LON_MIN,
                                    max_lon: float = LON_MAX) -> pd.DataFrame:
        """Rows whose position lies inside the box; rows without a position are dropped."""
        if not {'LAT', 'LON'}.issubset(df.columns):
            return df

        inside = df['LAT'].between(min_lat, max_lat) & df['LON'].between(min_lon, max_lon)
        return df[inside.fillna(False).astype(bool)].reset_index(drop=True)

    @staticmethod
    def _ground_mask(df: pd.DataFrame) -> pd.Series:
        """
        CAT021: ON_GROUND classification (GBS, surface vehicle ATP or FL <= 14)
        CAT048: STAT_code in [1, 3]
        """
        mask = pd.Series(False, index=df.index)
        if 'ON_GROUND' in df.columns:
            mask = mask | df['ON_GROUND'].fillna(False).astype(bool)
        if 'STAT_code' in df.columns:
            mask = mask | df['STAT_code'].isin([1, 3]).fillna(False).astype(bool)
        return mask

    @staticmethod
    def _airborne_mask(df: pd.DataFrame) -> pd.Series:
        mask = pd.Series(False, index=df.index)
        if 'ON_GROUND' in df.columns and 'CAT' in df.columns:
            mask = mask | ((df['CAT'] == 21).fillna(False) & ~df['ON_GROUND'].fillna(False).astype(bool))
        if 'STAT_code' in df.columns:
            mask = mask | df['STAT_code'].isin([0, 2]).fillna(False).astype(bool)
        return mask

    @staticmethod
    def filter_airborne(df: pd.DataFrame) -> pd.DataFrame:
        """Rows flagged airborne by STAT_code (CAT048) or ON_GROUND (CAT021)."""
        if 'STAT_code' not in df.columns and 'ON_GROUND' not in df.columns:
            return df
        return df[AsterixFilter._airborne_mask(df)].reset_index(drop=True)

    @staticmethod
    def filter_on_ground(df: pd.DataFrame) -> pd.DataFrame:
        """Rows flagged on the ground by either category's indicator."""
        if 'STAT_code' not in df.columns and 'ON_GROUND' not in df.columns:
            return df
        return df[AsterixFilter._ground_mask(df)].reset_index(drop=True)

    @staticmethod
    def filter_by_category(df: pd.DataFrame, category: int) -> pd.DataFrame:
        """Keep the rows of one ASTERIX category (21 or 48)"""
        if 'CAT' not in df.columns:
            return df
        return df[(df['CAT'] == category).fillna(False)].reset_index(drop=True)

    @staticmethod
    def filter_by_altitude(df: pd.DataFrame,
                           min_fl: Optional[float] = None,
                           max_fl: Optional[float] = None) -> pd.DataFrame:
        """Open-ended flight level window; a missing bound does not constrain."""
        if 'FL' not in df.columns:
            return df

        lower = -float('inf') if min_fl is None else min_fl
        upper = float('inf') if max_fl is None else max_fl
        keep = df['FL'].between(lower, upper)
        return df[keep.fillna(False).astype(bool)].reset_index(drop=True)
