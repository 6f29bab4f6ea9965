"""
Helpers shared by the cohort stages: existence flags and hour windows.

Every derived flag is an existence test of a key against the qualifying
source rows, so keys without a matching row come out False and one-to-many
fan-out never inflates a flag.
"""

from __future__ import annotations
import numpy as np
import pandas as pd

def floor_hours(delta: pd.Series) -> pd.Series:
    """Whole hours of a timedelta series (floor), NA where either end is missing."""
    hours = np.floor(pd.to_timedelta(delta).dt.total_seconds() / 3600.0)
    return hours.astype("Int64")

def within_window(ts: pd.Series, start: pd.Series, end: pd.Series) -> pd.Series:
    """Closed interval [start, end]; missing timestamps are outside."""
    return ((ts >= start) & (ts <= end)).fillna(False).astype(bool)

def as_flag(s: pd.Series) -> pd.Series:
    """Collapse a possibly-NA boolean series to plain bool, NA -> False."""
    return s.eq(True).fillna(False).astype(bool)

def flag_from_keys(df: pd.DataFrame, on: str, keys) -> pd.Series:
    """True where df[on] appears among keys."""
    keys = pd.Series(keys).dropna().unique()
    return df[on].isin(keys)
