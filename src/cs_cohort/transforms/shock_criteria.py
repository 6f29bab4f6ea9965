"""
Hemodynamic shock criteria within [ICU intime, ICU intime + 24 h].

Each criterion is collapsed to one boolean per stay before the three are
summed, so several qualifying rows of one criterion still count once.
"""

from __future__ import annotations
import logging
import pandas as pd
from cs_cohort.core.criteria import (
    SBP_ITEMIDS, SBP_LOWER, SBP_UPPER,
    LACTATE_ITEMIDS, LACTATE_THRESHOLD,
    VASOPRESSOR_AGENTS, WINDOW_HOURS,
)
from cs_cohort.transforms.common import flag_from_keys, within_window

log = logging.getLogger(__name__)

CRITERIA_COLS = ["has_hypotension_24h", "has_vasopressor_24h", "has_lactate_24h"]

def assessment_windows(stays: pd.DataFrame, hours: int = WINDOW_HOURS) -> pd.DataFrame:
    w = stays[["stay_id", "hadm_id", "icu_intime"]].copy()
    w["window_end"] = w["icu_intime"] + pd.Timedelta(hours=hours)
    return w

def hypotension_stays(windows: pd.DataFrame, chartevents: pd.DataFrame) -> pd.Series:
    """Stays with systolic BP strictly between 0 and 90 mmHg in the window."""
    value = pd.to_numeric(chartevents["valuenum"], errors="coerce")
    sbp = chartevents.loc[
        chartevents["itemid"].isin(SBP_ITEMIDS) & (value > SBP_LOWER) & (value < SBP_UPPER),
        ["stay_id", "charttime"],
    ]
    m = sbp.merge(windows[["stay_id", "icu_intime", "window_end"]], on="stay_id", how="inner")
    return m.loc[within_window(m["charttime"], m["icu_intime"], m["window_end"]), "stay_id"]

def vasopressor_rows(vasoactive: pd.DataFrame, agents: dict = VASOPRESSOR_AGENTS) -> pd.Series:
    """Rows where a listed agent is running; agents with a threshold need dose > threshold."""
    qualifies = pd.Series(False, index=vasoactive.index)
    for agent, threshold in agents.items():
        if agent not in vasoactive.columns:
            continue
        dose = pd.to_numeric(vasoactive[agent], errors="coerce")
        qualifies |= dose.notna() if threshold is None else (dose > threshold).fillna(False)
    return qualifies

def vasopressor_stays(windows: pd.DataFrame, vasoactive: pd.DataFrame) -> pd.Series:
    """Stays with a qualifying infusion started no later than the window end."""
    va = vasoactive.loc[vasopressor_rows(vasoactive), ["stay_id", "starttime"]]
    m = va.merge(windows[["stay_id", "window_end"]], on="stay_id", how="inner")
    started = (m["starttime"] <= m["window_end"]).fillna(False).astype(bool)
    return m.loc[started, "stay_id"]

def lactate_stays(windows: pd.DataFrame, labevents: pd.DataFrame) -> pd.Series:
    """Stays whose admission has lactate >= 2.0 mmol/L in the stay's window."""
    value = pd.to_numeric(labevents["valuenum"], errors="coerce")
    lac = labevents.loc[
        labevents["itemid"].isin(LACTATE_ITEMIDS) & (value >= LACTATE_THRESHOLD),
        ["hadm_id", "charttime"],
    ]
    m = lac.merge(windows, on="hadm_id", how="inner")
    return m.loc[within_window(m["charttime"], m["icu_intime"], m["window_end"]), "stay_id"]

def aggregate_shock_criteria(
    stays: pd.DataFrame,
    chartevents: pd.DataFrame,
    vasoactive: pd.DataFrame,
    labevents: pd.DataFrame,
) -> pd.DataFrame:
    windows = assessment_windows(stays)

    out = stays.copy()
    out["has_hypotension_24h"] = flag_from_keys(out, "stay_id", hypotension_stays(windows, chartevents))
    out["has_vasopressor_24h"] = flag_from_keys(out, "stay_id", vasopressor_stays(windows, vasoactive))
    out["has_lactate_24h"] = flag_from_keys(out, "stay_id", lactate_stays(windows, labevents))
    out["criteria_0to24h_count"] = out[CRITERIA_COLS].astype(int).sum(axis=1).astype(int)

    log.info(
        "Shock criteria 0-24h: hypotension=%d vasopressor=%d lactate=%d, >=2 criteria=%d",
        out["has_hypotension_24h"].sum(), out["has_vasopressor_24h"].sum(),
        out["has_lactate_24h"].sum(), (out["criteria_0to24h_count"] >= 2).sum(),
    )
    return out
