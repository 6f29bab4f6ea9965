"""
Positive blood culture flags.

has_positive_blood_culture: any time during the admission, descriptive only.
has_positive_bc_24h: within 24 h of an ICU admission of the same
hospitalization; this one feeds the primary-sepsis exclusion.
"""

from __future__ import annotations
import logging
import pandas as pd
from cs_cohort.core.criteria import CULTURE_SPECIMEN, CULTURE_UNSPECIFIED, WINDOW_HOURS
from cs_cohort.transforms.common import flag_from_keys, within_window

log = logging.getLogger(__name__)

CULTURE_COLS = ["has_positive_blood_culture", "has_positive_bc_24h"]

def positive_blood_cultures(micro: pd.DataFrame) -> pd.DataFrame:
    specimen = micro["spec_type_desc"].astype("string")
    organism = micro["org_name"].astype("string")
    mask = (
        specimen.str.contains(CULTURE_SPECIMEN, regex=False).fillna(False)
        & organism.notna()
        & organism.ne(CULTURE_UNSPECIFIED).fillna(False)
    )
    return micro.loc[mask.to_numpy(dtype=bool), ["hadm_id", "charttime"]]

def positive_culture_24h_admissions(
    micro: pd.DataFrame, icustays: pd.DataFrame, hours: int = WINDOW_HOURS
) -> pd.Series:
    """Admissions with a positive culture in [intime, intime + 24 h] of any of their ICU stays."""
    pos = positive_blood_cultures(micro)
    anchors = icustays[["hadm_id", "intime"]].dropna().drop_duplicates()
    m = pos.merge(anchors, on="hadm_id", how="inner")
    end = m["intime"] + pd.Timedelta(hours=hours)
    return m.loc[within_window(m["charttime"], m["intime"], end), "hadm_id"].drop_duplicates()

def resolve_cultures(stays: pd.DataFrame, micro: pd.DataFrame, icustays: pd.DataFrame) -> pd.DataFrame:
    out = stays.copy()
    out["has_positive_blood_culture"] = flag_from_keys(
        out, "hadm_id", positive_blood_cultures(micro)["hadm_id"]
    )
    out["has_positive_bc_24h"] = flag_from_keys(
        out, "hadm_id", positive_culture_24h_admissions(micro, icustays)
    )

    log.info(
        "Positive blood culture: any time=%d, within 24h=%d of %d stays",
        out["has_positive_blood_culture"].sum(), out["has_positive_bc_24h"].sum(), len(out),
    )
    return out
