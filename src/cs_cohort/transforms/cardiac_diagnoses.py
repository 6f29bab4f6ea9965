"""
Cardiac diagnosis categories and the hierarchical CS etiology label.
"""

from __future__ import annotations
import logging
import re
from typing import Dict, List
import pandas as pd
from cs_cohort.core.criteria import CARDIAC_CATEGORIES, ETIOLOGY_PRIORITY, NO_CARDIAC_DX
from cs_cohort.transforms.common import flag_from_keys
from cs_cohort.transforms.documentation import normalize_icd

log = logging.getLogger(__name__)

CATEGORY_FLAGS = list(CARDIAC_CATEGORIES)

def category_prefixes(category_codes: Dict[str, List[str]]) -> tuple:
    """All prefixes of a category across both vocabularies.

    ICD-9 prefixes are numeric and ICD-10 prefixes start with a letter, so a
    single prefix test covers both vocabularies.

    Example:
        >>> category_prefixes({"icd9": ["424"], "icd10": ["I0", "I3"]})
        ('424', 'I0', 'I3')
    """
    return tuple(p.upper() for codes in category_codes.values() for p in codes)

def etiology_for(flags: Dict[str, bool]) -> str:
    """Label of the first true category in priority order, else No-Cardiac-Dx."""
    for flag, label in ETIOLOGY_PRIORITY:
        if flags.get(flag):
            return label
    return NO_CARDIAC_DX

def assign_etiology(df: pd.DataFrame) -> pd.Series:
    """etiology_for applied to each row's category flags."""
    labels = [etiology_for(flags) for flags in df[CATEGORY_FLAGS].astype(bool).to_dict("records")]
    return pd.Series(labels, index=df.index, dtype="object")

def classify_cardiac_diagnoses(stays: pd.DataFrame, diagnoses: pd.DataFrame) -> pd.DataFrame:
    codes = normalize_icd(diagnoses["icd_code"]).fillna("")

    out = stays.copy()
    for flag, category_codes in CARDIAC_CATEGORIES.items():
        pattern = "|".join(re.escape(p) for p in category_prefixes(category_codes))
        matched = codes.str.match(pattern, na=False)
        out[flag] = flag_from_keys(out, "hadm_id", diagnoses.loc[matched.to_numpy(dtype=bool), "hadm_id"])

    out["has_cardiac_dx"] = out[CATEGORY_FLAGS].any(axis=1)
    out["cs_etiology"] = assign_etiology(out)

    log.info("Cardiac diagnosis present: %d of %d stays", out["has_cardiac_dx"].sum(), len(out))
    log.info("Etiology: %s", out["cs_etiology"].value_counts().to_dict())
    return out
