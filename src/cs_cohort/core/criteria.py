"""
Clinical definitions for the cardiogenic shock (CS) cohort.

Codes are stored the way MIMIC-IV stores them: upper-case, no dots.
"""

# Documented CS: ICD-9 785.51, ICD-10 R57.0
CS_ICD_CODES = {"78551", "R570"}

# "cardiogenic" followed anywhere later in the note by "shock"
CS_NOTE_PATTERN = r"cardiogenic.*shock"

# Cardiac categories -> code prefixes per vocabulary
CARDIAC_CATEGORIES = {
    "has_ami":            {"icd9": ["410"], "icd10": ["I21"]},
    "has_hf":             {"icd9": ["428"], "icd10": ["I50"]},
    "has_cardiomyopathy": {"icd9": ["425"], "icd10": ["I42"]},
    "has_arrhythmia":     {"icd9": ["427"], "icd10": ["I49"]},
    "has_valvular":       {"icd9": ["424"], "icd10": ["I0", "I3"]},
}

# Etiology tie-break, first true flag wins
ETIOLOGY_PRIORITY = [
    ("has_ami", "AMI-CS"),
    ("has_hf", "HF-CS"),
    ("has_cardiomyopathy", "Cardiomyopathy-CS"),
    ("has_valvular", "Valvular-CS"),
    ("has_arrhythmia", "Arrhythmia-CS"),
]
NO_CARDIAC_DX = "No-Cardiac-Dx"
ETIOLOGY_LABELS = {label for _, label in ETIOLOGY_PRIORITY} | {NO_CARDIAC_DX}

# Assessment window after ICU admission
WINDOW_HOURS = 24

# Hypotension: systolic BP (220050 arterial, 220179 non-invasive)
SBP_ITEMIDS = [220050, 220179]
SBP_LOWER = 0
SBP_UPPER = 90

# Lactate (mmol/L), IABP-SHOCK II threshold
LACTATE_ITEMIDS = [50813]
LACTATE_THRESHOLD = 2.0

# Vasoactive agents -> minimum dose (None means any recorded rate qualifies)
VASOPRESSOR_AGENTS = {
    "norepinephrine": None,
    "epinephrine": None,
    "dopamine": 5.0,  # mcg/kg/min, strictly greater
    "vasopressin": None,
    "phenylephrine": None,
}

# Positive blood culture
CULTURE_SPECIMEN = "BLOOD"
CULTURE_UNSPECIFIED = "UNSPECIFIED"

# Inclusion thresholds
MIN_AGE = 18
MIN_LOS_HOURS = 8
MIN_CRITERIA = 2

# Landmark survival flags (hours from ICU admission)
LANDMARK_HOURS = [24, 48]
