from cs_cohort.models.tables import (
    Base,
    IcuStay,
    ChartEvent,
    VasoactiveAgent,
    Patient,
    Admission,
    DiagnosisIcd,
    LabEvent,
    MicrobiologyEvent,
    DischargeNote,
    CohortStay,
    SOURCE_TABLES,
)
