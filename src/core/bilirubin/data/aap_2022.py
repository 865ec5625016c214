"""
AAP 2022 hyperbilirubinemia thresholds for infants >= 35 weeks gestation.
Source: Kemper AR et al. Clinical Practice Guideline Revision: Management of
Hyperbilirubinemia in the Newborn Infant 35 or More Weeks of Gestation.
Pediatrics. 2022;150(3):e2022058859.

Points are (postnatal age in hours, total serum bilirubin in mg/dL).
"""

from ..models import CurveTable, ReferenceCurve, RiskStatus, TreatmentCategory

_PHOTO = TreatmentCategory.PHOTOTHERAPY
_EXCHANGE = TreatmentCategory.EXCHANGE


def _table(category, risk, age_range, curves):
    min_age, max_age = age_range
    return CurveTable(
        category=category,
        risk=risk,
        curves={
            ga: ReferenceCurve(gestational_age_weeks=ga, points=tuple(points))
            for ga, points in curves.items()
        },
        min_age_weeks=min_age,
        max_age_weeks=max_age,
    )


PHOTOTHERAPY_NO_RISK = _table(_PHOTO, RiskStatus.NO_RISK, (35, 40), {
    40: [(0, 9), (12, 11), (24, 13.3), (36, 15.3), (60, 18.5), (72, 19.8), (96, 21.7), (336, 21.8)],
    39: [(0, 8.4), (12, 10.5), (24, 12.8), (36, 14.8), (60, 18.2), (72, 19.6), (96, 21.5), (336, 21.8)],
    38: [(0, 8), (12, 10), (24, 12.1), (48, 16), (60, 17.5), (96, 20.7), (336, 21.8)],
    37: [(0, 7.5), (12, 9.6), (24, 11.8), (48, 15.4), (60, 16.9), (96, 20), (336, 21.1)],
    36: [(0, 6.9), (12, 9), (24, 11), (48, 14.6), (60, 16.2), (72, 17.5), (96, 19.4), (336, 20.4)],
    35: [(0, 6.4), (12, 8.5), (36, 12.4), (48, 14.2), (60, 15.6), (72, 16.9), (96, 18.6), (336, 19.7)],
})

PHOTOTHERAPY_WITH_RISK = _table(_PHOTO, RiskStatus.WITH_RISK, (35, 38), {
    38: [(0, 6.3), (24, 10.5), (72, 16.5), (96, 18.3), (336, 18.3)],
    37: [(0, 5.9), (12, 8), (24, 10), (48, 13.6), (60, 14.9), (72, 16.1), (96, 17.9), (336, 18.3)],
    36: [(0, 5.4), (24, 9.4), (60, 14.2), (96, 17), (336, 18.3)],
    35: [(0, 4.9), (24, 8.9), (60, 13.5), (72, 14.6), (96, 16.2), (336, 17.4)],
})

EXCHANGE_NO_RISK = _table(_EXCHANGE, RiskStatus.NO_RISK, (35, 38), {
    38: [(24, 21.4), (48, 24), (72, 25.9), (96, 27), (336, 27)],
    37: [(24, 20.3), (48, 23.1), (72, 25.3), (96, 26.5), (336, 27)],
    36: [(24, 19), (48, 21.9), (72, 24), (96, 25.5), (336, 27)],
    35: [(24, 18), (48, 20.6), (72, 22.8), (96, 24.5), (336, 26.3)],
})

EXCHANGE_WITH_RISK = _table(_EXCHANGE, RiskStatus.WITH_RISK, (35, 38), {
    38: [(24, 17.8), (48, 20.1), (72, 22.1), (96, 23.5), (336, 23.5)],
    37: [(24, 17.2), (48, 19.7), (72, 21.7), (96, 23.1), (336, 23.5)],
    36: [(24, 16.6), (48, 19), (72, 20.8), (96, 22.1), (336, 23.5)],
    35: [(24, 16), (48, 18.4), (72, 20.1), (96, 21), (336, 22.9)],
})

AAP_2022_TABLES = [
    PHOTOTHERAPY_NO_RISK,
    PHOTOTHERAPY_WITH_RISK,
    EXCHANGE_NO_RISK,
    EXCHANGE_WITH_RISK,
]
