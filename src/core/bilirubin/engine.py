"""
ThresholdEngine: bilirubin action thresholds from piecewise-linear reference curves.
Pure table lookup and interpolation, no state beyond the loaded tables.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, Optional, Tuple, Union

import numpy as np

from .exceptions import InvalidCategoryError, InvalidCurveError
from .models import (
    CurveTable,
    ReferenceCurve,
    RiskStatus,
    ThresholdResult,
    ThresholdStatus,
    TreatmentCategory,
)

logger = logging.getLogger(__name__)

TableKey = Tuple[TreatmentCategory, RiskStatus]


def round_half_up(value: float, places: int = 2) -> float:
    """Conventional decimal rounding (half away from zero)."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def interpolate(t: float, t1: float, b1: float, t2: float, b2: float) -> float:
    return b1 + (t - t1) * ((b2 - b1) / (t2 - t1))


def parse_category(category: Union[str, TreatmentCategory]) -> TreatmentCategory:
    if isinstance(category, TreatmentCategory):
        return category
    try:
        return TreatmentCategory(category)
    except ValueError:
        raise InvalidCategoryError(category) from None


def validate_curve(curve: ReferenceCurve) -> None:
    """Raise InvalidCurveError unless ages strictly increase and values never drop."""
    if len(curve.points) < 2:
        raise InvalidCurveError(
            f"{curve.gestational_age_weeks}-week curve needs at least two points"
        )
    points = np.asarray(curve.points, dtype=float)
    if np.any(np.diff(points[:, 0]) <= 0):
        raise InvalidCurveError(
            f"{curve.gestational_age_weeks}-week curve ages are not strictly increasing"
        )
    if np.any(np.diff(points[:, 1]) < 0):
        raise InvalidCurveError(
            f"{curve.gestational_age_weeks}-week curve thresholds decrease"
        )


def _fmt(value) -> str:
    return f"{value:g}" if isinstance(value, (int, float)) else str(value)


class ThresholdEngine:
    """
    Computes phototherapy / exchange transfusion thresholds.

    Lookup algorithm:
      1. Pick the table for (category, risk status)
      2. Pick the gestational-age curve (clamp upward at the table maximum)
      3. Reject postnatal ages before the curve's first point
      4. Interpolate inside the bracketing segment, extrapolate past the last
    """

    # Only phototherapy with risk factors lacks a 34-week curve that the chart
    # nevertheless covers; it shares the 35-week curve.
    SPECIAL_CASES: Dict[Tuple[TreatmentCategory, RiskStatus, int], int] = {
        (TreatmentCategory.PHOTOTHERAPY, RiskStatus.WITH_RISK, 34): 35,
    }

    def __init__(self, tables: Optional[Iterable[CurveTable]] = None):
        self._tables: Dict[TableKey, CurveTable] = {}
        self._loaded = False
        if tables is not None:
            self._load(tables)

    def initialize(self) -> None:
        """Load the AAP 2022 reference tables."""
        from .data.aap_2022 import AAP_2022_TABLES

        self._load(AAP_2022_TABLES)

    def _load(self, tables: Iterable[CurveTable]) -> None:
        loaded: Dict[TableKey, CurveTable] = {}
        for table in tables:
            for curve in table.curves.values():
                validate_curve(curve)
            if table.get(table.max_age_weeks) is None:
                raise InvalidCurveError(
                    f"{table.category.value}/{table.risk.value} has no curve "
                    f"at its maximum age {table.max_age_weeks}"
                )
            loaded[(table.category, table.risk)] = table
        self._tables = loaded
        self._loaded = True
        logger.info(
            "ThresholdEngine loaded %d tables with %d curves",
            len(loaded),
            sum(len(t.curves) for t in loaded.values()),
        )

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def table_for(
        self, category: Union[str, TreatmentCategory], risk_factors_present: bool
    ) -> CurveTable:
        if not self._loaded:
            self.initialize()
        key = (parse_category(category), RiskStatus.from_flag(risk_factors_present))
        return self._tables[key]

    def coverage(
        self, category: Union[str, TreatmentCategory], risk_factors_present: bool
    ) -> Tuple[int, int]:
        """Declared inclusive gestational age span for a table."""
        table = self.table_for(category, risk_factors_present)
        return table.min_age_weeks, table.max_age_weeks

    def curve_for(
        self,
        category: Union[str, TreatmentCategory],
        risk_factors_present: bool,
        gestational_age_weeks: int,
    ) -> Optional[ReferenceCurve]:
        """The curve used for this gestational age, or None when uncovered."""
        table = self.table_for(category, risk_factors_present)

        if gestational_age_weeks >= table.max_age_weeks:
            return table.get(table.max_age_weeks)

        curve = table.get(gestational_age_weeks)
        if curve is not None:
            return curve

        mapped = self.SPECIAL_CASES.get(
            (table.category, table.risk, gestational_age_weeks)
        )
        if mapped is not None:
            return table.get(mapped)
        return None

    # ------------------------------------------------------------------
    # Threshold computation
    # ------------------------------------------------------------------

    def compute_threshold(
        self,
        category: Union[str, TreatmentCategory],
        risk_factors_present: bool,
        gestational_age_weeks: int,
        postnatal_age_hours: float,
        bilirubin_level: Optional[float] = None,
    ) -> ThresholdResult:
        category = parse_category(category)
        curve = self.curve_for(category, risk_factors_present, gestational_age_weeks)

        if curve is None:
            min_age, max_age = self.coverage(category, risk_factors_present)
            logger.debug(
                "No %s curve for %s weeks (span %d-%d)",
                category.value, gestational_age_weeks, min_age, max_age,
            )
            return ThresholdResult(
                threshold=None,
                needs_action=False,
                message=(
                    f"Gestational age {_fmt(gestational_age_weeks)} weeks is outside "
                    f"this chart's range ({min_age}-{max_age} weeks); "
                    "use the appropriate specialized chart."
                ),
                status=ThresholdStatus.OUT_OF_COVERAGE,
            )

        if postnatal_age_hours < curve.min_age_hours:
            return ThresholdResult(
                threshold=None,
                needs_action=False,
                message=(
                    f"Infant ({_fmt(postnatal_age_hours)} h) is younger than the "
                    f"minimum age on this chart ({_fmt(curve.min_age_hours)} h) "
                    "and needs individualized attention."
                ),
                status=ThresholdStatus.TOO_YOUNG,
            )

        threshold = round_half_up(self._threshold_at(curve, postnatal_age_hours))
        needs_action = bilirubin_level is not None and bilirubin_level >= threshold

        if bilirubin_level is None:
            verdict = "no bilirubin value supplied."
        elif needs_action:
            verdict = "action required."
        else:
            verdict = "no action required."

        message = (
            f"Infant of {_fmt(gestational_age_weeks)} weeks at {_fmt(postnatal_age_hours)} h:\n"
            f"    Action threshold: {_fmt(threshold)} mg/dL\n"
            f"    Patient bilirubin: "
            f"{_fmt(bilirubin_level) if bilirubin_level is not None else '-'} mg/dL\n"
            f"    Result: {verdict}"
        )
        return ThresholdResult(
            threshold=threshold, needs_action=needs_action, message=message
        )

    @staticmethod
    def _threshold_at(curve: ReferenceCurve, age_hours: float) -> float:
        # First matching segment wins; neighbours agree at shared knots.
        for (t1, b1), (t2, b2) in curve.segments():
            if t1 <= age_hours <= t2:
                return interpolate(age_hours, t1, b1, t2, b2)

        # Past the last point: extend the final segment.
        (t1, b1), (t2, b2) = curve.points[-2], curve.points[-1]
        return interpolate(age_hours, t1, b1, t2, b2)


_default_engine: Optional[ThresholdEngine] = None


def get_engine() -> ThresholdEngine:
    """Process-wide engine with the AAP tables loaded once."""
    global _default_engine
    if _default_engine is None:
        _default_engine = ThresholdEngine()
        _default_engine.initialize()
    return _default_engine


def compute_threshold(
    category: Union[str, TreatmentCategory],
    risk_factors_present: bool,
    gestational_age_weeks: int,
    postnatal_age_hours: float,
    bilirubin_level: Optional[float] = None,
) -> ThresholdResult:
    return get_engine().compute_threshold(
        category,
        risk_factors_present,
        gestational_age_weeks,
        postnatal_age_hours,
        bilirubin_level,
    )
