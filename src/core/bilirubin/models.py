"""Data models for bilirubin threshold lookup and recommendations."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class TreatmentCategory(Enum):
    PHOTOTHERAPY = "phototherapy"
    EXCHANGE = "exchange"


class RiskStatus(Enum):
    NO_RISK = "noRisk"
    WITH_RISK = "withRisk"

    @classmethod
    def from_flag(cls, risk_factors_present: bool) -> "RiskStatus":
        return cls.WITH_RISK if risk_factors_present else cls.NO_RISK


class ThresholdStatus(Enum):
    OK = "ok"
    OUT_OF_COVERAGE = "out-of-coverage"
    TOO_YOUNG = "too-young"


class RecommendationTier(Enum):
    """Clinical action tiers, most severe first."""
    EMERGENCY_EXCHANGE = "emergency-exchange"
    EXCHANGE_NOW = "exchange-now"
    INTENSIVE_ESCALATED = "intensive-escalated"
    INTENSIVE = "intensive"
    INTENSIVE_DOUBLE = "intensive-double"
    INTENSIVE_SINGLE = "intensive-single"
    FOLLOW_UP = "follow-up"
    OUT_OF_GUIDELINE_RANGE = "out-of-guideline-range"
    TOO_YOUNG = "too-young"
    EMERGENCY_OVERRIDE = "emergency-override"


class Severity(Enum):
    HIGH = "high-risk"
    MEDIUM = "medium-risk"
    LOW = "low-risk"
    NONE = "no-risk"


CurvePoint = Tuple[float, float]  # (age in hours, bilirubin mg/dL)


@dataclass(frozen=True)
class ReferenceCurve:
    """Piecewise-linear threshold curve for one gestational age."""
    gestational_age_weeks: int
    points: Tuple[CurvePoint, ...]

    @property
    def min_age_hours(self) -> float:
        return self.points[0][0]

    @property
    def max_age_hours(self) -> float:
        return self.points[-1][0]

    def segments(self):
        """Yield consecutive ((t1, b1), (t2, b2)) pairs in age order."""
        for i in range(len(self.points) - 1):
            yield self.points[i], self.points[i + 1]


@dataclass(frozen=True)
class CurveTable:
    """All curves for one (treatment category, risk status) combination."""
    category: TreatmentCategory
    risk: RiskStatus
    curves: Dict[int, ReferenceCurve]
    min_age_weeks: int  # inclusive
    max_age_weeks: int  # inclusive; older infants use this curve

    def get(self, gestational_age_weeks: int) -> Optional[ReferenceCurve]:
        return self.curves.get(gestational_age_weeks)


@dataclass(frozen=True)
class ThresholdResult:
    """Outcome of a single threshold lookup."""
    threshold: Optional[float]
    needs_action: bool
    message: str
    status: ThresholdStatus = ThresholdStatus.OK

    @property
    def is_available(self) -> bool:
        return self.threshold is not None


@dataclass(frozen=True)
class EvaluationInput:
    """Snapshot of the user-facing fields, rebuilt on every recomputation."""
    gestational_age_weeks: Optional[int]
    postnatal_age_hours: Optional[float]
    risk_factors_present: bool = False
    kernicterus_signs_present: bool = False
    total_bilirubin: Optional[float] = None
    treatment_category: Optional[TreatmentCategory] = None


@dataclass(frozen=True)
class ClassificationState:
    """Everything the classifier needs to pick a tier."""
    kernicterus_signs_present: bool
    postnatal_age_hours: Optional[float]
    gestational_age_weeks: Optional[int]
    total_bilirubin: Optional[float]
    phototherapy: Optional[ThresholdResult] = None
    exchange: Optional[ThresholdResult] = None


@dataclass
class Recommendation:
    tier: RecommendationTier
    severity: Severity
    title: str
    actions: List[str] = field(default_factory=list)
    detail: str = ""
    difference: Optional[float] = None


@dataclass
class ResultCards:
    """The three thresholds shown next to a recommendation."""
    phototherapy: float
    escalation: float
    exchange: float


@dataclass
class Evaluation:
    input: EvaluationInput
    recommendation: Optional[Recommendation]
    cards: Optional[ResultCards] = None
    phototherapy: Optional[ThresholdResult] = None
    exchange: Optional[ThresholdResult] = None
