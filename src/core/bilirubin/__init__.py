"""Neonatal hyperbilirubinemia thresholds and treatment recommendations"""

from .calculator import evaluate, threshold_for
from .classifier import RecommendationClassifier, classify
from .engine import ThresholdEngine, compute_threshold, get_engine
from .exceptions import BilirubinError, InvalidCategoryError, InvalidCurveError
from .models import (
    ClassificationState,
    Evaluation,
    EvaluationInput,
    Recommendation,
    RecommendationTier,
    ResultCards,
    Severity,
    ThresholdResult,
    ThresholdStatus,
    TreatmentCategory,
)

__all__ = [
    "BilirubinError",
    "ClassificationState",
    "Evaluation",
    "EvaluationInput",
    "InvalidCategoryError",
    "InvalidCurveError",
    "Recommendation",
    "RecommendationClassifier",
    "RecommendationTier",
    "ResultCards",
    "Severity",
    "ThresholdEngine",
    "ThresholdResult",
    "ThresholdStatus",
    "TreatmentCategory",
    "classify",
    "compute_threshold",
    "evaluate",
    "get_engine",
    "threshold_for",
]
