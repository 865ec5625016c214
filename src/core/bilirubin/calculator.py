"""
Calculator: runs the threshold engine and the classifier for one evaluation input.
"""

import logging
from typing import Optional

from ..config import config
from .classifier import RecommendationClassifier
from .engine import ThresholdEngine, get_engine
from .exceptions import InvalidCategoryError
from .models import (
    ClassificationState,
    Evaluation,
    EvaluationInput,
    ResultCards,
    ThresholdResult,
    TreatmentCategory,
)

logger = logging.getLogger(__name__)


def evaluate(
    evaluation_input: EvaluationInput,
    engine: Optional[ThresholdEngine] = None,
    classifier: Optional[RecommendationClassifier] = None,
) -> Evaluation:
    """
    Evaluate one snapshot of clinical inputs.

    Kernicterus, missing age data and infants under the guideline's minimum
    age are resolved before any threshold lookup takes place.
    """
    engine = engine or get_engine()
    classifier = classifier or RecommendationClassifier(config.calculator_config)

    state = ClassificationState(
        kernicterus_signs_present=evaluation_input.kernicterus_signs_present,
        postnatal_age_hours=evaluation_input.postnatal_age_hours,
        gestational_age_weeks=evaluation_input.gestational_age_weeks,
        total_bilirubin=evaluation_input.total_bilirubin,
    )

    early = classifier.precheck(state)
    if early is not None or not classifier.has_required_data(state):
        logger.debug(
            "Evaluation resolved before lookup: %s",
            early.tier.value if early else "insufficient data",
        )
        return Evaluation(input=evaluation_input, recommendation=early)

    bilirubin = classifier.bilirubin_for(state)
    photo = engine.compute_threshold(
        TreatmentCategory.PHOTOTHERAPY,
        evaluation_input.risk_factors_present,
        evaluation_input.gestational_age_weeks,
        evaluation_input.postnatal_age_hours,
        bilirubin,
    )
    exchange = engine.compute_threshold(
        TreatmentCategory.EXCHANGE,
        evaluation_input.risk_factors_present,
        evaluation_input.gestational_age_weeks,
        evaluation_input.postnatal_age_hours,
        bilirubin,
    )

    state = ClassificationState(
        kernicterus_signs_present=state.kernicterus_signs_present,
        postnatal_age_hours=state.postnatal_age_hours,
        gestational_age_weeks=state.gestational_age_weeks,
        total_bilirubin=state.total_bilirubin,
        phototherapy=photo,
        exchange=exchange,
    )
    recommendation = classifier.classify(state)

    cards = None
    if photo.is_available and exchange.is_available:
        cards = ResultCards(
            phototherapy=photo.threshold,
            escalation=classifier.escalation_threshold(exchange.threshold),
            exchange=exchange.threshold,
        )

    logger.debug(
        "GA %s wk, %s h, TSB %s -> %s",
        evaluation_input.gestational_age_weeks,
        evaluation_input.postnatal_age_hours,
        bilirubin,
        recommendation.tier.value,
    )
    return Evaluation(
        input=evaluation_input,
        recommendation=recommendation,
        cards=cards,
        phototherapy=photo,
        exchange=exchange,
    )


def threshold_for(
    evaluation_input: EvaluationInput,
    engine: Optional[ThresholdEngine] = None,
) -> ThresholdResult:
    """Single-category lookup for the input's treatment category."""
    engine = engine or get_engine()
    if evaluation_input.treatment_category is None:
        raise InvalidCategoryError(None)
    return engine.compute_threshold(
        evaluation_input.treatment_category,
        evaluation_input.risk_factors_present,
        evaluation_input.gestational_age_weeks,
        evaluation_input.postnatal_age_hours,
        evaluation_input.total_bilirubin,
    )
