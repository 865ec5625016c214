"""
RecommendationClassifier: maps a bilirubin value and its two thresholds to a
clinical action tier. The rules form a strict priority chain; the first match wins.
"""

import logging
from typing import Any, Dict, Optional

from .engine import round_half_up
from .models import (
    ClassificationState,
    Recommendation,
    RecommendationTier,
    Severity,
)

logger = logging.getLogger(__name__)

DEFAULT_BILIRUBIN = 8.0
GUIDELINE_MIN_AGE_HOURS = 24
ESCALATION_OFFSET = 2.0

_EXCHANGE_TITLE = "Recommendation: immediate exchange transfusion"
_INTENSIVE_TITLE = "Recommendation: intensive phototherapy"


class RecommendationClassifier:
    """Derives a recommendation tier from a ClassificationState."""

    def __init__(self, config: Dict[str, Any] = None):
        self.config = config or {}
        self.default_bilirubin = self.config.get("default_bilirubin", DEFAULT_BILIRUBIN)
        self.min_age_hours = self.config.get("guideline_min_age_hours", GUIDELINE_MIN_AGE_HOURS)
        self.escalation_offset = self.config.get("escalation_offset", ESCALATION_OFFSET)

    # ------------------------------------------------------------------
    # Pre-lookup rules
    # ------------------------------------------------------------------

    def precheck(self, state: ClassificationState) -> Optional[Recommendation]:
        """
        Apply the rules that need no threshold lookup.

        Returns the recommendation for kernicterus or too-young infants, None
        otherwise. Missing age data is reported via `has_required_data`.
        """
        if state.kernicterus_signs_present:
            return Recommendation(
                tier=RecommendationTier.EMERGENCY_OVERRIDE,
                severity=Severity.HIGH,
                title=_EXCHANGE_TITLE,
                actions=[
                    "Signs of neurotoxicity (kernicterus) are a medical emergency.",
                    "Urgent NICU consultation; start treatment regardless of the bilirubin level.",
                ],
            )
        if not self.has_required_data(state):
            return None
        if state.postnatal_age_hours < self.min_age_hours:
            return Recommendation(
                tier=RecommendationTier.TOO_YOUNG,
                severity=Severity.MEDIUM,
                title="Note",
                detail=(
                    f"This guideline does not apply to infants younger than "
                    f"{self.min_age_hours:g} hours."
                ),
            )
        return None

    @staticmethod
    def has_required_data(state: ClassificationState) -> bool:
        return (
            state.postnatal_age_hours is not None
            and state.gestational_age_weeks is not None
        )

    def bilirubin_for(self, state: ClassificationState) -> float:
        if state.total_bilirubin is None:
            return self.default_bilirubin
        return state.total_bilirubin

    def escalation_threshold(self, exchange_threshold: float) -> float:
        return round_half_up(exchange_threshold - self.escalation_offset)

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify(self, state: ClassificationState) -> Optional[Recommendation]:
        """Return the active recommendation, or None when age data is missing."""
        early = self.precheck(state)
        if early is not None or not self.has_required_data(state):
            return early

        photo, exchange = state.phototherapy, state.exchange
        if photo is None or exchange is None or not (photo.is_available and exchange.is_available):
            # Phototherapy's message wins whenever it has one.
            message = next(
                (r.message for r in (photo, exchange) if r is not None and r.message), ""
            )
            return Recommendation(
                tier=RecommendationTier.OUT_OF_GUIDELINE_RANGE,
                severity=Severity.MEDIUM,
                title="Note",
                detail=message,
            )

        return self.classify_thresholds(
            bilirubin=self.bilirubin_for(state),
            phototherapy_threshold=photo.threshold,
            exchange_threshold=exchange.threshold,
            postnatal_age_hours=state.postnatal_age_hours,
        )

    def classify_thresholds(
        self,
        bilirubin: float,
        phototherapy_threshold: float,
        exchange_threshold: float,
        postnatal_age_hours: float,
    ) -> Recommendation:
        """Band the bilirubin value against resolved thresholds."""
        escalation = self.escalation_threshold(exchange_threshold)
        # Drop binary float noise only, so 15.3 - 14.8 lands on 0.5.
        difference = round(phototherapy_threshold - bilirubin, 9)

        logger.debug(
            "TSB %s vs photo=%s escalation=%s exchange=%s (difference %s)",
            bilirubin, phototherapy_threshold, escalation, exchange_threshold, difference,
        )

        if bilirubin >= exchange_threshold:
            return Recommendation(
                tier=RecommendationTier.EXCHANGE_NOW,
                severity=Severity.HIGH,
                title=_EXCHANGE_TITLE,
                actions=[
                    "Urgent NICU consultation",
                    "Start intensive phototherapy and hydration",
                    "Prepare for exchange transfusion",
                ],
                difference=difference,
            )
        if bilirubin >= escalation:
            return Recommendation(
                tier=RecommendationTier.INTENSIVE_ESCALATED,
                severity=Severity.MEDIUM,
                title=_INTENSIVE_TITLE,
                actions=[
                    "Start intensive phototherapy and hydration",
                    "Check bilirubin every 8 hours",
                    "Consider transfer to an appropriate centre if the response is inadequate",
                ],
                difference=difference,
            )
        if bilirubin >= phototherapy_threshold:
            return self._intensive(difference)
        if difference <= 0.5:
            return self._intensive(difference)
        if difference <= 2:
            return Recommendation(
                tier=RecommendationTier.INTENSIVE_DOUBLE,
                severity=Severity.LOW,
                title="Recommendation: double phototherapy",
                actions=["Check bilirubin every 12 hours"],
                difference=difference,
            )
        if difference <= 3:
            return Recommendation(
                tier=RecommendationTier.INTENSIVE_SINGLE,
                severity=Severity.LOW,
                title="Recommendation: single phototherapy",
                actions=["Check bilirubin every 12 hours"],
                difference=difference,
            )

        return Recommendation(
            tier=RecommendationTier.FOLLOW_UP,
            severity=Severity.NONE,
            title=f"No immediate action needed (difference: {difference:.1f})",
            detail=self.follow_up_advice(difference, postnatal_age_hours),
            difference=difference,
        )

    @staticmethod
    def _intensive(difference: float) -> Recommendation:
        return Recommendation(
            tier=RecommendationTier.INTENSIVE,
            severity=Severity.LOW,
            title=_INTENSIVE_TITLE,
            actions=["Check bilirubin every 8 hours"],
            difference=difference,
        )

    @staticmethod
    def follow_up_advice(difference: float, postnatal_age_hours: float) -> str:
        """Recheck interval for bilirubin well below the phototherapy threshold."""
        if difference < 3.5:
            return "Recommendation: TSB or TcB in 4 to 24 hours."
        if difference < 5.5:
            return "Recommendation: TSB or TcB in 1 to 2 days."
        if difference < 7.0:
            advice = "follow up within 2 days" if postnatal_age_hours < 72 else "clinical judgment"
        else:
            advice = "follow up within 3 days" if postnatal_age_hours < 72 else "clinical judgment"
        return f"Recommendation: {advice}."


def classify(state: ClassificationState) -> Optional[Recommendation]:
    return RecommendationClassifier().classify(state)
