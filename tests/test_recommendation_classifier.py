"""Tests for the recommendation tier priority chain."""

import pytest

from src.core.bilirubin.classifier import RecommendationClassifier, classify
from src.core.bilirubin.models import (
    ClassificationState,
    RecommendationTier,
    Severity,
    ThresholdResult,
    ThresholdStatus,
)


def ok(threshold):
    return ThresholdResult(threshold=threshold, needs_action=False, message=f"threshold {threshold}")


def missing(message, status=ThresholdStatus.OUT_OF_COVERAGE):
    return ThresholdResult(threshold=None, needs_action=False, message=message, status=status)


def state(bilirubin=None, age=72, ga=38, kernicterus=False, photo=None, exchange=None):
    return ClassificationState(
        kernicterus_signs_present=kernicterus,
        postnatal_age_hours=age,
        gestational_age_weeks=ga,
        total_bilirubin=bilirubin,
        phototherapy=photo,
        exchange=exchange,
    )


def band(classifier, bilirubin, photo=15.3, exchange=24.0, age=72):
    return classifier.classify_thresholds(bilirubin, photo, exchange, age)


# ------------------------------------------------------------------
# Rules evaluated before thresholds
# ------------------------------------------------------------------

class TestPriorityRules:
    def test_kernicterus_overrides_too_young(self, classifier):
        rec = classifier.classify(state(age=0, kernicterus=True))
        assert rec.tier is RecommendationTier.EMERGENCY_OVERRIDE
        assert rec.severity is Severity.HIGH

    def test_kernicterus_overrides_missing_data(self, classifier):
        rec = classifier.classify(state(age=None, ga=None, kernicterus=True))
        assert rec.tier is RecommendationTier.EMERGENCY_OVERRIDE

    def test_kernicterus_overrides_low_bilirubin(self, classifier):
        rec = classifier.classify(state(bilirubin=2.0, kernicterus=True, photo=ok(18.57), exchange=ok(25.9)))
        assert rec.tier is RecommendationTier.EMERGENCY_OVERRIDE

    def test_missing_age_gives_nothing(self, classifier):
        assert classifier.classify(state(age=None)) is None

    def test_missing_gestational_age_gives_nothing(self, classifier):
        assert classifier.classify(state(ga=None)) is None

    def test_under_24_hours(self, classifier):
        rec = classifier.classify(state(age=23, photo=ok(12.0), exchange=ok(21.0)))
        assert rec.tier is RecommendationTier.TOO_YOUNG
        assert "24 hours" in rec.detail

    def test_24_hours_is_covered(self, classifier):
        rec = classifier.classify(state(bilirubin=5.0, age=24, photo=ok(12.1), exchange=ok(21.4)))
        assert rec.tier is not RecommendationTier.TOO_YOUNG


# ------------------------------------------------------------------
# Missing thresholds
# ------------------------------------------------------------------

class TestOutOfGuidelineRange:
    def test_both_missing_prefers_phototherapy_message(self, classifier):
        rec = classifier.classify(state(photo=missing("photo span"), exchange=missing("exchange span")))
        assert rec.tier is RecommendationTier.OUT_OF_GUIDELINE_RANGE
        assert rec.detail == "photo span"

    def test_exchange_missing_shows_phototherapy_message(self, classifier):
        rec = classifier.classify(state(photo=ok(15.0), exchange=missing("exchange span")))
        assert rec.tier is RecommendationTier.OUT_OF_GUIDELINE_RANGE
        assert rec.detail == "threshold 15.0"

    def test_exchange_message_when_phototherapy_has_none(self, classifier):
        photo = ThresholdResult(threshold=15.0, needs_action=False, message="")
        rec = classifier.classify(state(photo=photo, exchange=missing("exchange span")))
        assert rec.detail == "exchange span"

    def test_phototherapy_missing(self, classifier):
        rec = classifier.classify(
            state(photo=missing("too young", ThresholdStatus.TOO_YOUNG), exchange=ok(24.0))
        )
        assert rec.tier is RecommendationTier.OUT_OF_GUIDELINE_RANGE
        assert rec.severity is Severity.MEDIUM
        assert rec.detail == "too young"

    def test_results_not_supplied(self, classifier):
        rec = classifier.classify(state(bilirubin=10.0))
        assert rec.tier is RecommendationTier.OUT_OF_GUIDELINE_RANGE


# ------------------------------------------------------------------
# Threshold bands
# ------------------------------------------------------------------

class TestBands:
    def test_escalation_threshold(self, classifier):
        assert classifier.escalation_threshold(24) == 22.0
        assert classifier.escalation_threshold(25.9) == 23.9

    def test_at_exchange_threshold(self, classifier):
        rec = band(classifier, 24.0)
        assert rec.tier is RecommendationTier.EXCHANGE_NOW
        assert rec.severity is Severity.HIGH
        assert "Prepare for exchange transfusion" in rec.actions

    def test_at_escalation_threshold(self, classifier):
        rec = band(classifier, 22.0)
        assert rec.tier is RecommendationTier.INTENSIVE_ESCALATED
        assert rec.severity is Severity.MEDIUM

    def test_just_below_exchange(self, classifier):
        assert band(classifier, 23.9).tier is RecommendationTier.INTENSIVE_ESCALATED

    def test_at_phototherapy_threshold(self, classifier):
        rec = band(classifier, 15.3)
        assert rec.tier is RecommendationTier.INTENSIVE
        assert rec.actions == ["Check bilirubin every 8 hours"]

    def test_between_phototherapy_and_escalation(self, classifier):
        assert band(classifier, 21.9).tier is RecommendationTier.INTENSIVE

    def test_half_unit_below_threshold(self, classifier):
        rec = band(classifier, 14.8)
        assert rec.tier is RecommendationTier.INTENSIVE
        assert rec.difference == 0.5

    def test_band_edges_with_three_decimals(self, classifier):
        assert band(classifier, 14.804).tier is RecommendationTier.INTENSIVE
        assert band(classifier, 14.796).tier is RecommendationTier.INTENSIVE_DOUBLE
        assert band(classifier, 13.296).tier is RecommendationTier.INTENSIVE_SINGLE
        assert band(classifier, 12.296).tier is RecommendationTier.FOLLOW_UP

    def test_difference_keeps_small_fractions(self, classifier):
        assert band(classifier, 14.796).difference == pytest.approx(0.504)

    def test_double_phototherapy(self, classifier):
        assert band(classifier, 14.7).tier is RecommendationTier.INTENSIVE_DOUBLE
        assert band(classifier, 13.3).tier is RecommendationTier.INTENSIVE_DOUBLE

    def test_single_phototherapy(self, classifier):
        assert band(classifier, 13.2).tier is RecommendationTier.INTENSIVE_SINGLE
        assert band(classifier, 12.3).tier is RecommendationTier.INTENSIVE_SINGLE

    def test_follow_up(self, classifier):
        rec = band(classifier, 12.0)
        assert rec.tier is RecommendationTier.FOLLOW_UP
        assert rec.severity is Severity.NONE
        assert "3.3" in rec.title
        assert "4 to 24 hours" in rec.detail

    def test_most_severe_band_wins(self, classifier):
        # Satisfies exchange, escalation and phototherapy at once
        assert band(classifier, 27.0).tier is RecommendationTier.EXCHANGE_NOW

    def test_default_bilirubin_used_when_absent(self, classifier):
        rec = classifier.classify(state(bilirubin=None, photo=ok(15.3), exchange=ok(24.0)))
        assert rec.tier is RecommendationTier.FOLLOW_UP
        assert rec.difference == 7.3

    def test_configured_default_bilirubin(self):
        c = RecommendationClassifier({"default_bilirubin": 15.0})
        rec = c.classify(state(bilirubin=None, photo=ok(15.3), exchange=ok(24.0)))
        assert rec.tier is RecommendationTier.INTENSIVE

    def test_module_level_classify(self):
        rec = classify(state(bilirubin=22.0, photo=ok(15.3), exchange=ok(24.0)))
        assert rec.tier is RecommendationTier.INTENSIVE_ESCALATED


# ------------------------------------------------------------------
# Follow-up intervals
# ------------------------------------------------------------------

class TestFollowUpAdvice:
    @pytest.mark.parametrize(
        "difference, age, expected",
        [
            (3.1, 48, "4 to 24 hours"),
            (3.5, 48, "1 to 2 days"),
            (5.4, 100, "1 to 2 days"),
            (5.5, 48, "within 2 days"),
            (6.9, 72, "clinical judgment"),
            (7.0, 71, "within 3 days"),
            (9.0, 72, "clinical judgment"),
        ],
    )
    def test_intervals(self, difference, age, expected):
        advice = RecommendationClassifier.follow_up_advice(difference, age)
        assert expected in advice

    def test_older_infant_far_below_threshold(self, classifier):
        rec = band(classifier, 9.0, age=80)
        assert rec.tier is RecommendationTier.FOLLOW_UP
        assert "clinical judgment" in rec.detail

    def test_young_infant_far_below_threshold(self, classifier):
        rec = band(classifier, 8.0, age=48)
        assert "within 3 days" in rec.detail
