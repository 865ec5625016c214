"""Test configuration and fixtures"""

import pytest

from src.core.bilirubin.classifier import RecommendationClassifier
from src.core.bilirubin.engine import ThresholdEngine


@pytest.fixture
def engine():
    """Threshold engine with the AAP 2022 tables loaded"""
    e = ThresholdEngine()
    e.initialize()
    return e


@pytest.fixture
def classifier():
    """Classifier with default rule constants"""
    return RecommendationClassifier()
