"""
Bagging Ensemble Base Classifiers

This module contains the classifier capability, the model type selector and
the factory that builds scikit-learn backed members.
"""

from .base import Classifier
from .types import ModelType
from .estimators import EstimatorClassifier, build_estimator
from .factory import ClassifierConfig, ClassifierFactory, make_classifier

__all__ = [
    "Classifier",
    "ModelType",
    "EstimatorClassifier",
    "build_estimator",
    "ClassifierConfig",
    "ClassifierFactory",
    "make_classifier",
]
