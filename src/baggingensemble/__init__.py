"""
baggingensemble: Bootstrap Aggregating Ensemble Classifier

Trains a configurable number of base classifiers on bootstrap samples of a
training set and combines their predictions by voting.

This package provides:
- A bagging ensemble with majority and confidence-weighted voting
- A model type selector and factory for scikit-learn backed base classifiers
  (decision tree, gradient descent, k-NN, perceptron, two-layer network)
- A DataSet container with bootstrap resampling
"""

__version__ = "0.1.0"

# Errors
from .exceptions import UntrainedModelError, InvalidConfigurationError

# Core data structures
from .data import Example, DataSet, DataSetSplit, make_classification_dataset

# Base classifiers
from .models import (
    Classifier,
    ModelType,
    EstimatorClassifier,
    ClassifierConfig,
    ClassifierFactory,
    make_classifier
)

# Ensemble
from .ensemble import MajorityVoter, ConfidenceVoter, BaggingClassifier

# Evaluation
from .evaluation import accuracy, member_agreement

__all__ = [
    # Errors
    "UntrainedModelError",
    "InvalidConfigurationError",

    # Data
    "Example",
    "DataSet",
    "DataSetSplit",
    "make_classification_dataset",

    # Models
    "Classifier",
    "ModelType",
    "EstimatorClassifier",
    "ClassifierConfig",
    "ClassifierFactory",
    "make_classifier",

    # Ensemble
    "MajorityVoter",
    "ConfidenceVoter",
    "BaggingClassifier",

    # Evaluation
    "accuracy",
    "member_agreement",
]
