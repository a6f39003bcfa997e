"""
Bagging Ensemble Integration Methods

This module contains the voting rules and the bagging ensemble itself.
"""

from .voting import BaseVoter, MajorityVoter, ConfidenceVoter, tally
from .bagging import BaggingClassifier

__all__ = ["BaseVoter", "MajorityVoter", "ConfidenceVoter", "tally", "BaggingClassifier"]
