"""
Bagging Ensemble Evaluation

This module contains metrics for comparing an ensemble with its members and
with single-model baselines.
"""

from .metrics import accuracy, member_agreement

__all__ = ["accuracy", "member_agreement"]
