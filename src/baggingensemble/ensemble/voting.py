"""
Voting Rules for Bagging Ensembles

This module implements the rules that turn the members' individual
predictions for one example into the ensemble's label and score.

Scores are accumulated per distinct label in ascending label order, so the
winner of a tie is always the smallest label, whatever order the members
were visited in.
"""

import math

import numpy as np
from abc import ABC, abstractmethod
from typing import Dict, Optional, Sequence, Tuple


def tally(
    labels: Sequence[float],
    weights: Optional[Sequence[float]] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Sum weights per distinct label.

    Parameters:
        labels: Predicted label of each member (m,)
        weights: Score each member contributes (m,); None counts one vote each

    Returns:
        distinct: Distinct labels, ascending (k,)
        scores: Summed weight per distinct label (k,). Weighted sums are
            exactly rounded, so they do not depend on member order.
    """
    labels = np.asarray(labels, dtype=float)
    if labels.ndim != 1 or labels.size == 0:
        raise ValueError(f"labels must be a non-empty 1D sequence, got shape {labels.shape}")

    if weights is not None:
        weights = np.asarray(weights, dtype=float)
        if weights.shape != labels.shape:
            raise ValueError(
                f"weights shape {weights.shape} must match labels shape {labels.shape}"
            )

    distinct, inverse = np.unique(labels, return_inverse=True)
    inverse = inverse.ravel()
    if weights is None:
        return distinct, np.bincount(inverse, minlength=distinct.size).astype(float)

    # Exactly rounded, so member order cannot change a tie
    scores = np.array([math.fsum(weights[inverse == k]) for k in range(distinct.size)])
    return distinct, scores


class BaseVoter(ABC):
    """
    Base class for voting rules.

    A voter takes the predictions of m members for one example and returns
    the winning label together with the score behind it.
    """

    @abstractmethod
    def scores(
        self,
        labels: Sequence[float],
        confidences: Optional[Sequence[float]] = None
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Accumulate member predictions.

        Parameters:
            labels: Predicted label of each member (m,)
            confidences: Confidence of each member (m,), if the rule uses it

        Returns:
            distinct: Distinct labels, ascending (k,)
            scores: Accumulated score per label (k,)
        """
        pass

    @property
    def needs_confidence(self) -> bool:
        """Whether ``vote`` requires member confidences."""
        return False

    def vote(
        self,
        labels: Sequence[float],
        confidences: Optional[Sequence[float]] = None
    ) -> Tuple[float, float]:
        """
        Pick the label with the highest score; ties go to the smallest label.

        Returns:
            label: Winning label
            score: Accumulated score of the winning label
        """
        distinct, scores = self.scores(labels, confidences)
        # argmax returns the first maximum, i.e. the smallest tied label
        best = int(np.argmax(scores))
        return float(distinct[best]), float(scores[best])

    def as_dict(
        self,
        labels: Sequence[float],
        confidences: Optional[Sequence[float]] = None
    ) -> Dict[float, float]:
        """Accumulated scores as a {label: score} mapping."""
        distinct, scores = self.scores(labels, confidences)
        return {float(k): float(v) for k, v in zip(distinct, scores)}


class MajorityVoter(BaseVoter):
    """
    One vote per member.

    score(label) = #members predicting label

    Example:
        >>> MajorityVoter().vote([1, 1, 0, 1, 0])
        (1.0, 3.0)
    """

    def scores(self, labels, confidences=None):
        """Count votes per label (confidences are ignored)."""
        return tally(labels)


class ConfidenceVoter(BaseVoter):
    """
    Confidence-weighted votes.

    score(label) = Σ confidence_u over members u predicting label

    The score is not normalised: it grows with the number of agreeing
    members as well as with their certainty.

    Example:
        >>> ConfidenceVoter().vote([1, 1, 0], [0.9, 0.1, 0.5])
        (1.0, 1.0)
    """

    @property
    def needs_confidence(self) -> bool:
        return True

    def scores(self, labels, confidences=None):
        """Sum confidences per label."""
        if confidences is None:
            raise ValueError("ConfidenceVoter requires member confidences")
        confidences = np.asarray(confidences, dtype=float)
        if np.any(confidences < 0):
            raise ValueError("confidences must be non-negative")
        return tally(labels, confidences)
