"""
Base classifier capability.

Every model the ensemble can hold (including the ensemble itself) exposes the
same three operations: train on a DataSet, classify one Example, and report a
non-negative confidence in that classification.
"""

from abc import ABC, abstractmethod

from ..data.dataset import DataSet, Example


class Classifier(ABC):
    """
    Base class for classifiers.

    The ensemble only calls these three methods, so any object providing them
    can be used as a member.
    """

    @abstractmethod
    def train(self, dataset: DataSet) -> 'Classifier':
        """
        Fit the classifier to a labelled DataSet.

        Parameters:
            dataset: Training examples

        Returns:
            self
        """
        pass

    @abstractmethod
    def classify(self, example: Example) -> float:
        """
        Predict the label of a single example.

        Returns:
            label: Predicted label
        """
        pass

    @abstractmethod
    def confidence(self, example: Example) -> float:
        """
        Self-reported certainty in ``classify(example)``.

        Returns:
            score: Non-negative real number, larger means more certain
        """
        pass
