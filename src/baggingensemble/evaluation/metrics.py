"""
Evaluation metrics for classifiers built on the Classifier capability.
"""

import numpy as np
from sklearn.metrics import accuracy_score

from ..data.dataset import DataSet
from ..models.base import Classifier


def accuracy(classifier: Classifier, dataset: DataSet) -> float:
    """
    Fraction of examples whose predicted label matches the true label.

    Works for the ensemble and for any single base classifier.

    Parameters:
        classifier: Trained classifier
        dataset: Labelled evaluation data

    Returns:
        accuracy: Value in [0, 1]

    Example:
        >>> ensemble.train(train_data)
        >>> accuracy(ensemble, test_data)
        0.91
    """
    if len(dataset) == 0:
        raise ValueError("Cannot evaluate on an empty DataSet")
    y_pred = np.array([classifier.classify(ex) for ex in dataset])
    return float(accuracy_score(dataset.y, y_pred))


def member_agreement(ensemble, dataset: DataSet) -> float:
    """
    Mean fraction of members that agree with the ensemble's label.

    1.0 means every member predicts the ensemble's label on every example;
    low values indicate a diverse (or noisy) ensemble.

    Parameters:
        ensemble: Trained BaggingClassifier
        dataset: Evaluation data (labels are not used)

    Returns:
        agreement: Value in (0, 1]
    """
    if len(dataset) == 0:
        raise ValueError("Cannot evaluate on an empty DataSet")

    members = ensemble.classifiers
    per_example = []
    for ex in dataset:
        label = ensemble.classify(ex)
        votes = np.array([c.classify(ex) for c in members])
        per_example.append(np.mean(votes == label))
    return float(np.mean(per_example))
