"""
Synthetic Data Generation for Bagging Ensembles
===============================================

Small labelled datasets with controlled properties for tests, demos and
benchmarks. Generation is delegated to scikit-learn; this module only wraps
the result in a ``DataSet``.
"""

import numpy as np
from typing import Optional
from sklearn.datasets import make_classification

from .dataset import DataSet


def make_classification_dataset(
    n_examples: int = 200,
    n_features: int = 6,
    n_informative: int = 4,
    n_classes: int = 2,
    class_sep: float = 1.0,
    flip_y: float = 0.05,
    random_state: Optional[int] = None
) -> DataSet:
    """
    Generate a labelled classification DataSet.

    Parameters
    ----------
    n_examples : int, default=200
        Number of examples
    n_features : int, default=6
        Number of features per example
    n_informative : int, default=4
        Number of informative features (the rest are noise)
    n_classes : int, default=2
        Number of distinct labels (0, 1, ..., n_classes - 1)
    class_sep : float, default=1.0
        Separation between classes; larger is easier
    flip_y : float, default=0.05
        Fraction of labels assigned at random (label noise)
    random_state : int or None, default=None
        Seed for generation and for the DataSet's resampling

    Returns
    -------
    data : DataSet
        Labels are floats in {0, ..., n_classes - 1}

    Examples
    --------
    >>> data = make_classification_dataset(n_examples=100, random_state=42)
    >>> train, test = data.split(0.5)
    """
    if n_examples < 1:
        raise ValueError(f"n_examples must be positive, got {n_examples}")
    if n_informative > n_features:
        raise ValueError(
            f"n_informative ({n_informative}) cannot exceed n_features ({n_features})"
        )

    X, y = make_classification(
        n_samples=n_examples,
        n_features=n_features,
        n_informative=n_informative,
        n_redundant=0,
        n_classes=n_classes,
        n_clusters_per_class=1,
        class_sep=class_sep,
        flip_y=flip_y,
        random_state=random_state
    )
    return DataSet(X, y.astype(float), random_state=random_state)


def train_test_datasets(
    data: DataSet,
    test_fraction: float = 0.25,
    random_state: Optional[int] = None
):
    """
    Partition a DataSet into disjoint train and test DataSets (no replacement).

    Unlike ``DataSet.split`` this is a plain holdout split, used to evaluate
    an ensemble on examples it never saw.

    Returns
    -------
    train, test : DataSet
    """
    if not 0 < test_fraction < 1:
        raise ValueError(f"test_fraction must be in (0, 1), got {test_fraction}")

    rng = np.random.default_rng(random_state)
    shuffled = rng.permutation(len(data))
    n_test = max(1, int(len(data) * test_fraction))

    return data.subset(shuffled[n_test:]), data.subset(shuffled[:n_test])
