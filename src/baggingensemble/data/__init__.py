"""
Bagging Ensemble Data Structures

This module contains the example/dataset types and synthetic data helpers.
"""

from .dataset import Example, DataSet, DataSetSplit
from .synthetic import make_classification_dataset, train_test_datasets

__all__ = [
    # Data structures
    "Example",
    "DataSet",
    "DataSetSplit",
    # Synthetic data generation
    "make_classification_dataset",
    "train_test_datasets",
]
