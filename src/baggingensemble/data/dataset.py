"""
DataSet: Container for labelled examples.

This module provides the data structures the ensemble consumes:
- Example: a single feature vector with an optional label
- DataSet: an ordered collection of examples backed by numpy arrays
- DataSetSplit: the (train, test) pair produced by bootstrap resampling
"""

import numpy as np
from typing import Iterable, Iterator, NamedTuple, Optional


class Example:
    """
    A single feature vector with an optional numeric label.

    Attributes:
        features (np.ndarray): Feature vector (d,)
        label (float or None): True label, None for unlabeled examples

    Example:
        >>> ex = Example([0.5, 1.2, -0.3], label=1)
        >>> ex.features.shape
        (3,)
    """

    __slots__ = ('features', 'label')

    def __init__(self, features, label: Optional[float] = None):
        features = np.asarray(features, dtype=float)
        if features.ndim != 1:
            raise ValueError(f"features must be 1D array, got shape {features.shape}")
        self.features = features
        self.label = None if label is None else float(label)

    def __repr__(self) -> str:
        return f"Example(n_features={self.features.shape[0]}, label={self.label})"


class DataSetSplit(NamedTuple):
    """Result of ``DataSet.split``: bootstrap sample and out-of-bag remainder."""
    train: 'DataSet'
    test: 'DataSet'


class DataSet:
    """
    Ordered collection of labelled examples.

    Attributes:
        X (np.ndarray): Feature matrix (n × d)
        y (np.ndarray): Labels (n,)
        n_examples (int): Number of examples
        n_features (int): Number of features per example

    Each call to ``split`` draws a new bootstrap sample from the dataset's own
    random generator, so a fixed ``random_state`` gives a reproducible
    sequence of samples.

    Example:
        >>> X = np.random.rand(100, 4)
        >>> y = np.random.randint(0, 2, 100).astype(float)
        >>> data = DataSet(X, y, random_state=0)
        >>> train, test = data.split(0.5)
        >>> len(train)
        50
    """

    def __init__(
        self,
        X: np.ndarray,
        y: np.ndarray,
        random_state: Optional[int] = None
    ):
        """
        Initialize DataSet.

        Parameters:
            X: Feature matrix (n × d)
            y: Labels (n,)
            random_state: Seed for the generator used by ``split``

        Raises:
            ValueError: If dimensions don't match
        """
        X = np.asarray(X, dtype=float)
        y = np.asarray(y, dtype=float)

        if X.ndim != 2:
            raise ValueError(f"X must be 2D array, got shape {X.shape}")
        if y.ndim != 1:
            raise ValueError(f"y must be 1D array, got shape {y.shape}")
        if X.shape[0] != len(y):
            raise ValueError(
                f"X rows ({X.shape[0]}) must match y length ({len(y)})"
            )

        self.X = X
        self.y = y
        self.random_state = random_state
        self._rng = np.random.default_rng(random_state)

        self.n_examples, self.n_features = X.shape

    @classmethod
    def from_examples(
        cls,
        examples: Iterable[Example],
        random_state: Optional[int] = None
    ) -> 'DataSet':
        """
        Build a DataSet from labelled Examples.

        Raises:
            ValueError: If the iterable is empty or an example has no label
        """
        examples = list(examples)
        if not examples:
            raise ValueError("Cannot build a DataSet from zero examples")
        if any(ex.label is None for ex in examples):
            raise ValueError("All examples must be labelled")

        X = np.vstack([ex.features for ex in examples])
        y = np.array([ex.label for ex in examples])
        return cls(X, y, random_state=random_state)

    @property
    def labels(self) -> np.ndarray:
        """Distinct labels in ascending order."""
        return np.unique(self.y)

    def split(self, proportion: float) -> DataSetSplit:
        """
        Draw a bootstrap sample of the data.

        The training part holds ``max(1, round(proportion * n))`` examples
        drawn with replacement; the test part holds every example that was
        not drawn (out-of-bag). Successive calls draw new samples.

        Parameters:
            proportion: Size of the sample relative to the dataset, in (0, 1]

        Returns:
            DataSetSplit(train, test)

        Raises:
            ValueError: If proportion is out of range or the dataset is empty
        """
        if not 0 < proportion <= 1:
            raise ValueError(f"proportion must be in (0, 1], got {proportion}")
        if self.n_examples == 0:
            raise ValueError("Cannot split an empty DataSet")

        n_draw = max(1, int(round(proportion * self.n_examples)))
        drawn = self._rng.integers(0, self.n_examples, size=n_draw)

        out_of_bag = np.ones(self.n_examples, dtype=bool)
        out_of_bag[drawn] = False

        train = self.subset(drawn)
        test = self.subset(np.flatnonzero(out_of_bag))
        return DataSetSplit(train, test)

    def subset(self, indices: np.ndarray) -> 'DataSet':
        """
        Rows selected by ``indices`` (repeats allowed) as a new DataSet.

        The new DataSet gets its own generator seeded from this one, so
        resampling a subset stays reproducible.
        """
        seed = int(self._rng.integers(0, 2**31 - 1))
        return DataSet(self.X[indices], self.y[indices], random_state=seed)

    def __len__(self) -> int:
        return self.n_examples

    def __getitem__(self, i: int) -> Example:
        return Example(self.X[i], self.y[i])

    def __iter__(self) -> Iterator[Example]:
        for i in range(self.n_examples):
            yield self[i]

    def __repr__(self) -> str:
        return (
            f"DataSet("
            f"n_examples={self.n_examples}, "
            f"n_features={self.n_features}, "
            f"n_labels={len(self.labels)})"
        )

    def summary(self) -> str:
        """Get detailed summary of the data."""
        lines = [
            "=" * 50,
            "DataSet Summary",
            "=" * 50,
            f"Number of examples:       {self.n_examples}",
            f"Number of features:       {self.n_features}",
            "",
            "Labels:",
        ]
        values, counts = np.unique(self.y, return_counts=True)
        for value, count in zip(values, counts):
            lines.append(
                f"  - {value:<22g}{count} ({100*count/self.n_examples:.1f}%)"
            )
        lines.append("=" * 50)
        return "\n".join(lines)
