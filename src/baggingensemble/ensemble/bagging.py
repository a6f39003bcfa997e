"""
Bagging (bootstrap aggregating) ensemble classifier.

Training draws m bootstrap samples from the training DataSet and fits one
fresh base classifier on each. Prediction asks every member and combines the
answers with a voting rule:

- majority vote: the label predicted by the most members
- confidence-weighted vote: the label with the largest summed member
  confidence

In both modes ties go to the smallest label.

Usage:
    >>> from baggingensemble import BaggingClassifier, ModelType
    >>> from baggingensemble.data import make_classification_dataset
    >>> data = make_classification_dataset(random_state=0)
    >>> ensemble = BaggingClassifier(ModelType.DECISION_TREE, m=10, sample_proportion=0.5)
    >>> ensemble.set_subclassifier_hyperparameters([3])
    >>> ensemble.train(data)
    >>> ensemble.classify(data[0]), ensemble.confidence(data[0])
"""

import numbers
import warnings
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
from joblib import Parallel, delayed

from ..data.dataset import DataSet, Example
from ..exceptions import InvalidConfigurationError, UntrainedModelError
from ..models.base import Classifier
from ..models.factory import ClassifierFactory
from ..models.types import ModelType
from .voting import BaseVoter, ConfidenceVoter, MajorityVoter


def _train_member(classifier: Classifier, sample: DataSet) -> Classifier:
    classifier.train(sample)
    return classifier


def _same_model_type(a, b) -> bool:
    try:
        return ModelType.coerce(a) == ModelType.coerce(b)
    except ValueError:
        return False


class BaggingClassifier(Classifier):
    """
    Ensemble of base classifiers trained on bootstrap samples.

    The ensemble is itself a Classifier, so it can be used anywhere a single
    base classifier can.

    Attributes:
        model_type: Kind of base classifier (ModelType, its value or its name)
        m: Number of members trained per ``train`` call
        sample_proportion: Bootstrap sample size relative to the training set
        use_confidence_voting: Use confidence-weighted instead of majority vote
        hyperparameters: Positional vector forwarded to the factory
        accumulate: If True, repeated ``train`` calls add m members each;
                    if False, each call replaces the previous members
        n_jobs: Parallel member training (None or 1 = sequential)
        random_state: Seed forwarded to every member's estimator
        factory: ClassifierFactory producing fresh members

    Example:
        >>> ensemble = BaggingClassifier(ModelType.KNN, m=5, sample_proportion=0.8)
        >>> ensemble.set_subclassifier_hyperparameters([3])
        >>> ensemble.set_use_confidence_voting(True)
        >>> ensemble.train(data)
        >>> len(ensemble)
        5
    """

    def __init__(
        self,
        model_type: Union[ModelType, int, str] = ModelType.DECISION_TREE,
        m: int = 10,
        sample_proportion: float = 0.5,
        hyperparameters: Optional[Sequence[float]] = None,
        use_confidence_voting: bool = False,
        accumulate: bool = True,
        n_jobs: Optional[int] = None,
        random_state: Optional[int] = None,
        verbose: bool = False
    ):
        """
        Initialize bagging ensemble.

        No validation happens here; an invalid configuration is reported by
        ``train`` as InvalidConfigurationError.

        Parameters:
            model_type: Kind of base classifier (default: decision tree)
            m: Ensemble size (default: 10)
            sample_proportion: Bootstrap sample size as a fraction of the
                               training set, in (0, 1] (default: 0.5)
            hyperparameters: Positional vector for the base classifiers,
                             see ``set_subclassifier_hyperparameters``
            use_confidence_voting: Weight votes by member confidence
            accumulate: Keep earlier members on repeated ``train`` calls
            n_jobs: Number of parallel jobs for member training
            random_state: Seed forwarded to the base classifiers
            verbose: Whether to print training progress
        """
        self.model_type = model_type
        self.m = m
        self.sample_proportion = sample_proportion
        self.use_confidence_voting = use_confidence_voting
        self.accumulate = accumulate
        self.n_jobs = n_jobs
        self.random_state = random_state
        self.verbose = verbose

        self.hyperparameters: Tuple[float, ...] = (
            tuple(hyperparameters) if hyperparameters is not None else ()
        )
        self.factory = ClassifierFactory(model_type, self.hyperparameters, random_state)

        self._majority_voter = MajorityVoter()
        self._confidence_voter = ConfidenceVoter()
        self._classifiers: List[Classifier] = []

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def set_model_type(self, model_type: Union[ModelType, int, str]):
        """
        Set the kind of base classifier.

        Hyperparameter vectors are specific to a model type, so switching to
        a different type discards the current vector (with a warning).
        """
        if self.hyperparameters and not _same_model_type(model_type, self.model_type):
            warnings.warn(
                f"Discarding subclassifier hyperparameters {list(self.hyperparameters)} "
                f"on model type change {self.model_type!r} -> {model_type!r}",
                UserWarning
            )
            self.hyperparameters = ()
        self.model_type = model_type
        self.factory = ClassifierFactory(model_type, self.hyperparameters, self.random_state)

    def set_ensemble_size(self, m: int):
        """Set the number of members trained per ``train`` call."""
        self.m = m

    def set_sample_proportion(self, sample_proportion: float):
        """Set the bootstrap sample size relative to the training set."""
        self.sample_proportion = sample_proportion

    def set_use_confidence_voting(self, use_confidence_voting: bool):
        """Choose confidence-weighted (True) or majority (False) voting."""
        self.use_confidence_voting = use_confidence_voting

    def set_hyperparameters(
        self,
        model_type: Union[ModelType, int, str],
        m: int,
        sample_proportion: float
    ):
        """
        Set model type, ensemble size and sample proportion at once.

        Parameters:
            model_type: Kind of base classifier
            m: Number of members
            sample_proportion: Bootstrap sample size as a fraction
        """
        self.set_model_type(model_type)
        self.set_ensemble_size(m)
        self.set_sample_proportion(sample_proportion)

    def set_subclassifier_hyperparameters(self, params: Sequence[float]):
        """
        Set the hyperparameters of the base classifiers.

        Replaces the factory; members trained earlier are unaffected.
        Formats (positional):
            Decision tree:     [depth limit]
            Gradient descent:  [loss, regularization, lambda*100, eta*100, iterations]
            k-NN:              [k]
            Perceptron:        [iterations]
            Two-layer NN:      [eta*100, iterations]

        Parameters:
            params: Hyperparameter vector for the current model type
        """
        self.hyperparameters = tuple(params)
        self.factory = ClassifierFactory(self.model_type, self.hyperparameters, self.random_state)

    def get_single_classifier(self) -> Classifier:
        """
        Fresh, untrained base classifier of the configured type.

        Useful as a single-model baseline. Does not touch the ensemble.
        """
        return self.factory.get_classifier()

    def get_params(self) -> dict:
        """Get ensemble configuration."""
        return {
            'model_type': self.model_type,
            'm': self.m,
            'sample_proportion': self.sample_proportion,
            'hyperparameters': self.hyperparameters,
            'use_confidence_voting': self.use_confidence_voting,
            'accumulate': self.accumulate,
            'n_jobs': self.n_jobs,
            'random_state': self.random_state
        }

    def _validate_config(self):
        m = self.m
        if isinstance(m, bool) or not isinstance(m, numbers.Integral) or m < 1:
            raise InvalidConfigurationError(f"m must be a positive integer, got {m!r}")

        p = self.sample_proportion
        if isinstance(p, bool) or not isinstance(p, numbers.Real) or not 0 < p <= 1:
            raise InvalidConfigurationError(
                f"sample_proportion must be in (0, 1], got {p!r}"
            )

        try:
            ModelType.coerce(self.model_type)
        except ValueError as e:
            raise InvalidConfigurationError(str(e)) from e

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def train(self, dataset: DataSet) -> 'BaggingClassifier':
        """
        Train m base classifiers on bootstrap samples of ``dataset``.

        Procedure:
        1. Draw m samples with ``dataset.split(sample_proportion)``, in order
        2. Get a fresh classifier from the factory for each sample
        3. Train each classifier on its sample (in parallel if n_jobs is set)
        4. Append the trained classifiers (or replace the old ones if
           ``accumulate`` is False)

        A failing member aborts the call and leaves the ensemble unchanged.

        Parameters:
            dataset: Training data

        Returns:
            self: Trained ensemble (for method chaining)

        Raises:
            InvalidConfigurationError: If m, sample_proportion or model_type
                                       is invalid
        """
        self._validate_config()

        if self.verbose:
            print("Training bagging ensemble...")
            print(f"  Members: {self.m} × {ModelType.coerce(self.model_type).name}")
            print(f"  Hyperparameters: {list(self.hyperparameters)}")
            print(f"  Sample proportion: {self.sample_proportion:.2f} of {len(dataset)} examples")

        samples = []
        for i in range(self.m):
            sample = dataset.split(self.sample_proportion).train
            if len(sample.labels) < 2:
                warnings.warn(
                    f"Bootstrap sample {i} contains a single label "
                    f"({sample.labels[0]:g}); its member can only predict that label",
                    RuntimeWarning
                )
            samples.append(sample)

        members = [self.factory.get_classifier() for _ in samples]

        if self.n_jobs is None or self.n_jobs == 1:
            trained = []
            for i, (member, sample) in enumerate(zip(members, samples)):
                trained.append(_train_member(member, sample))
                if self.verbose:
                    print(f"  Member {i + 1:3d}/{self.m}: trained on {len(sample)} examples")
        else:
            # Results come back in submission order
            trained = Parallel(n_jobs=self.n_jobs, prefer="threads")(
                delayed(_train_member)(member, sample)
                for member, sample in zip(members, samples)
            )

        if self.accumulate:
            self._classifiers.extend(trained)
        else:
            self._classifiers = list(trained)

        if self.verbose:
            print(f"✓ Ensemble holds {len(self._classifiers)} members")
            print()

        return self

    def reset(self):
        """Drop all trained members."""
        self._classifiers = []

    @property
    def classifiers(self) -> Tuple[Classifier, ...]:
        """Trained members, in training order (read-only view)."""
        return tuple(self._classifiers)

    @property
    def n_classifiers(self) -> int:
        return len(self._classifiers)

    @property
    def is_trained(self) -> bool:
        return len(self._classifiers) > 0

    def __len__(self) -> int:
        return len(self._classifiers)

    # ------------------------------------------------------------------
    # Prediction
    # ------------------------------------------------------------------

    @property
    def voter(self) -> BaseVoter:
        """Voting rule used by ``classify``."""
        return self._confidence_voter if self.use_confidence_voting else self._majority_voter

    def _check_trained(self):
        if not self._classifiers:
            raise UntrainedModelError("Ensemble not trained. Call train() first.")

    def _member_votes(
        self,
        example: Example,
        with_confidence: bool
    ) -> Tuple[List[float], Optional[List[float]]]:
        self._check_trained()
        labels = [c.classify(example) for c in self._classifiers]
        if not with_confidence:
            return labels, None
        confidences = [c.confidence(example) for c in self._classifiers]
        return labels, confidences

    def classify(self, example: Example) -> float:
        """
        Predict a label by voting.

        Uses the majority vote, or ``classify_using_confidence`` when
        confidence voting is enabled. Ties go to the smallest label.

        Raises:
            UntrainedModelError: If the ensemble has no members
        """
        if self.use_confidence_voting:
            return self.classify_using_confidence(example)
        labels, _ = self._member_votes(example, with_confidence=False)
        label, _ = self._majority_voter.vote(labels)
        return label

    def classify_using_confidence(self, example: Example) -> float:
        """
        Predict the label with the largest summed member confidence.

        Raises:
            UntrainedModelError: If the ensemble has no members
        """
        labels, confidences = self._member_votes(example, with_confidence=True)
        label, _ = self._confidence_voter.vote(labels, confidences)
        return label

    def confidence(self, example: Example) -> float:
        """
        Summed confidence of the members agreeing with the winning label.

        The value is not normalised: it grows with the number of agreeing
        members. It is computed with confidence weighting regardless of the
        voting mode.

        Raises:
            UntrainedModelError: If the ensemble has no members
        """
        labels, confidences = self._member_votes(example, with_confidence=True)
        _, score = self._confidence_voter.vote(labels, confidences)
        return score

    def vote_scores(self, example: Example) -> Dict[float, float]:
        """
        Per-label scores accumulated by the active voting rule.

        Returns:
            scores: {label: vote count or summed confidence}
        """
        voter = self.voter
        labels, confidences = self._member_votes(example, with_confidence=voter.needs_confidence)
        return voter.as_dict(labels, confidences)

    def predict(self, examples: Union[DataSet, Iterable[Example]]) -> np.ndarray:
        """
        Classify a batch of examples.

        Parameters:
            examples: DataSet or iterable of Examples

        Returns:
            labels: Predicted labels (n,)
        """
        self._check_trained()
        return np.array([self.classify(ex) for ex in examples], dtype=float)

    def __repr__(self) -> str:
        return (
            f"BaggingClassifier("
            f"model_type={self.model_type!r}, "
            f"m={self.m}, "
            f"sample_proportion={self.sample_proportion}, "
            f"n_classifiers={self.n_classifiers})"
        )

    def summary(self) -> str:
        """Get detailed summary of the ensemble."""
        lines = [
            "=" * 50,
            "BaggingClassifier Summary",
            "=" * 50,
            f"Model type:               {self.model_type!r}",
            f"Hyperparameters:          {list(self.hyperparameters)}",
            f"Members per train call:   {self.m}",
            f"Sample proportion:        {self.sample_proportion}",
            f"Voting:                   {'confidence-weighted' if self.use_confidence_voting else 'majority'}",
            f"Repeated train:           {'accumulate' if self.accumulate else 'replace'}",
            f"Trained members:          {self.n_classifiers}",
            "=" * 50,
        ]
        return "\n".join(lines)
