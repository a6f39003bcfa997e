"""
Classifier factory.

A ``ClassifierConfig`` is an immutable description of one kind of base
classifier; ``make_classifier`` turns it into a fresh, untrained instance.
``ClassifierFactory`` binds a config so the ensemble can ask for members
without knowing what they are.

Usage:
    >>> factory = ClassifierFactory(ModelType.DECISION_TREE, [5])
    >>> clf = factory.get_classifier()
    >>> clf.estimator.max_depth
    5
"""

from typing import NamedTuple, Optional, Sequence, Tuple, Union

from .estimators import EstimatorClassifier
from .types import ModelType


class ClassifierConfig(NamedTuple):
    """
    What the factory builds.

    Attributes:
        model_type: ModelType, its integer value or its name
        hyperparameters: Positional vector, decoded by the model type
        random_state: Seed forwarded to the underlying estimator
    """
    model_type: Union[ModelType, int, str] = ModelType.DECISION_TREE
    hyperparameters: Tuple[float, ...] = ()
    random_state: Optional[int] = None


def make_classifier(config: ClassifierConfig) -> EstimatorClassifier:
    """
    Build a fresh, untrained classifier from a config.

    Parameters
    ----------
    config : ClassifierConfig
        Model type, hyperparameter vector and seed

    Returns
    -------
    classifier : EstimatorClassifier
        Untrained classifier

    Raises
    ------
    ValueError
        If the model type is unknown or the hyperparameters don't fit it

    Examples
    --------
    >>> clf = make_classifier(ClassifierConfig(ModelType.KNN, (3,)))
    >>> clf.estimator.n_neighbors
    3
    """
    model_type = ModelType.coerce(config.model_type)
    return EstimatorClassifier(
        model_type,
        hyperparameters=config.hyperparameters,
        random_state=config.random_state
    )


class ClassifierFactory:
    """
    Produces classifiers of one configured type.

    The config is fixed at construction. To change what gets built, create
    a new factory.
    """

    def __init__(
        self,
        model_type: Union[ModelType, int, str] = ModelType.DECISION_TREE,
        hyperparameters: Optional[Sequence[float]] = None,
        random_state: Optional[int] = None
    ):
        self.config = ClassifierConfig(
            model_type,
            tuple(hyperparameters) if hyperparameters is not None else (),
            random_state
        )

    def get_classifier(self) -> EstimatorClassifier:
        """Return a fresh, untrained classifier."""
        return make_classifier(self.config)

    def __repr__(self) -> str:
        return (
            f"ClassifierFactory("
            f"model_type={self.config.model_type!r}, "
            f"hyperparameters={list(self.config.hyperparameters)})"
        )
