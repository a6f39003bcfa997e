"""
scikit-learn backed base classifiers.

Each model type maps to one scikit-learn estimator. The positional
hyperparameter vector used throughout the package is decoded here and
nowhere else:

    Decision tree:     [depth limit]                       (<= 0: unlimited)
    Gradient descent:  [loss, regularization, lambda*100, eta*100, iterations]
    k-NN:              [k]
    Perceptron:        [iterations]
    Two-layer NN:      [eta*100, iterations]

Loss codes:            0 log_loss, 1 hinge, 2 modified_huber, 3 squared_hinge
Regularization codes:  0 none, 1 l1, 2 l2
"""

import numpy as np
from typing import Callable, Dict, Optional, Sequence, Tuple
from sklearn.base import BaseEstimator
from sklearn.dummy import DummyClassifier
from sklearn.linear_model import Perceptron, SGDClassifier
from sklearn.neighbors import KNeighborsClassifier
from sklearn.neural_network import MLPClassifier
from sklearn.tree import DecisionTreeClassifier

from ..data.dataset import DataSet, Example
from ..exceptions import UntrainedModelError
from .base import Classifier
from .types import ModelType


LOSSES = {0: 'log_loss', 1: 'hinge', 2: 'modified_huber', 3: 'squared_hinge'}
PENALTIES = {0: None, 1: 'l1', 2: 'l2'}

# Hidden layer width of the two-layer network
HIDDEN_UNITS = 10


def _unpack(
    model_type: ModelType,
    params: Sequence[float],
    defaults: Tuple[float, ...]
) -> Tuple[float, ...]:
    """Fill missing trailing hyperparameters with defaults."""
    if len(params) > len(defaults):
        raise ValueError(
            f"{model_type.name} takes at most {len(defaults)} hyperparameters, "
            f"got {len(params)}: {list(params)}"
        )
    return tuple(params) + defaults[len(params):]


def _lookup(table: Dict[int, Optional[str]], code: float, what: str) -> Optional[str]:
    if int(code) not in table:
        raise ValueError(
            f"Unknown {what} code {code}. Available: {sorted(table)}"
        )
    return table[int(code)]


def _decision_tree(params, random_state) -> BaseEstimator:
    (depth_limit,) = _unpack(ModelType.DECISION_TREE, params, (0,))
    depth_limit = int(depth_limit)
    return DecisionTreeClassifier(
        max_depth=depth_limit if depth_limit > 0 else None,
        random_state=random_state
    )


def _gradient_descent(params, random_state) -> BaseEstimator:
    loss, regularization, lambda_100, eta_100, iterations = _unpack(
        ModelType.GRADIENT_DESCENT, params, (0, 2, 1, 1, 100)
    )
    return SGDClassifier(
        loss=_lookup(LOSSES, loss, 'loss'),
        penalty=_lookup(PENALTIES, regularization, 'regularization'),
        alpha=lambda_100 / 100,
        learning_rate='constant',
        eta0=eta_100 / 100,
        max_iter=int(iterations),
        random_state=random_state
    )


def _knn(params, random_state) -> BaseEstimator:
    (k,) = _unpack(ModelType.KNN, params, (5,))
    return KNeighborsClassifier(n_neighbors=int(k))


def _perceptron(params, random_state) -> BaseEstimator:
    (iterations,) = _unpack(ModelType.PERCEPTRON, params, (100,))
    return Perceptron(max_iter=int(iterations), random_state=random_state)


def _two_layer_nn(params, random_state) -> BaseEstimator:
    eta_100, iterations = _unpack(ModelType.TWO_LAYER_NN, params, (10, 200))
    return MLPClassifier(
        hidden_layer_sizes=(HIDDEN_UNITS,),
        activation='tanh',
        solver='sgd',
        learning_rate_init=eta_100 / 100,
        max_iter=int(iterations),
        random_state=random_state
    )


ESTIMATOR_BUILDERS: Dict[ModelType, Callable[..., BaseEstimator]] = {
    ModelType.DECISION_TREE: _decision_tree,
    ModelType.GRADIENT_DESCENT: _gradient_descent,
    ModelType.KNN: _knn,
    ModelType.PERCEPTRON: _perceptron,
    ModelType.TWO_LAYER_NN: _two_layer_nn,
}


def build_estimator(
    model_type: ModelType,
    hyperparameters: Sequence[float] = (),
    random_state: Optional[int] = None
) -> BaseEstimator:
    """
    Build an unfitted scikit-learn estimator for a model type.

    Raises:
        ValueError: On too many hyperparameters or an unknown code
    """
    return ESTIMATOR_BUILDERS[model_type](tuple(hyperparameters), random_state)


class EstimatorClassifier(Classifier):
    """
    Base classifier wrapping one scikit-learn estimator.

    Confidence is the predicted class probability where the estimator
    provides probabilities, otherwise the absolute decision-function margin
    of the predicted class.

    Attributes:
        model_type (ModelType): Which variant this is
        hyperparameters (tuple): The positional vector it was built from
        estimator: The wrapped scikit-learn estimator
        model: The fitted model; a constant predictor when the training
            data held a single label

    Example:
        >>> clf = EstimatorClassifier(ModelType.KNN, hyperparameters=[3])
        >>> clf.train(data)
        >>> clf.classify(data[0]), clf.confidence(data[0])
    """

    def __init__(
        self,
        model_type: ModelType,
        hyperparameters: Sequence[float] = (),
        random_state: Optional[int] = None
    ):
        self.model_type = model_type
        self.hyperparameters = tuple(hyperparameters)
        self.random_state = random_state
        self.estimator = build_estimator(model_type, self.hyperparameters, random_state)
        self.model = None
        self._is_fitted = False

    def train(self, dataset: DataSet) -> 'EstimatorClassifier':
        labels = dataset.labels
        if len(labels) < 2:
            # Linear models refuse single-class data; predict the only label seen
            self.model = DummyClassifier(strategy="constant", constant=labels[0])
        else:
            self.model = self.estimator
        self.model.fit(dataset.X, dataset.y)
        self._is_fitted = True
        return self

    def _row(self, example: Example) -> np.ndarray:
        if not self._is_fitted:
            raise UntrainedModelError(
                f"{self.model_type.name} classifier not trained. Call train() first."
            )
        return example.features.reshape(1, -1)

    def classify(self, example: Example) -> float:
        return float(self.model.predict(self._row(example))[0])

    def confidence(self, example: Example) -> float:
        row = self._row(example)

        # SGDClassifier only exposes predict_proba for probabilistic losses
        if hasattr(self.model, 'predict_proba'):
            return float(np.max(self.model.predict_proba(row)))

        margins = np.ravel(self.model.decision_function(row))
        if margins.size == 1:
            return float(abs(margins[0]))
        return float(abs(np.max(margins)))

    def get_params(self) -> dict:
        """Get model type, hyperparameter vector and estimator settings."""
        return {
            'model_type': self.model_type,
            'hyperparameters': self.hyperparameters,
            'random_state': self.random_state,
            'estimator': self.estimator.get_params()
        }

    def __repr__(self) -> str:
        return (
            f"EstimatorClassifier("
            f"model_type={self.model_type.name}, "
            f"hyperparameters={list(self.hyperparameters)}, "
            f"trained={self._is_fitted})"
        )
