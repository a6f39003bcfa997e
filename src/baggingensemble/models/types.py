"""Model type selector for base classifiers."""

from enum import IntEnum


class ModelType(IntEnum):
    """
    Kinds of base classifier the factory can build.

    Values are stable so configurations can be written as plain integers.
    """
    DECISION_TREE = 0
    GRADIENT_DESCENT = 1
    KNN = 2
    PERCEPTRON = 3
    TWO_LAYER_NN = 4

    @classmethod
    def coerce(cls, value) -> 'ModelType':
        """
        Convert an enum member, its integer value or its name to a ModelType.

        Names are case-insensitive and may use '-' or ' ' for '_'
        (e.g. 'knn', 'decision-tree', 'Two layer NN').

        Raises:
            ValueError: If the value names no model type
        """
        if isinstance(value, cls):
            return value

        if isinstance(value, str):
            key = value.strip().upper().replace('-', '_').replace(' ', '_')
            if key in cls.__members__:
                return cls[key]
        elif not isinstance(value, bool):
            try:
                return cls(int(value))
            except (TypeError, ValueError):
                pass

        raise ValueError(
            f"Unknown model type {value!r}. "
            f"Available: {[f'{m.value}={m.name.lower()}' for m in cls]}"
        )
