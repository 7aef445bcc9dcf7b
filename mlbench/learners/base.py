"""
Abstract base class for learners and the scikit-learn wrapper.
"""
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np


PREDICT_TYPES = ("response", "prob")


@dataclass
class WrappedModel:
    """A fitted model together with the context it was trained in."""
    learner_id: str
    task_id: str
    model: Any
    class_levels: List[Any]
    train_time: float
    iteration: Optional[int] = None


class Learner(ABC):
    """
    Abstract base class for classification learners.

    Provides a unified interface for training and prediction; subclasses
    implement _fit() and _predict().
    """

    def __init__(
        self,
        id: str,
        predict_type: str = "response",
        short_name: Optional[str] = None,
        **params,
    ):
        """
        Initialize the learner.

        Args:
            id: Unique learner id (e.g. 'classif.lda').
            predict_type: 'response' for class labels, 'prob' to also predict probabilities.
            short_name: Short display name (defaults to id without the 'classif.' prefix).
            **params: Hyperparameters passed to the underlying algorithm.
        """
        if predict_type not in PREDICT_TYPES:
            raise ValueError(f"Unknown predict_type: {predict_type}. Use one of {PREDICT_TYPES}")
        self.id = id
        self.predict_type = predict_type
        self.short_name = short_name or id.split(".", 1)[-1]
        self.params: Dict[str, Any] = dict(params)

        if predict_type == "prob" and not self.supports_prob:
            raise ValueError(f"Learner '{id}' does not support predict_type='prob'")

    @property
    @abstractmethod
    def supports_prob(self) -> bool:
        """Whether the learner can predict class probabilities."""
        pass

    @abstractmethod
    def _fit(self, X: np.ndarray, y: np.ndarray, class_levels: List[Any]) -> Any:
        """Fit and return the underlying model."""
        pass

    @abstractmethod
    def _predict(
        self, model: Any, X: np.ndarray, class_levels: List[Any]
    ) -> Tuple[np.ndarray, Optional[np.ndarray]]:
        """
        Predict with a fitted model.

        Returns:
            Tuple of (response, prob) where prob has one column per class
            level in class_levels order, or None for predict_type='response'.
        """
        pass

    def train(self, X: np.ndarray, y: np.ndarray, class_levels: List[Any],
              task_id: str = "", iteration: Optional[int] = None) -> WrappedModel:
        """
        Train on the given data.

        Args:
            X: Feature matrix.
            y: Target vector.
            class_levels: All class levels of the task (not only those present in y).
            task_id: Task id, recorded on the wrapped model.
            iteration: Resampling iteration, recorded on the wrapped model.

        Returns:
            WrappedModel with timing information.
        """
        start = time.perf_counter()
        model = self._fit(X, y, class_levels)
        train_time = time.perf_counter() - start
        return WrappedModel(
            learner_id=self.id,
            task_id=task_id,
            model=model,
            class_levels=list(class_levels),
            train_time=train_time,
            iteration=iteration,
        )

    def predict(self, wrapped: WrappedModel, X: np.ndarray) -> Tuple[np.ndarray, Optional[np.ndarray]]:
        """Predict responses (and probabilities if predict_type='prob')."""
        return self._predict(wrapped.model, X, wrapped.class_levels)

    def get_params(self) -> Dict[str, Any]:
        return dict(self.params)

    def to_dict(self) -> dict:
        """Convert to a serializable description."""
        return {
            'id': self.id,
            'short_name': self.short_name,
            'predict_type': self.predict_type,
            'class': type(self).__name__,
            'params': {k: _jsonable(v) for k, v in self.params.items()},
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id='{self.id}', predict_type='{self.predict_type}', params={self.params})"


def align_proba(proba: np.ndarray, model_classes, class_levels: List[Any]) -> np.ndarray:
    """
    Reorder probability columns to the task's class levels.

    Classes the model never saw during training get probability zero.
    """
    out = np.zeros((proba.shape[0], len(class_levels)), dtype=np.float64)
    positions = {level: j for j, level in enumerate(class_levels)}
    for i, cls in enumerate(model_classes):
        out[:, positions[cls]] = proba[:, i]
    return out


def _jsonable(value):
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, (np.integer,)):
        return int(value)
    if isinstance(value, (np.floating,)):
        return float(value)
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return repr(value)


class SklearnLearner(Learner):
    """Learner backed by a scikit-learn estimator class."""

    def __init__(
        self,
        id: str,
        estimator_cls: type,
        predict_type: str = "response",
        short_name: Optional[str] = None,
        **params,
    ):
        self.estimator_cls = estimator_cls
        super().__init__(id, predict_type=predict_type, short_name=short_name, **params)

    @property
    def supports_prob(self) -> bool:
        return hasattr(self.estimator_cls, "predict_proba")

    def _fit(self, X, y, class_levels):
        estimator = self.estimator_cls(**self.params)
        estimator.fit(X, y)
        return estimator

    def _predict(self, model, X, class_levels):
        response = model.predict(X)
        if self.predict_type != "prob":
            return response, None
        proba = align_proba(model.predict_proba(X), model.classes_, class_levels)
        return response, proba


class FeaturelessLearner(Learner):
    """
    Baseline learner ignoring all features.

    Predicts the most frequent training class; probabilities are the
    training class frequencies.
    """

    def __init__(self, id: str = "classif.featureless", predict_type: str = "response",
                 short_name: Optional[str] = None, **params):
        super().__init__(id, predict_type=predict_type, short_name=short_name, **params)

    @property
    def supports_prob(self) -> bool:
        return True

    def _fit(self, X, y, class_levels):
        counts = np.array([np.sum(y == level) for level in class_levels], dtype=np.float64)
        return counts / counts.sum()

    def _predict(self, model, X, class_levels):
        n = X.shape[0]
        majority = class_levels[int(np.argmax(model))]
        response = np.array([majority] * n, dtype=object)
        if self.predict_type != "prob":
            return response, None
        return response, np.tile(model, (n, 1))


class LearnerError(RuntimeError):
    """Raised when a learner fails to train or predict and errors are not tolerated."""

    def __init__(self, learner_id: str, task_id: str, iteration: int, cause: Exception):
        self.learner_id = learner_id
        self.task_id = task_id
        self.iteration = iteration
        self.cause = cause
        super().__init__(
            f"Learner '{learner_id}' failed on task '{task_id}' in iteration {iteration}: "
            f"{type(cause).__name__}: {cause}"
        )
