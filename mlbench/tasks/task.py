"""
Classification task: a dataset bundled with its target column.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Any

import numpy as np
import pandas as pd


@dataclass(eq=False)
class ClassifTask:
    """
    A classification dataset with a designated target column.

    Non-numeric feature columns are one-hot encoded once at construction,
    so learners always see a float matrix.

    Usage:
        task = ClassifTask(id="iris", data=df, target="Species")
        X, y = task.subset(train_idx)
    """

    id: str
    data: pd.DataFrame
    target: str
    positive: Optional[Any] = None

    # Computed in __post_init__
    feature_names: List[str] = field(init=False, default_factory=list)
    class_levels: List[Any] = field(init=False, default_factory=list)
    _X: np.ndarray = field(init=False, default=None, repr=False)
    _y: np.ndarray = field(init=False, default=None, repr=False)

    def __post_init__(self):
        if self.target not in self.data.columns:
            raise ValueError(f"Target column '{self.target}' not found in data for task '{self.id}'")

        self.data = self.data.reset_index(drop=True)
        features = self.data.drop(columns=[self.target])
        non_numeric = [c for c in features.columns if not pd.api.types.is_numeric_dtype(features[c])]
        if non_numeric:
            features = pd.get_dummies(features, columns=non_numeric, dtype=float)

        self.feature_names = [str(c) for c in features.columns]
        self._X = features.to_numpy(dtype=np.float64)
        self._y = self.data[self.target].to_numpy()

        self.class_levels = _sorted_levels(pd.unique(self._y).tolist())
        if len(self.class_levels) < 2:
            raise ValueError(f"Task '{self.id}' needs at least two classes, got {self.class_levels}")

        if self.is_binary:
            if self.positive is None:
                self.positive = self.class_levels[0]
            elif self.positive not in self.class_levels:
                raise ValueError(f"Positive class '{self.positive}' is not a level of '{self.target}'")
        else:
            self.positive = None

    @property
    def n_obs(self) -> int:
        """Number of observations."""
        return len(self._y)

    @property
    def n_features(self) -> int:
        return len(self.feature_names)

    @property
    def is_binary(self) -> bool:
        return len(self.class_levels) == 2

    def X(self) -> np.ndarray:
        """Return the feature matrix."""
        return self._X

    def y(self) -> np.ndarray:
        """Return the target vector."""
        return self._y

    def subset(self, indices: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Select rows by index.

        Args:
            indices: Integer row indices.

        Returns:
            Tuple of (X, y) for the selected rows.
        """
        indices = np.asarray(indices, dtype=int)
        return self._X[indices], self._y[indices]

    def class_counts(self) -> pd.Series:
        return pd.Series(self._y).value_counts().reindex(self.class_levels)

    def __repr__(self) -> str:
        return (
            f"ClassifTask(id='{self.id}', n_obs={self.n_obs}, n_features={self.n_features}, "
            f"classes={self.class_levels}, positive={self.positive!r})"
        )


def _sorted_levels(levels: List[Any]) -> List[Any]:
    """Natural order of the class labels; mixed label types fall back to text order."""
    try:
        return sorted(levels)
    except TypeError:
        return sorted(levels, key=str)
