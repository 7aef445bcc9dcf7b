"""
Result types for benchmark experiments.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd


class ResamplePrediction:
    """
    Test-set predictions of all resampling iterations.

    Wraps a DataFrame with columns:
        id: Row index in the task.
        truth: True class.
        response: Predicted class.
        prob.<class>: Predicted probability per class (predict_type='prob' only).
        iter: Resampling iteration (1-based).
        set: Always 'test'.
    """

    def __init__(self, data: pd.DataFrame, class_levels: List[Any], predict_type: str = "response",
                 positive: Any = None):
        self.data = data
        self.class_levels = list(class_levels)
        self.predict_type = predict_type
        if positive is None and len(self.class_levels) == 2:
            positive = self.class_levels[0]
        self.positive = positive

    @property
    def has_prob(self) -> bool:
        return any(c.startswith("prob.") for c in self.data.columns)

    def get_prob(self, level=None) -> np.ndarray:
        """Probability matrix in class-level order, or one column if level is given."""
        if not self.has_prob:
            raise ValueError("Predictions do not contain probabilities (use predict_type='prob')")
        if level is not None:
            return self.data[f"prob.{level}"].to_numpy()
        return self.data[[f"prob.{lvl}" for lvl in self.class_levels]].to_numpy()

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        iters = self.data['iter'].nunique() if len(self.data) else 0
        return f"ResamplePrediction(n={len(self.data)}, iters={iters}, predict_type='{self.predict_type}')"


@dataclass
class ResampleResult:
    """
    Outcome of resampling one learner on one task.

    Stores everything needed for later aggregation, analysis and plotting.
    """

    # Identifiers
    task_id: str
    learner_id: str

    # Performance
    measures_test: pd.DataFrame          # columns: iter, <measure ids>
    aggr: Dict[str, float]               # '<measure>.<aggregation>' -> value

    # Optional retained outputs
    pred: Optional[ResamplePrediction] = None
    models: Optional[List[Any]] = None

    # Errors per iteration (iteration -> message)
    err_msgs: Dict[int, str] = field(default_factory=dict)
    failures: List['FailureRecord'] = field(default_factory=list)

    runtime: float = 0.0

    @property
    def iters(self) -> int:
        return len(self.measures_test)

    def to_dict(self) -> dict:
        """Convert to dictionary (excluding predictions and models)."""
        return {
            'task_id': self.task_id,
            'learner_id': self.learner_id,
            'iters': self.iters,
            'runtime': self.runtime,
            'n_errors': len(self.err_msgs),
            **self.aggr,
        }

    def __repr__(self) -> str:
        aggr = ", ".join(f"{k}={v:.4f}" for k, v in self.aggr.items())
        return f"ResampleResult(task='{self.task_id}', learner='{self.learner_id}', {aggr})"


@dataclass
class FailureRecord:
    """
    Record of a failed training or prediction step.

    Used to track which learners failed in which resampling iteration.
    """
    task_id: str
    learner_id: str
    iteration: int
    error_type: str
    error_message: str
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> dict:
        """Convert to dictionary for CSV export."""
        return {
            'task_id': self.task_id,
            'learner_id': self.learner_id,
            'iteration': self.iteration,
            'error_type': self.error_type,
            'error_message': self.error_message,
            'timestamp': self.timestamp,
        }
