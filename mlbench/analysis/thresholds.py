"""
Performance as a function of the decision threshold (e.g. ROC curves).
"""
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from ..measures.measures import Measure, resolve_measure
from ..results.benchmark_result import BenchmarkResult


@dataclass
class ThreshVsPerfData:
    """
    Threshold sweep results.

    data has columns task_id, learner_id, threshold and one column per
    measure id; values are averaged over resampling iterations.
    """
    data: pd.DataFrame
    measures: List[Measure]

    @property
    def measure_ids(self) -> List[str]:
        return [m.id for m in self.measures]


def _threshold_response(pos_prob: np.ndarray, threshold: float, positive, negative) -> np.ndarray:
    response = np.empty(len(pos_prob), dtype=object)
    response[:] = negative
    response[pos_prob >= threshold] = positive
    return response


def generate_thresh_vs_perf_data(
    bmr: BenchmarkResult,
    measures: Sequence = ("fpr", "tpr"),
    gridsize: int = 100,
    task_ids: Optional[Sequence[str]] = None,
    learner_ids: Optional[Sequence[str]] = None,
) -> ThreshVsPerfData:
    """
    Sweep the threshold for the positive class and compute measures.

    Only pairs of binary tasks and learners that kept probability
    predictions are used; other pairs are skipped.

    Args:
        bmr: Benchmark result with kept predictions.
        measures: Measures (or ids) computed from the thresholded response.
        gridsize: Number of equally spaced thresholds in [0, 1].
        task_ids: Restrict to these tasks.
        learner_ids: Restrict to these learners.

    Returns:
        ThreshVsPerfData.
    """
    if gridsize < 2:
        raise ValueError(f"gridsize must be at least 2, got {gridsize}")
    measures = [resolve_measure(m) for m in measures]
    for m in measures:
        if m.requires_prob:
            raise ValueError(f"Measure '{m.id}' needs probabilities and cannot be computed from a threshold")

    thresholds = np.linspace(0.0, 1.0, gridsize)
    frames = []
    for task_id, learner_id, rr in bmr.iter_results(task_ids, learner_ids):
        pred = rr.pred
        if pred is None or not pred.has_prob or len(pred.class_levels) != 2:
            continue
        positive = pred.positive
        negative = [lvl for lvl in pred.class_levels if lvl != positive][0]

        rows = []
        for it, sub in pred.data.groupby('iter', sort=True):
            truth = sub['truth'].to_numpy()
            pos_prob = sub[f"prob.{positive}"].to_numpy(dtype=float)
            for t in thresholds:
                response = _threshold_response(pos_prob, t, positive, negative)
                row = {'iter': it, 'threshold': t}
                for m in measures:
                    row[m.id] = m.compute(
                        truth=truth,
                        response=response,
                        class_levels=pred.class_levels,
                        positive=positive,
                    )
                rows.append(row)

        per_iter = pd.DataFrame(rows)
        mean = per_iter.groupby('threshold', as_index=False)[[m.id for m in measures]].mean()
        mean.insert(0, 'learner_id', learner_id)
        mean.insert(0, 'task_id', task_id)
        frames.append(mean)

    if not frames:
        raise ValueError(
            "No binary task with probability predictions found; "
            "use predict_type='prob' and keep_pred=True"
        )
    data = pd.concat(frames, ignore_index=True)
    return ThreshVsPerfData(data=data, measures=measures)
