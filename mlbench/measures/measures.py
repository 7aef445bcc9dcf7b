"""
Performance measures and their aggregation over resampling iterations.
"""
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional

import numpy as np
from sklearn import metrics


@dataclass(frozen=True)
class Aggregation:
    """Summarizes per-iteration test performance into one number."""
    id: str
    fun: Callable[[np.ndarray], float]

    def __call__(self, values) -> float:
        values = np.asarray(values, dtype=np.float64)
        if values.size == 0:
            return float('nan')
        return float(self.fun(values))


def _sd(values: np.ndarray) -> float:
    if values.size < 2:
        return float('nan')
    return np.std(values, ddof=1)


test_mean = Aggregation("test.mean", np.mean)
test_sd = Aggregation("test.sd", _sd)
test_median = Aggregation("test.median", np.median)
test_min = Aggregation("test.min", np.min)
test_max = Aggregation("test.max", np.max)
test_sum = Aggregation("test.sum", np.sum)

AGGREGATIONS = {a.id: a for a in (test_mean, test_sd, test_median, test_min, test_max, test_sum)}


@dataclass(frozen=True)
class Measure:
    """
    A performance measure.

    The measure function receives keyword arguments truth, response, prob,
    class_levels, positive, train_time and predict_time, and returns a float.
    """
    id: str
    name: str
    fun: Callable[..., float]
    minimize: bool
    best: float
    worst: float
    requires_prob: bool = False
    requires_binary: bool = False
    aggregation: Aggregation = test_mean

    @property
    def aggr_id(self) -> str:
        """Column name of the aggregated value, e.g. 'mmce.test.mean'."""
        return f"{self.id}.{self.aggregation.id}"

    def compute(
        self,
        truth: np.ndarray,
        response: Optional[np.ndarray] = None,
        prob: Optional[np.ndarray] = None,
        class_levels: Optional[List[Any]] = None,
        positive: Any = None,
        train_time: float = float('nan'),
        predict_time: float = float('nan'),
    ) -> float:
        """
        Compute the measure on one test set.

        Returns NaN when the measure needs probabilities that are not available.
        """
        if self.requires_prob and prob is None:
            return float('nan')
        return float(self.fun(
            truth=np.asarray(truth),
            response=None if response is None else np.asarray(response),
            prob=prob,
            class_levels=class_levels,
            positive=positive,
            train_time=train_time,
            predict_time=predict_time,
        ))

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'minimize': self.minimize,
            'aggregation': self.aggregation.id,
        }


# ---------------------------------------------------------------------------
# Measure functions
# ---------------------------------------------------------------------------

def _mmce(truth, response, **kwargs):
    return np.mean(truth != response)


def _acc(truth, response, **kwargs):
    return np.mean(truth == response)


def _ber(truth, response, class_levels, **kwargs):
    # Mean of per-class error rates over classes present in the test set
    rates = [np.mean(response[truth == level] != level)
             for level in class_levels if np.any(truth == level)]
    return np.mean(rates)


def _kappa(truth, response, class_levels, **kwargs):
    return metrics.cohen_kappa_score(truth, response, labels=class_levels)


def _f1(truth, response, positive, **kwargs):
    return metrics.f1_score(truth == positive, response == positive, zero_division=0.0)


def _tpr(truth, response, positive, **kwargs):
    pos = truth == positive
    if not pos.any():
        return float('nan')
    return np.mean(response[pos] == positive)


def _fpr(truth, response, positive, **kwargs):
    neg = truth != positive
    if not neg.any():
        return float('nan')
    return np.mean(response[neg] == positive)


def _positive_prob(prob, class_levels, positive):
    return prob[:, list(class_levels).index(positive)]


def _auc(truth, prob, class_levels, positive, **kwargs):
    y = truth == positive
    if y.all() or not y.any():
        return float('nan')
    return metrics.roc_auc_score(y, _positive_prob(prob, class_levels, positive))


def _brier(truth, prob, class_levels, positive, **kwargs):
    y = (truth == positive).astype(np.float64)
    return np.mean((_positive_prob(prob, class_levels, positive) - y) ** 2)


def _multiclass_brier(truth, prob, class_levels, **kwargs):
    onehot = np.column_stack([(truth == level).astype(np.float64) for level in class_levels])
    return np.mean(np.sum((prob - onehot) ** 2, axis=1))


def _logloss(truth, prob, class_levels, **kwargs):
    eps = 1e-15
    idx = np.array([list(class_levels).index(t) for t in truth])
    p = np.clip(prob[np.arange(len(idx)), idx], eps, 1.0)
    return -np.mean(np.log(p))


def _timetrain(train_time, **kwargs):
    return train_time


def _timepredict(predict_time, **kwargs):
    return predict_time


def _timeboth(train_time, predict_time, **kwargs):
    return train_time + predict_time


INF = float('inf')

mmce = Measure("mmce", "Mean misclassification error", _mmce, minimize=True, best=0.0, worst=1.0)
acc = Measure("acc", "Accuracy", _acc, minimize=False, best=1.0, worst=0.0)
ber = Measure("ber", "Balanced error rate", _ber, minimize=True, best=0.0, worst=1.0)
kappa = Measure("kappa", "Cohen's kappa", _kappa, minimize=False, best=1.0, worst=-1.0)
f1 = Measure("f1", "F1 measure", _f1, minimize=False, best=1.0, worst=0.0, requires_binary=True)
tpr = Measure("tpr", "True positive rate", _tpr, minimize=False, best=1.0, worst=0.0, requires_binary=True)
fpr = Measure("fpr", "False positive rate", _fpr, minimize=True, best=0.0, worst=1.0, requires_binary=True)
auc = Measure("auc", "Area under the ROC curve", _auc, minimize=False, best=1.0, worst=0.0,
              requires_prob=True, requires_binary=True)
brier = Measure("brier", "Brier score", _brier, minimize=True, best=0.0, worst=1.0,
                requires_prob=True, requires_binary=True)
multiclass_brier = Measure("multiclass.brier", "Multiclass Brier score", _multiclass_brier,
                           minimize=True, best=0.0, worst=2.0, requires_prob=True)
logloss = Measure("logloss", "Logarithmic loss", _logloss, minimize=True, best=0.0, worst=INF,
                  requires_prob=True)
timetrain = Measure("timetrain", "Time of fitting the model", _timetrain, minimize=True, best=0.0, worst=INF)
timepredict = Measure("timepredict", "Time of predicting test set", _timepredict, minimize=True,
                      best=0.0, worst=INF)
timeboth = Measure("timeboth", "timetrain + timepredict", _timeboth, minimize=True, best=0.0, worst=INF)

MEASURES: Dict[str, Measure] = {
    m.id: m for m in (
        mmce, acc, ber, kappa, f1, tpr, fpr, auc, brier, multiclass_brier,
        logloss, timetrain, timepredict, timeboth,
    )
}


def list_measures() -> List[str]:
    return list(MEASURES)


def get_measure(measure_id: str) -> Measure:
    """Look up a measure by id."""
    if measure_id not in MEASURES:
        raise ValueError(f"Unknown measure: {measure_id}. Available: {', '.join(MEASURES)}")
    return MEASURES[measure_id]


def set_aggregation(measure: Measure, aggregation) -> Measure:
    """
    Return a copy of the measure with a different aggregation.

    Args:
        measure: Measure to copy.
        aggregation: Aggregation object or its id (e.g. 'test.median').
    """
    if isinstance(aggregation, str):
        if aggregation not in AGGREGATIONS:
            raise ValueError(f"Unknown aggregation: {aggregation}. Available: {', '.join(AGGREGATIONS)}")
        aggregation = AGGREGATIONS[aggregation]
    return replace(measure, aggregation=aggregation)


def default_measure(task) -> Measure:
    """Default measure for a task (misclassification error for classification)."""
    return mmce


def resolve_measure(measure) -> Measure:
    """Accept a Measure or a measure id, optionally with aggregation ('mmce.test.sd')."""
    if isinstance(measure, Measure):
        return measure
    for aggr_id in AGGREGATIONS:
        suffix = f".{aggr_id}"
        if measure.endswith(suffix):
            return set_aggregation(get_measure(measure[:-len(suffix)]), aggr_id)
    return get_measure(measure)
