"""Performance measures for benchmark experiments."""
from .measures import (
    Measure,
    Aggregation,
    AGGREGATIONS,
    MEASURES,
    get_measure,
    list_measures,
    set_aggregation,
    default_measure,
    resolve_measure,
    mmce, acc, ber, kappa, f1, tpr, fpr, auc, brier, multiclass_brier, logloss,
    timetrain, timepredict, timeboth,
    test_mean, test_sd, test_median, test_min, test_max, test_sum,
)

__all__ = [
    'Measure',
    'Aggregation',
    'AGGREGATIONS',
    'MEASURES',
    'get_measure',
    'list_measures',
    'set_aggregation',
    'default_measure',
    'resolve_measure',
    'mmce', 'acc', 'ber', 'kappa', 'f1', 'tpr', 'fpr', 'auc', 'brier',
    'multiclass_brier', 'logloss', 'timetrain', 'timepredict', 'timeboth',
    'test_mean', 'test_sd', 'test_median', 'test_min', 'test_max', 'test_sum',
]
