"""Tests for performance measures and aggregations."""

import numpy as np
import pytest

from mlbench.measures import (
    acc,
    auc,
    ber,
    brier,
    fpr,
    get_measure,
    list_measures,
    logloss,
    mmce,
    multiclass_brier,
    resolve_measure,
    set_aggregation,
    timeboth,
    tpr,
)
from mlbench.measures.measures import AGGREGATIONS

MEAN = AGGREGATIONS["test.mean"]
SD = AGGREGATIONS["test.sd"]
LEVELS = ["neg", "pos"]
TRUTH = np.array(["pos", "pos", "neg", "neg", "neg"], dtype=object)
RESPONSE = np.array(["pos", "neg", "neg", "neg", "pos"], dtype=object)
PROB = np.array([[0.1, 0.9], [0.6, 0.4], [0.8, 0.2], [0.7, 0.3], [0.4, 0.6]])


def compute(measure, **kwargs):
    defaults = dict(truth=TRUTH, response=RESPONSE, prob=PROB, class_levels=LEVELS, positive="pos")
    defaults.update(kwargs)
    return measure.compute(**defaults)


class TestClassificationMeasures:
    def test_mmce_and_acc_sum_to_one(self) -> None:
        assert compute(mmce) == pytest.approx(0.4)
        assert compute(acc) == pytest.approx(0.6)

    def test_ber_averages_class_errors(self) -> None:
        # pos: 1 of 2 wrong, neg: 1 of 3 wrong
        assert compute(ber) == pytest.approx((0.5 + 1 / 3) / 2)

    def test_tpr_and_fpr(self) -> None:
        assert compute(tpr) == pytest.approx(0.5)
        assert compute(fpr) == pytest.approx(1 / 3)

    def test_auc(self) -> None:
        # positive scores 0.9, 0.4 against negatives 0.2, 0.3, 0.6
        assert compute(auc) == pytest.approx(5 / 6)

    def test_auc_single_class_is_nan(self) -> None:
        truth = np.array(["pos"] * 5, dtype=object)
        assert np.isnan(compute(auc, truth=truth))

    def test_brier(self) -> None:
        expected = np.mean((PROB[:, 1] - np.array([1, 1, 0, 0, 0])) ** 2)
        assert compute(brier) == pytest.approx(expected)

    def test_multiclass_brier_is_twice_binary_brier(self) -> None:
        assert compute(multiclass_brier) == pytest.approx(2 * compute(brier))

    def test_logloss(self) -> None:
        expected = -np.mean(np.log([0.9, 0.4, 0.8, 0.7, 0.4]))
        assert compute(logloss) == pytest.approx(expected)

    def test_prob_measure_without_prob_is_nan(self) -> None:
        assert np.isnan(compute(auc, prob=None))

    def test_time_measure(self) -> None:
        assert compute(timeboth, train_time=1.5, predict_time=0.5) == pytest.approx(2.0)

    def test_directions(self) -> None:
        assert mmce.minimize
        assert not acc.minimize
        assert not auc.minimize


class TestAggregation:
    def test_aggr_id(self) -> None:
        assert mmce.aggr_id == "mmce.test.mean"

    def test_mean_and_sd(self) -> None:
        values = np.array([0.1, 0.2, 0.3])
        assert MEAN(values) == pytest.approx(0.2)
        assert SD(values) == pytest.approx(0.1)

    def test_sd_of_one_value_is_nan(self) -> None:
        assert np.isnan(SD([0.5]))

    def test_empty_is_nan(self) -> None:
        assert np.isnan(MEAN([]))

    def test_set_aggregation_returns_copy(self) -> None:
        sd = set_aggregation(mmce, "test.sd")
        assert sd.aggr_id == "mmce.test.sd"
        assert mmce.aggr_id == "mmce.test.mean"

    def test_unknown_aggregation_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown aggregation"):
            set_aggregation(mmce, "test.mode")


class TestRegistry:
    def test_get_measure(self) -> None:
        assert get_measure("ber") is ber
        assert "multiclass.brier" in list_measures()

    def test_unknown_measure_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown measure"):
            get_measure("r2")

    def test_resolve_with_aggregation_suffix(self) -> None:
        m = resolve_measure("mmce.test.median")
        assert m.id == "mmce"
        assert m.aggregation.id == "test.median"

    def test_resolve_dotted_measure_id(self) -> None:
        assert resolve_measure("multiclass.brier") is multiclass_brier
