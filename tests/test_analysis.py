"""Tests for rank matrices, Friedman/Nemenyi tests and plot data."""

import numpy as np
import pandas as pd
import pytest
from scipy import stats

from mlbench.analysis import (
    bonferroni_dunn_critical_difference,
    convert_bmr_to_rank_matrix,
    find_cliques,
    friedman_posthoc_test_bmr,
    friedman_test_bmr,
    generate_crit_differences_data,
    generate_thresh_vs_perf_data,
    get_aggr_matrix,
    nemenyi_critical_difference,
)
from mlbench.analysis.stats import friedman_statistic
from mlbench.experiment import benchmark
from mlbench.learners import make_learner
from mlbench.results import BenchmarkResult, merge_benchmark_results


class TestRankMatrix:
    def test_shape_and_labels(self, quick_bmr: BenchmarkResult) -> None:
        ranks = convert_bmr_to_rank_matrix(quick_bmr)
        assert list(ranks.index) == quick_bmr.get_learner_ids()
        assert list(ranks.columns) == quick_bmr.get_task_ids()

    def test_best_learner_gets_rank_one(self, quick_bmr: BenchmarkResult) -> None:
        aggr = get_aggr_matrix(quick_bmr, "mmce")
        ranks = convert_bmr_to_rank_matrix(quick_bmr, "mmce", ties_method="min")
        for task_id in ranks.columns:
            assert ranks.loc[aggr[task_id].idxmin(), task_id] == 1

    def test_direction_follows_measure(self, quick_bmr: BenchmarkResult) -> None:
        by_error = convert_bmr_to_rank_matrix(quick_bmr, "mmce")
        by_accuracy = convert_bmr_to_rank_matrix(quick_bmr, "acc")
        pd.testing.assert_frame_equal(by_error, by_accuracy)

    def test_featureless_is_last_on_blobs(self, quick_bmr: BenchmarkResult) -> None:
        ranks = convert_bmr_to_rank_matrix(quick_bmr)
        assert ranks.loc["classif.featureless", "blobs"] == 3

    def test_mean_aggregation_matches_default_for_mean_measure(self, quick_bmr: BenchmarkResult) -> None:
        default = get_aggr_matrix(quick_bmr, "mmce")
        mean = get_aggr_matrix(quick_bmr, "mmce", aggregation="mean")
        np.testing.assert_allclose(default.to_numpy(), mean.to_numpy())

    def test_missing_pairs_are_nan(self, binary_task, multiclass_task, cv3) -> None:
        a = benchmark("classif.lda", binary_task, cv3, show_info=False)
        b = benchmark("classif.rpart", multiclass_task, cv3, show_info=False)
        ranks = convert_bmr_to_rank_matrix(merge_benchmark_results([a, b]))
        assert np.isnan(ranks.loc["classif.lda", "blobs"])
        assert ranks.loc["classif.lda", "moons"] == 1

    def test_invalid_arguments(self, quick_bmr: BenchmarkResult) -> None:
        with pytest.raises(ValueError, match="ties_method"):
            convert_bmr_to_rank_matrix(quick_bmr, ties_method="random")
        with pytest.raises(ValueError, match="aggregation"):
            get_aggr_matrix(quick_bmr, aggregation="median")


class TestFriedman:
    def test_statistic_matches_scipy(self) -> None:
        rng = np.random.default_rng(0)
        values = rng.normal(size=(8, 4))
        statistic, p_value, df = friedman_statistic(values)
        expected = stats.friedmanchisquare(*values.T)
        assert statistic == pytest.approx(expected.statistic)
        assert p_value == pytest.approx(expected.pvalue)
        assert df == 3

    def test_statistic_with_ties_matches_scipy(self) -> None:
        values = np.array([[1.0, 1.0, 2.0], [0.5, 0.7, 0.7], [0.1, 0.3, 0.2], [2.0, 1.0, 3.0]])
        statistic, _, _ = friedman_statistic(values)
        assert statistic == pytest.approx(stats.friedmanchisquare(*values.T).statistic)

    def test_all_ties_give_nan(self) -> None:
        statistic, p_value, _ = friedman_statistic(np.ones((3, 3)))
        assert np.isnan(statistic) and np.isnan(p_value)

    def test_bmr_matches_scipy(self, many_tasks_bmr: BenchmarkResult) -> None:
        result = friedman_test_bmr(many_tasks_bmr)
        mat = get_aggr_matrix(many_tasks_bmr, "mmce")
        expected = stats.friedmanchisquare(*mat.to_numpy())
        assert result.statistic == pytest.approx(expected.statistic)
        assert result.p_value == pytest.approx(expected.pvalue)
        assert (result.n_learners, result.n_tasks, result.df) == (3, 6, 2)
        assert "Friedman chi-squared" in str(result)

    def test_rejects_on_many_tasks(self, many_tasks_bmr: BenchmarkResult) -> None:
        assert friedman_test_bmr(many_tasks_bmr).p_value < 0.05

    def test_single_task_raises(self, binary_task, cv3) -> None:
        bmr = benchmark(["classif.lda", "classif.rpart"], binary_task, cv3, show_info=False)
        with pytest.raises(ValueError, match="at least 2 tasks"):
            friedman_test_bmr(bmr)

    def test_single_learner_raises(self, binary_task, multiclass_task, cv3) -> None:
        bmr = benchmark("classif.lda", [binary_task, multiclass_task], cv3, show_info=False)
        with pytest.raises(ValueError, match="at least 2 learners"):
            friedman_test_bmr(bmr)

    def test_missing_performance_raises(self, binary_task, multiclass_task, cv3) -> None:
        a = benchmark("classif.lda", binary_task, cv3, show_info=False)
        b = benchmark("classif.rpart", multiclass_task, cv3, show_info=False)
        with pytest.raises(ValueError, match="missing"):
            friedman_test_bmr(merge_benchmark_results([a, b]))


class TestPosthoc:
    def test_pairwise_p_values(self, many_tasks_bmr: BenchmarkResult) -> None:
        result = friedman_posthoc_test_bmr(many_tasks_bmr, p_value=0.05)
        assert result.f_rejnull
        p = result.p_values
        assert list(p.index) == many_tasks_bmr.get_learner_ids()
        np.testing.assert_allclose(p.to_numpy(), p.to_numpy().T, equal_nan=True)
        assert np.isnan(np.diag(p.to_numpy())).all()
        off_diag = p.to_numpy()[~np.eye(3, dtype=bool)]
        assert ((off_diag >= 0) & (off_diag <= 1)).all()
        assert result.critical_difference == pytest.approx(nemenyi_critical_difference(3, 6, 0.05))

    def test_featureless_has_worst_mean_rank(self, many_tasks_bmr: BenchmarkResult) -> None:
        result = friedman_posthoc_test_bmr(many_tasks_bmr)
        assert result.mean_ranks.idxmax() == "classif.featureless"
        assert result.mean_ranks["classif.featureless"] == pytest.approx(3.0)

    def test_not_rejected_warns(self, quick_bmr: BenchmarkResult) -> None:
        # two tasks can never give p < 0.05 with three learners
        with pytest.warns(UserWarning, match="Cannot reject"):
            result = friedman_posthoc_test_bmr(quick_bmr)
        assert not result.f_rejnull
        assert result.p_values is None
        assert "Cannot reject" in str(result)

    @pytest.mark.parametrize("p_value", [0.0, 1.0, -0.1])
    def test_invalid_p_value(self, quick_bmr: BenchmarkResult, p_value: float) -> None:
        with pytest.raises(ValueError, match="p_value"):
            friedman_posthoc_test_bmr(quick_bmr, p_value=p_value)


class TestCriticalDifference:
    def test_nemenyi_matches_table(self) -> None:
        # q_0.05 for three learners is 2.343
        cd = nemenyi_critical_difference(3, 6, 0.05)
        assert cd == pytest.approx(2.343 * np.sqrt(12 / 36), rel=1e-3)

    def test_bonferroni_dunn_matches_table(self) -> None:
        # q_0.05 for three learners is 2.241
        cd = bonferroni_dunn_critical_difference(3, 6, 0.05)
        assert cd == pytest.approx(2.241 * np.sqrt(12 / 36), rel=1e-3)

    def test_find_cliques(self) -> None:
        ranks = pd.Series({"a": 1.0, "b": 1.5, "c": 2.8, "d": 3.0})
        assert find_cliques(ranks, 1.0) == [["a", "b"], ["c", "d"]]
        assert find_cliques(ranks, 1.9) == [["a", "b", "c"], ["b", "c", "d"]]
        assert find_cliques(ranks, 0.1) == []

    def test_bd_data(self, many_tasks_bmr: BenchmarkResult) -> None:
        cd_data = generate_crit_differences_data(many_tasks_bmr, test="bd")
        df = cd_data.data
        assert list(df["rank"]) == [1, 2, 3]
        assert df.iloc[-1]["learner_id"] == "classif.featureless"
        assert bool(df.iloc[-1]["right"])
        assert df.iloc[-1]["xend"] == 4
        assert df.iloc[0]["xend"] == 0
        assert cd_data.baseline == df.iloc[0]["learner_id"]
        assert cd_data.cd_info["x"] == pytest.approx(df["mean_rank"].min())
        assert cd_data.cd_info["cd"] == pytest.approx(bonferroni_dunn_critical_difference(3, 6, 0.05))
        assert cd_data.measure_id == "mmce"

    def test_bd_with_baseline(self, many_tasks_bmr: BenchmarkResult) -> None:
        cd_data = generate_crit_differences_data(many_tasks_bmr, baseline="classif.featureless")
        assert cd_data.baseline == "classif.featureless"
        assert cd_data.cd_info["x"] == pytest.approx(3.0)

    def test_nemenyi_data(self, many_tasks_bmr: BenchmarkResult) -> None:
        cd_data = generate_crit_differences_data(many_tasks_bmr, test="nemenyi")
        assert cd_data.baseline is None
        cliques = cd_data.cd_info["cliques"]
        assert list(cliques.columns) == ["learners", "xstart", "xend", "y"]
        assert (cliques["xend"] - cliques["xstart"] <= cd_data.cd_info["cd"]).all()

    def test_drawn_without_rejection(self, quick_bmr: BenchmarkResult) -> None:
        cd_data = generate_crit_differences_data(quick_bmr)
        assert not cd_data.friedman_nemenyi_test.f_rejnull
        assert len(cd_data.data) == 3

    def test_invalid_arguments(self, many_tasks_bmr: BenchmarkResult) -> None:
        with pytest.raises(ValueError, match="test must be"):
            generate_crit_differences_data(many_tasks_bmr, test="holm")
        with pytest.raises(ValueError, match="Baseline"):
            generate_crit_differences_data(many_tasks_bmr, baseline="classif.svm")


class TestThresholdData:
    def test_columns_and_grid(self, quick_bmr: BenchmarkResult) -> None:
        data = generate_thresh_vs_perf_data(quick_bmr, gridsize=11)
        df = data.data
        assert list(df.columns) == ["task_id", "learner_id", "threshold", "fpr", "tpr"]
        # only the binary task is used
        assert set(df["task_id"]) == {"moons"}
        assert len(df) == 3 * 11
        assert data.measure_ids == ["fpr", "tpr"]

    def test_zero_threshold_predicts_positive(self, quick_bmr: BenchmarkResult) -> None:
        df = generate_thresh_vs_perf_data(quick_bmr, gridsize=5).data
        at_zero = df[df["threshold"] == 0.0]
        assert (at_zero["tpr"] == 1.0).all()
        assert (at_zero["fpr"] == 1.0).all()

    def test_tpr_decreases_with_threshold(self, quick_bmr: BenchmarkResult) -> None:
        df = generate_thresh_vs_perf_data(quick_bmr, learner_ids=["classif.lda"], gridsize=21).data
        assert (np.diff(df["tpr"].to_numpy()) <= 1e-12).all()

    def test_prob_measure_raises(self, quick_bmr: BenchmarkResult) -> None:
        with pytest.raises(ValueError, match="probabilities"):
            generate_thresh_vs_perf_data(quick_bmr, measures=["fpr", "auc"])

    def test_small_grid_raises(self, quick_bmr: BenchmarkResult) -> None:
        with pytest.raises(ValueError, match="gridsize"):
            generate_thresh_vs_perf_data(quick_bmr, gridsize=1)

    def test_multiclass_only_raises(self, multiclass_task, cv3) -> None:
        bmr = benchmark(make_learner("classif.lda", predict_type="prob"), multiclass_task, cv3,
                        show_info=False)
        with pytest.raises(ValueError, match="No binary task"):
            generate_thresh_vs_perf_data(bmr)
