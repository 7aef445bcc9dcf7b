"""Tests for benchmark(), add_learners() and add_tasks()."""

import numpy as np
import pytest

from mlbench.experiment import add_learners, add_tasks, benchmark
from mlbench.learners import make_learner
from mlbench.resampling import make_resample_desc
from mlbench.results import BenchmarkResult
from mlbench.tasks import ClassifTask, make_task


class TestBenchmark:
    def test_grouped_by_task_then_learner(self, quick_bmr: BenchmarkResult) -> None:
        assert quick_bmr.get_task_ids() == ["moons", "blobs"]
        assert quick_bmr.get_learner_ids() == ["classif.featureless", "classif.lda", "classif.rpart"]
        assert len(quick_bmr) == 6

    def test_timetrain_is_always_recorded(self, quick_bmr: BenchmarkResult) -> None:
        assert quick_bmr.get_measure_ids() == ["mmce", "acc", "timetrain"]

    def test_learners_share_splits_per_task(self, quick_bmr: BenchmarkResult) -> None:
        preds = quick_bmr.get_predictions(task_ids="moons")["moons"]
        lda = preds["classif.lda"].data
        rpart = preds["classif.rpart"].data
        for it in (1, 2, 3):
            ids_lda = sorted(lda.loc[lda["iter"] == it, "id"])
            ids_rpart = sorted(rpart.loc[rpart["iter"] == it, "id"])
            assert ids_lda == ids_rpart

    def test_learner_ids_as_strings(self, binary_task: ClassifTask, cv3) -> None:
        bmr = benchmark(["classif.lda", "classif.naiveBayes"], binary_task, cv3, show_info=False)
        assert bmr.get_learner_ids() == ["classif.lda", "classif.naiveBayes"]

    def test_default_resampling_is_10_fold_cv(self, binary_task: ClassifTask) -> None:
        bmr = benchmark("classif.lda", binary_task, show_info=False)
        assert bmr.get_resamplings()["moons"].iters == 10

    def test_seed_makes_runs_identical(self, binary_task: ClassifTask, cv3) -> None:
        a = benchmark("classif.randomForest", binary_task, cv3, seed=1, show_info=False)
        b = benchmark("classif.randomForest", binary_task, cv3, seed=1, show_info=False)
        np.testing.assert_array_equal(
            a.get_performances(as_df=True)["mmce"], b.get_performances(as_df=True)["mmce"]
        )

    def test_one_resampling_per_task(self, binary_task: ClassifTask, multiclass_task: ClassifTask) -> None:
        bmr = benchmark(
            "classif.lda",
            [binary_task, multiclass_task],
            [make_resample_desc("Holdout"), make_resample_desc("CV", iters=2)],
            show_info=False,
        )
        assert bmr.get_resamplings()["moons"].iters == 1
        assert bmr.get_resamplings()["blobs"].iters == 2

    def test_wrong_number_of_resamplings_raises(self, binary_task: ClassifTask, multiclass_task: ClassifTask) -> None:
        with pytest.raises(ValueError, match="resampling strategies"):
            benchmark("classif.lda", [binary_task, multiclass_task],
                      [make_resample_desc("Holdout")] * 3, show_info=False)

    def test_duplicate_learner_ids_raise(self, binary_task: ClassifTask, cv3) -> None:
        with pytest.raises(ValueError, match="unique"):
            benchmark([make_learner("classif.lda"), make_learner("classif.lda")], binary_task, cv3,
                      show_info=False)

    def test_binary_measure_on_multiclass_raises_before_running(self, multiclass_task: ClassifTask, cv3) -> None:
        with pytest.raises(ValueError, match="binary task"):
            benchmark("classif.lda", multiclass_task, cv3, measures=["f1"], show_info=False)

    def test_no_learners_raises(self, binary_task: ClassifTask) -> None:
        with pytest.raises(ValueError, match="No learners"):
            benchmark([], binary_task, show_info=False)

    def test_show_info_prints_progress(self, binary_task: ClassifTask, cv3, capsys) -> None:
        benchmark("classif.lda", binary_task, cv3, show_info=True)
        assert "Task: moons, Learner: classif.lda" in capsys.readouterr().out

    def test_prob_measure_warning_once_per_learner(self, binary_task: ClassifTask, cv3) -> None:
        tasks = [binary_task, make_task("moons", id="moons.small", n_samples=60, seed=5)]
        with pytest.warns(UserWarning, match="requires probabilities") as record:
            bmr = benchmark(["classif.lda", "classif.rpart"], tasks, cv3, measures=["mmce", "auc"],
                            show_info=False)
        messages = [str(w.message) for w in record if "requires probabilities" in str(w.message)]
        assert len(messages) == 2
        assert sum("classif.lda" in m for m in messages) == 1
        assert np.isnan(bmr.get_aggr_performances(task_ids="moons.small", learner_ids="classif.lda",
                                                  drop=True)["auc.test.mean"])


class TestExtendBenchmark:
    def test_add_learners_reuses_splits(self, quick_bmr: BenchmarkResult, binary_task: ClassifTask,
                                        multiclass_task: ClassifTask) -> None:
        extended = add_learners(quick_bmr, make_learner("classif.kknn"), [binary_task, multiclass_task],
                                show_info=False)
        assert extended.get_learner_ids()[-1] == "classif.kknn"
        assert len(extended) == 8
        assert extended.get_resamplings()["moons"].same_splits(quick_bmr.get_resamplings()["moons"])

    def test_add_learners_unknown_task_raises(self, quick_bmr: BenchmarkResult) -> None:
        with pytest.raises(ValueError, match="not part"):
            add_learners(quick_bmr, "classif.kknn", make_task("iris"), show_info=False)

    def test_add_tasks(self, quick_bmr: BenchmarkResult, cv3) -> None:
        extended = add_tasks(quick_bmr, make_task("iris"), cv3, show_info=False)
        assert extended.get_task_ids() == ["moons", "blobs", "iris"]
        assert list(extended.results["iris"]) == quick_bmr.get_learner_ids()

    def test_measures_cannot_be_overridden(self, quick_bmr: BenchmarkResult, binary_task: ClassifTask,
                                           cv3) -> None:
        with pytest.raises(ValueError, match="measures"):
            add_learners(quick_bmr, "classif.kknn", binary_task, measures=["ber"], show_info=False)
        with pytest.raises(ValueError, match="measures"):
            add_tasks(quick_bmr, make_task("iris"), cv3, measures=["ber"], show_info=False)
