"""Tests for saving and loading benchmark results."""

import json
from pathlib import Path

import numpy as np
import pytest

from mlbench.experiment import benchmark
from mlbench.learners import Learner
from mlbench.resampling import make_resample_instance
from mlbench.tasks import make_task
from mlbench.results import (
    BenchmarkResult,
    LearnerInfo,
    load_benchmark_result,
    merge_benchmark_results,
    save_benchmark_result,
)


class TestSave:
    def test_writes_expected_files(self, quick_bmr: BenchmarkResult, tmp_path: Path) -> None:
        out = save_benchmark_result(quick_bmr, tmp_path / "run")
        assert (out / "benchmark.json").exists()
        assert (out / "performances.csv").exists()
        assert (out / "aggregated.csv").exists()
        assert (out / "predictions.csv").exists()
        # no failures and no models kept
        assert not (out / "failures.csv").exists()
        assert not (out / "models.pkl").exists()

    def test_metadata(self, quick_bmr: BenchmarkResult, tmp_path: Path) -> None:
        out = save_benchmark_result(quick_bmr, tmp_path)
        meta = json.loads((out / "benchmark.json").read_text())
        assert meta["task_ids"] == ["moons", "blobs"]
        assert [m["id"] for m in meta["measures"]] == ["mmce", "acc", "timetrain"]
        assert meta["positive"] == {"moons": "c0"}
        assert set(meta["resamplings"]) == {"moons", "blobs"}

    def test_models_are_pickled(self, binary_task, cv3, tmp_path: Path) -> None:
        bmr = benchmark("classif.lda", binary_task, cv3, models=True, show_info=False)
        out = save_benchmark_result(bmr, tmp_path)
        assert (out / "models.pkl").exists()


class TestLoad:
    def test_restores_result(self, quick_bmr: BenchmarkResult, tmp_path: Path) -> None:
        save_benchmark_result(quick_bmr, tmp_path)
        loaded = load_benchmark_result(tmp_path)
        assert loaded.get_task_ids() == quick_bmr.get_task_ids()
        assert loaded.get_learner_ids() == quick_bmr.get_learner_ids()
        assert loaded.get_measure_ids() == quick_bmr.get_measure_ids()
        assert loaded.get_learner_short_names() == quick_bmr.get_learner_short_names()

    def test_restores_performance(self, quick_bmr: BenchmarkResult, tmp_path: Path) -> None:
        save_benchmark_result(quick_bmr, tmp_path)
        loaded = load_benchmark_result(tmp_path)
        np.testing.assert_allclose(
            loaded.get_performances(as_df=True)["mmce"],
            quick_bmr.get_performances(as_df=True)["mmce"],
        )
        a = loaded.get_aggr_performances(task_ids="blobs", learner_ids="classif.lda", drop=True)
        b = quick_bmr.get_aggr_performances(task_ids="blobs", learner_ids="classif.lda", drop=True)
        assert a["mmce.test.mean"] == pytest.approx(b["mmce.test.mean"])

    def test_restores_predictions(self, quick_bmr: BenchmarkResult, tmp_path: Path) -> None:
        save_benchmark_result(quick_bmr, tmp_path)
        loaded = load_benchmark_result(tmp_path)
        pred = loaded.get_predictions(task_ids="moons", learner_ids="classif.rpart", drop=True)
        assert pred.positive == "c0"
        assert pred.has_prob
        assert len(pred) == 120

    def test_numeric_looking_ids_stay_strings(self, cv3, tmp_path: Path) -> None:
        task = make_task("moons", id="2024", n_samples=120, noise=0.3, seed=1)
        bmr = benchmark("classif.lda", task, cv3, show_info=False)
        save_benchmark_result(bmr, tmp_path)
        loaded = load_benchmark_result(tmp_path)
        assert loaded.get_task_ids() == ["2024"]
        a = loaded.get_aggr_performances(task_ids="2024", learner_ids="classif.lda", drop=True)
        b = bmr.get_aggr_performances(task_ids="2024", learner_ids="classif.lda", drop=True)
        assert a["mmce.test.mean"] == pytest.approx(b["mmce.test.mean"])

    def test_predictions_kept_for_some_pairs_only(self, binary_task, cv3, tmp_path: Path) -> None:
        inst = make_resample_instance(cv3, task=binary_task, seed=4)
        kept = benchmark("classif.lda", binary_task, inst, show_info=False)
        dropped = benchmark("classif.rpart", binary_task, inst, keep_pred=False, show_info=False)
        save_benchmark_result(merge_benchmark_results([kept, dropped]), tmp_path)
        assert (tmp_path / "predictions.csv").exists()
        loaded = load_benchmark_result(tmp_path)
        assert len(loaded.get_predictions(task_ids="moons", learner_ids="classif.lda", drop=True)) == 120
        assert loaded.results["moons"]["classif.rpart"].pred is None

    def test_learners_become_descriptions(self, quick_bmr: BenchmarkResult, tmp_path: Path) -> None:
        save_benchmark_result(quick_bmr, tmp_path)
        loaded = load_benchmark_result(tmp_path)
        learner = loaded.learners["classif.lda"]
        assert isinstance(learner, LearnerInfo)
        assert not isinstance(learner, Learner)
        assert learner.predict_type == "prob"

    def test_loaded_results_merge(self, binary_task, cv3, tmp_path: Path) -> None:
        inst = make_resample_instance(cv3, task=binary_task, seed=9)
        a = benchmark("classif.lda", binary_task, inst, show_info=False)
        b = benchmark("classif.rpart", binary_task, inst, show_info=False)
        save_benchmark_result(a, tmp_path / "a")
        save_benchmark_result(b, tmp_path / "b")
        merged = merge_benchmark_results([
            load_benchmark_result(tmp_path / "a"),
            load_benchmark_result(tmp_path / "b"),
        ])
        assert merged.get_learner_ids() == ["classif.lda", "classif.rpart"]

    def test_failures_round_trip(self, binary_task, cv3, failing_learner, tmp_path: Path) -> None:
        bmr = benchmark(failing_learner(fail_on=[1]), binary_task, cv3, on_learner_error="quiet",
                        show_info=False)
        save_benchmark_result(bmr, tmp_path)
        loaded = load_benchmark_result(tmp_path)
        failures = loaded.get_failures()
        assert len(failures) == 1
        assert failures[0].error_type == "RuntimeError"
        assert loaded.results["moons"]["classif.failing"].err_msgs == {1: "RuntimeError: boom"}

    def test_missing_directory_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_benchmark_result(tmp_path / "nothing")
