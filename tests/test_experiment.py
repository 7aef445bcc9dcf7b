"""Tests for run directories, stdout logging and progress tracking."""

import sys
from pathlib import Path

import pytest

from mlbench.experiment import (
    ExperimentManager,
    ProgressTracker,
    format_duration,
    restore_logging,
    setup_logging,
)


class TestExperimentManager:
    def test_run_ids_increase(self, tmp_path: Path) -> None:
        base = str(tmp_path / "experiments")
        first = ExperimentManager(base_dir=base)
        second = ExperimentManager(base_dir=base)
        first.setup(log=False)
        second.setup(log=False)
        assert first.experiment_id.endswith("_0")
        assert second.experiment_id.endswith("_1")
        assert Path(second.output_dir).name == f"bmr_{second.experiment_id}"
        assert (Path(base) / ".last_experiment_id").read_text() == second.experiment_id

    def test_log_file(self, tmp_path: Path) -> None:
        manager = ExperimentManager(base_dir=str(tmp_path), quiet=True)
        output_dir = manager.setup()
        try:
            print("fitting learners")
        finally:
            manager.close()
        log = Path(output_dir) / f"benchmark_{manager.experiment_id}_log.txt"
        assert "fitting learners" in log.read_text()

    def test_plots_dir(self, tmp_path: Path) -> None:
        manager = ExperimentManager(base_dir=str(tmp_path))
        manager.setup(log=False)
        assert Path(manager.plots_dir).is_dir()

    def test_find_and_list(self, tmp_path: Path) -> None:
        base = str(tmp_path)
        manager = ExperimentManager(base_dir=base)
        output_dir = manager.setup(log=False)
        assert ExperimentManager.find_experiment(base, manager.experiment_id) == output_dir
        assert ExperimentManager.find_experiment(base, f"bmr_{manager.experiment_id}") == output_dir
        assert ExperimentManager.find_experiment(base) == output_dir
        assert ExperimentManager.list_experiments(base) == [output_dir]

    def test_find_missing_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            ExperimentManager.find_experiment(str(tmp_path))
        with pytest.raises(FileNotFoundError, match="010101_9"):
            ExperimentManager.find_experiment(str(tmp_path), "010101_9")


class TestLogging:
    def test_tee(self, tmp_path: Path, capsys) -> None:
        log_path = tmp_path / "run.log"
        logger = setup_logging(str(log_path))
        print("to both")
        restore_logging(logger)
        assert "to both" in log_path.read_text()
        assert "to both" in capsys.readouterr().out

    def test_quiet(self, tmp_path: Path, capsys) -> None:
        log_path = tmp_path / "run.log"
        stdout = sys.stdout
        logger = setup_logging(str(log_path), quiet=True)
        print("only logged")
        restore_logging(logger)
        assert sys.stdout is stdout
        assert "only logged" in log_path.read_text()
        assert "only logged" not in capsys.readouterr().out


class TestProgress:
    def test_tracker(self) -> None:
        tracker = ProgressTracker(n_tasks=1, n_learners=2, quiet=True)
        assert tracker.total == 2
        assert tracker.elapsed_time == 0.0
        tracker.start()
        tracker.begin_pair("moons", "classif.lda")
        tracker.end_pair({"mmce.test.mean": 0.1})
        tracker.begin_pair("moons", "classif.rpart")
        tracker.end_pair({"mmce.test.mean": 0.2}, n_errors=2)
        assert tracker.finish() >= 0.0
        assert tracker.n_failed_iters == 2
        assert tracker.elapsed_str.endswith("s")

    def test_info_lines(self, capsys) -> None:
        tracker = ProgressTracker(n_tasks=1, n_learners=1)
        tracker.start()
        tracker.begin_pair("iris", "classif.lda")
        tracker.end_pair({"mmce.test.mean": 0.02}, n_errors=1)
        tracker.finish()
        out = capsys.readouterr().out
        assert "Task: iris, Learner: classif.lda" in out
        assert "mmce.test.mean=0.0200" in out
        assert "1 failed iteration(s)" in out

    @pytest.mark.parametrize("seconds, expected", [
        (45.2, "45.2s"),
        (83, "1m 23.0s"),
        (5025, "1h 23m 45s"),
    ])
    def test_format_duration(self, seconds: float, expected: str) -> None:
        assert format_duration(seconds) == expected
