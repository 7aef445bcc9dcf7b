"""
Shared pytest fixtures for mlbench tests.

Tasks are small and learners fast, so a full benchmark runs in seconds.
"""

import textwrap
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from mlbench.experiment import benchmark
from mlbench.learners import Learner, make_learner
from mlbench.resampling import make_resample_desc
from mlbench.tasks import ClassifTask, make_task


@pytest.fixture()
def binary_task() -> ClassifTask:
    return make_task("moons", n_samples=120, noise=0.3, seed=1)


@pytest.fixture()
def multiclass_task() -> ClassifTask:
    return make_task("blobs", n_samples=90, seed=2)


@pytest.fixture()
def tiny_df() -> pd.DataFrame:
    """Twelve rows, one numeric and one categorical feature, binary target."""
    rng = np.random.default_rng(0)
    return pd.DataFrame({
        "x": rng.normal(size=12),
        "color": ["red", "blue", "green"] * 4,
        "label": ["yes", "no"] * 6,
    })


@pytest.fixture()
def cv3():
    return make_resample_desc("CV", iters=3)


@pytest.fixture()
def quick_bmr(binary_task, multiclass_task, cv3):
    """Three learners on two tasks, 3-fold CV, probabilities kept."""
    learners = [
        make_learner("classif.featureless", predict_type="prob"),
        make_learner("classif.lda", predict_type="prob"),
        make_learner("classif.rpart", predict_type="prob"),
    ]
    return benchmark(
        learners,
        [binary_task, multiclass_task],
        cv3,
        measures=["mmce", "acc"],
        seed=42,
        show_info=False,
    )


@pytest.fixture()
def many_tasks_bmr(cv3):
    """Three learners on six tasks, enough for the Friedman test to reject."""
    tasks = [
        make_task("moons", id=f"moons_{i}", n_samples=150, noise=0.2, seed=i)
        for i in range(3)
    ] + [
        make_task("circles", id=f"circles_{i}", n_samples=150, noise=0.05, seed=i)
        for i in range(3)
    ]
    learners = [
        make_learner("classif.featureless"),
        make_learner("classif.rpart"),
        make_learner("classif.kknn"),
    ]
    return benchmark(learners, tasks, cv3, measures=["mmce"], seed=7, show_info=False)


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """A small benchmark config."""
    content = textwrap.dedent("""\
        tasks:
          - name: moons
            params:
              n_samples: 80
              seed: 3
          - iris
        learners:
          - name: classif.lda
            predict_type: prob
          - name: classif.rpart
            id: rpart.deep
            params:
              ccp_alpha: 0.0
        resampling:
          method: CV
          iters: 3
          stratify: true
        measures: [mmce, ber]
        experiment:
          seed: 11
          output_dir: out/
          on_learner_error: quiet
    """)
    config_file = tmp_path / "benchmark.yaml"
    config_file.write_text(content, encoding="utf-8")
    return config_file


class FailingLearner(Learner):
    """Fails to train in the listed iterations."""

    def __init__(self, fail_on=(1,), **kwargs):
        self.fail_on = set(fail_on)
        self._calls = 0
        super().__init__("classif.failing", **kwargs)

    @property
    def supports_prob(self) -> bool:
        return False

    def _fit(self, X, y, class_levels):
        self._calls += 1
        if self._calls in self.fail_on:
            raise RuntimeError("boom")
        return class_levels[0]

    def _predict(self, model, X, class_levels):
        return np.array([model] * len(X), dtype=object), None


@pytest.fixture()
def failing_learner():
    return FailingLearner
