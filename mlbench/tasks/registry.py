"""
Built-in classification tasks.

Real datasets come from scikit-learn's bundled loaders, synthetic ones from
its sample generators.
"""
import os
from typing import List, Optional

import pandas as pd
from sklearn import datasets

from .task import ClassifTask


def _from_bunch(task_id: str, bunch, target: str = "target", positive=None) -> ClassifTask:
    df = pd.DataFrame(bunch.data, columns=[str(c) for c in bunch.feature_names])
    df[target] = [bunch.target_names[i] for i in bunch.target]
    return ClassifTask(id=task_id, data=df, target=target, positive=positive)


def _from_arrays(task_id: str, X, y, positive=None) -> ClassifTask:
    df = pd.DataFrame(X, columns=[f"x{i + 1}" for i in range(X.shape[1])])
    df["target"] = [f"c{label}" for label in y]
    return ClassifTask(id=task_id, data=df, target="target", positive=positive)


def _iris(**kwargs) -> ClassifTask:
    return _from_bunch("iris", datasets.load_iris(), target="Species")


def _breast_cancer(**kwargs) -> ClassifTask:
    return _from_bunch("breast_cancer", datasets.load_breast_cancer(), target="diagnosis",
                       positive="malignant")


def _wine(**kwargs) -> ClassifTask:
    return _from_bunch("wine", datasets.load_wine(), target="cultivar")


def _digits(**kwargs) -> ClassifTask:
    bunch = datasets.load_digits()
    return _from_arrays("digits", bunch.data, bunch.target)


def _moons(n_samples: int = 200, noise: float = 0.25, seed: int = 0, **kwargs) -> ClassifTask:
    X, y = datasets.make_moons(n_samples=n_samples, noise=noise, random_state=seed)
    return _from_arrays("moons", X, y)


def _circles(n_samples: int = 200, noise: float = 0.1, seed: int = 0, **kwargs) -> ClassifTask:
    X, y = datasets.make_circles(n_samples=n_samples, noise=noise, factor=0.5, random_state=seed)
    return _from_arrays("circles", X, y)


def _blobs(n_samples: int = 200, noise: float = 1.5, seed: int = 0, **kwargs) -> ClassifTask:
    X, y = datasets.make_blobs(n_samples=n_samples, centers=3, cluster_std=noise, random_state=seed)
    return _from_arrays("blobs", X, y)


def _synthetic(n_samples: int = 300, noise: float = 0.05, seed: int = 0,
               n_features: int = 10, n_classes: int = 2, **kwargs) -> ClassifTask:
    X, y = datasets.make_classification(
        n_samples=n_samples,
        n_features=n_features,
        n_informative=max(2, n_features // 2),
        n_classes=n_classes,
        flip_y=noise,
        random_state=seed,
    )
    return _from_arrays("synthetic", X, y)


TASK_BUILDERS = {
    "iris": _iris,
    "breast_cancer": _breast_cancer,
    "wine": _wine,
    "digits": _digits,
    "moons": _moons,
    "circles": _circles,
    "blobs": _blobs,
    "synthetic": _synthetic,
}


def list_tasks() -> List[str]:
    """Names of the built-in tasks."""
    return list(TASK_BUILDERS)


def make_task(name: str, id: Optional[str] = None, **kwargs) -> ClassifTask:
    """
    Build a built-in task by name.

    Args:
        name: One of list_tasks().
        id: Optional task id (defaults to the name).
        **kwargs: Generator settings for synthetic tasks (n_samples, noise, seed).

    Returns:
        ClassifTask instance.
    """
    if name not in TASK_BUILDERS:
        raise ValueError(f"Unknown task: {name}. Available: {', '.join(TASK_BUILDERS)}")
    task = TASK_BUILDERS[name](**kwargs)
    if id is not None:
        task.id = id
    return task


def task_from_csv(path: str, target: str, id: Optional[str] = None, positive=None) -> ClassifTask:
    """
    Load a task from a CSV file.

    Args:
        path: Path to the CSV file.
        target: Name of the target column.
        id: Task id (defaults to the file stem).
        positive: Positive class for binary tasks.

    Returns:
        ClassifTask instance.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Task data not found at {path}")
    df = pd.read_csv(path)
    task_id = id or os.path.splitext(os.path.basename(path))[0]
    return ClassifTask(id=task_id, data=df, target=target, positive=positive)
