"""
Resampling a single learner on a single task.
"""
import time
import warnings
from typing import List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from ..learners.base import Learner, LearnerError
from ..measures.measures import Measure, default_measure, resolve_measure
from ..results.types import FailureRecord, ResamplePrediction, ResampleResult
from ..tasks.task import ClassifTask
from .desc import ResampleDesc, ResampleInstance, make_resample_instance


ON_LEARNER_ERROR = ("stop", "warn", "quiet")


def warn_missing_prob(measures: Sequence[Measure], learner: Learner, stacklevel: int = 3) -> None:
    """Warn for every probability measure the learner cannot serve."""
    for measure in measures:
        if measure.requires_prob and learner.predict_type != "prob":
            warnings.warn(
                f"Measure '{measure.id}' requires probabilities, but learner '{learner.id}' "
                f"has predict_type='{learner.predict_type}'. Values will be NaN.",
                UserWarning,
                stacklevel=stacklevel,
            )


def check_measures(measures: Sequence[Measure], task: ClassifTask, learner: Learner,
                   warn: bool = True) -> None:
    """
    Validate measures against a task and learner.

    Binary-only measures on multiclass tasks are an error. Probability
    measures on learners without probabilities only warn (unless warn is
    False); their values will be NaN.
    """
    for measure in measures:
        if measure.requires_binary and not task.is_binary:
            raise ValueError(
                f"Measure '{measure.id}' requires a binary task, but task '{task.id}' "
                f"has {len(task.class_levels)} classes"
            )
    if warn:
        warn_missing_prob(measures, learner, stacklevel=4)


def resample(
    learner: Learner,
    task: ClassifTask,
    resampling: Union[ResampleDesc, ResampleInstance],
    measures: Optional[Sequence[Union[Measure, str]]] = None,
    models: bool = False,
    keep_pred: bool = True,
    on_learner_error: str = "warn",
    warn_prob: bool = True,
) -> ResampleResult:
    """
    Fit and evaluate a learner on every resampling iteration.

    Args:
        learner: Learner to evaluate.
        task: Task providing the data.
        resampling: Description (instantiated here) or instance.
        measures: Measures or measure ids (default: the task's default measure).
        models: Keep the fitted model of every iteration.
        keep_pred: Keep the test-set predictions.
        on_learner_error: 'stop' raises LearnerError, 'warn' prints and continues
            with NaN performance, 'quiet' continues silently.
        warn_prob: Warn about probability measures the learner cannot serve.

    Returns:
        ResampleResult with per-iteration and aggregated performance.
    """
    if on_learner_error not in ON_LEARNER_ERROR:
        raise ValueError(f"on_learner_error must be one of {ON_LEARNER_ERROR}, got '{on_learner_error}'")

    measures = [resolve_measure(m) for m in measures] if measures else [default_measure(task)]
    check_measures(measures, task, learner, warn=warn_prob)

    if isinstance(resampling, ResampleDesc):
        resampling = make_resample_instance(resampling, task=task)
    if resampling.size != task.n_obs:
        raise ValueError(
            f"Resample instance size {resampling.size} does not match task '{task.id}' "
            f"size {task.n_obs}"
        )

    start = time.perf_counter()
    rows = []
    pred_frames: List[pd.DataFrame] = []
    kept_models = [] if models else None
    err_msgs = {}
    failures: List[FailureRecord] = []

    for i, (train_idx, test_idx) in enumerate(resampling, start=1):
        X_train, y_train = task.subset(train_idx)
        X_test, y_test = task.subset(test_idx)

        try:
            wrapped = learner.train(X_train, y_train, task.class_levels, task_id=task.id, iteration=i)
            t0 = time.perf_counter()
            response, prob = learner.predict(wrapped, X_test)
            predict_time = time.perf_counter() - t0
        except Exception as e:
            if on_learner_error == "stop":
                raise LearnerError(learner.id, task.id, i, e) from e
            message = f"{type(e).__name__}: {e}"
            if on_learner_error == "warn":
                print(f"WARNING: learner '{learner.id}' failed on task '{task.id}' (iter {i}): {message}")
            err_msgs[i] = message
            failures.append(FailureRecord(
                task_id=task.id,
                learner_id=learner.id,
                iteration=i,
                error_type=type(e).__name__,
                error_message=str(e),
            ))
            rows.append({'iter': i, **{m.id: float('nan') for m in measures}})
            if kept_models is not None:
                kept_models.append(None)
            continue

        row = {'iter': i}
        for m in measures:
            row[m.id] = m.compute(
                truth=y_test,
                response=response,
                prob=prob,
                class_levels=task.class_levels,
                positive=task.positive,
                train_time=wrapped.train_time,
                predict_time=predict_time,
            )
        rows.append(row)

        if kept_models is not None:
            kept_models.append(wrapped)

        if keep_pred:
            frame = pd.DataFrame({'id': test_idx, 'truth': y_test, 'response': response})
            if prob is not None:
                for j, level in enumerate(task.class_levels):
                    frame[f"prob.{level}"] = prob[:, j]
            frame['iter'] = i
            frame['set'] = 'test'
            pred_frames.append(frame)

    measures_test = pd.DataFrame(rows, columns=['iter'] + [m.id for m in measures])
    aggr = {m.aggr_id: m.aggregation(measures_test[m.id].to_numpy()) for m in measures}

    pred = None
    if keep_pred:
        data = pd.concat(pred_frames, ignore_index=True) if pred_frames else pd.DataFrame(
            columns=['id', 'truth', 'response', 'iter', 'set'])
        pred = ResamplePrediction(data, task.class_levels, learner.predict_type, positive=task.positive)

    return ResampleResult(
        task_id=task.id,
        learner_id=learner.id,
        measures_test=measures_test,
        aggr=aggr,
        pred=pred,
        models=kept_models,
        err_msgs=err_msgs,
        failures=failures,
        runtime=time.perf_counter() - start,
    )
