"""
Saving and loading benchmark results.

A saved run directory looks like:

    bmr_dir/
    ├── benchmark.json      # measures, learners, task order, resample instances
    ├── performances.csv    # one row per (task, learner, iteration)
    ├── aggregated.csv      # one row per (task, learner)
    ├── predictions.csv     # test-set predictions (if kept)
    ├── failures.csv        # failed iterations (if any)
    └── models.pkl          # fitted models (if kept and requested)
"""
import json
import pickle
from datetime import datetime
from pathlib import Path
from typing import Dict, List

import numpy as np
import pandas as pd

from ..measures.measures import get_measure, set_aggregation
from ..resampling.desc import ResampleInstance
from .benchmark_result import BenchmarkResult, LearnerInfo
from .types import FailureRecord, ResamplePrediction, ResampleResult


BENCHMARK_FILE = "benchmark.json"

# ids that look like numbers must stay strings
ID_DTYPES = {'task_id': str, 'learner_id': str}


def save_benchmark_result(bmr: BenchmarkResult, output_dir, save_models: bool = True) -> Path:
    """
    Save a benchmark result to a directory.

    Args:
        bmr: Result to save.
        output_dir: Target directory (created if needed).
        save_models: Pickle kept models to models.pkl.

    Returns:
        Path to the output directory.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    _save_metadata(bmr, output_dir)
    bmr.get_performances(as_df=True).to_csv(output_dir / "performances.csv", index=False)
    bmr.get_aggr_performances(as_df=True).to_csv(output_dir / "aggregated.csv", index=False)
    _save_predictions(bmr, output_dir)
    _save_failures(bmr, output_dir)
    if save_models:
        _save_models(bmr, output_dir)
    return output_dir


def _save_metadata(bmr: BenchmarkResult, output_dir: Path):
    """Save benchmark.json with everything that is not tabular."""
    pairs = []
    class_levels = {}
    positives = {}
    for task_id, learner_id, rr in bmr.iter_results():
        pairs.append({
            'task_id': task_id,
            'learner_id': learner_id,
            'runtime': rr.runtime,
            'err_msgs': {str(k): v for k, v in rr.err_msgs.items()},
            'has_pred': rr.pred is not None,
        })
        if rr.pred is not None:
            class_levels[task_id] = [_native(v) for v in rr.pred.class_levels]
            if rr.pred.positive is not None:
                positives[task_id] = _native(rr.pred.positive)

    meta = {
        'created': datetime.now().isoformat(),
        'task_ids': bmr.get_task_ids(),
        'measures': [m.to_dict() for m in bmr.measures],
        'learners': [bmr.learners[lid].to_dict() for lid in bmr.get_learner_ids()],
        'pairs': pairs,
        'class_levels': class_levels,
        'positive': positives,
        'resamplings': {task_id: inst.to_dict() for task_id, inst in bmr.resamplings.items()},
    }
    with open(output_dir / BENCHMARK_FILE, 'w') as f:
        json.dump(meta, f, indent=2)


def _save_predictions(bmr: BenchmarkResult, output_dir: Path):
    """Save predictions.csv with the predictions of every pair that kept them."""
    frames = [
        rr.pred.data.assign(task_id=task_id, learner_id=learner_id)
        for task_id, learner_id, rr in bmr.iter_results()
        if rr.pred is not None
    ]
    if not frames:
        return
    df = pd.concat(frames, ignore_index=True)
    front = ['task_id', 'learner_id']
    df[front + [c for c in df.columns if c not in front]].to_csv(output_dir / "predictions.csv", index=False)


def _save_failures(bmr: BenchmarkResult, output_dir: Path):
    """Save failures.csv with all failed iterations."""
    failures = bmr.get_failures()
    if not failures:
        return
    pd.DataFrame([f.to_dict() for f in failures]).to_csv(output_dir / "failures.csv", index=False)


def _save_models(bmr: BenchmarkResult, output_dir: Path):
    models = {(t, l): rr.models for t, l, rr in bmr.iter_results() if rr.models is not None}
    if models:
        with open(output_dir / "models.pkl", 'wb') as f:
            pickle.dump(models, f)


def _native(value):
    if isinstance(value, np.generic):
        return value.item()
    return value


def load_benchmark_result(input_dir) -> BenchmarkResult:
    """
    Load a benchmark result saved with save_benchmark_result().

    Learners are restored as LearnerInfo descriptions; everything needed
    for merging, analysis and plotting is available.

    Raises:
        FileNotFoundError: If the directory holds no benchmark.json.
    """
    input_dir = Path(input_dir)
    meta_path = input_dir / BENCHMARK_FILE
    if not meta_path.exists():
        raise FileNotFoundError(f"No {BENCHMARK_FILE} found in {input_dir}")

    with open(meta_path) as f:
        meta = json.load(f)

    measures = [set_aggregation(get_measure(m['id']), m['aggregation']) for m in meta['measures']]
    learners = {d['id']: LearnerInfo.from_dict(d) for d in meta['learners']}
    resamplings = {t: ResampleInstance.from_dict(d) for t, d in meta.get('resamplings', {}).items()}

    perf = pd.read_csv(input_dir / "performances.csv", dtype=ID_DTYPES)
    aggr = pd.read_csv(input_dir / "aggregated.csv", dtype=ID_DTYPES)

    pred_path = input_dir / "predictions.csv"
    preds = pd.read_csv(pred_path, dtype=ID_DTYPES) if pred_path.exists() else None

    models: Dict = {}
    models_path = input_dir / "models.pkl"
    if models_path.exists():
        with open(models_path, 'rb') as f:
            models = pickle.load(f)

    failures = _load_failures(input_dir)
    measure_ids = [m.id for m in measures]
    aggr_ids = [m.aggr_id for m in measures]

    results: Dict[str, Dict[str, ResampleResult]] = {task_id: {} for task_id in meta['task_ids']}
    for pair in meta['pairs']:
        task_id, learner_id = pair['task_id'], pair['learner_id']
        perf_mask = (perf['task_id'] == task_id) & (perf['learner_id'] == learner_id)
        measures_test = perf.loc[perf_mask, ['iter'] + measure_ids].reset_index(drop=True)
        aggr_row = aggr[(aggr['task_id'] == task_id) & (aggr['learner_id'] == learner_id)].iloc[0]

        pred = None
        if preds is not None and pair.get('has_pred', True):
            mask = (preds['task_id'] == task_id) & (preds['learner_id'] == learner_id)
            data = preds.loc[mask].drop(columns=['task_id', 'learner_id']).reset_index(drop=True)
            data = data.dropna(axis=1, how='all')
            pred = ResamplePrediction(
                data,
                meta['class_levels'].get(task_id, []),
                learners[learner_id].predict_type,
                positive=meta.get('positive', {}).get(task_id),
            )

        results[task_id][learner_id] = ResampleResult(
            task_id=task_id,
            learner_id=learner_id,
            measures_test=measures_test,
            aggr={a: float(aggr_row[a]) for a in aggr_ids},
            pred=pred,
            models=models.get((task_id, learner_id)),
            err_msgs={int(k): v for k, v in pair.get('err_msgs', {}).items()},
            failures=[fr for fr in failures if fr.task_id == task_id and fr.learner_id == learner_id],
            runtime=pair.get('runtime', 0.0),
        )

    return BenchmarkResult(results=results, measures=measures, learners=learners, resamplings=resamplings)


def _load_failures(input_dir: Path) -> List[FailureRecord]:
    path = input_dir / "failures.csv"
    if not path.exists():
        return []
    df = pd.read_csv(path, dtype=ID_DTYPES)
    return [
        FailureRecord(
            task_id=row['task_id'],
            learner_id=row['learner_id'],
            iteration=int(row['iteration']),
            error_type=row['error_type'],
            error_message=str(row['error_message']),
            timestamp=row['timestamp'],
        )
        for _, row in df.iterrows()
    ]
