"""
Benchmark result: resampling outcomes for every (task, learner) pair.

Results are grouped first by task, then by learner; insertion order is
kept and drives default tables and plots.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

import pandas as pd

from ..measures.measures import Measure, resolve_measure
from ..resampling.desc import ResampleInstance
from .types import FailureRecord, ResampleResult


@dataclass
class LearnerInfo:
    """Description of a learner restored from disk (the fitted object is not needed for analysis)."""
    id: str
    short_name: str
    predict_type: str = "response"
    params: Dict[str, Any] = field(default_factory=dict)
    cls: str = ""

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'short_name': self.short_name,
            'predict_type': self.predict_type,
            'class': self.cls,
            'params': self.params,
        }

    @classmethod
    def from_dict(cls, d: dict) -> 'LearnerInfo':
        return cls(
            id=d['id'],
            short_name=d.get('short_name', d['id']),
            predict_type=d.get('predict_type', 'response'),
            params=d.get('params', {}),
            cls=d.get('class', ''),
        )


class BenchmarkResult:
    """
    Container for the results of a benchmark experiment.

    Usage:
        bmr = benchmark(learners, tasks, rdesc, measures=[mmce, ber])
        bmr.get_aggr_performances(as_df=True)
        bmr.get_performances(task_ids=["iris"], drop=True)
    """

    def __init__(
        self,
        results: Dict[str, Dict[str, ResampleResult]],
        measures: Sequence[Measure],
        learners: Dict[str, Any],
        resamplings: Optional[Dict[str, ResampleInstance]] = None,
    ):
        """
        Args:
            results: Ordered mapping task id -> learner id -> ResampleResult.
            measures: Measures computed in every resampling.
            learners: Ordered mapping learner id -> Learner (or LearnerInfo).
            resamplings: Mapping task id -> the resample instance used on that task.
        """
        self.results = results
        self.measures = list(measures)
        self.learners = learners
        self.resamplings = resamplings or {}

    # ------------------------------------------------------------------
    # Ids and objects
    # ------------------------------------------------------------------

    def get_task_ids(self) -> List[str]:
        return list(self.results)

    def get_learner_ids(self) -> List[str]:
        """Learner ids in order of first appearance."""
        ids: List[str] = []
        for per_task in self.results.values():
            for learner_id in per_task:
                if learner_id not in ids:
                    ids.append(learner_id)
        return ids

    def get_measure_ids(self) -> List[str]:
        return [m.id for m in self.measures]

    def get_measures(self) -> List[Measure]:
        return list(self.measures)

    def get_learners(self) -> List[Any]:
        return [self.learners[lid] for lid in self.get_learner_ids()]

    def get_learner_short_names(self) -> List[str]:
        return [self.learners[lid].short_name for lid in self.get_learner_ids()]

    def get_resamplings(self) -> Dict[str, ResampleInstance]:
        return dict(self.resamplings)

    def get_measure(self, measure=None) -> Measure:
        """
        Resolve a measure of this result.

        Args:
            measure: Measure, measure id, or None for the first measure.
        """
        if measure is None:
            return self.measures[0]
        stored = {m.id: m for m in self.measures}
        if isinstance(measure, str) and measure in stored:
            return stored[measure]
        resolved = resolve_measure(measure)
        if resolved.id not in stored:
            raise ValueError(
                f"Measure '{resolved.id}' not in benchmark result. Available: {self.get_measure_ids()}")
        return resolved

    def aggregate(self, rr: ResampleResult, measure: Measure) -> float:
        """Aggregated value of a measure, recomputed if its aggregation differs from the stored one."""
        if measure.aggr_id in rr.aggr:
            return rr.aggr[measure.aggr_id]
        return measure.aggregation(rr.measures_test[measure.id].to_numpy())

    def iter_results(
        self,
        task_ids: Optional[Sequence[str]] = None,
        learner_ids: Optional[Sequence[str]] = None,
    ) -> Iterator[Tuple[str, str, ResampleResult]]:
        """Yield (task_id, learner_id, ResampleResult) in result order."""
        task_ids = self._check_ids(task_ids, self.get_task_ids(), "task")
        learner_ids = self._check_ids(learner_ids, self.get_learner_ids(), "learner")
        for task_id in task_ids:
            for learner_id, rr in self.results[task_id].items():
                if learner_id in learner_ids:
                    yield task_id, learner_id, rr

    @staticmethod
    def _check_ids(requested, available, kind) -> List[str]:
        if requested is None:
            return list(available)
        if isinstance(requested, str):
            requested = [requested]
        unknown = [r for r in requested if r not in available]
        if unknown:
            raise ValueError(f"Unknown {kind} ids: {unknown}. Available: {list(available)}")
        return [a for a in available if a in requested]

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_performances(self, task_ids=None, learner_ids=None, as_df: bool = False, drop: bool = False):
        """
        Per-iteration test performance.

        Returns:
            Nested {task: {learner: DataFrame}} or, with as_df=True, one long
            DataFrame with task_id, learner_id, iter and one column per measure.
        """
        if as_df:
            frames = []
            for task_id, learner_id, rr in self.iter_results(task_ids, learner_ids):
                df = rr.measures_test.copy()
                df.insert(0, 'learner_id', learner_id)
                df.insert(0, 'task_id', task_id)
                frames.append(df)
            return self._finish_df(frames)
        return self._nested(lambda rr: rr.measures_test, task_ids, learner_ids, drop)

    def get_aggr_performances(self, task_ids=None, learner_ids=None, as_df: bool = False, drop: bool = False):
        """
        Aggregated performance.

        Returns:
            Nested {task: {learner: {aggr_id: value}}} or a DataFrame with one
            row per (task, learner) pair.
        """
        if as_df:
            rows = [
                {'task_id': t, 'learner_id': l, **rr.aggr}
                for t, l, rr in self.iter_results(task_ids, learner_ids)
            ]
            if not rows:
                return pd.DataFrame(columns=['task_id', 'learner_id'])
            return self._categorize(pd.DataFrame(rows))
        return self._nested(lambda rr: dict(rr.aggr), task_ids, learner_ids, drop)

    def get_predictions(self, task_ids=None, learner_ids=None, as_df: bool = False, drop: bool = False):
        """
        Test-set predictions.

        Raises:
            ValueError: If predictions were not kept (keep_pred=False).
        """
        selected = list(self.iter_results(task_ids, learner_ids))
        missing = [(t, l) for t, l, rr in selected if rr.pred is None]
        if missing:
            raise ValueError(f"Predictions were not kept for {missing}. Rerun with keep_pred=True.")
        if as_df:
            frames = []
            for task_id, learner_id, rr in selected:
                df = rr.pred.data.copy()
                df.insert(0, 'learner_id', learner_id)
                df.insert(0, 'task_id', task_id)
                frames.append(df)
            return self._finish_df(frames)
        return self._nested(lambda rr: rr.pred, task_ids, learner_ids, drop)

    def get_models(self, task_ids=None, learner_ids=None, drop: bool = False):
        """
        Fitted models, one list per (task, learner) pair.

        Raises:
            ValueError: If models were not kept (models=False).
        """
        missing = [(t, l) for t, l, rr in self.iter_results(task_ids, learner_ids) if rr.models is None]
        if missing:
            raise ValueError(f"Models were not kept for {missing}. Rerun with models=True.")
        return self._nested(lambda rr: rr.models, task_ids, learner_ids, drop)

    def get_failures(self) -> List[FailureRecord]:
        return [f for _, _, rr in self.iter_results() for f in rr.failures]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _nested(self, fn: Callable[[ResampleResult], Any], task_ids, learner_ids, drop: bool):
        out: Dict[str, Dict[str, Any]] = {}
        for task_id, learner_id, rr in self.iter_results(task_ids, learner_ids):
            out.setdefault(task_id, {})[learner_id] = fn(rr)
        if not drop:
            return out

        single_learner = all(len(v) == 1 for v in out.values()) and len(
            {lid for v in out.values() for lid in v}) == 1
        if len(out) == 1:
            inner = next(iter(out.values()))
            return next(iter(inner.values())) if single_learner else inner
        if single_learner:
            return {task_id: next(iter(v.values())) for task_id, v in out.items()}
        return out

    def _categorize(self, df: pd.DataFrame) -> pd.DataFrame:
        """Make task_id and learner_id ordered categoricals following result order."""
        df['task_id'] = pd.Categorical(df['task_id'], categories=self.get_task_ids(), ordered=True)
        df['learner_id'] = pd.Categorical(df['learner_id'], categories=self.get_learner_ids(), ordered=True)
        return df

    def _finish_df(self, frames: List[pd.DataFrame]) -> pd.DataFrame:
        if not frames:
            return pd.DataFrame(columns=['task_id', 'learner_id'])
        return self._categorize(pd.concat(frames, ignore_index=True))

    def __len__(self) -> int:
        return sum(len(v) for v in self.results.values())

    def __repr__(self) -> str:
        df = self.get_aggr_performances(as_df=True)
        return df.to_string(index=False)
