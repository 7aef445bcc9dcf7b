"""
Configuration dataclasses and loader for benchmark experiments.

Sections: tasks, learners, resampling, measures and experiment.
"""
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional
from enum import Enum
import os
import yaml

from ..learners.base import Learner
from ..learners.registry import make_learner
from ..resampling.desc import ResampleDesc, make_resample_desc
from ..tasks.registry import make_task, task_from_csv
from ..tasks.task import ClassifTask


class OnLearnerError(Enum):
    """What to do when a learner fails in a resampling iteration."""
    STOP = "stop"
    WARN = "warn"
    QUIET = "quiet"


@dataclass
class TaskSpec:
    """A built-in task (name) or a CSV file (path + target)."""
    name: Optional[str] = None
    id: Optional[str] = None
    params: Dict[str, Any] = field(default_factory=dict)
    path: Optional[str] = None
    target: Optional[str] = None
    positive: Any = None

    def build(self) -> ClassifTask:
        if self.path is not None:
            if self.target is None:
                raise ValueError(f"Task from {self.path} needs a 'target' column")
            return task_from_csv(self.path, self.target, id=self.id, positive=self.positive)
        if self.name is None:
            raise ValueError("A task needs either 'name' or 'path'")
        return make_task(self.name, id=self.id, **self.params)


@dataclass
class LearnerSpec:
    """A learner from the registry with optional hyperparameters."""
    name: str
    id: Optional[str] = None
    predict_type: str = "response"
    short_name: Optional[str] = None
    params: Dict[str, Any] = field(default_factory=dict)

    def build(self) -> Learner:
        return make_learner(
            self.name,
            id=self.id,
            predict_type=self.predict_type,
            short_name=self.short_name,
            **self.params,
        )


@dataclass
class ResamplingSettings:
    """Resampling strategy shared by all tasks."""
    method: str = "CV"
    iters: Optional[int] = None
    folds: Optional[int] = None
    reps: Optional[int] = None
    split: Optional[float] = None
    stratify: bool = False

    def build(self) -> ResampleDesc:
        kwargs = {k: v for k, v in (('iters', self.iters), ('folds', self.folds),
                                    ('reps', self.reps), ('split', self.split)) if v is not None}
        return make_resample_desc(self.method, stratify=self.stratify, **kwargs)


@dataclass
class ExperimentSettings:
    """Configuration for experiment execution."""
    seed: int = 123
    output_dir: str = "experiments/"
    keep_pred: bool = True
    models: bool = False
    on_learner_error: OnLearnerError = OnLearnerError.WARN
    p_value: float = 0.05


@dataclass
class BenchmarkConfig:
    """Complete configuration."""
    tasks: List[TaskSpec]
    learners: List[LearnerSpec]
    resampling: ResamplingSettings
    measures: List[str]
    experiment: ExperimentSettings

    def build_tasks(self) -> List[ClassifTask]:
        return [t.build() for t in self.tasks]

    def build_learners(self) -> List[Learner]:
        return [l.build() for l in self.learners]


def _parse_task(raw) -> TaskSpec:
    if isinstance(raw, str):
        return TaskSpec(name=raw)
    return TaskSpec(
        name=raw.get('name'),
        id=raw.get('id'),
        params=dict(raw.get('params') or {}),
        path=raw.get('path'),
        target=raw.get('target'),
        positive=raw.get('positive'),
    )


def _parse_learner(raw) -> LearnerSpec:
    if isinstance(raw, str):
        return LearnerSpec(name=raw)
    return LearnerSpec(
        name=raw['name'],
        id=raw.get('id'),
        predict_type=raw.get('predict_type', 'response'),
        short_name=raw.get('short_name'),
        params=dict(raw.get('params') or {}),
    )


def load_config(config_path: str) -> BenchmarkConfig:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config YAML file. Relative paths are resolved
            against the repository root.

    Returns:
        BenchmarkConfig object with all settings.
    """
    if not os.path.isabs(config_path) and not os.path.exists(config_path):
        config_path = os.path.join(
            os.path.dirname(os.path.abspath(__file__)), '..', '..', config_path
        )

    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Config file not found at {config_path}")

    with open(config_path, 'r') as f:
        raw = yaml.safe_load(f)

    if not raw.get('tasks'):
        raise ValueError(f"Config {config_path} defines no tasks")
    if not raw.get('learners'):
        raise ValueError(f"Config {config_path} defines no learners")

    resampling_raw = raw.get('resampling') or {}
    experiment_raw = raw.get('experiment') or {}

    return BenchmarkConfig(
        tasks=[_parse_task(t) for t in raw['tasks']],
        learners=[_parse_learner(l) for l in raw['learners']],
        resampling=ResamplingSettings(
            method=resampling_raw.get('method', 'CV'),
            iters=resampling_raw.get('iters'),
            folds=resampling_raw.get('folds'),
            reps=resampling_raw.get('reps'),
            split=resampling_raw.get('split'),
            stratify=resampling_raw.get('stratify', False),
        ),
        measures=list(raw.get('measures') or ['mmce']),
        experiment=ExperimentSettings(
            seed=experiment_raw.get('seed', 123),
            output_dir=experiment_raw.get('output_dir', 'experiments/'),
            keep_pred=experiment_raw.get('keep_pred', True),
            models=experiment_raw.get('models', False),
            on_learner_error=OnLearnerError(experiment_raw.get('on_learner_error', 'warn')),
            p_value=float(experiment_raw.get('p_value', 0.05)),
        ),
    )


def load_config_with_overrides(config_path: str, overrides: Dict[str, Any] = None) -> BenchmarkConfig:
    """
    Load configuration with CLI overrides.

    Args:
        config_path: Path to config YAML file.
        overrides: Dictionary of CLI overrides (from argparse vars()).

    Returns:
        BenchmarkConfig object with overrides applied.
    """
    config = load_config(config_path)

    if overrides is None:
        return config

    # --- Experiment settings ---
    if overrides.get('seed') is not None:
        config.experiment.seed = overrides['seed']

    if overrides.get('output_dir') is not None:
        config.experiment.output_dir = overrides['output_dir']

    if overrides.get('on_learner_error') is not None:
        config.experiment.on_learner_error = OnLearnerError(overrides['on_learner_error'])

    if overrides.get('p_value') is not None:
        config.experiment.p_value = overrides['p_value']

    if overrides.get('models'):
        config.experiment.models = True

    # --- Tasks / learners / measures ---
    if overrides.get('task') is not None:
        # Single task overrides the list
        config.tasks = [TaskSpec(name=overrides['task'])]

    if overrides.get('learners') is not None:
        config.learners = [LearnerSpec(name=name) for name in overrides['learners']]

    if overrides.get('measures') is not None:
        config.measures = list(overrides['measures'])

    # --- Resampling ---
    if overrides.get('resampling') is not None:
        config.resampling = ResamplingSettings(
            method=overrides['resampling'],
            stratify=config.resampling.stratify,
        )

    if overrides.get('iters') is not None:
        config.resampling.iters = overrides['iters']

    if overrides.get('stratify'):
        config.resampling.stratify = True

    return config


def config_to_dict(config: BenchmarkConfig) -> Dict[str, Any]:
    """
    Convert BenchmarkConfig object to a dictionary suitable for YAML serialization.

    Args:
        config: BenchmarkConfig object to serialize.

    Returns:
        Dictionary representation of the config.
    """
    def drop_none(d: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in d.items() if v is not None and v != {}}

    return {
        'tasks': [
            drop_none({
                'name': t.name, 'id': t.id, 'params': t.params,
                'path': t.path, 'target': t.target, 'positive': t.positive,
            })
            for t in config.tasks
        ],
        'learners': [
            drop_none({
                'name': l.name, 'id': l.id, 'predict_type': l.predict_type,
                'short_name': l.short_name, 'params': l.params,
            })
            for l in config.learners
        ],
        'resampling': drop_none({
            'method': config.resampling.method,
            'iters': config.resampling.iters,
            'folds': config.resampling.folds,
            'reps': config.resampling.reps,
            'split': config.resampling.split,
            'stratify': config.resampling.stratify,
        }),
        'measures': list(config.measures),
        'experiment': {
            'seed': config.experiment.seed,
            'output_dir': config.experiment.output_dir,
            'keep_pred': config.experiment.keep_pred,
            'models': config.experiment.models,
            'on_learner_error': config.experiment.on_learner_error.value,
            'p_value': config.experiment.p_value,
        },
    }


def save_config(config: BenchmarkConfig, path: str) -> None:
    """
    Save BenchmarkConfig object to a YAML file.

    Args:
        config: BenchmarkConfig object to save.
        path: Path to output YAML file.
    """
    config_dict = config_to_dict(config)
    with open(path, 'w') as f:
        yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)
