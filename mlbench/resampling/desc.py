"""
Resampling descriptions and instances.

A ResampleDesc states how to split (e.g. 10-fold CV); instantiating it
for a task fixes the actual train/test indices so that several learners
can be evaluated on identical splits.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

import numpy as np
from sklearn.model_selection import (
    KFold,
    StratifiedKFold,
    RepeatedKFold,
    RepeatedStratifiedKFold,
    ShuffleSplit,
    StratifiedShuffleSplit,
    LeaveOneOut,
)


METHODS = ("Holdout", "CV", "RepCV", "Subsample", "Bootstrap", "LOO")


@dataclass
class ResampleDesc:
    """
    Description of a resampling strategy.

    Defaults: Holdout split=2/3, CV iters=10, RepCV folds=10 reps=10,
    Subsample iters=30 split=2/3, Bootstrap iters=30.
    """
    method: str
    iters: Optional[int] = None
    folds: Optional[int] = None
    reps: Optional[int] = None
    split: Optional[float] = None
    stratify: bool = False

    def __post_init__(self):
        if self.method not in METHODS:
            raise ValueError(f"Unknown resampling method: {self.method}. Available: {', '.join(METHODS)}")

        if self.method == "Holdout":
            self.iters = 1
            self.split = 2 / 3 if self.split is None else self.split
        elif self.method == "CV":
            self.iters = 10 if self.iters is None else self.iters
            if self.iters < 2:
                raise ValueError(f"CV needs at least 2 folds, got {self.iters}")
        elif self.method == "RepCV":
            self.folds = 10 if self.folds is None else self.folds
            self.reps = 10 if self.reps is None else self.reps
            if self.folds < 2 or self.reps < 1:
                raise ValueError(f"RepCV needs folds >= 2 and reps >= 1, got folds={self.folds}, reps={self.reps}")
            self.iters = self.folds * self.reps
        elif self.method == "Subsample":
            self.iters = 30 if self.iters is None else self.iters
            self.split = 2 / 3 if self.split is None else self.split
        elif self.method == "Bootstrap":
            self.iters = 30 if self.iters is None else self.iters
        elif self.method == "LOO":
            self.iters = None

        if self.split is not None and not 0 < self.split < 1:
            raise ValueError(f"split must be in (0, 1), got {self.split}")
        if self.iters is not None and self.iters < 1:
            raise ValueError(f"iters must be positive, got {self.iters}")
        if self.method in ("Bootstrap", "LOO") and self.stratify:
            raise ValueError(f"Stratification is not supported for {self.method}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'method': self.method,
            'iters': self.iters,
            'folds': self.folds,
            'reps': self.reps,
            'split': self.split,
            'stratify': self.stratify,
        }

    def __str__(self) -> str:
        if self.method == "RepCV":
            detail = f"folds={self.folds}, reps={self.reps}"
        elif self.method in ("Holdout",):
            detail = f"split={self.split:.3f}"
        elif self.method == "Subsample":
            detail = f"iters={self.iters}, split={self.split:.3f}"
        elif self.method == "LOO":
            detail = ""
        else:
            detail = f"iters={self.iters}"
        strat = ", stratified" if self.stratify else ""
        return f"{self.method}({detail}{strat})"


def make_resample_desc(method: str, **kwargs) -> ResampleDesc:
    """Create a resampling description, e.g. make_resample_desc('CV', iters=5)."""
    return ResampleDesc(method=method, **kwargs)


@dataclass
class ResampleInstance:
    """Concrete train/test indices for a task of a given size."""
    desc: ResampleDesc
    size: int
    train_inds: List[np.ndarray] = field(default_factory=list)
    test_inds: List[np.ndarray] = field(default_factory=list)

    @property
    def iters(self) -> int:
        return len(self.train_inds)

    def __iter__(self) -> Iterator[Tuple[np.ndarray, np.ndarray]]:
        return iter(zip(self.train_inds, self.test_inds))

    def same_splits(self, other: 'ResampleInstance') -> bool:
        """Whether both instances hold exactly the same splits."""
        if self.size != other.size or self.iters != other.iters:
            return False
        pairs = zip(self.train_inds, other.train_inds, self.test_inds, other.test_inds)
        return all(np.array_equal(a, b) and np.array_equal(c, d) for a, b, c, d in pairs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'desc': self.desc.to_dict(),
            'size': self.size,
            'train_inds': [inds.tolist() for inds in self.train_inds],
            'test_inds': [inds.tolist() for inds in self.test_inds],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'ResampleInstance':
        desc = d['desc']
        return cls(
            desc=ResampleDesc(**desc),
            size=d['size'],
            train_inds=[np.asarray(inds, dtype=int) for inds in d['train_inds']],
            test_inds=[np.asarray(inds, dtype=int) for inds in d['test_inds']],
        )


def make_resample_instance(desc: ResampleDesc, task=None, size: Optional[int] = None,
                           seed: Optional[int] = None) -> ResampleInstance:
    """
    Instantiate a resampling description.

    Args:
        desc: Resampling description.
        task: Task to split (needed for stratification).
        size: Number of observations if no task is given.
        seed: Seed for the split generator. If None, a seed is drawn from
            numpy's global random state, so np.random.seed() makes runs
            reproducible.

    Returns:
        ResampleInstance with one (train, test) pair per iteration.
    """
    if task is None and size is None:
        raise ValueError("Either task or size must be given")
    if task is not None:
        size = task.n_obs
    if desc.stratify and task is None:
        raise ValueError("Stratified resampling needs a task")

    if seed is None:
        seed = int(np.random.randint(0, 2**31 - 1))
    rng = np.random.default_rng(seed)
    random_state = int(rng.integers(0, 2**31 - 1))

    y = task.y() if task is not None else None
    X_dummy = np.zeros((size, 1))

    if desc.method == "Bootstrap":
        train_inds, test_inds = [], []
        for _ in range(desc.iters):
            train = rng.integers(0, size, size=size)
            test = np.setdiff1d(np.arange(size), train)
            train_inds.append(np.sort(train))
            test_inds.append(test)
        return ResampleInstance(desc, size, train_inds, test_inds)

    splitter = _make_splitter(desc, random_state, size)
    splits = splitter.split(X_dummy, y) if desc.stratify else splitter.split(X_dummy)

    train_inds, test_inds = [], []
    for train, test in splits:
        train_inds.append(np.sort(np.asarray(train, dtype=int)))
        test_inds.append(np.sort(np.asarray(test, dtype=int)))
    return ResampleInstance(desc, size, train_inds, test_inds)


def _make_splitter(desc: ResampleDesc, random_state: int, size: int):
    """Map a description to a scikit-learn splitter."""
    if desc.method == "CV":
        if desc.iters > size:
            raise ValueError(f"Cannot do {desc.iters}-fold CV on {size} observations")
        cls = StratifiedKFold if desc.stratify else KFold
        return cls(n_splits=desc.iters, shuffle=True, random_state=random_state)
    if desc.method == "RepCV":
        cls = RepeatedStratifiedKFold if desc.stratify else RepeatedKFold
        return cls(n_splits=desc.folds, n_repeats=desc.reps, random_state=random_state)
    if desc.method in ("Holdout", "Subsample"):
        cls = StratifiedShuffleSplit if desc.stratify else ShuffleSplit
        return cls(n_splits=desc.iters, train_size=desc.split, random_state=random_state)
    if desc.method == "LOO":
        return LeaveOneOut()
    raise ValueError(f"Unknown resampling method: {desc.method}")
