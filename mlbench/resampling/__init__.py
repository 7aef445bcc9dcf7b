"""
Resampling module for benchmark experiments.

Provides:
- ResampleDesc / make_resample_desc: How to split a task
- ResampleInstance / make_resample_instance: Concrete train/test indices
- resample: Evaluate one learner on one task
"""
from .desc import (
    ResampleDesc,
    ResampleInstance,
    make_resample_desc,
    make_resample_instance,
    METHODS,
)
from .resample import resample, check_measures, warn_missing_prob, ON_LEARNER_ERROR

__all__ = [
    'ResampleDesc',
    'ResampleInstance',
    'make_resample_desc',
    'make_resample_instance',
    'METHODS',
    'resample',
    'check_measures',
    'warn_missing_prob',
    'ON_LEARNER_ERROR',
]
