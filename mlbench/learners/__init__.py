"""
Learners module for benchmark experiments.

Provides:
- Learner: Abstract base class for learners
- SklearnLearner: Wrapper around scikit-learn estimators
- FeaturelessLearner: Majority-class baseline
- TorchMLPLearner: Multilayer perceptron trained with torch
- WrappedModel: Fitted model kept in results
- make_learner: Factory by learner id
"""
from .base import Learner, SklearnLearner, FeaturelessLearner, WrappedModel, LearnerError
from .torch_mlp import TorchMLPLearner, get_optimizer
from .registry import make_learner, list_learners

__all__ = [
    'Learner',
    'SklearnLearner',
    'FeaturelessLearner',
    'TorchMLPLearner',
    'WrappedModel',
    'LearnerError',
    'get_optimizer',
    'make_learner',
    'list_learners',
]
