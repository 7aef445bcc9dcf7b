"""
Configuration module for benchmark experiments.

Provides:
- BenchmarkConfig and its sections, loaded from YAML
- argparse parsers for the runner scripts
"""
from .config import (
    BenchmarkConfig,
    TaskSpec,
    LearnerSpec,
    ResamplingSettings,
    ExperimentSettings,
    OnLearnerError,
    load_config,
    load_config_with_overrides,
    config_to_dict,
    save_config,
)

# CLI parsers
from .cli import create_benchmark_parser, create_visualization_parser, create_merge_parser

__all__ = [
    'BenchmarkConfig',
    'TaskSpec',
    'LearnerSpec',
    'ResamplingSettings',
    'ExperimentSettings',
    'OnLearnerError',
    'load_config',
    'load_config_with_overrides',
    'config_to_dict',
    'save_config',
    # CLI
    'create_benchmark_parser',
    'create_visualization_parser',
    'create_merge_parser',
]
