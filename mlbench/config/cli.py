"""
Command-line argument parsing for benchmark runs.
"""
import argparse


def create_benchmark_parser() -> argparse.ArgumentParser:
    """Create argument parser for the benchmark runner."""
    parser = argparse.ArgumentParser(description="Run a classifier benchmark experiment")

    # Config file
    parser.add_argument("--config", type=str, default="configs/benchmark.yaml",
                        help="Path to config file")

    # Experiment settings
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed (overrides config)")
    parser.add_argument("--output_dir", type=str, default=None,
                        help="Output directory (overrides config)")
    parser.add_argument("--on_learner_error", type=str, default=None,
                        choices=["stop", "warn", "quiet"],
                        help="Handling of failing learners (overrides config)")
    parser.add_argument("--p_value", type=float, default=None,
                        help="Significance level of the Friedman/Nemenyi tests (overrides config)")
    parser.add_argument("--models", action="store_true",
                        help="Keep and save fitted models")

    # Tasks / learners / measures
    parser.add_argument("--task", type=str, default=None,
                        help="Single built-in task name (overrides config list)")
    parser.add_argument("--learners", type=str, nargs="+", default=None,
                        help="Learner ids, e.g. classif.lda classif.rpart (overrides config list)")
    parser.add_argument("--measures", type=str, nargs="+", default=None,
                        help="Measure ids, the first one is used for tests and plots (overrides config)")

    # Resampling
    parser.add_argument("--resampling", type=str, default=None,
                        choices=["Holdout", "CV", "RepCV", "Subsample", "Bootstrap", "LOO"],
                        help="Resampling method (overrides config)")
    parser.add_argument("--iters", type=int, default=None,
                        help="Resampling iterations (overrides config)")
    parser.add_argument("--stratify", action="store_true",
                        help="Stratify resampling by class")

    # Output control
    parser.add_argument("--no_plot", action="store_true",
                        help="Do not write plots")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Suppress verbose output")

    return parser


def create_visualization_parser() -> argparse.ArgumentParser:
    """Create argument parser for the visualization runner."""
    parser = argparse.ArgumentParser(description="Generate plots for saved benchmark results")
    parser.add_argument("--id", type=str, default=None,
                        help="Specific experiment ID (e.g., 170226_0). Defaults to latest.")
    parser.add_argument("--all", action="store_true",
                        help="Generate plots for all experiments in the base directory")
    parser.add_argument("--base_dir", type=str, default="experiments",
                        help="Directory holding the experiment folders")
    parser.add_argument("--measure", type=str, default=None,
                        help="Measure to plot (default: first measure of the run)")
    parser.add_argument("--p_value", type=float, default=0.05,
                        help="Significance level of the critical differences plot")
    parser.add_argument("--format", type=str, default="pdf", choices=["pdf", "png", "svg"],
                        help="File format of the plots")
    return parser


def create_merge_parser() -> argparse.ArgumentParser:
    """Create argument parser for merging saved benchmark results."""
    parser = argparse.ArgumentParser(description="Merge saved benchmark results into one")
    parser.add_argument("ids", type=str, nargs="+",
                        help="Experiment IDs or directories to merge")
    parser.add_argument("--base_dir", type=str, default="experiments",
                        help="Directory holding the experiment folders")
    parser.add_argument("--output_dir", type=str, default=None,
                        help="Output directory (default: new run directory in base_dir)")
    parser.add_argument("--no_plot", action="store_true",
                        help="Do not write plots of the merged result")
    return parser
