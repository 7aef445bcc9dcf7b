#!/usr/bin/env python
"""
Merge saved benchmark results.

Combines runs that added learners or tasks to an earlier benchmark into one
result directory, e.g. to compare learners benchmarked on different days on
the same resampling splits.

Usage:
    python merge_benchmarks.py 270126_0 270126_1
    python merge_benchmarks.py experiments/bmr_270126_0 other/bmr_280126_0 --output_dir merged/
"""
import os
import sys

from mlbench.config import create_merge_parser
from mlbench.experiment import ExperimentManager
from mlbench.results import load_benchmark_result, merge_benchmark_results, save_benchmark_result
from mlbench.visualization import plot_benchmark_result


def resolve_run_dir(base_dir: str, run: str) -> str:
    """Accept a run directory or an experiment ID."""
    if os.path.isdir(run):
        return run
    return ExperimentManager.find_experiment(base_dir, run)


def main():
    parser = create_merge_parser()
    args = parser.parse_args()

    try:
        run_dirs = [resolve_run_dir(args.base_dir, run) for run in args.ids]
    except FileNotFoundError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Merging {len(run_dirs)} benchmark result(s):")
    bmrs = []
    for run_dir in run_dirs:
        bmr = load_benchmark_result(run_dir)
        print(f"  {run_dir}: {len(bmr.get_task_ids())} task(s), {len(bmr.get_learner_ids())} learner(s)")
        bmrs.append(bmr)

    try:
        merged = merge_benchmark_results(bmrs)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.output_dir is not None:
        output_dir = args.output_dir
        plots_dir = os.path.join(output_dir, "plots")
    else:
        exp_manager = ExperimentManager(base_dir=args.base_dir)
        output_dir = exp_manager.setup(log=False)
        plots_dir = exp_manager.plots_dir

    save_benchmark_result(merged, output_dir)
    print(f"\n--- Merged result saved to {output_dir} ---")
    print(merged.get_aggr_performances(as_df=True).to_string(index=False))

    if not args.no_plot:
        print("\n--- Generating Plots ---")
        for path in plot_benchmark_result(merged, plots_dir):
            print(f"  Saved: {path}")


if __name__ == "__main__":
    main()
