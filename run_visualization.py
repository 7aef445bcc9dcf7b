#!/usr/bin/env python
"""
Re-plot saved benchmark runs.

Plots are written into the plots/ directory of each run; the benchmark
itself is not re-run.

Usage:
    python run_visualization.py                          # latest run
    python run_visualization.py --id 170126_0 --format png
    python run_visualization.py --all --measure ber
"""
import os
import sys
from typing import List

from mlbench.config import create_visualization_parser
from mlbench.experiment import ExperimentManager
from mlbench.results import load_benchmark_result
from mlbench.visualization import plot_benchmark_result


def visualize_experiment(data_dir: str, measure=None, p_value: float = 0.05, fmt: str = "pdf") -> bool:
    """
    Load one run and write its plots.

    Returns:
        False if the directory holds no saved benchmark result.
    """
    try:
        bmr = load_benchmark_result(data_dir)
    except FileNotFoundError as e:
        print(f"  Skipping {data_dir}: {e}")
        return False

    print(f"  {len(bmr.get_task_ids())} task(s), {len(bmr.get_learner_ids())} learner(s), "
          f"measures: {', '.join(bmr.get_measure_ids())}")
    for path in plot_benchmark_result(bmr, os.path.join(data_dir, "plots"),
                                      measure=measure, p_value=p_value, fmt=fmt):
        print(f"  Saved: {path}")
    return True


def select_runs(base_dir: str, run_id=None, all_runs: bool = False) -> List[str]:
    if all_runs:
        return ExperimentManager.list_experiments(base_dir)
    return [ExperimentManager.find_experiment(base_dir, run_id)]


def main():
    args = create_visualization_parser().parse_args()

    if not os.path.isdir(args.base_dir):
        print(f"Error: Base directory '{args.base_dir}' does not exist.")
        sys.exit(1)

    try:
        runs = select_runs(args.base_dir, args.id, args.all)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        sys.exit(1)
    if not runs:
        print(f"No benchmark runs found in '{args.base_dir}'.")
        sys.exit(1)

    plotted = 0
    for i, run_dir in enumerate(runs, 1):
        print(f"[{i}/{len(runs)}] {os.path.basename(run_dir)}")
        plotted += visualize_experiment(run_dir, args.measure, args.p_value, args.format)

    print(f"\n--- Visualization Complete: {plotted}/{len(runs)} run(s) plotted ---")
    if plotted == 0:
        sys.exit(1)


if __name__ == "__main__":
    main()
