#!/usr/bin/env python
"""
Main runner for classifier benchmark experiments.

This script orchestrates the benchmark but does NOT define utility functions.
All logic is imported from mlbench/ modules.

Usage:
    python run_benchmark.py --config configs/benchmark.yaml
    python run_benchmark.py --seed 42 --learners classif.lda classif.rpart --iters 3
"""
import os
import warnings

from mlbench.config import create_benchmark_parser, load_config_with_overrides, save_config
from mlbench.experiment import ExperimentManager, benchmark, set_seed
from mlbench.analysis import friedman_test_bmr, friedman_posthoc_test_bmr
from mlbench.results import save_benchmark_result
from mlbench.visualization import plot_benchmark_result


def main():
    # --- Parse arguments and load config ---
    parser = create_benchmark_parser()
    args = parser.parse_args()
    config = load_config_with_overrides(args.config, vars(args))

    # --- Set seeds ---
    set_seed(config.experiment.seed)

    # --- Setup experiment directory and logging ---
    exp_manager = ExperimentManager(base_dir=config.experiment.output_dir, quiet=args.quiet)
    output_dir = exp_manager.setup()

    # Save config at start for reproducibility
    save_config(config, os.path.join(output_dir, f"config_{exp_manager.experiment_id}.yaml"))

    # --- Build the experiment ---
    tasks = config.build_tasks()
    learners = config.build_learners()
    resampling = config.resampling.build()
    print(f"Tasks: {', '.join(t.id for t in tasks)}")
    print(f"Learners: {', '.join(l.id for l in learners)}")
    print(f"Resampling: {resampling}")
    print(f"Measures: {', '.join(config.measures)}")

    # --- Run ---
    bmr = benchmark(
        learners,
        tasks,
        resamplings=resampling,
        measures=config.measures,
        keep_pred=config.experiment.keep_pred,
        models=config.experiment.models,
        seed=config.experiment.seed,
        on_learner_error=config.experiment.on_learner_error.value,
        show_info=not args.quiet,
    )

    # --- Save results ---
    print("\n--- Saving Benchmark Result ---")
    save_benchmark_result(bmr, output_dir, save_models=config.experiment.models)

    print("\n--- Aggregated Performance ---")
    print(bmr.get_aggr_performances(as_df=True).to_string(index=False))

    failures = bmr.get_failures()
    if failures:
        print(f"\n{len(failures)} failed iteration(s), see failures.csv")

    # --- Friedman / Nemenyi tests ---
    n_learners, n_tasks = len(bmr.get_learner_ids()), len(bmr.get_task_ids())
    if n_learners >= 2 and n_tasks >= 2:
        print("\n--- Friedman Test ---")
        try:
            print(friedman_test_bmr(bmr))
            with warnings.catch_warnings():
                warnings.simplefilter("ignore", UserWarning)
                print(friedman_posthoc_test_bmr(bmr, p_value=config.experiment.p_value))
        except ValueError as e:
            print(f"Skipping tests: {e}")
    else:
        print("\n--- Skipping Friedman test (needs at least 2 learners and 2 tasks) ---")

    # --- Generate plots ---
    if not args.no_plot:
        print("\n--- Generating Plots ---")
        for path in plot_benchmark_result(bmr, exp_manager.plots_dir, p_value=config.experiment.p_value):
            print(f"  Saved: {path}")
    else:
        print("\n--- Skipping plot generation (--no_plot) ---")

    print(f"\n--- Benchmark Complete (results in {output_dir}) ---")
    exp_manager.close()

    # Print completion message to terminal (even in quiet mode)
    if args.quiet:
        print(f"Benchmark {exp_manager.experiment_id} complete. Results in: {output_dir}")


if __name__ == "__main__":
    main()
