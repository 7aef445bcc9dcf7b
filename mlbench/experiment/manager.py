"""
Run directories for benchmark experiments.

Every run gets its own directory under a base directory:

    experiments/
    ├── .last_experiment_id
    ├── bmr_170126_0/
    │   ├── benchmark_170126_0_log.txt
    │   ├── config_170126_0.yaml
    │   ├── benchmark.json, *.csv
    │   └── plots/
    └── bmr_170126_1/
"""
import os
import re
import glob
import datetime
from typing import List, Optional

from .logger import Logger, setup_logging, restore_logging


RUN_PREFIX = "bmr_"
LAST_ID_FILE = ".last_experiment_id"


def _run_dirs(base_dir: str) -> List[str]:
    return [d for d in glob.glob(os.path.join(base_dir, f"{RUN_PREFIX}*")) if os.path.isdir(d)]


def _next_run_number(base_dir: str, day: str) -> int:
    """Lowest run number above all runs of the given day."""
    pattern = re.compile(rf"^{RUN_PREFIX}{day}_(\d+)$")
    numbers = [
        int(m.group(1))
        for m in (pattern.match(os.path.basename(d)) for d in _run_dirs(base_dir))
        if m
    ]
    return max(numbers, default=-1) + 1


class ExperimentManager:
    """Creates the run directory of a benchmark and tees its output into a log."""

    def __init__(self, base_dir: str = "experiments", quiet: bool = False):
        self.base_dir = base_dir
        self.quiet = quiet
        self.output_dir: Optional[str] = None
        self.today_str: Optional[str] = None
        self.run_of_day: Optional[int] = None
        self._logger: Optional[Logger] = None

    def setup(self, log: bool = True) -> str:
        """
        Create a fresh run directory.

        Args:
            log: Copy stdout and warnings into benchmark_<id>_log.txt.

        Returns:
            Path to the run directory.
        """
        os.makedirs(self.base_dir, exist_ok=True)
        self.today_str = datetime.datetime.now().strftime("%d%m%y")
        self.run_of_day = _next_run_number(self.base_dir, self.today_str)
        self.output_dir = os.path.join(self.base_dir, f"{RUN_PREFIX}{self.experiment_id}")
        os.makedirs(self.output_dir, exist_ok=True)

        if log:
            self._logger = setup_logging(
                os.path.join(self.output_dir, f"benchmark_{self.experiment_id}_log.txt"),
                quiet=self.quiet,
            )
        with open(os.path.join(self.base_dir, LAST_ID_FILE), "w") as f:
            f.write(self.experiment_id)

        print(f"--- Saving benchmark results to ./{self.output_dir} ---")
        return self.output_dir

    def close(self):
        if self._logger is not None:
            restore_logging(self._logger)
            self._logger = None

    @property
    def experiment_id(self) -> str:
        """Run id such as '170126_0' (date, then run number of that day)."""
        return f"{self.today_str}_{self.run_of_day}"

    @property
    def plots_dir(self) -> str:
        plots_dir = os.path.join(self.output_dir, "plots")
        os.makedirs(plots_dir, exist_ok=True)
        return plots_dir

    @staticmethod
    def find_experiment(base_dir: str, experiment_id: Optional[str] = None) -> str:
        """
        Locate a run directory.

        Args:
            base_dir: Directory holding the runs.
            experiment_id: Run id ('170126_0') or directory name
                ('bmr_170126_0'). If None, the most recently modified run.

        Raises:
            FileNotFoundError: If no matching run exists.
        """
        if experiment_id is None:
            runs = _run_dirs(base_dir)
            if not runs:
                raise FileNotFoundError(f"No benchmark folders found in '{base_dir}'")
            return max(runs, key=os.path.getmtime)

        name = experiment_id if experiment_id.startswith(RUN_PREFIX) else f"{RUN_PREFIX}{experiment_id}"
        for candidate in (name, experiment_id):
            path = os.path.join(base_dir, candidate)
            if os.path.isdir(path):
                return path
        raise FileNotFoundError(f"Benchmark folder not found for ID '{experiment_id}'")

    @staticmethod
    def list_experiments(base_dir: str) -> List[str]:
        """All run directories, oldest first."""
        return sorted(_run_dirs(base_dir), key=os.path.getmtime)
