"""
Progress reporting for benchmark runs.

One progress step is one (task, learner) pair resampled completely.
"""
import time
from typing import Optional

from tqdm import tqdm


class ProgressTracker:
    """tqdm bar over (task, learner) pairs with per-pair info lines."""

    def __init__(self, n_tasks: int, n_learners: int, quiet: bool = False):
        self.n_tasks = n_tasks
        self.n_learners = n_learners
        self.quiet = quiet
        self.n_failed_iters = 0
        self._t0: Optional[float] = None
        self._t1: Optional[float] = None
        self._pair_t0: Optional[float] = None
        self.pbar = tqdm(total=n_tasks * n_learners, desc="Benchmark", unit="pair", disable=quiet)

    @property
    def total(self) -> int:
        return self.n_tasks * self.n_learners

    def start(self):
        self._t0 = time.time()
        self.write(f"\nResampling {self.n_learners} learner(s) on {self.n_tasks} task(s)...")

    def begin_pair(self, task_id: str, learner_id: str):
        """Announce the next (task, learner) pair."""
        self._pair_t0 = time.time()
        self.pbar.set_postfix_str(f"{task_id}/{learner_id}")
        self.write(f"Task: {task_id}, Learner: {learner_id}")

    def end_pair(self, aggr: dict, n_errors: int = 0):
        """
        Report the aggregated performance of the finished pair and advance the bar.

        Args:
            aggr: Aggregated performance, e.g. {'mmce.test.mean': 0.12}.
            n_errors: Number of failed resampling iterations.
        """
        self.n_failed_iters += n_errors
        values = ", ".join(f"{k}={v:.4f}" for k, v in aggr.items())
        took = format_duration(time.time() - self._pair_t0) if self._pair_t0 else "?"
        failed = f" [{n_errors} failed]" if n_errors else ""
        self.write(f"  {values} ({took}){failed}")
        self.pbar.update(1)

    def write(self, message: str):
        """Print above the bar; silent when quiet."""
        if not self.quiet:
            tqdm.write(message)

    def finish(self) -> float:
        """Close the bar and print a summary. Returns the elapsed seconds."""
        self.pbar.close()
        self._t1 = time.time()
        summary = f"Benchmark finished in {self.elapsed_str}"
        if self.n_failed_iters:
            summary += f" ({self.n_failed_iters} failed iteration(s))"
        self.write(summary)
        return self.elapsed_time

    @property
    def elapsed_time(self) -> float:
        if self._t0 is None:
            return 0.0
        return (self._t1 or time.time()) - self._t0

    @property
    def elapsed_str(self) -> str:
        return format_duration(self.elapsed_time)


def format_duration(seconds: float) -> str:
    """
    Human-readable duration.

    Examples:
        >>> format_duration(45.2)
        '45.2s'
        >>> format_duration(83)
        '1m 23.0s'
        >>> format_duration(5025)
        '1h 23m 45s'
    """
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(seconds, 60)
    if minutes < 60:
        return f"{int(minutes)}m {secs:.1f}s"
    hours, minutes = divmod(int(minutes), 60)
    return f"{hours}h {minutes}m {secs:.0f}s"
