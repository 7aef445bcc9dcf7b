"""
Run log: stdout and warnings of a benchmark run are copied into a text file.
"""
import sys
import warnings


class Logger:
    """
    File-like object that duplicates writes into a log file.

    Installed as sys.stdout by setup_logging(). In quiet mode the terminal
    stream is skipped and output only reaches the log.
    """

    def __init__(self, filename: str, quiet: bool = False, stream=None):
        self.terminal = stream if stream is not None else sys.stdout
        self.log = open(filename, "a", encoding="utf-8")
        self.quiet = quiet
        self.previous_showwarning = None

    def _targets(self):
        return (self.log,) if self.quiet else (self.terminal, self.log)

    def write(self, message: str) -> int:
        for target in self._targets():
            target.write(message)
        return len(message)

    def flush(self):
        for target in self._targets():
            target.flush()

    def isatty(self) -> bool:
        # no terminal control codes in the log
        return False

    @property
    def closed(self) -> bool:
        return self.log.closed

    def close(self):
        if not self.log.closed:
            self.log.close()


def setup_logging(log_path: str, quiet: bool = False) -> Logger:
    """
    Start copying stdout and warnings into log_path.

    Warnings raised during resampling (probability measures on
    response-only learners, estimator convergence warnings) end up in the
    log next to the messages of the iteration they belong to.

    Returns:
        The installed Logger; pass it to restore_logging() when done.
    """
    logger = Logger(log_path, quiet=quiet)
    logger.previous_showwarning = warnings.showwarning

    def showwarning(message, category, filename, lineno, file=None, line=None):
        logger.write(warnings.formatwarning(message, category, filename, lineno, line))

    sys.stdout = logger
    warnings.showwarning = showwarning
    return logger


def restore_logging(logger: Logger):
    """Undo setup_logging() and close the log file."""
    if sys.stdout is logger:
        sys.stdout = logger.terminal
    if logger.previous_showwarning is not None:
        warnings.showwarning = logger.previous_showwarning
    logger.close()
