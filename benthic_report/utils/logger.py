"""
Logging utilities for the report pipeline.

A report run logs to stdout and to ``run.log`` in its output directory.
The log file is truncated at the start of each run so that it only ever
describes the artifacts currently on disk.
"""
import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Optional


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
RULE_WIDTH = 72


class PipelineLogger:
    """
    Report logger with step banners and timing.

    Parameters
    ----------
    name : str
        Name of the underlying ``logging`` logger
    log_file : Path, optional
        File receiving a copy of every record, overwritten on open
    level : int
        Minimum level for both handlers
    """

    def __init__(self, name: str, log_file: Optional[Path] = None, level: int = logging.INFO):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.log_file = log_file
        self.n_warnings = 0

        # A previous run in the same process may still hold its run.log open
        self.close()

        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
        handlers = [logging.StreamHandler(sys.stdout)]
        if log_file is not None:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

        for handler in handlers:
            handler.setLevel(level)
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def info(self, message: str):
        self.logger.info(message)

    def warning(self, message: str):
        self.n_warnings += 1
        self.logger.warning(message)

    def error(self, message: str):
        self.logger.error(message)

    def debug(self, message: str):
        self.logger.debug(message)

    def section(self, title: str, char: str = "="):
        """Log a section header."""
        self.logger.info(char * RULE_WIDTH)
        self.logger.info(title)
        self.logger.info(char * RULE_WIDTH)

    @contextmanager
    def step(self, title: str):
        """
        Log a section header around one pipeline step and time it.

        A failing step is logged with its title and elapsed time before
        the exception propagates.
        """
        self.section(title)
        start = time.perf_counter()
        try:
            yield self
        except Exception as e:
            self.logger.error(f"{title} failed after {time.perf_counter() - start:.2f}s: {e}")
            raise
        self.logger.info(f"{title} finished in {time.perf_counter() - start:.2f}s")

    def close(self):
        """Flush, close and detach all handlers."""
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)


def setup_logger(name: str, save_dir: Path, level: int = logging.INFO) -> PipelineLogger:
    """Create the logger for a report writing to ``save_dir/run.log``."""
    return PipelineLogger(name, Path(save_dir) / "run.log", level)
