"""
Provenance information recorded alongside each report.
"""
import subprocess
import sys
from pathlib import Path
from typing import Optional

import matplotlib
import pandas as pd
import plotly
import seaborn as sns


def get_git_commit() -> Optional[str]:
    """Get current git commit hash."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            capture_output=True,
            text=True,
            check=True,
            cwd=Path(__file__).parent.parent.parent
        )
        return result.stdout.strip()
    except (subprocess.CalledProcessError, FileNotFoundError):
        return None


def get_git_status() -> Optional[str]:
    """Check if git repo has uncommitted changes."""
    try:
        result = subprocess.run(
            ["git", "status", "--porcelain"],
            capture_output=True,
            text=True,
            check=True,
            cwd=Path(__file__).parent.parent.parent
        )
        status = result.stdout.strip()
        return "clean" if not status else "dirty"
    except (subprocess.CalledProcessError, FileNotFoundError):
        return None


def get_environment_info() -> dict:
    """Get versions of the interpreter and charting stack."""
    return {
        "python_version": sys.version,
        "pandas_version": pd.__version__,
        "matplotlib_version": matplotlib.__version__,
        "seaborn_version": sns.__version__,
        "plotly_version": plotly.__version__,
    }
