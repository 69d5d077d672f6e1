"""
Utility functions for the report pipeline.
"""
from .config import (
    load_yaml,
    save_yaml,
    load_report_config,
    compute_config_hash,
    merge_configs,
    ConfigValidator,
    DEFAULT_CONFIG,
    INPUT_KEYS,
)
from .logger import setup_logger, PipelineLogger
from .reproducibility import (
    get_git_commit,
    get_git_status,
    get_environment_info,
)

__all__ = [
    'load_yaml',
    'save_yaml',
    'load_report_config',
    'compute_config_hash',
    'merge_configs',
    'ConfigValidator',
    'DEFAULT_CONFIG',
    'INPUT_KEYS',
    'setup_logger',
    'PipelineLogger',
    'get_git_commit',
    'get_git_status',
    'get_environment_info',
]
