"""
Configuration loading and validation utilities.
"""
import copy
import yaml
from pathlib import Path
from typing import Dict, Any
import hashlib
import json

from ..analysis.reshape import MORPHOLOGY_SUFFIXES


INPUT_KEYS = [
    'overall_metrics',
    'label_metrics',
    'label_map',
    'taxonomy',
    'user_assignments',
]

DEFAULT_CONFIG: Dict[str, Any] = {
    'columns': {
        'overall_metric': 'metric',
        'overall_value': 'value',
        'label_id': 'label_id',
        'label_map_id': 'id',
        'label_map_name': 'name',
        'taxonomy_name': 'name',
        'taxonomy_parent': 'parent',
        'taxonomy_id': None,
        'ba_user': 'ba_user',
        'ba_classifier': 'ba_classifier',
        'tlc_user': 'tlc_user',
        'tlc_classifier': 'tlc_classifier',
    },
    'morphology_suffixes': list(MORPHOLOGY_SUFFIXES),
    'unknown_marker': '*',
    'output': {
        'save_dir': 'results',
        'dpi': 300,
        'interactive': True,
        'save_tables': True,
        'bar_chart': {
            'figsize': None,
        },
        'confusion_matrix': {
            'figsize': [14, 12],
            'colors': ['#f7fbff', '#6baed6', '#08306b'],
        },
    },
}


class ConfigValidator:
    """Validate report configurations."""

    @staticmethod
    def validate_report_config(config: Dict[str, Any]) -> None:
        """Validate a resolved report configuration."""
        required = ['name', 'inputs']
        for field in required:
            if field not in config:
                raise ValueError(f"Report config missing required field: {field}")

        inputs = config['inputs']
        if not isinstance(inputs, dict):
            raise ValueError("'inputs' must map input names to file paths")

        for key in INPUT_KEYS:
            if key not in inputs:
                raise ValueError(f"Report config missing input file: inputs.{key}")

        # Check input files exist
        for key in INPUT_KEYS:
            path = Path(inputs[key])
            if not path.exists():
                raise FileNotFoundError(f"Input file not found for '{key}': {path}")

        colors = config.get('output', {}).get('confusion_matrix', {}).get('colors', [])
        if len(colors) != 3:
            raise ValueError(
                f"output.confusion_matrix.colors must list exactly 3 colors, got {len(colors)}"
            )

        suffixes = config.get('morphology_suffixes', [])
        if not isinstance(suffixes, list):
            raise ValueError("'morphology_suffixes' must be a list of strings")


def load_yaml(path: Path) -> Dict[str, Any]:
    """Load YAML configuration file."""
    with open(path, 'r') as f:
        return yaml.safe_load(f) or {}


def save_yaml(config: Dict[str, Any], path: Path) -> None:
    """Save configuration to YAML file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def compute_config_hash(config: Dict[str, Any]) -> str:
    """Compute hash of configuration for reproducibility."""
    config_str = json.dumps(config, sort_keys=True, default=str)
    return hashlib.md5(config_str.encode()).hexdigest()[:8]


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge two configurations, with override taking precedence."""
    merged = base.copy()
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_report_config(config_path: Path) -> Dict[str, Any]:
    """
    Load, complete and validate a report configuration.

    Input paths given relative to the config file are resolved against
    the config file's directory.

    Parameters
    ----------
    config_path : Path
        Path to report YAML config

    Returns
    -------
    config : Dict[str, Any]
        Configuration merged over the defaults
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Report config not found: {config_path}")

    config = merge_configs(copy.deepcopy(DEFAULT_CONFIG), load_yaml(config_path))

    inputs = config.get('inputs')
    if isinstance(inputs, dict):
        resolved = {}
        for key, value in inputs.items():
            path = Path(value)
            if not path.is_absolute():
                path = config_path.parent / path
            resolved[key] = str(path)
        config['inputs'] = resolved

    ConfigValidator.validate_report_config(config)
    return config
