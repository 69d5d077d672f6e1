"""
Loading and validation of report inputs.
"""
from .loader import ReportInputLoader, METRIC_COLUMNS, ASSIGNMENT_FIELDS
from .validator import DataValidator

__all__ = [
    'ReportInputLoader',
    'METRIC_COLUMNS',
    'ASSIGNMENT_FIELDS',
    'DataValidator',
]
