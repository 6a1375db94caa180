"""
Utilities package - Helper functions and classes.

Contains implementations for:
- Run metrics and residual error analytics
- Report rendering
- Data source / sink
- Logging utilities
"""

from .metrics import RunMetrics, AnalyticsRecord, analyze, count_residual_bit_errors
from .report import format_report, print_report, write_csv
from .data_io import TestDataGenerator, DataVerifier, read_data_file, write_data_file
from .logger import SimulationLogger

__all__ = [
    'RunMetrics',
    'AnalyticsRecord',
    'analyze',
    'count_residual_bit_errors',
    'format_report',
    'print_report',
    'write_csv',
    'TestDataGenerator',
    'DataVerifier',
    'read_data_file',
    'write_data_file',
    'SimulationLogger'
]
