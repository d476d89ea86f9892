"""
gradestats - peer ranking and statistics engine for semester grade records.
"""

from gradestats.analytics.global_statistics import compute_statistics
from gradestats.errors import GradeStatsError, NoGradesYet, RecordNotFound

__version__ = "0.1.0"

__all__ = [
    'GradeStatsError',
    'NoGradesYet',
    'RecordNotFound',
    'compute_statistics',
]
