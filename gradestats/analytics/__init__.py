"""
Analytics module for the peer statistics engine.

This module provides the aggregate math helpers, student and group rankers,
subject/module statistics builder and the orchestrator that assembles a
student's statistics across grouping levels.
"""

from .global_statistics import compute_population_statistics, compute_statistics, previous_period
from .group_ranker import rank_groups_from_records, rank_groups_from_student_ranks
from .student_ranker import rank_students, resolve_display_name
from .subject_stats import build_subject_statistics
from .utils_stats import maximum, mean, median, minimum

__all__ = [
    'build_subject_statistics',
    'compute_population_statistics',
    'compute_statistics',
    'maximum',
    'mean',
    'median',
    'minimum',
    'previous_period',
    'rank_groups_from_records',
    'rank_groups_from_student_ranks',
    'rank_students',
    'resolve_display_name',
]
