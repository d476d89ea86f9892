"""
Record and result types for the statistics engine.
"""

from .semester_schema import (
    Module,
    SemesterFrameSchema,
    SemesterRecord,
    StudentIdentity,
    Subject,
    module_frame,
    semester_frame,
    subject_frame,
    validate_frame,
)
from .statistics_schema import (
    Deviation,
    GroupKey,
    LevelStatistics,
    ObjectStatistics,
    PopulationStatistics,
    RankLine,
    StatisticsResult,
)

__all__ = [
    'Deviation',
    'GroupKey',
    'LevelStatistics',
    'Module',
    'ObjectStatistics',
    'PopulationStatistics',
    'RankLine',
    'SemesterFrameSchema',
    'SemesterRecord',
    'StatisticsResult',
    'StudentIdentity',
    'Subject',
    'module_frame',
    'semester_frame',
    'subject_frame',
    'validate_frame',
]
