#!/usr/bin/env python3
"""
Statistics result tree.

Pure in-memory structures returned by the orchestrator. Every node exposes
``to_dict()`` so the caller can serialize the tree without knowing its shape.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional

import pandas as pd


class GroupKey(NamedTuple):
    """Bucket key for group rankings: the enclosing group (spe) and the group itself."""
    spe: str
    group: str


@dataclass
class Deviation:
    """A current value and its raw change since the previous period (None without baseline)."""
    current: float
    raw: Optional[float] = None

    @classmethod
    def between(cls, current: float, previous: Optional[float]) -> "Deviation":
        if previous is None:
            return cls(current=current, raw=None)
        return cls(current=current, raw=current - previous)


@dataclass
class RankLine:
    """One leaderboard row; name is a ``"label/-/group"`` presentation string."""
    name: str
    rank: Deviation
    average: Deviation


@dataclass
class ObjectStatistics:
    """Statistics for one normalized subject code or one module key."""
    code: str
    name: str
    average: float
    median: float
    min: float
    max: float
    number_of_students: int
    student_rank: Optional[int] = None
    student_average: Optional[float] = None
    student_rankings: List[RankLine] = field(default_factory=list)
    group_rankings: List[RankLine] = field(default_factory=list)
    modules: List["ObjectStatistics"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class LevelStatistics:
    """The target student's standing within one grouping level."""
    level: str
    group_name: str
    semester: int
    number_of_students: int
    student_average: Optional[Deviation]
    student_rank: Optional[Deviation]
    group_average: Deviation
    min: Deviation
    max: Deviation
    median: float
    student_rankings: List[RankLine] = field(default_factory=list)
    group_rankings: List[RankLine] = field(default_factory=list)
    subjects: List[ObjectStatistics] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class PopulationStatistics:
    """Snapshot of one population: aggregates plus full rankings."""
    name: str
    semester: int
    academic_year: str
    average: float
    median: float
    min: float
    max: float
    number_of_students: int
    student_rankings: Optional[pd.DataFrame] = None
    group_rankings: Optional[pd.DataFrame] = None


@dataclass
class StatisticsResult:
    """Full response for one student and one semester."""
    user_id: str
    semester: int
    academic_year: str
    student_average: float
    previous_semester: Optional[int] = None
    previous_academic_year: Optional[str] = None
    levels: Dict[str, Optional[LevelStatistics]] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'user_id': self.user_id,
            'semester': self.semester,
            'academic_year': self.academic_year,
            'student_average': self.student_average,
            'previous_semester': self.previous_semester,
            'previous_academic_year': self.previous_academic_year,
            'levels': {
                name: (level.to_dict() if level is not None else None)
                for name, level in self.levels.items()
            },
            'errors': dict(self.errors),
        }
