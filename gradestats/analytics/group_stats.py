#!/usr/bin/env python3
"""
Per-level comparison of a student against their peers.

Turns the current and previous-period snapshots of one grouping level into
the LevelStatistics node: the student's own rank and average, the group's
aggregates, and top-N leaderboards, each with its raw change since the
previous period.
"""

import logging
from typing import Dict, List, Optional

import pandas as pd

from gradestats.analytics.group_ranker import group_key, group_label
from gradestats.analytics.student_ranker import (
    DEFAULT_ANONYMOUS_NAME,
    find_student,
    student_label,
)
from gradestats.schema.statistics_schema import (
    Deviation,
    GroupKey,
    LevelStatistics,
    ObjectStatistics,
    PopulationStatistics,
    RankLine,
)

logger = logging.getLogger(__name__)


def _lookup(identities, user_id: str):
    if identities is None:
        return None
    return identities.get(user_id)


def _previous_students(previous: Optional[pd.DataFrame]) -> Dict[str, pd.Series]:
    if previous is None or previous.empty:
        return {}
    return {str(row['user_id']): row for _, row in previous.iterrows()}


def _previous_groups(previous: Optional[pd.DataFrame]) -> Dict[GroupKey, pd.Series]:
    if previous is None or previous.empty:
        return {}
    return {group_key(row): row for _, row in previous.iterrows()}


def build_student_lines(current: pd.DataFrame, previous: Optional[pd.DataFrame],
                        identities, limit: int,
                        placeholder: str = DEFAULT_ANONYMOUS_NAME) -> List[RankLine]:
    """
    Build the top-N student leaderboard.

    Args:
        current: Current student ranking (rank, user_id, average, spe, group)
        previous: Previous-period ranking of the same population, if any
        identities: Identity directory used for display names (may be None)
        limit: Number of rows to keep
        placeholder: Name shown for students who did not opt in

    Returns:
        List of RankLine, best first
    """
    previous_by_user = _previous_students(previous)
    lines = []
    for _, row in current.head(limit).iterrows():
        user_id = str(row['user_id'])
        before = previous_by_user.get(user_id)
        lines.append(RankLine(
            name=student_label(_lookup(identities, user_id), str(row['group']), placeholder),
            rank=Deviation.between(int(row['rank']), None if before is None else int(before['rank'])),
            average=Deviation.between(float(row['average']),
                                      None if before is None else float(before['average'])),
        ))
    return lines


def build_group_lines(current: pd.DataFrame, previous: Optional[pd.DataFrame],
                      limit: int) -> List[RankLine]:
    """Build the top-N group leaderboard, matching previous buckets by GroupKey."""
    previous_by_key = _previous_groups(previous)
    lines = []
    for _, row in current.head(limit).iterrows():
        key = group_key(row)
        before = previous_by_key.get(key)
        lines.append(RankLine(
            name=group_label(key),
            rank=Deviation.between(int(row['rank']), None if before is None else int(before['rank'])),
            average=Deviation.between(float(row['average']),
                                      None if before is None else float(before['average'])),
        ))
    return lines


def build_level_statistics(level: str, group_name: str,
                           current: PopulationStatistics,
                           previous: Optional[PopulationStatistics],
                           user_id: str, identities, config: dict,
                           subjects: Optional[List[ObjectStatistics]] = None) -> LevelStatistics:
    """
    Compare the student with one level's population, now and in the previous period.

    Args:
        level: Level name (group, spe, filiere, cursus)
        group_name: Display name of the population (e.g. the groupe value)
        current: Current-period snapshot of the population
        previous: Previous-period snapshot, or None without baseline
        user_id: Target student
        identities: Identity directory for leaderboard names
        config: Engine configuration
        subjects: Subject blocks to attach, if this level carries them

    Returns:
        LevelStatistics node
    """
    limit = config['LEADERBOARD_SIZE']
    placeholder = config['ANONYMOUS_NAME']

    previous_students = previous.student_rankings if previous else None
    previous_groups = previous.group_rankings if previous else None

    now = find_student(current.student_rankings, user_id)
    before = find_student(previous_students, user_id)

    if now is None:
        logger.warning(f"Student {user_id} is not ranked in level '{level}' ({group_name})")
        student_average = None
        student_rank = None
    else:
        student_average = Deviation.between(
            float(now['average']), None if before is None else float(before['average']))
        student_rank = Deviation.between(
            int(now['rank']), None if before is None else int(before['rank']))

    return LevelStatistics(
        level=level,
        group_name=group_name,
        semester=current.semester,
        number_of_students=current.number_of_students,
        student_average=student_average,
        student_rank=student_rank,
        group_average=Deviation.between(current.average, previous.average if previous else None),
        min=Deviation.between(current.min, previous.min if previous else None),
        max=Deviation.between(current.max, previous.max if previous else None),
        median=current.median,
        student_rankings=build_student_lines(current.student_rankings, previous_students,
                                             identities, limit, placeholder),
        group_rankings=build_group_lines(current.group_rankings, previous_groups, limit),
        subjects=subjects or [],
    )
