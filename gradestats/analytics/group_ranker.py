#!/usr/bin/env python3
"""
Group ranking.

Collapses students into GroupKey(spe, group) buckets, averages each bucket
over the members that have an average, and ranks the buckets.
"""

import logging

import pandas as pd

from gradestats.analytics.utils_stats import mean
from gradestats.normalizers.code_normalizer import join_key
from gradestats.schema.statistics_schema import GroupKey

logger = logging.getLogger(__name__)

GROUP_RANK_COLUMNS = ['rank', 'spe', 'group', 'average', 'number_of_students']


def _bucket_mean(averages: pd.Series) -> float:
    return mean(averages.tolist())


def _rank_buckets(entries: pd.DataFrame) -> pd.DataFrame:
    graded = entries.dropna(subset=['average'])
    if graded.empty:
        return pd.DataFrame(columns=GROUP_RANK_COLUMNS)

    buckets = (
        graded.groupby(['spe', 'group'], sort=True)
        .agg(average=('average', _bucket_mean), number_of_students=('average', 'size'))
        .reset_index()
    )
    buckets = buckets.sort_values(['average', 'group', 'spe'],
                                  ascending=[False, True, True], kind='mergesort')
    buckets['rank'] = range(1, len(buckets) + 1)
    return buckets[GROUP_RANK_COLUMNS].reset_index(drop=True)


def rank_groups_from_records(frame: pd.DataFrame, cursus_view: bool = False) -> pd.DataFrame:
    """
    Rank groups straight from a semester frame.

    Args:
        frame: Output of semester_frame()
        cursus_view: Bucket filieres within the cursus instead of
            effective groups within the class group

    Returns:
        DataFrame with GROUP_RANK_COLUMNS sorted by rank
    """
    if frame.empty:
        return pd.DataFrame(columns=GROUP_RANK_COLUMNS)

    if cursus_view:
        entries = pd.DataFrame({
            'spe': frame['cursus'].astype(str),
            'group': frame['filiere'].astype(str),
            'average': frame['average'].astype(float),
        })
    else:
        entries = pd.DataFrame({
            'spe': frame['groupe'].astype(str),
            'group': frame['effective_group'].astype(str),
            'average': frame['average'].astype(float),
        })
    return _rank_buckets(entries)


def rank_groups_from_student_ranks(ranked: pd.DataFrame) -> pd.DataFrame:
    """
    Rank groups from an existing student ranking (spe, group, average columns).

    Used for subject and module populations, which are already narrowed to
    the students who took the course.
    """
    if ranked.empty:
        return pd.DataFrame(columns=GROUP_RANK_COLUMNS)
    return _rank_buckets(ranked[['spe', 'group', 'average']])


def group_key(row: pd.Series) -> GroupKey:
    return GroupKey(spe=str(row['spe']), group=str(row['group']))


def group_label(key: GroupKey) -> str:
    """Leaderboard label of a group bucket, e.g. ``"B2/-/G1"``."""
    return join_key(key.group, key.spe)
