#!/usr/bin/env python3
"""
Student ranking and privacy-gated display names.

Ranks are contiguous (1..N) over the students that have an average; equal
averages are ordered by user id so the output never depends on input order.
"""

import logging
from typing import Optional

import pandas as pd

from gradestats.normalizers.code_normalizer import join_key
from gradestats.schema.semester_schema import StudentIdentity

logger = logging.getLogger(__name__)

STUDENT_RANK_COLUMNS = ['rank', 'user_id', 'average', 'spe', 'group']

DEFAULT_ANONYMOUS_NAME = "John Doe"


def students_from_frame(frame: pd.DataFrame) -> pd.DataFrame:
    """
    Build ranker entries from a semester or subject frame.

    spe is the class group, group the effective group (branch or groupe).
    """
    return pd.DataFrame({
        'user_id': frame['user_id'].astype(str),
        'average': frame['average'].astype(float),
        'spe': frame['groupe'].astype(str),
        'group': frame['effective_group'].astype(str),
    })


def rank_students(entries: pd.DataFrame) -> pd.DataFrame:
    """
    Rank students by average, highest first.

    Args:
        entries: DataFrame with user_id, average, spe and group columns;
            average may be null

    Returns:
        DataFrame with STUDENT_RANK_COLUMNS, sorted by rank. Students with a
        null average are dropped entirely.
    """
    if entries.empty:
        return pd.DataFrame(columns=STUDENT_RANK_COLUMNS)

    ranked = entries.dropna(subset=['average']).copy()
    dropped = len(entries) - len(ranked)
    if dropped:
        logger.debug(f"Excluded {dropped} students without an average from ranking")

    ranked = ranked.sort_values(['average', 'user_id'], ascending=[False, True], kind='mergesort')
    ranked['rank'] = range(1, len(ranked) + 1)
    return ranked[STUDENT_RANK_COLUMNS].reset_index(drop=True)


def find_student(ranked: pd.DataFrame, user_id: str) -> Optional[pd.Series]:
    """Return the ranking row of a student, or None when they are not ranked."""
    if ranked is None or ranked.empty:
        return None
    match = ranked[ranked['user_id'] == str(user_id)]
    if match.empty:
        return None
    return match.iloc[0]


def resolve_display_name(identity: Optional[StudentIdentity],
                         placeholder: str = DEFAULT_ANONYMOUS_NAME) -> str:
    """
    Resolve the name shown for a student in leaderboards.

    A student who opted in is shown as "first last", falling back to the
    display name, then the first name alone, then the last name alone.
    Everyone else (or a student without identity data) gets the placeholder.

    Example:
        >>> resolve_display_name(StudentIdentity("u1", True, "Ada", "Lovelace"))
        'Ada Lovelace'
        >>> resolve_display_name(StudentIdentity("u2", False, "Alan", "Turing"))
        'John Doe'
    """
    if identity is None or not identity.opted_in:
        return placeholder

    first_name = (identity.first_name or "").strip()
    last_name = (identity.last_name or "").strip()
    display_name = (identity.display_name or "").strip()

    if first_name and last_name:
        return f"{first_name} {last_name}"
    if display_name:
        return display_name
    if first_name:
        return first_name
    if last_name:
        return last_name
    return placeholder


def student_label(identity: Optional[StudentIdentity], group: str,
                  placeholder: str = DEFAULT_ANONYMOUS_NAME) -> str:
    """Leaderboard label: display name and effective group, e.g. ``"Ada Lovelace/-/B2"``."""
    return join_key(resolve_display_name(identity, placeholder), group)
