#!/usr/bin/env python3
"""
Subject and module statistics.

For every normalized subject code in a population, gathers the students who
have a graded average for it, aggregates those averages, ranks students and
groups, and nests one block per module key underneath. Equivalent offerings
(UE11 / UE11P, SM102PM-... / SM102I-...) merge into one bucket.
"""

import logging
from typing import Dict, List, Optional, Sequence

import pandas as pd

from gradestats.analytics.group_ranker import rank_groups_from_student_ranks
from gradestats.analytics.group_stats import build_group_lines, build_student_lines
from gradestats.analytics.student_ranker import find_student, rank_students, students_from_frame
from gradestats.analytics.utils_stats import present_values, summarize
from gradestats.normalizers.code_normalizer import ModuleKey
from gradestats.schema.semester_schema import SemesterRecord, module_frame, subject_frame
from gradestats.schema.statistics_schema import ObjectStatistics

logger = logging.getLogger(__name__)


def _first_name(rows: pd.DataFrame, column: str) -> str:
    names = [n for n in rows[column].tolist() if n]
    return names[0] if names else ""


def object_statistics(code: str, name: str, rows: pd.DataFrame, user_id: Optional[str],
                      identities, config: dict) -> Optional[ObjectStatistics]:
    """
    Aggregate and rank one subject or module population.

    Args:
        code: Normalized code of the block
        name: Display name of the block
        rows: Subject or module frame rows for this code (average may be null)
        user_id: Target student, located in the ranking when present
        identities: Identity directory for leaderboard names
        config: Engine configuration

    Returns:
        ObjectStatistics, or None when no student has a graded average
    """
    graded = rows.dropna(subset=['average'])
    if graded.empty:
        return None

    summary = summarize(present_values(graded['average']))
    ranked = rank_students(students_from_frame(graded))
    groups = rank_groups_from_student_ranks(ranked)
    target = find_student(ranked, user_id) if user_id is not None else None

    limit = config['LEADERBOARD_SIZE']
    return ObjectStatistics(
        code=code,
        name=name,
        average=summary['average'],
        median=summary['median'],
        min=summary['min'],
        max=summary['max'],
        number_of_students=summary['number_of_students'],
        student_rank=None if target is None else int(target['rank']),
        student_average=None if target is None else float(target['average']),
        student_rankings=build_student_lines(ranked, None, identities, limit,
                                             config['ANONYMOUS_NAME']),
        group_rankings=build_group_lines(groups, None, limit),
    )


def build_module_statistics(modules: pd.DataFrame, user_id: Optional[str], identities,
                            config: dict) -> Dict[str, List[ObjectStatistics]]:
    """
    Build module blocks grouped by their parent subject code.

    The population of a module key is every (subject, module) pair whose
    normalized key matches, whichever subject instance it came from.
    """
    blocks: Dict[str, List[ObjectStatistics]] = {}
    if modules.empty:
        return blocks

    for (subject_code, module_code), rows in modules.groupby(['subject_code', 'module_code'], sort=True):
        key = ModuleKey(subject_code, module_code)
        block = object_statistics(key.module_code, _first_name(rows, 'module_name'), rows,
                                  user_id, identities, config)
        if block is None:
            logger.debug(f"Skipping module {key.label()}: no graded students")
            continue
        blocks.setdefault(key.subject_code, []).append(block)

    return blocks


def build_subject_statistics(records: Sequence[SemesterRecord], user_id: Optional[str],
                             identities, config: dict) -> List[ObjectStatistics]:
    """
    Build one statistics block per normalized subject code, with nested modules.

    Args:
        records: Eligible population
        user_id: Target student (None to skip locating anyone)
        identities: Identity directory for leaderboard names
        config: Engine configuration

    Returns:
        Subject blocks sorted by code; codes without graded students are skipped
    """
    subjects = subject_frame(records, config['DERIVE_SUBJECT_AVERAGE'])
    if subjects.empty:
        return []

    module_blocks = build_module_statistics(module_frame(records), user_id, identities, config)

    blocks = []
    for code, rows in subjects.groupby('subject_code', sort=True):
        block = object_statistics(code, _first_name(rows, 'subject_name'), rows,
                                  user_id, identities, config)
        if block is None:
            logger.debug(f"Skipping subject {code}: no graded students")
            continue
        block.modules = module_blocks.get(code, [])
        blocks.append(block)

    logger.debug(f"Built statistics for {len(blocks)} subjects")
    return blocks
