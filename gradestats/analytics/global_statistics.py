#!/usr/bin/env python3
"""
Global Statistics Orchestrator

Computes a student's standing against their peers at four nested grouping
levels for one semester:

    group   -> same class group and same effective group (branch, or groupe
               when the student has no branch)
    spe     -> same class group within the filiere
    filiere -> same specialization track within the cursus
    cursus  -> same degree cursus

Each (level, period) population is fetched and ranked as an independent task;
the current and previous-period results are then merged into one
StatisticsResult with raw deltas. Nothing is cached or persisted: every call
recomputes from the record store.
"""

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence, Tuple

from gradestats.analytics.group_ranker import rank_groups_from_records
from gradestats.analytics.group_stats import build_level_statistics
from gradestats.analytics.student_ranker import rank_students, students_from_frame
from gradestats.analytics.subject_stats import build_subject_statistics
from gradestats.analytics.utils_stats import present_values, summarize
from gradestats.config import LEVELS, load_config
from gradestats.errors import LevelComputationError, NoGradesYet, RecordNotFound
from gradestats.schema.semester_schema import SemesterRecord, semester_frame
from gradestats.schema.statistics_schema import (
    LevelStatistics,
    ObjectStatistics,
    PopulationStatistics,
    StatisticsResult,
)
from gradestats.store.record_store import IdentityDirectory, RecordStore

logger = logging.getLogger(__name__)

ACADEMIC_YEAR_PATTERN = re.compile(r"^(\d{4})-(\d{4})$")

CURRENT = "current"
PREVIOUS = "previous"


def shift_academic_year(academic_year: str, years: int) -> Optional[str]:
    """
    Shift an academic year label such as "2024-2025" by a number of years.

    Returns:
        The shifted label, or None when the label is not in YYYY-YYYY form
    """
    match = ACADEMIC_YEAR_PATTERN.match(academic_year or "")
    if not match:
        logger.warning(f"Cannot shift academic year '{academic_year}': expected YYYY-YYYY")
        return None
    start, end = int(match.group(1)), int(match.group(2))
    return f"{start + years}-{end + years}"


def previous_period(semester: int, academic_year: str,
                    strategy: str = "previous_semester") -> Optional[Tuple[int, str]]:
    """
    Resolve the period used as the comparison baseline.

    Semesters are numbered across the whole program, two per academic year
    (1-2 in the first year, 3-4 in the second, ...).

    Args:
        semester: Current semester number
        academic_year: Current academic year label
        strategy: "previous_semester" (n-1; the academic year moves back when
            n opens a year) or "previous_year" (n-2 in the previous year)

    Returns:
        (semester, academic_year) of the baseline, or None when there is none
    """
    if strategy == "previous_year":
        if semester <= 2:
            return None
        year = shift_academic_year(academic_year, -1)
        return None if year is None else (semester - 2, year)

    if semester <= 1:
        return None
    if semester % 2 == 1:
        year = shift_academic_year(academic_year, -1)
        return None if year is None else (semester - 1, year)
    return semester - 1, academic_year


def level_filters(level: str, record: SemesterRecord) -> Dict[str, Any]:
    """
    Record store filters selecting the population of a level around a student.

    Levels are nested: every filter carries the enclosing keys. The group
    level is narrowed further on effective group by fetch_population().
    """
    if level in ("group", "spe"):
        return {'cursus': record.cursus, 'filiere': record.filiere, 'groupe': record.groupe}
    if level == "filiere":
        return {'cursus': record.cursus, 'filiere': record.filiere}
    if level == "cursus":
        return {'cursus': record.cursus}
    raise ValueError(f"Unknown level: {level}")


def level_group_name(level: str, record: SemesterRecord) -> str:
    return {
        'group': record.effective_group,
        'spe': record.groupe,
        'filiere': record.filiere,
        'cursus': record.cursus,
    }[level]


def fetch_population(store: RecordStore, level: str, record: SemesterRecord,
                     semester: int, academic_year: str) -> List[SemesterRecord]:
    """Fetch a level's population for a period, applying the effective-group rule."""
    population = store.find(academic_year, semester, **level_filters(level, record))
    if level == "group":
        # Branch "", whitespace or None all fall back to the groupe.
        population = [r for r in population if r.effective_group == record.effective_group]
    return population


def compute_population_statistics(name: str, semester: int, academic_year: str,
                                  records: Sequence[SemesterRecord],
                                  cursus_view: bool = False) -> Optional[PopulationStatistics]:
    """
    Aggregate and rank one population.

    Args:
        name: Population display name
        semester: Semester of the records
        academic_year: Academic year of the records
        records: Population; records without an average are excluded
        cursus_view: Rank filieres instead of effective groups

    Returns:
        PopulationStatistics, or None when nobody in the population has an average
    """
    frame = semester_frame(records)
    averages = present_values(frame['average'])
    if not averages:
        return None

    summary = summarize(averages)
    return PopulationStatistics(
        name=name,
        semester=semester,
        academic_year=academic_year,
        average=summary['average'],
        median=summary['median'],
        min=summary['min'],
        max=summary['max'],
        number_of_students=summary['number_of_students'],
        student_rankings=rank_students(students_from_frame(frame)),
        group_rankings=rank_groups_from_records(frame, cursus_view=cursus_view),
    )


def _population_pass(store: RecordStore, level: str, record: SemesterRecord,
                     semester: int, academic_year: str, with_subjects: bool,
                     identities: Optional[IdentityDirectory],
                     config: Dict[str, Any]) -> Tuple[Optional[PopulationStatistics], List[ObjectStatistics]]:
    population = fetch_population(store, level, record, semester, academic_year)
    logger.info(f"Level '{level}' {semester}/{academic_year}: {len(population)} records")

    stats = compute_population_statistics(level_group_name(level, record), semester, academic_year,
                                          population, cursus_view=(level == "cursus"))
    subjects = []
    if with_subjects and stats is not None:
        subjects = build_subject_statistics(population, record.user_id, identities, config)
    return stats, subjects


def compute_statistics(user_id: str, semester: int, academic_year: str,
                       store: RecordStore,
                       identities: Optional[IdentityDirectory] = None,
                       config: Optional[Dict[str, Any]] = None) -> StatisticsResult:
    """
    Compute the full statistics tree of one student for one semester.

    Args:
        user_id: Target student
        semester: Semester number
        academic_year: Academic year label ("2024-2025")
        store: Record store to read populations from
        identities: Identity directory for leaderboard names (None: all anonymous)
        config: Engine configuration; partial dicts are merged over the
            packaged defaults and validated

    Returns:
        StatisticsResult; a level with no graded peers is None, a level whose
        computation failed is None with its message in ``errors``

    Raises:
        RecordNotFound: The student has no record for the period
        NoGradesYet: The record exists but has no average
    """
    config = load_config(overrides=config)

    record = store.find_one(user_id, semester, academic_year)
    if record is None:
        raise RecordNotFound(user_id, semester, academic_year)
    if record.average is None:
        raise NoGradesYet(user_id, semester, academic_year)

    baseline = previous_period(semester, academic_year, config['PREVIOUS_PERIOD'])
    subject_levels = set(config['SUBJECT_STATS_LEVELS'])

    result = StatisticsResult(
        user_id=str(user_id),
        semester=semester,
        academic_year=academic_year,
        student_average=record.average,
        previous_semester=baseline[0] if baseline else None,
        previous_academic_year=baseline[1] if baseline else None,
    )

    logger.info(f"Computing statistics for {user_id} (semester {semester}, {academic_year})")

    with ThreadPoolExecutor(max_workers=config['MAX_WORKERS']) as pool:
        futures = {}
        for level in LEVELS:
            futures[(level, CURRENT)] = pool.submit(
                _population_pass, store, level, record, semester, academic_year,
                level in subject_levels, identities, config)
            if baseline:
                futures[(level, PREVIOUS)] = pool.submit(
                    _population_pass, store, level, record, baseline[0], baseline[1],
                    False, identities, config)

        for level in LEVELS:
            try:
                result.levels[level] = _assemble_level(level, record, futures, identities, config)
            except Exception as e:
                error = LevelComputationError(level, e)
                logger.exception(error.message)
                result.levels[level] = None
                result.errors[level] = error.message

    return result


def _assemble_level(level: str, record: SemesterRecord, futures: Dict[Tuple[str, str], Any],
                    identities: Optional[IdentityDirectory],
                    config: Dict[str, Any]) -> Optional[LevelStatistics]:
    current, subjects = futures[(level, CURRENT)].result()
    if current is None:
        logger.warning(f"Level '{level}' has no graded students; returning no statistics")
        return None

    previous = None
    if (level, PREVIOUS) in futures:
        previous, _ = futures[(level, PREVIOUS)].result()
        if previous is None:
            logger.info(f"Level '{level}' has no previous-period data; deltas omitted")

    return build_level_statistics(level, level_group_name(level, record), current, previous,
                                  record.user_id, identities, config, subjects=subjects)
