#!/usr/bin/env python3
"""
Semester Record Schema Definition

Read-only record types handed to the engine by the record store, and the
flattening helpers that turn a population of records into pandas frames.
The population frame is validated with Pandera so grouping keys and
averages are consistent before any ranking pass.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd
import pandera as pa
from pandera.typing import Series

from gradestats.normalizers.code_normalizer import normalize_module_code, normalize_subject_code

logger = logging.getLogger(__name__)

SEMESTER_COLUMNS = ['user_id', 'cursus', 'filiere', 'groupe', 'branch', 'effective_group', 'average']
SUBJECT_COLUMNS = ['user_id', 'groupe', 'effective_group', 'subject_code', 'subject_name', 'average']
MODULE_COLUMNS = ['user_id', 'groupe', 'effective_group', 'subject_code', 'module_code',
                  'module_name', 'average']


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if pd.isna(number) else number


@dataclass
class Module:
    """A graded sub-component of a subject."""
    code: str
    name: str = ""
    average: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Module":
        return cls(
            code=str(data.get('code', '')),
            name=str(data.get('name', '')),
            average=_optional_float(data.get('average')),
        )


@dataclass
class Subject:
    """A graded course unit (UE) and its modules."""
    code: str
    name: str = ""
    average: Optional[float] = None
    modules: List[Module] = field(default_factory=list)

    def effective_average(self, derive: bool = True) -> Optional[float]:
        """
        Subject average, falling back to the mean of graded modules.

        Args:
            derive: When False, only the stored average is used

        Returns:
            The average, or None when nothing is graded
        """
        if self.average is not None or not derive:
            return self.average

        graded = [m.average for m in self.modules if m.average is not None]
        if not graded:
            return None
        return sum(graded) / len(graded)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Subject":
        return cls(
            code=str(data.get('code', '')),
            name=str(data.get('name', '')),
            average=_optional_float(data.get('average')),
            modules=[Module.from_dict(m) for m in data.get('modules') or []],
        )


@dataclass
class SemesterRecord:
    """One student's results for one (academic year, semester) pair."""
    user_id: str
    academic_year: str
    semester: int
    cursus: str
    filiere: str
    groupe: str
    branch: Optional[str] = None
    average: Optional[float] = None
    subjects: List[Subject] = field(default_factory=list)

    @property
    def effective_group(self) -> str:
        """Branch when set, otherwise the class group."""
        if self.branch is not None and self.branch.strip() != "":
            return self.branch
        return self.groupe

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SemesterRecord":
        """
        Build a record from a store document.

        Accepts both snake_case keys and the camelCase document shape
        (``userId``, ``academicYear``, ``ues``).
        """
        subjects = data.get('subjects')
        if subjects is None:
            subjects = data.get('ues') or []

        branch = data.get('branch')
        return cls(
            user_id=str(data.get('user_id', data.get('userId', ''))),
            academic_year=str(data.get('academic_year', data.get('academicYear', ''))),
            semester=int(data['semester']),
            cursus=str(data.get('cursus', '')),
            filiere=str(data.get('filiere', '')),
            groupe=str(data.get('groupe', '')),
            branch=None if branch is None else str(branch),
            average=_optional_float(data.get('average')),
            subjects=[Subject.from_dict(s) for s in subjects],
        )


@dataclass
class StudentIdentity:
    """Display identity of a student and their opt-in to appear by name."""
    user_id: str
    opted_in: bool = False
    first_name: str = ""
    last_name: str = ""
    display_name: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StudentIdentity":
        return cls(
            user_id=str(data.get('user_id', data.get('_id', ''))),
            opted_in=bool(data.get('opted_in', data.get('nameInStats', False))),
            first_name=data.get('first_name', data.get('firstName')) or "",
            last_name=data.get('last_name', data.get('lastName')) or "",
            display_name=data.get('display_name', data.get('name')) or "",
        )


class SemesterFrameSchema(pa.DataFrameModel):
    """
    Pandera schema for a flattened population of semester records.

    Grouping keys must be present; the average is nullable (students without
    grades yet) but never negative.
    """

    user_id: Series[str] = pa.Field(description="Student identifier")
    cursus: Series[str] = pa.Field(description="Degree cursus")
    filiere: Series[str] = pa.Field(description="Specialization track")
    groupe: Series[str] = pa.Field(description="Class group")
    branch: Series[str] = pa.Field(description="Optional finer group, empty when absent")
    effective_group: Series[str] = pa.Field(description="Branch, or groupe when no branch")
    average: Series[float] = pa.Field(description="Semester average", nullable=True, ge=0)

    class Config:
        """Pandera configuration."""
        coerce = True
        strict = False

    @pa.check("effective_group")
    def effective_group_not_empty(cls, series: Series[str]) -> Series[bool]:
        """Every student lands in a named group bucket."""
        return series.str.len() > 0


def validate_frame(df: pd.DataFrame) -> pd.DataFrame:
    """
    Validate a population frame against SemesterFrameSchema.

    Raises:
        pa.errors.SchemaError: If validation fails
    """
    try:
        return SemesterFrameSchema.validate(df)
    except (pa.errors.SchemaError, pa.errors.SchemaErrors) as e:
        logger.error(f"Population frame failed validation: {e}")
        logger.error(f"Frame shape: {df.shape}, columns: {list(df.columns)}")
        raise


def semester_frame(records: Iterable[SemesterRecord]) -> pd.DataFrame:
    """
    Flatten semester records to one row per student.

    Rows are sorted by user id so every downstream pass sees a stable order.
    """
    rows = [
        {
            'user_id': r.user_id,
            'cursus': r.cursus,
            'filiere': r.filiere,
            'groupe': r.groupe,
            'branch': r.branch or "",
            'effective_group': r.effective_group,
            'average': r.average,
        }
        for r in records
    ]
    df = pd.DataFrame(rows, columns=SEMESTER_COLUMNS)
    df['average'] = pd.to_numeric(df['average'], errors='coerce').astype(float)

    ungrouped = df['effective_group'].str.strip() == ""
    if ungrouped.any():
        logger.warning(f"Dropping {int(ungrouped.sum())} records without groupe or branch: "
                       f"{df.loc[ungrouped, 'user_id'].tolist()}")
        df = df[~ungrouped]

    df = df.sort_values('user_id', kind='mergesort').reset_index(drop=True)
    return validate_frame(df)


def subject_frame(records: Iterable[SemesterRecord], derive_average: bool = True) -> pd.DataFrame:
    """Flatten to one row per (student, subject) with the normalized subject code."""
    rows = []
    for r in records:
        for subject in r.subjects:
            rows.append({
                'user_id': r.user_id,
                'groupe': r.groupe,
                'effective_group': r.effective_group,
                'subject_code': normalize_subject_code(subject.code),
                'subject_name': subject.name,
                'average': subject.effective_average(derive_average),
            })

    df = pd.DataFrame(rows, columns=SUBJECT_COLUMNS)
    df['average'] = pd.to_numeric(df['average'], errors='coerce').astype(float)
    return df.sort_values(['subject_code', 'user_id'], kind='mergesort').reset_index(drop=True)


def module_frame(records: Iterable[SemesterRecord]) -> pd.DataFrame:
    """Flatten to one row per (student, subject, module) keyed by normalized codes."""
    rows = []
    for r in records:
        for subject in r.subjects:
            subject_code = normalize_subject_code(subject.code)
            for module in subject.modules:
                rows.append({
                    'user_id': r.user_id,
                    'groupe': r.groupe,
                    'effective_group': r.effective_group,
                    'subject_code': subject_code,
                    'module_code': normalize_module_code(module.code),
                    'module_name': module.name,
                    'average': module.average,
                })

    df = pd.DataFrame(rows, columns=MODULE_COLUMNS)
    df['average'] = pd.to_numeric(df['average'], errors='coerce').astype(float)
    return df.sort_values(['subject_code', 'module_code', 'user_id'],
                          kind='mergesort').reset_index(drop=True)
