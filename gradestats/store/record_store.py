#!/usr/bin/env python3
"""
Read-only access to semester records and student identities.

The engine only needs two capabilities: filtering semester records on
(academic year, semester, cursus, filiere, groupe, branch) and looking up a
student's display identity. Any backend implementing RecordStore and
IdentityDirectory can be plugged in; in-memory versions loaded from JSON are
provided for the CLI and tests.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from gradestats.schema.semester_schema import SemesterRecord, StudentIdentity

logger = logging.getLogger(__name__)

FILTER_FIELDS = ('cursus', 'filiere', 'groupe', 'branch')


class RecordStore(ABC):
    """Read interface over a collection of semester records."""

    @abstractmethod
    def find(self, academic_year: str, semester: int, **filters: Any) -> List[SemesterRecord]:
        """
        Return every record of the period matching the filters, unsorted.

        Each filter value is either a scalar (equality) or a list, tuple or
        set (membership). Filter names are limited to FILTER_FIELDS.
        """

    @abstractmethod
    def find_one(self, user_id: str, semester: int, academic_year: str) -> Optional[SemesterRecord]:
        """Return one student's record for the period, or None."""


class IdentityDirectory(ABC):
    """Lookup from student identifier to display identity."""

    @abstractmethod
    def get(self, user_id: str) -> Optional[StudentIdentity]:
        """Return the identity of a student, or None when unknown."""


def _matches(value: Any, expected: Any) -> bool:
    if isinstance(expected, (list, tuple, set, frozenset)):
        return value in expected
    return value == expected


def _load_json_list(path: Union[str, Path]) -> List[Dict[str, Any]]:
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON list of documents in {path}")
    return data


class InMemoryRecordStore(RecordStore):
    """RecordStore over a list of records held in memory."""

    def __init__(self, records: Iterable[SemesterRecord]):
        self._records = list(records)

    @classmethod
    def from_dicts(cls, documents: Iterable[Dict[str, Any]]) -> "InMemoryRecordStore":
        return cls(SemesterRecord.from_dict(doc) for doc in documents)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "InMemoryRecordStore":
        """Load records from a JSON file holding a list of record documents."""
        documents = _load_json_list(path)
        logger.info(f"Loaded {len(documents)} semester records from {path}")
        return cls.from_dicts(documents)

    def __len__(self) -> int:
        return len(self._records)

    def find(self, academic_year: str, semester: int, **filters: Any) -> List[SemesterRecord]:
        unknown = [name for name in filters if name not in FILTER_FIELDS]
        if unknown:
            raise ValueError(f"Unsupported record filters: {unknown}")

        return [
            record for record in self._records
            if record.academic_year == academic_year
            and record.semester == semester
            and all(_matches(getattr(record, name), expected) for name, expected in filters.items())
        ]

    def find_one(self, user_id: str, semester: int, academic_year: str) -> Optional[SemesterRecord]:
        for record in self._records:
            if (record.user_id == str(user_id) and record.semester == semester
                    and record.academic_year == academic_year):
                return record
        return None


class InMemoryIdentityDirectory(IdentityDirectory):
    """IdentityDirectory over a dict of identities."""

    def __init__(self, identities: Iterable[StudentIdentity] = ()):
        self._identities = {identity.user_id: identity for identity in identities}

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "InMemoryIdentityDirectory":
        documents = _load_json_list(path)
        logger.info(f"Loaded {len(documents)} student identities from {path}")
        return cls(StudentIdentity.from_dict(doc) for doc in documents)

    def get(self, user_id: str) -> Optional[StudentIdentity]:
        return self._identities.get(str(user_id))
