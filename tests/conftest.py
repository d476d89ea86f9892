#!/usr/bin/env python3
"""
Pytest configuration and fixtures
"""

import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from gradestats.config import load_config
from gradestats.schema.semester_schema import Module, SemesterRecord, StudentIdentity, Subject
from gradestats.store.record_store import InMemoryIdentityDirectory, InMemoryRecordStore


def make_record(user_id, average, groupe="G1", branch=None, filiere="INFO", cursus="PGE",
                semester=3, academic_year="2024-2025", subjects=None):
    """Build a SemesterRecord with sensible defaults for tests"""
    return SemesterRecord(
        user_id=user_id,
        academic_year=academic_year,
        semester=semester,
        cursus=cursus,
        filiere=filiere,
        groupe=groupe,
        branch=branch,
        average=average,
        subjects=subjects or [],
    )


@pytest.fixture
def record_factory():
    """Factory for semester records"""
    return make_record


@pytest.fixture
def config():
    """Packaged default configuration"""
    return load_config()


@pytest.fixture
def scenario_records():
    """Three students: A and B in G1, C in G2"""
    return [
        make_record("A", 15.0, groupe="G1"),
        make_record("B", 10.0, groupe="G1"),
        make_record("C", 20.0, groupe="G2"),
    ]


@pytest.fixture
def previous_scenario_records():
    """Same three students one semester earlier"""
    return [
        make_record("A", 12.0, groupe="G1", semester=2, academic_year="2023-2024"),
        make_record("B", 14.0, groupe="G1", semester=2, academic_year="2023-2024"),
        make_record("C", 16.0, groupe="G2", semester=2, academic_year="2023-2024"),
    ]


@pytest.fixture
def scenario_store(scenario_records):
    """Record store holding only the current semester"""
    return InMemoryRecordStore(scenario_records)


@pytest.fixture
def trend_store(scenario_records, previous_scenario_records):
    """Record store holding the current and the previous semester"""
    return InMemoryRecordStore(scenario_records + previous_scenario_records)


@pytest.fixture
def identities():
    """A opted in to appear by name, B did not, C has no identity"""
    return InMemoryIdentityDirectory([
        StudentIdentity("A", opted_in=True, first_name="Ada", last_name="Lovelace"),
        StudentIdentity("B", opted_in=False, first_name="Alan", last_name="Turing"),
    ])


@pytest.fixture
def subject_records():
    """Students with merged subject / module codes across class sections"""
    return [
        make_record("A", 15.0, groupe="G1", subjects=[
            Subject("UE11P", "Algorithmique", 14.0, [
                Module("SM102PM-2526PSA01", "Structures", 12.0),
                Module("SM103-2526", "Graphes", 16.0),
            ]),
            Subject("UE12", "Langues", None, []),
        ]),
        make_record("B", 10.0, groupe="G1", subjects=[
            Subject("UE11", "Algorithmique", 10.0, [
                Module("SM102I-2526PSA01", "Structures", 8.0),
            ]),
        ]),
        make_record("C", 20.0, groupe="G2", subjects=[
            Subject("UE11I", "Algorithmique", None, [
                Module("SM102-2526PSA01", "Structures", None),
            ]),
        ]),
    ]
