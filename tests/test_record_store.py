#!/usr/bin/env python3
"""
Test suite for the in-memory record store and identity directory
"""

import json
import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from gradestats.store.record_store import InMemoryIdentityDirectory, InMemoryRecordStore


RECORD_DOCUMENTS = [
    {
        'userId': 'A', 'academicYear': '2024-2025', 'semester': 3,
        'cursus': 'PGE', 'filiere': 'INFO', 'groupe': 'G1', 'average': 15.0,
        'ues': [{'code': 'UE11P', 'name': 'Algo', 'average': 14.0,
                 'modules': [{'code': 'SM102PM-2526PSA01', 'name': 'Structures', 'average': 12.0}]}],
    },
    {
        'userId': 'B', 'academicYear': '2024-2025', 'semester': 3,
        'cursus': 'PGE', 'filiere': 'INFO', 'groupe': 'G1', 'branch': 'B1', 'average': None,
    },
    {
        'user_id': 'C', 'academic_year': '2023-2024', 'semester': 2,
        'cursus': 'PGE', 'filiere': 'MATH', 'groupe': 'G2', 'average': '11.5',
    },
]


class TestInMemoryRecordStore:
    """Test cases for record filtering"""

    def test_find_by_period(self):
        """Test that find only returns the requested period"""
        store = InMemoryRecordStore.from_dicts(RECORD_DOCUMENTS)

        assert len(store) == 3
        assert sorted(r.user_id for r in store.find('2024-2025', 3)) == ['A', 'B']
        assert [r.user_id for r in store.find('2023-2024', 2)] == ['C']

    def test_equality_and_membership_filters(self):
        """Test scalar and list filter values"""
        store = InMemoryRecordStore.from_dicts(RECORD_DOCUMENTS)

        assert [r.user_id for r in store.find('2024-2025', 3, branch='B1')] == ['B']
        assert [r.user_id for r in store.find('2024-2025', 3, branch=['', None])] == ['A']
        assert store.find('2024-2025', 3, filiere='MATH') == []

    def test_unknown_filter(self):
        """Test that unsupported filter names are rejected"""
        store = InMemoryRecordStore.from_dicts(RECORD_DOCUMENTS)

        with pytest.raises(ValueError):
            store.find('2024-2025', 3, campus='Paris')

    def test_find_one(self):
        """Test single record lookup"""
        store = InMemoryRecordStore.from_dicts(RECORD_DOCUMENTS)

        record = store.find_one('A', 3, '2024-2025')
        assert record.average == 15.0
        assert record.subjects[0].code == 'UE11P'
        assert record.subjects[0].modules[0].average == 12.0
        assert store.find_one('A', 2, '2024-2025') is None

    def test_document_values(self):
        """Test null and string averages in documents"""
        store = InMemoryRecordStore.from_dicts(RECORD_DOCUMENTS)

        assert store.find_one('B', 3, '2024-2025').average is None
        assert store.find_one('B', 3, '2024-2025').effective_group == 'B1'
        assert store.find_one('C', 2, '2023-2024').average == 11.5

    def test_from_json(self, tmp_path):
        """Test loading records from a JSON export"""
        path = tmp_path / "records.json"
        path.write_text(json.dumps(RECORD_DOCUMENTS), encoding='utf-8')

        store = InMemoryRecordStore.from_json(path)
        assert len(store) == 3

    def test_from_json_requires_list(self, tmp_path):
        """Test that a JSON object is rejected"""
        path = tmp_path / "records.json"
        path.write_text(json.dumps({'records': []}), encoding='utf-8')

        with pytest.raises(ValueError):
            InMemoryRecordStore.from_json(path)


class TestInMemoryIdentityDirectory:
    """Test cases for identity lookup"""

    def test_from_json(self, tmp_path):
        """Test loading identities with document field names"""
        path = tmp_path / "users.json"
        path.write_text(json.dumps([
            {'_id': 'A', 'nameInStats': True, 'firstName': 'Ada', 'lastName': 'Lovelace'},
            {'_id': 'B', 'firstName': 'Alan', 'lastName': 'Turing'},
        ]), encoding='utf-8')

        directory = InMemoryIdentityDirectory.from_json(path)

        assert directory.get('A').opted_in is True
        assert directory.get('A').first_name == 'Ada'
        assert directory.get('B').opted_in is False
        assert directory.get('Z') is None


if __name__ == "__main__":
    pytest.main([__file__])
