#!/usr/bin/env python3
"""
End-to-end tests for the command line entry point
"""

import json
import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from gradestats.cli import main


def write_json(path, data):
    path.write_text(json.dumps(data), encoding='utf-8')
    return str(path)


@pytest.fixture
def exports(tmp_path):
    records = [
        {'userId': 'A', 'academicYear': '2024-2025', 'semester': 4, 'cursus': 'PGE',
         'filiere': 'INFO', 'groupe': 'G1', 'average': 15.0},
        {'userId': 'B', 'academicYear': '2024-2025', 'semester': 4, 'cursus': 'PGE',
         'filiere': 'INFO', 'groupe': 'G1', 'average': 10.0},
        {'userId': 'C', 'academicYear': '2024-2025', 'semester': 4, 'cursus': 'PGE',
         'filiere': 'INFO', 'groupe': 'G2', 'average': None},
        {'userId': 'A', 'academicYear': '2024-2025', 'semester': 3, 'cursus': 'PGE',
         'filiere': 'INFO', 'groupe': 'G1', 'average': 9.0},
        {'userId': 'B', 'academicYear': '2024-2025', 'semester': 3, 'cursus': 'PGE',
         'filiere': 'INFO', 'groupe': 'G1', 'average': 11.0},
    ]
    users = [{'_id': 'A', 'nameInStats': True, 'firstName': 'Ada', 'lastName': 'Lovelace'}]
    return {
        'records': write_json(tmp_path / "records.json", records),
        'identities': write_json(tmp_path / "users.json", users),
        'output': str(tmp_path / "stats.json"),
    }


def base_args(exports, user_id='A'):
    return ['--records', exports['records'], '--user-id', user_id,
            '--semester', '4', '--academic-year', '2024-2025']


class TestCli:
    """Test cases for the gradestats command"""

    def test_writes_output_file(self, exports):
        """Test a successful run writing JSON to a file"""
        code = main(base_args(exports) + ['--identities', exports['identities'],
                                          '--output', exports['output']])

        assert code == 0
        data = json.loads(Path(exports['output']).read_text(encoding='utf-8'))
        assert data['user_id'] == 'A'
        assert data['previous_semester'] == 3
        assert set(data['levels']) == {'group', 'spe', 'filiere', 'cursus'}

        group = data['levels']['group']
        assert group['student_rank'] == {'current': 1, 'raw': -1}
        assert group['student_average'] == {'current': 15.0, 'raw': 6.0}
        assert group['student_rankings'][0]['name'] == 'Ada Lovelace/-/G1'

    def test_prints_to_stdout(self, exports, capsys):
        """Test a successful run printing JSON"""
        assert main(base_args(exports)) == 0

        data = json.loads(capsys.readouterr().out)
        assert data['levels']['filiere']['number_of_students'] == 2

    def test_unknown_student(self, exports):
        """Test exit code for a missing record"""
        assert main(base_args(exports, user_id='Z')) == 2

    def test_no_grades_yet(self, exports):
        """Test exit code for a record without average"""
        assert main(base_args(exports, user_id='C')) == 3

    def test_missing_records_file(self, exports, tmp_path):
        """Test exit code for a records file that does not exist"""
        args = base_args(exports)
        args[1] = str(tmp_path / "missing.json")

        assert main(args) == 2

    def test_malformed_records_file(self, exports, tmp_path):
        """Test exit code for records that are not valid JSON or not a list"""
        broken = tmp_path / "broken.json"
        broken.write_text("{not json", encoding='utf-8')
        args = base_args(exports)
        args[1] = str(broken)
        assert main(args) == 2

        args[1] = write_json(tmp_path / "object.json", {'records': []})
        assert main(args) == 2

    def test_malformed_identities_file(self, exports, tmp_path):
        """Test exit code for an unreadable identities file"""
        broken = tmp_path / "users.json"
        broken.write_text("[{", encoding='utf-8')

        assert main(base_args(exports) + ['--identities', str(broken)]) == 2

    def test_missing_config(self, exports, tmp_path):
        """Test exit code for a missing configuration file"""
        assert main(base_args(exports) + ['--config', str(tmp_path / "nope.yaml")]) == 2


if __name__ == "__main__":
    pytest.main([__file__])
