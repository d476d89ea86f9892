#!/usr/bin/env python3
"""
Typed exceptions for the statistics engine.

Provides:
- Request-level failures the caller renders (missing record, no grades yet)
- Per-level failures reported next to the levels that did complete
- Programming errors raised by the aggregate math helpers
"""


class GradeStatsError(Exception):
    """Base exception for the statistics engine"""
    status_code: int = 500

    def __init__(self, message: str, status_code: int = None):
        self.message = message
        if status_code:
            self.status_code = status_code
        super().__init__(self.message)


class RecordNotFound(GradeStatsError):
    """
    Raised when the target student has no semester record for the period.

    Fatal to the request and surfaced as-is.
    """
    status_code = 404

    def __init__(self, user_id: str, semester: int, academic_year: str):
        self.user_id = user_id
        self.semester = semester
        self.academic_year = academic_year
        super().__init__(
            f"No semester record for user {user_id} (semester {semester}, {academic_year})",
            self.status_code
        )


class NoGradesYet(GradeStatsError):
    """
    Raised when the record exists but carries no computed average.

    Kept distinct from RecordNotFound so the caller can render an empty state.
    """
    status_code = 409

    def __init__(self, user_id: str, semester: int, academic_year: str):
        self.user_id = user_id
        self.semester = semester
        self.academic_year = academic_year
        super().__init__(
            f"User {user_id} has no graded average yet (semester {semester}, {academic_year})",
            self.status_code
        )


class LevelComputationError(GradeStatsError):
    """Raised when one grouping level could not be computed."""

    def __init__(self, level: str, cause: BaseException):
        self.level = level
        self.cause = cause
        super().__init__(f"Level '{level}' failed: {type(cause).__name__}: {cause}")


class ConfigError(GradeStatsError):
    """Raised for an invalid configuration value."""
    status_code = 400


class EmptySampleError(ValueError):
    """Aggregate math was called on an empty sample."""
