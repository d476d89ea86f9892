"""
Code normalization for subject and module identifiers.
"""

from .code_normalizer import (
    KEY_SEPARATOR,
    MODULE_SUFFIXES,
    SUBJECT_SUFFIXES,
    ModuleKey,
    join_key,
    normalize_code,
    normalize_module_code,
    normalize_subject_code,
)

__all__ = [
    'KEY_SEPARATOR',
    'MODULE_SUFFIXES',
    'SUBJECT_SUFFIXES',
    'ModuleKey',
    'join_key',
    'normalize_code',
    'normalize_module_code',
    'normalize_subject_code',
]
