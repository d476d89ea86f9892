#!/usr/bin/env python3
"""
Subject / Module Code Normalizer

Strips class-section suffixes from subject (UE) and module codes so that the
same course offered to different groups lands in one statistical bucket:

    SM102PM-2526PSA01 -> SM102-2526PSA01
    SM102I-2526PSA01  -> SM102-2526PSA01
    UE16BN            -> UE16
"""

from typing import NamedTuple, Sequence

# Priority order matters: the first applicable suffix wins.
SUBJECT_SUFFIXES = ("PM", "I", "P", "BN")
MODULE_SUFFIXES = ("PM", "I", "P")

# Presentation-only separator for composite labels.
KEY_SEPARATOR = "/-/"


class ModuleKey(NamedTuple):
    """Map key for a module: its normalized parent subject code plus its own normalized code."""
    subject_code: str
    module_code: str

    def label(self) -> str:
        return join_key(self.subject_code, self.module_code)


def _strippable(segment: str, suffix: str) -> bool:
    return segment.endswith(suffix) and len(segment) > len(suffix)


def _strip_segment(segment: str, suffixes: Sequence[str]) -> str:
    for suffix in suffixes:
        if not _strippable(segment, suffix):
            continue
        remainder = segment[:-len(suffix)]
        # Only strip when the remainder is already in normal form.
        if any(_strippable(remainder, other) for other in suffixes):
            return segment
        return remainder
    return segment


def normalize_code(code: str, suffixes: Sequence[str]) -> str:
    """
    Normalize a raw code by stripping one known suffix from its terminal segment.

    The terminal segment is the text before the first dash (the whole code
    when there is none); the dash-delimited year/group tag is kept as-is.

    Args:
        code: Raw subject or module code
        suffixes: Suffixes to try, in priority order

    Returns:
        Normalized code, never empty for a non-empty input

    Example:
        >>> normalize_code("SM102PM-2526PSA01", MODULE_SUFFIXES)
        'SM102-2526PSA01'
        >>> normalize_code("UE11P", SUBJECT_SUFFIXES)
        'UE11'
    """
    if not code or not isinstance(code, str):
        return ""

    dash_index = code.find("-")
    if dash_index == -1:
        return _strip_segment(code, suffixes)

    head, tail = code[:dash_index], code[dash_index:]
    return _strip_segment(head, suffixes) + tail


def normalize_subject_code(code: str) -> str:
    """Normalize a subject (UE) code."""
    return normalize_code(code, SUBJECT_SUFFIXES)


def normalize_module_code(code: str) -> str:
    """Normalize a module code, independently of its parent subject."""
    return normalize_code(code, MODULE_SUFFIXES)


def join_key(*parts: str) -> str:
    """Join label parts with the reserved separator, e.g. ``"SM102/-/TD"``."""
    return KEY_SEPARATOR.join(parts)
