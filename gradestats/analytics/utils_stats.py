#!/usr/bin/env python3
"""
Statistical utilities for the peer statistics engine.

Pure helpers over non-null numeric samples. Null filtering is the caller's
job: every helper here treats an empty sample as a programming error.
"""

import logging
from typing import Any, Dict, Iterable, List

import numpy as np
import pandas as pd

from gradestats.errors import EmptySampleError

logger = logging.getLogger(__name__)


def _as_sample(values: Iterable[float], name: str) -> np.ndarray:
    sample = np.asarray(list(values), dtype=float)
    if sample.size == 0:
        raise EmptySampleError(f"{name}() requires a non-empty sample")
    if np.isnan(sample).any():
        raise EmptySampleError(f"{name}() received null values; filter them first")
    return sample


def mean(values: Iterable[float]) -> float:
    """
    Arithmetic mean of a non-empty sample.

    Raises:
        EmptySampleError: If the sample is empty or contains nulls
    """
    sample = _as_sample(values, "mean")
    # Float rounding can land a hair outside [min, max] for near-equal samples.
    return float(np.clip(sample.sum() / sample.size, sample.min(), sample.max()))


def median(values: Iterable[float]) -> float:
    """
    Median of a non-empty sample.

    Even-length samples average the two middle elements.
    """
    sample = np.sort(_as_sample(values, "median"))
    mid = sample.size // 2
    if sample.size % 2 == 0:
        return float((sample[mid - 1] + sample[mid]) / 2)
    return float(sample[mid])


def minimum(values: Iterable[float]) -> float:
    """Smallest value of a non-empty sample."""
    sample = _as_sample(values, "minimum")
    lowest = sample[0]
    for value in sample[1:]:
        if value < lowest:
            lowest = value
    return float(lowest)


def maximum(values: Iterable[float]) -> float:
    """Largest value of a non-empty sample."""
    sample = _as_sample(values, "maximum")
    highest = sample[0]
    for value in sample[1:]:
        if value > highest:
            highest = value
    return float(highest)


def present_values(series: pd.Series) -> List[float]:
    """Drop nulls from a series and return the remaining values as floats."""
    return [float(v) for v in series.dropna().tolist()]


def summarize(values: Iterable[float]) -> Dict[str, Any]:
    """
    Compute every aggregate of a non-empty sample in one pass.

    Args:
        values: Non-null numeric sample

    Returns:
        Dictionary with average, median, min, max and number_of_students
    """
    sample = list(values)
    return {
        'average': mean(sample),
        'median': median(sample),
        'min': minimum(sample),
        'max': maximum(sample),
        'number_of_students': len(sample),
    }
