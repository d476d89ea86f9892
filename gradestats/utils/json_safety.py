#!/usr/bin/env python3
"""
JSON Safety Utilities - make result trees JSON-serializable.

Converts dataclasses, numpy scalars, NaN and Path objects found in a
statistics result into plain JSON values.
"""

import json
import math
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any

import numpy as np


def to_jsonable(obj: Any) -> Any:
    """
    Recursively convert an object into JSON-compatible values.

    Args:
        obj: Any Python object, typically a StatisticsResult or its to_dict()

    Returns:
        Object made of dicts, lists, strings, numbers, booleans and None
    """
    if hasattr(obj, 'to_dict') and callable(obj.to_dict):
        return to_jsonable(obj.to_dict())
    if is_dataclass(obj) and not isinstance(obj, type):
        return to_jsonable(asdict(obj))
    if isinstance(obj, Path):
        return obj.as_posix()
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, (float, np.floating)):
        value = float(obj)
        return None if math.isnan(value) else value
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [to_jsonable(x) for x in obj]
    return obj


def safe_json_dumps(data: Any, **kwargs) -> str:
    """Serialize data to a JSON string after to_jsonable()."""
    return json.dumps(to_jsonable(data), **kwargs)


def safe_json_dump(data: Any, file_path: str, **kwargs) -> None:
    """
    Safely dump data to JSON file.

    Args:
        data: Data to serialize to JSON
        file_path: Path to output JSON file
        **kwargs: Additional arguments passed to json.dump()
    """
    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump(to_jsonable(data), f, **kwargs)
