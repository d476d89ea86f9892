#!/usr/bin/env python3
"""
Command line entry point: compute one student's statistics from JSON exports.
"""

import argparse
import logging
import sys

from gradestats.analytics.global_statistics import compute_statistics
from gradestats.config import load_config
from gradestats.errors import GradeStatsError, NoGradesYet
from gradestats.store.record_store import InMemoryIdentityDirectory, InMemoryRecordStore
from gradestats.utils.json_safety import safe_json_dump, safe_json_dumps
from gradestats.utils.logger import get_logger

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Peer grade statistics engine")
    parser.add_argument("--records", type=str, required=True,
                        help="JSON file with a list of semester record documents")
    parser.add_argument("--identities", type=str, default=None,
                        help="JSON file with a list of student identity documents")
    parser.add_argument("--user-id", type=str, required=True,
                        help="Student to compute statistics for")
    parser.add_argument("--semester", type=int, required=True,
                        help="Semester number")
    parser.add_argument("--academic-year", type=str, required=True,
                        help="Academic year, e.g. 2024-2025")
    parser.add_argument("--config", type=str, default=None,
                        help="Configuration file path (packaged defaults if omitted)")
    parser.add_argument("--output", type=str, default=None,
                        help="Write the JSON result here instead of stdout")
    parser.add_argument("--log-file", type=str, default=None,
                        help="Also append logs to this file")
    parser.add_argument("--verbose", action="store_true",
                        help="Enable debug logging")
    return parser


def main(argv=None) -> int:
    """CLI entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)

    get_logger(args.log_file, level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        store = InMemoryRecordStore.from_json(args.records)
        identities = InMemoryIdentityDirectory.from_json(args.identities) if args.identities else None
    except (OSError, KeyError, ValueError) as e:
        # json.JSONDecodeError is a ValueError
        logger.error(f"Could not load input data: {e}")
        return 2

    try:
        config = load_config(args.config)
        result = compute_statistics(args.user_id, args.semester, args.academic_year,
                                    store, identities, config)
    except NoGradesYet as e:
        logger.warning(e.message)
        return 3
    except GradeStatsError as e:
        logger.error(e.message)
        return 2

    if result.errors:
        logger.warning(f"Levels with errors: {sorted(result.errors)}")

    if args.output:
        safe_json_dump(result, args.output, indent=2)
        logger.info(f"Statistics saved to {args.output}")
    else:
        sys.stdout.write(safe_json_dumps(result, indent=2) + "\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
