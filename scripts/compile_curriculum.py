#!/usr/bin/env python3
"""
compile_curriculum.py - Bundle a YAML curriculum into curriculum.db.

Validates units, lessons and challenges, reports integrity issues and
writes a single SQLite database for runtime serving.

Usage:
  python scripts/compile_curriculum.py
  python scripts/compile_curriculum.py --curriculum data/curriculum.yaml --output data/curriculum.db
"""

import argparse
import json
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from streakpath.classroom import compile_curriculum, load_curriculum_file
from streakpath.utils import load_engine_config

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Compile curriculum database from a YAML curriculum",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "--curriculum",
        type=Path,
        default=PROJECT_ROOT / "data" / "curriculum.yaml",
        help="Path to curriculum YAML file"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=PROJECT_ROOT / "data" / "curriculum.db",
        help="Output database path"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Engine config YAML (default: config/engine.yaml)"
    )
    parser.add_argument(
        "--stats-output",
        type=Path,
        default=None,
        help="Output path for stats JSON (default: alongside database)"
    )

    args = parser.parse_args()

    logger.info("Loading config...")
    config = load_engine_config(args.config)

    logger.info("Loading curriculum...")
    units = load_curriculum_file(args.curriculum)
    logger.info(f"  Loaded {len(units)} units")

    logger.info("Compiling database...")
    stats = compile_curriculum(units, args.output, config)

    stats_path = args.stats_output or args.output.with_suffix(".stats.json")
    with open(stats_path, "w", encoding="utf-8") as f:
        json.dump(stats, f, indent=2, ensure_ascii=False)
    logger.info(f"Saved stats to: {stats_path}")

    logger.info("\n" + "=" * 50)
    logger.info("COMPILATION COMPLETE")
    logger.info("=" * 50)
    logger.info(f"Database: {args.output}")
    logger.info(f"Units: {stats['total_units']}")
    logger.info(f"Lessons: {stats['total_lessons']}")
    logger.info(f"Challenges: {stats['total_challenges']}")
    if stats["issues"]:
        logger.warning(f"Integrity issues: {len(stats['issues'])}")
    else:
        logger.info("All integrity checks passed!")


if __name__ == "__main__":
    main()
