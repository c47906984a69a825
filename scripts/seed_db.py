"""
Seed script for the problem store and directory.

Usage:
  - Dry run (default): python scripts/seed_db.py
  - Apply to configured DB: python scripts/seed_db.py --apply
  - Use another seed file: python scripts/seed_db.py --seed ./my_seed.json --apply

Seed file format:
  {
    "departments": [{"id": "...", "name": "...", "category": "waste", "municipality": "Butwal",
                     "workload": {"active_cases": 2, "completion_rate": 0.9}}],
    "problems": [{"title": "...", "description": "...", "category": "waste",
                  "municipality": "Butwal", "ward": 7, "reporter_id": "user-1"}]
  }

Departments are written straight to the directory (Firestore users collection
with role "department"). Problems go through the engine, so they are
validated exactly like citizen reports.

NOTE: with USE_MOCK_DB=true everything is written to process memory and is
gone when the script exits; only useful as a validation dry run.
"""

import argparse
import json
import logging
import os

from civic_triage.core.errors import TriageError
from civic_triage.core.settings import settings
from civic_triage.models.department import Department
from civic_triage.services.engine import get_triage_engine

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
logger = logging.getLogger("seed_db")


def load_seed(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_departments(engine, departments, apply: bool = False) -> int:
    written = 0
    for raw in departments:
        department = Department.model_validate(raw)
        logger.info(f"Preparing department: {department.id} ({department.category.value}, {department.municipality})")
        if not apply:
            continue
        engine.directory.upsert_department(department)
        written += 1
    return written


def write_problems(engine, problems, apply: bool = False) -> int:
    written = 0
    for raw in problems:
        logger.info(f"Preparing problem: {raw.get('title')}")
        if not apply:
            continue
        try:
            problem = engine.create_problem(raw)
        except TriageError as e:
            logger.error(f"Skipped problem '{raw.get('title')}': {e.detail}")
            continue
        logger.info(f"Wrote problem {problem.id}")
        written += 1
    return written


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--apply", action="store_true", help="Write seed to the DB instead of dry-run")
    parser.add_argument("--seed", default=os.path.join(os.getcwd(), "db_seed.json"), help="Seed file path")
    args = parser.parse_args()

    if not os.path.exists(args.seed):
        logger.error(f"Seed file not found: {args.seed}")
        return

    seed = load_seed(args.seed)
    engine = get_triage_engine()
    logger.info(f"Backend: {engine.store.backend_name} (USE_MOCK_DB={settings.USE_MOCK_DB})")

    departments = write_departments(engine, seed.get("departments", []), apply=args.apply)
    problems = write_problems(engine, seed.get("problems", []), apply=args.apply)

    if args.apply:
        logger.info(f"Seeding completed: {departments} departments, {problems} problems.")
    else:
        logger.info("Dry run complete. Re-run with --apply to write to DB.")


if __name__ == "__main__":
    main()
