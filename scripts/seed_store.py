from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.config import settings
from app.store import SqliteDataStore

logger = logging.getLogger("seed_store")


def seed(store: SqliteDataStore, payload: dict, *, reset_matches: bool = False) -> tuple[int, int]:
    jobs = payload.get("jobs") or []
    resumes = payload.get("resumes") or []
    for job in jobs:
        stored = store.add_job(job)
        if reset_matches:
            store.delete_matches_for_job(stored.id)
    for resume in resumes:
        store.add_resume(resume)
    return len(jobs), len(resumes)


def main() -> None:
    parser = argparse.ArgumentParser(description="Load jobs and resumes from a JSON file into the match store.")
    parser.add_argument("path", help='JSON file shaped like {"jobs": [...], "resumes": [...]}')
    parser.add_argument("--db", default=settings.store_db_path, help="sqlite store path")
    parser.add_argument(
        "--reset-matches",
        action="store_true",
        help="Drop cached match records for every seeded job.",
    )
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level, format="%(message)s")
    payload = json.loads(Path(args.path).read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise SystemExit("Seed file must contain a JSON object with 'jobs' and 'resumes'.")

    store = SqliteDataStore(args.db)
    try:
        job_count, resume_count = seed(store, payload, reset_matches=args.reset_matches)
    finally:
        store.close()
    logger.info("Seeded %s jobs and %s resumes into %s", job_count, resume_count, args.db)


if __name__ == "__main__":
    main()
