"""Import seed data (users, prospects, activities, ...) into any database.

Rows whose id already exists are skipped, so the script can be re-run safely.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))
load_dotenv(PROJECT_ROOT / ".env")

from pipeline_crm.core.exceptions import PipelineCRMException  # noqa: E402
from pipeline_crm.core.logging_config import configure_logging  # noqa: E402
from pipeline_crm.database.db import Database  # noqa: E402
from pipeline_crm.database.schema import ensure_schema  # noqa: E402
from pipeline_crm.database.seed import import_seed_data, read_seed_file  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description="Import pipeline CRM seed data from a JSON export.")
    parser.add_argument("seed_file", help="Path to the JSON file (users, prospects, activities, ...).")
    parser.add_argument("--database-url", help="SQLAlchemy URL. If omitted, DATABASE_URL env is used.")
    args = parser.parse_args()

    database_url = args.database_url or os.getenv("DATABASE_URL")
    if not database_url:
        raise SystemExit("DATABASE_URL is not set and --database-url was not given.")

    configure_logging()
    database = Database(database_url).open()
    try:
        payload = read_seed_file(args.seed_file)
        ensure_schema(database.engine)
        with database.session() as db:
            inserted = import_seed_data(db, payload)
    except (OSError, PipelineCRMException) as exc:
        raise SystemExit(f"Seed import failed: {exc}") from exc
    finally:
        database.close()

    for section, count in inserted.items():
        print(f"{section}: {count} inserted")


if __name__ == "__main__":
    main()
