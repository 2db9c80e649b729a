"""
Database connection check: connects with DATABASE_URL, makes sure the
study cards table exists, counts the cards and prints the newest few.

Usage:
    python -m scripts.check_db

Exit code 1 when the database is unreachable or the table is missing.
The check never creates anything; tables are created when the app starts.
"""

from __future__ import annotations

import logging
import sys

from sqlalchemy import func, inspect

from config import load_settings
from db import make_engine, make_session_factory
from models import StudyCard

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

TROUBLESHOOTING = [
    "Verify DATABASE_URL in .env",
    "Check that the database server is running and reachable",
    "Make sure the database user can read the study_cards table",
    "Start the app once (uvicorn main:app) to create missing tables",
]


def check_database(database_url: str, sample_size: int = 5) -> int:
    engine = None
    try:
        engine = make_engine(database_url)
        logger.info("Step 1: connecting to %s", engine.url.render_as_string(hide_password=True))
        with engine.connect():
            pass
        logger.info("Connected")

        table = StudyCard.__tablename__
        logger.info("Step 2: checking that table %r exists", table)
        if not inspect(engine).has_table(table):
            logger.error("Table %r does not exist", table)
            logger.error("Start the app once (uvicorn main:app) to create it")
            return 1

        logger.info("Step 3: counting study cards")
        db = make_session_factory(engine)()
        try:
            total = db.query(func.count(StudyCard.id)).scalar() or 0
            logger.info("Found %d study cards", total)

            if not total:
                logger.warning("The table exists but is empty; add cards from the dashboard")
            newest = db.query(StudyCard).order_by(StudyCard.created_at.desc()).limit(sample_size).all()
            for card in newest:
                logger.info(
                    "  #%s %s (category=%s, completed=%s, created %s)",
                    card.id, card.title, card.category or "N/A", card.is_completed, card.created_at,
                )
        finally:
            db.close()
    except Exception as e:
        logger.error("Database check failed: %r", e)
        for i, tip in enumerate(TROUBLESHOOTING, start=1):
            logger.error("  %d. %s", i, tip)
        return 1
    finally:
        if engine is not None:
            engine.dispose()

    logger.info("Database check passed")
    return 0


def main() -> int:
    return check_database(load_settings().database_url)


if __name__ == "__main__":
    sys.exit(main())
