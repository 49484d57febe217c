# scripts/mark_no_shows.py
#  to run the script, run the following command:
#  python scripts/mark_no_shows.py

"""
No-Show Sweep
One-shot version of the daily sweep, for cron. Pair it with
NO_SHOW_SWEEP_ENABLED=false on the API.
"""
import asyncio
import logging.config
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

load_dotenv()

from config.appconfig import settings
import app.model_registry  # noqa: F401
from app.database.connection import Database
from app.jobs.appointment_jobs import mark_no_show_appointments

logging.config.dictConfig(settings.LOGGING_CONFIG)
logger = logging.getLogger("app.scripts.mark_no_shows")


async def main() -> int:
    database = Database(settings.DATABASE_URL, echo=settings.DB_ECHO)
    try:
        async with database.session() as db:
            return await mark_no_show_appointments(db)
    finally:
        await database.dispose()


if __name__ == "__main__":
    updated = asyncio.run(main())
    print(f"✅ Marked {updated} appointment(s) as no_show")
