# app/jobs/appointment_jobs.py
import asyncio
import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import update, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import Database
from app.helpers.time import today
from app.system_models.appointment_model.appointment_model import Appointment, AppointmentStatus

logger = logging.getLogger(__name__)


# ============================================================
# ✅ NO-SHOW SWEEP
# ============================================================
async def mark_no_show_appointments(db: AsyncSession) -> int:
    """Scheduled appointments dated before today become no_show. Returns the count."""
    result = await db.execute(
        update(Appointment)
        .where(
            and_(
                Appointment.status == AppointmentStatus.SCHEDULED.value,
                Appointment.date < today(),
            )
        )
        .values(status=AppointmentStatus.NO_SHOW.value)
    )
    await db.commit()
    updated = result.rowcount or 0
    logger.info(f"No-show sweep marked {updated} appointment(s)")
    return updated


def seconds_until(hour: int, minute: int, now: Optional[datetime] = None) -> float:
    """Seconds from now to the next local hour:minute."""
    now = now or datetime.now()
    target = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return (target - now).total_seconds()


async def run_no_show_sweeper(database: Database, hour: int, minute: int) -> None:
    """Run the sweep every day at hour:minute until cancelled."""
    logger.info(f"No-show sweeper scheduled daily at {hour:02d}:{minute:02d}")
    while True:
        await asyncio.sleep(seconds_until(hour, minute))
        try:
            async with database.session() as db:
                await mark_no_show_appointments(db)
        except Exception:
            # Log and wait for the next run
            logger.error("No-show sweep failed", exc_info=True)
