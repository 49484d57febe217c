# tests/test_no_show_job.py
from datetime import date, datetime, timedelta

from sqlalchemy import select

from app.jobs.appointment_jobs import mark_no_show_appointments, seconds_until
from app.system_models.appointment_model.appointment_model import Appointment


async def test_past_scheduled_appointments_become_no_show(database):
    yesterday = date.today() - timedelta(days=1)
    tomorrow = date.today() + timedelta(days=1)
    async with database.session() as db:
        db.add_all([
            Appointment(date=yesterday, time="09:00", status="scheduled"),
            Appointment(date=yesterday, time="10:00", status="cancelled"),
            Appointment(date=date.today(), time="11:00", status="scheduled"),
            Appointment(date=tomorrow, time="12:00", status="scheduled"),
        ])
        await db.commit()

    async with database.session() as db:
        assert await mark_no_show_appointments(db) == 1

    async with database.session() as db:
        rows = (await db.execute(select(Appointment.time, Appointment.status).order_by(Appointment.time))).all()
    assert [tuple(r) for r in rows] == [
        ("09:00", "no_show"),
        ("10:00", "cancelled"),
        ("11:00", "scheduled"),
        ("12:00", "scheduled"),
    ]


async def test_sweep_is_idempotent(database):
    async with database.session() as db:
        db.add(Appointment(date=date.today() - timedelta(days=3), time="09:00", status="scheduled"))
        await db.commit()
        assert await mark_no_show_appointments(db) == 1
        assert await mark_no_show_appointments(db) == 0


def test_seconds_until_next_run():
    now = datetime(2030, 5, 1, 23, 0, 0)
    assert seconds_until(0, 1, now) == 61 * 60
    assert seconds_until(23, 30, now) == 30 * 60
    assert seconds_until(23, 0, now) == 24 * 60 * 60
