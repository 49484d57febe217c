# tests/conftest.py
import itertools
from datetime import date, timedelta

import pytest
from httpx import ASGITransport, AsyncClient

from app.database.connection import Database
from app.main import create_app
from app.users.security import get_password_hash
from app.users.user_models.user_model import User, UserRole

PASSWORD = "Passw0rd1"


def future_date(days: int = 7) -> str:
    return (date.today() + timedelta(days=days)).isoformat()


@pytest.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def client(database):
    app = create_app(database=database, enable_sweeper=False)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _login(client: AsyncClient, email: str) -> dict:
    response = await client.post("/login", json={"email": email, "password": PASSWORD})
    assert response.status_code == 200, response.text
    # Each test user authenticates by header; drop the cookie the login set
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def make_user(client):
    """Sign up through the API and log in. Returns {"id", "user", "headers"}."""
    counter = itertools.count(1)

    async def _make(role: str = "student", name: str = None, **fields) -> dict:
        n = next(counter)
        email = f"{role}{n}@campus.edu"
        body = {
            "name": name or f"{role.title()} {n}",
            "email": email,
            "password": PASSWORD,
            "role": role,
            **fields,
        }
        response = await client.post("/signup", json=body)
        assert response.status_code == 201, response.text
        user = response.json()["user"]
        return {"id": user["id"], "user": user, "headers": await _login(client, email)}

    return _make


@pytest.fixture
def make_admin(client, database):
    """Admins cannot sign up, so they are inserted directly."""
    counter = itertools.count(1)

    async def _make(name: str = None) -> dict:
        n = next(counter)
        email = f"admin{n}@campus.edu"
        async with database.session() as db:
            admin = User(
                name=name or f"Admin {n}",
                email=email,
                hashed_password=get_password_hash(PASSWORD),
                role=UserRole.ADMIN.value,
            )
            db.add(admin)
            await db.commit()
            admin_id = admin.id
        return {"id": admin_id, "headers": await _login(client, email)}

    return _make


@pytest.fixture
def add_window(client):
    async def _add(doctor: dict, on_date: str, start: str, end: str, max_patients=None) -> dict:
        body = {"date": on_date, "startTime": start, "endTime": end}
        if max_patients is not None:
            body["maxPatients"] = max_patients
        response = await client.post("/availability", json=body, headers=doctor["headers"])
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _add


@pytest.fixture
def book(client):
    async def _book(student: dict, doctor_id: int, on_date: str, at: str, **extra):
        body = {"doctor_id": doctor_id, "date": on_date, "time": at, **extra}
        return await client.post("/appointments", json=body, headers=student["headers"])

    return _book
