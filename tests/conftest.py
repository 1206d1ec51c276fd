"""
Shared fixtures.

Every test gets a fresh app on an in-memory SQLite database. No app context
stays pushed while the test client runs, so requests see exactly what was
committed.
"""

import pytest
from sqlalchemy import func, select

from config import TestingConfig
from liftlog import create_app, db
from liftlog.forms import SignupForm
from liftlog.models.exercise import create_exercise
from liftlog.storage import atomic

PASSWORD = "hunter22"
EXERCISES = ["Bench Press", "Deadlift", "Squat"]


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def exercises(app):
    """name -> id; Squat ends up with id 3."""
    ids = {}
    with app.app_context():
        with atomic():
            for name in EXERCISES:
                ids[name] = create_exercise(name)
    return ids


def make_user(app, email="lifter@example.com", username="lifter", password=PASSWORD):
    with app.app_context():
        auth = app.extensions["liftlog.auth"]
        user_id = auth.sign_up(SignupForm(email=email, password=password, username=username))
    return {"id": user_id, "email": email, "username": username, "password": password}


@pytest.fixture
def user(app):
    return make_user(app)


def log_in(client, user):
    return client.post("/login", data={"email": user["email"], "password": user["password"]})


@pytest.fixture
def logged_in(client, user):
    resp = log_in(client, user)
    assert resp.status_code == 302
    return client


def count_rows(app, model, *where):
    with app.app_context():
        query = select(func.count()).select_from(model)
        if where:
            query = query.where(*where)
        return db.session.execute(query).scalar()
