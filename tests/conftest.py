"""Pytest configuration and fixtures for taskboard tests."""

from datetime import date

import pytest

from taskboard.app import create_app
from taskboard.config import TestingConfig
from taskboard.repositories.task_repository import TaskRepository
from taskboard.services.email_service import EmailService
from taskboard.utils.db import Database

TODAY = date(2023, 5, 1)


class FakeEmailService(EmailService):
    """Records outgoing mail instead of talking to an SMTP server."""

    def __init__(self, succeed=True):
        super().__init__("smtp.test", sender="noreply@taskboard.test")
        self.succeed = succeed
        self.sent = []

    def send_email(self, to, subject, html):
        self.sent.append({"to": to, "subject": subject, "html": html})
        return self.succeed


@pytest.fixture
def database(tmp_path):
    """A file-backed SQLite database with the schema created."""
    db = Database(f"sqlite:///{tmp_path / 'taskboard.db'}", pool_size=5)
    db.create_schema()
    yield db
    db.dispose()


@pytest.fixture
def repo(database):
    return TaskRepository(database)


@pytest.fixture
def mailer():
    return FakeEmailService()


@pytest.fixture
def app(database, mailer):
    app = create_app(TestingConfig, database=database, email_service=mailer)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def task_payload():
    """A valid create payload dated well into the future."""
    return {
        "title": "Team Meeting",
        "date": "2099-05-15",
        "startTime": "09:00",
        "endTime": "10:00",
        "location": "Conference Room A",
        "category": "Meeting",
        "isStaticSchedule": False,
    }


@pytest.fixture
def make_task(repo):
    """Insert a task directly through the repository."""

    def _make(**overrides):
        fields = {
            "title": "Task",
            "date": "2023-05-15",
            "startTime": "09:00",
            "endTime": "10:00",
            "category": "Meeting",
            "isStaticSchedule": False,
        }
        fields.update(overrides)
        return repo.create(fields)

    return _make
