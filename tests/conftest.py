"""Shared fixtures: an app on in-memory SQLite with recording outbound clients."""

from datetime import date, timedelta

import pytest

from dorothy import create_app
from dorothy.config import Settings
from dorothy.exceptions import StorageError
from dorothy.extensions import db
from dorothy.models import EventStatus, Program, User, UserRole
from dorothy.repositories import EventRepository, UserRepository
from dorothy.utils.auth import issue_token
from werkzeug.security import generate_password_hash

ADMIN_EMAIL = "direction@centre-dorothy.fr"

BASE_SETTINGS = dict(
    TESTING=True,
    DATABASE_URL="sqlite://",
    SUPABASE_URL="https://project.supabase.co",
    SUPABASE_SERVICE_ROLE_KEY="service-role-key-for-tests",
    STORAGE_BUCKET="uploads",
    JWT_SECRET="a-test-secret-that-is-long-enough-for-hs256",
    ADMIN_EMAIL=ADMIN_EMAIL,
    BREVO_API_KEY="brevo-test-key",
    FRONTEND_URL="https://www.centre-dorothy.fr",
    BACKEND_URL="https://api.centre-dorothy.fr",
    RATELIMIT_ENABLED=False,
)


def make_settings(**overrides):
    values = dict(BASE_SETTINGS)
    values.update(overrides)
    return Settings(_env_file=None, **values)


class RecordingMailer:
    """Stands in for BrevoMailer and keeps every message it was asked to send."""

    def __init__(self, result=True, error=None):
        self.sent = []
        self.result = result
        self.error = error

    def send(self, to, content, to_name=None):
        self.sent.append({"to": to, "name": to_name, "content": content})
        if self.error:
            raise self.error
        return self.result

    def send_admin(self, content):
        return self.send(ADMIN_EMAIL, content, to_name="Administrateur Dorothy")

    def to(self, address):
        return [message["content"] for message in self.sent if message["to"] == address]


class FakeStorage:
    def __init__(self, fail=False):
        self.objects = {}
        self.fail = fail

    def upload(self, path, data, content_type):
        if self.fail:
            raise StorageError("bucket unavailable", status=503)
        self.objects[path] = (data, content_type)
        return path

    def public_url(self, path):
        return f"https://project.supabase.co/storage/v1/object/public/uploads/{path}"


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def app(settings, mailer, storage):
    app = create_app(settings, mailer=mailer, storage=storage)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _create_user(email, role, password="secret123", active=True):
    return UserRepository.create(
        User(
            email=email,
            password_hash=generate_password_hash(password),
            name=email.split("@")[0].title(),
            role=role,
            active=active,
        )
    )


@pytest.fixture
def admin_user(app):
    return _create_user("admin@centre-dorothy.fr", UserRole.ADMIN.value)


@pytest.fixture
def plain_user(app):
    return _create_user("benevole@centre-dorothy.fr", UserRole.USER.value)


@pytest.fixture
def admin_headers(admin_user):
    return {"Authorization": f"Bearer {issue_token(admin_user)}"}


@pytest.fixture
def user_headers(plain_user):
    return {"Authorization": f"Bearer {issue_token(plain_user)}"}


@pytest.fixture
def make_event(app):
    def factory(**overrides):
        attrs = {
            "title": "Atelier cuisine",
            "description": "Cuisine du monde en famille",
            "date": date.today() + timedelta(days=14),
            "time": "14h00",
            "location": "Salle polyvalente",
            "category": Program.JEUNESSE.value,
            "status": EventStatus.PUBLISHED.value,
            "tags": ["cuisine"],
        }
        attrs.update(overrides)
        return EventRepository.create(attrs)

    return factory


@pytest.fixture
def event(make_event):
    return make_event()


@pytest.fixture
def registration_body(event):
    return {
        "first_name": "Jeanne",
        "last_name": "Dupont",
        "email": "Jeanne.Dupont@exemple.fr",
        "phone": "06 12 34 56 78",
        "message": "Avec ma fille",
        "event_id": event.id,
    }
