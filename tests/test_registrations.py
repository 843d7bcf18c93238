"""End-to-end tests for the registration workflow."""

from datetime import timedelta
from urllib.parse import parse_qs, urlparse

import pytest
from sqlalchemy.exc import OperationalError

from dorothy.extensions import db
from dorothy.models import Registration, RegistrationStatus
from dorothy.repositories import EventRepository
from dorothy.services.registration_service import hash_token
from dorothy.utils.dates import utcnow

from tests.conftest import ADMIN_EMAIL


def _database_down(*args, **kwargs):
    raise OperationalError("SELECT events", {}, Exception("connection lost"))


def _register(client, body):
    return client.post("/registrations", json=body)


def _registration(registration_id):
    db.session.expire_all()
    return db.session.get(Registration, registration_id)


def _redirect_params(response):
    assert response.status_code == 302
    location = urlparse(response.headers["Location"])
    assert location.path == "/evenements"
    return {key: values[0] for key, values in parse_qs(location.query).items()}


@pytest.fixture
def pending(client, registration_body):
    response = _register(client, registration_body)
    assert response.status_code == 201
    return _registration(response.get_json()["registration"]["id"])


class TestCreateRegistration:
    def test_creates_pending_registration_with_token(self, client, registration_body, mailer):
        response = _register(client, registration_body)

        assert response.status_code == 201
        body = response.get_json()
        assert body["message"] == "Inscription créée. Veuillez confirmer votre email."
        assert body["registration"]["status"] == "PENDING"
        assert body["registration"]["email"] == "jeanne.dupont@exemple.fr"

        registration = _registration(body["registration"]["id"])
        assert registration.id.startswith("reg_")
        assert len(registration.email_token) == 64
        remaining = registration.email_token_expiry - utcnow()
        assert timedelta(hours=23, minutes=59) < remaining <= timedelta(hours=24)

    def test_sends_confirmation_link_to_registrant(self, client, registration_body, mailer, event):
        response = _register(client, registration_body)
        registration = _registration(response.get_json()["registration"]["id"])

        messages = mailer.to("jeanne.dupont@exemple.fr")
        assert len(messages) == 1
        assert event.title in messages[0].subject
        assert (
            "https://api.centre-dorothy.fr/registrations/confirm-email?token="
            + registration.email_token
        ) in messages[0].html
        assert mailer.sent[0]["name"] == "Jeanne Dupont"

    def test_blank_message_is_stored_as_null(self, client, registration_body):
        registration_body["message"] = "   "
        response = _register(client, registration_body)
        assert _registration(response.get_json()["registration"]["id"]).message is None

    def test_unknown_event(self, client, registration_body, mailer):
        registration_body["event_id"] = 9999
        response = _register(client, registration_body)

        assert response.status_code == 404
        assert response.get_json() == {"error": "Event not found"}
        assert Registration.query.count() == 0
        assert mailer.sent == []

    @pytest.mark.parametrize(
        "field, value",
        [
            ("email", "not-an-email"),
            ("first_name", ""),
            ("phone", None),
            ("event_id", "abc"),
            ("event_id", 0),
        ],
    )
    def test_invalid_body(self, client, registration_body, field, value):
        registration_body[field] = value
        response = _register(client, registration_body)

        assert response.status_code == 400
        assert response.get_json() == {"error": "Invalid body"}

    def test_missing_body(self, client):
        response = client.post("/registrations", data="nope", content_type="text/plain")
        assert response.status_code == 400

    def test_duplicate_active_registration(self, client, registration_body, mailer):
        assert _register(client, registration_body).status_code == 201

        registration_body["email"] = "JEANNE.DUPONT@exemple.fr"
        response = _register(client, registration_body)

        assert response.status_code == 409
        assert response.get_json() == {"error": "Already registered"}
        assert Registration.query.count() == 1
        assert len(mailer.sent) == 1

    @pytest.mark.parametrize("approve", [False, True], ids=["email_confirmed", "confirmed"])
    def test_duplicate_of_confirmed_registration(
        self, client, registration_body, pending, admin_headers, approve
    ):
        client.get(f"/registrations/confirm-email?token={pending.email_token}")
        if approve:
            client.patch(
                f"/admin/registrations/{pending.id}",
                json={"status": "CONFIRMED"},
                headers=admin_headers,
            )
        expected = RegistrationStatus.CONFIRMED if approve else RegistrationStatus.EMAIL_CONFIRMED
        assert _registration(pending.id).status == expected.value

        response = _register(client, registration_body)

        assert response.status_code == 409
        assert response.get_json() == {"error": "Already registered"}
        assert Registration.query.count() == 1

    def test_can_register_again_after_cancellation(
        self, client, registration_body, pending, admin_headers
    ):
        client.patch(
            f"/admin/registrations/{pending.id}",
            json={"status": "CANCELLED"},
            headers=admin_headers,
        )

        response = _register(client, registration_body)
        assert response.status_code == 201
        assert Registration.query.count() == 2

    def test_mail_failure_does_not_fail_request(self, client, registration_body, mailer):
        mailer.result = False
        assert _register(client, registration_body).status_code == 201

    def test_mail_exception_does_not_fail_request(self, client, registration_body, mailer):
        mailer.error = RuntimeError("brevo down")
        response = _register(client, registration_body)

        assert response.status_code == 201
        assert Registration.query.count() == 1


class TestConfirmEmail:
    def test_confirms_and_notifies_admin(self, client, pending, mailer, event):
        token = pending.email_token
        response = client.get(f"/registrations/confirm-email?token={token}")

        assert _redirect_params(response) == {"success": "email_confirme", "event": str(event.id)}
        registration = _registration(pending.id)
        assert registration.status == RegistrationStatus.EMAIL_CONFIRMED.value
        assert registration.email_token is None
        assert registration.email_token_expiry is None
        assert registration.email_confirmed_at is not None
        assert registration.confirmed_token_hash == hash_token(token)

        admin_messages = mailer.to(ADMIN_EMAIL)
        assert len(admin_messages) == 1
        assert "Jeanne Dupont" in admin_messages[0].html
        assert pending.id in admin_messages[0].text

    def test_replayed_link_reports_already_confirmed(self, client, pending, mailer):
        url = f"/registrations/confirm-email?token={pending.email_token}"
        client.get(url)
        sent_before = len(mailer.sent)

        response = client.get(url)

        assert _redirect_params(response) == {"success": "deja_confirme"}
        assert len(mailer.sent) == sent_before

    def test_replay_after_approval_reports_already_confirmed(
        self, client, pending, admin_headers
    ):
        url = f"/registrations/confirm-email?token={pending.email_token}"
        client.get(url)
        client.patch(
            f"/admin/registrations/{pending.id}",
            json={"status": "CONFIRMED"},
            headers=admin_headers,
        )

        assert _redirect_params(client.get(url)) == {"success": "deja_confirme"}

    def test_replay_after_cancellation_is_invalid(self, client, pending, admin_headers):
        url = f"/registrations/confirm-email?token={pending.email_token}"
        client.get(url)
        client.patch(
            f"/admin/registrations/{pending.id}",
            json={"status": "CANCELLED"},
            headers=admin_headers,
        )

        assert _redirect_params(client.get(url)) == {"error": "token_invalide"}

    def test_expired_token(self, client, pending, mailer):
        pending.email_token_expiry = utcnow() - timedelta(minutes=1)
        db.session.commit()

        response = client.get(f"/registrations/confirm-email?token={pending.email_token}")

        assert _redirect_params(response) == {"error": "token_expire"}
        assert _registration(pending.id).status == RegistrationStatus.PENDING.value
        assert mailer.to(ADMIN_EMAIL) == []

    def test_unknown_token(self, client, pending):
        response = client.get("/registrations/confirm-email?token=deadbeef")
        assert _redirect_params(response) == {"error": "token_invalide"}

    @pytest.mark.parametrize("query", ["", "?token=", "?token=%20%20"])
    def test_missing_token(self, client, query):
        response = client.get(f"/registrations/confirm-email{query}")
        assert _redirect_params(response) == {"error": "token_invalide"}

    def test_token_of_cancelled_registration_is_invalid(self, client, pending, admin_headers):
        token = pending.email_token
        client.patch(
            f"/admin/registrations/{pending.id}",
            json={"status": "CANCELLED"},
            headers=admin_headers,
        )

        response = client.get(f"/registrations/confirm-email?token={token}")
        assert _redirect_params(response) == {"error": "token_invalide"}

    def test_admin_mail_failure_still_confirms(self, client, pending, mailer):
        mailer.result = False
        response = client.get(f"/registrations/confirm-email?token={pending.email_token}")

        assert _redirect_params(response)["success"] == "email_confirme"
        assert _registration(pending.id).status == RegistrationStatus.EMAIL_CONFIRMED.value

    def test_database_failure_redirects_to_server_error(self, client, pending, mailer, monkeypatch):
        monkeypatch.setattr(EventRepository, "get_event", staticmethod(_database_down))

        response = client.get(f"/registrations/confirm-email?token={pending.email_token}")

        assert _redirect_params(response) == {"error": "erreur_serveur"}
        assert mailer.to(ADMIN_EMAIL) == []

    def test_missing_event_after_confirmation(self, client, pending, mailer, monkeypatch):
        monkeypatch.setattr(EventRepository, "get_event", staticmethod(lambda event_id: None))

        response = client.get(f"/registrations/confirm-email?token={pending.email_token}")

        assert _redirect_params(response) == {"error": "evenement_introuvable"}
        assert _registration(pending.id).status == RegistrationStatus.EMAIL_CONFIRMED.value
        assert mailer.to(ADMIN_EMAIL) == []


class TestAdminStatus:
    def _patch(self, client, registration, status, headers):
        return client.patch(
            f"/admin/registrations/{registration.id}",
            json={"status": status},
            headers=headers,
        )

    def test_approve_sends_final_confirmation(self, client, pending, admin_headers, admin_user, mailer):
        client.get(f"/registrations/confirm-email?token={pending.email_token}")

        response = self._patch(client, pending, "CONFIRMED", admin_headers)

        assert response.status_code == 200
        assert response.get_json() == {"ok": True}
        registration = _registration(pending.id)
        assert registration.status == RegistrationStatus.CONFIRMED.value
        assert registration.admin_approved_by == admin_user.id
        assert registration.admin_approved_at is not None

        final = mailer.to("jeanne.dupont@exemple.fr")[-1]
        assert final.subject.startswith("Inscription validée")

    def test_admin_can_approve_before_email_confirmation(self, client, pending, admin_headers):
        response = self._patch(client, pending, "CONFIRMED", admin_headers)

        assert response.status_code == 200
        assert _registration(pending.id).status == RegistrationStatus.CONFIRMED.value

    def test_cancel_sends_nothing(self, client, pending, admin_headers, mailer):
        sent_before = len(mailer.sent)

        response = self._patch(client, pending, "CANCELLED", admin_headers)

        assert response.status_code == 200
        registration = _registration(pending.id)
        assert registration.status == RegistrationStatus.CANCELLED.value
        assert registration.admin_approved_by is None
        assert len(mailer.sent) == sent_before

    def test_confirmed_registration_can_be_cancelled(self, client, pending, admin_headers):
        self._patch(client, pending, "CONFIRMED", admin_headers)
        response = self._patch(client, pending, "CANCELLED", admin_headers)

        assert response.status_code == 200
        registration = _registration(pending.id)
        assert registration.status == RegistrationStatus.CANCELLED.value
        assert registration.admin_approved_at is None

    def test_cancelled_registration_cannot_be_approved(self, client, pending, admin_headers):
        self._patch(client, pending, "CANCELLED", admin_headers)
        response = self._patch(client, pending, "CONFIRMED", admin_headers)

        assert response.status_code == 409
        assert _registration(pending.id).status == RegistrationStatus.CANCELLED.value

    @pytest.mark.parametrize("status", ["PENDING", "EMAIL_CONFIRMED", "approved", None])
    def test_rejects_other_statuses(self, client, pending, admin_headers, status):
        response = self._patch(client, pending, status, admin_headers)

        assert response.status_code == 400
        assert response.get_json() == {"error": "Invalid body"}

    def test_unknown_registration(self, client, admin_headers):
        response = client.patch(
            "/admin/registrations/reg_0_missing",
            json={"status": "CONFIRMED"},
            headers=admin_headers,
        )
        assert response.status_code == 404

    def test_final_mail_failure_keeps_approval(self, client, pending, admin_headers, mailer):
        mailer.error = RuntimeError("brevo down")
        response = self._patch(client, pending, "CONFIRMED", admin_headers)

        assert response.status_code == 200
        assert _registration(pending.id).status == RegistrationStatus.CONFIRMED.value

    @pytest.mark.parametrize("status", ["CONFIRMED", "CANCELLED"])
    def test_admin_decision_retires_email_token(self, client, pending, admin_headers, status):
        token = pending.email_token

        self._patch(client, pending, status, admin_headers)

        registration = _registration(pending.id)
        assert registration.status == status
        assert registration.email_token is None
        assert registration.email_token_expiry is None
        assert registration.confirmed_token_hash == hash_token(token)

    def test_link_after_direct_approval_reports_already_confirmed(
        self, client, pending, admin_headers
    ):
        token = pending.email_token
        self._patch(client, pending, "CONFIRMED", admin_headers)

        response = client.get(f"/registrations/confirm-email?token={token}")
        assert _redirect_params(response) == {"success": "deja_confirme"}

    def test_event_lookup_failure_still_approves(
        self, client, pending, admin_headers, mailer, monkeypatch
    ):
        sent_before = len(mailer.sent)
        monkeypatch.setattr(EventRepository, "get_event", staticmethod(_database_down))

        response = self._patch(client, pending, "CONFIRMED", admin_headers)

        assert response.status_code == 200
        assert response.get_json() == {"ok": True}
        assert _registration(pending.id).status == RegistrationStatus.CONFIRMED.value
        assert len(mailer.sent) == sent_before

    def test_requires_admin(self, client, pending, user_headers):
        assert self._patch(client, pending, "CONFIRMED", {}).status_code == 401
        assert self._patch(client, pending, "CONFIRMED", user_headers).status_code == 403


class TestAdminList:
    @pytest.fixture
    def registrations(self, client, registration_body, make_event):
        other = make_event(title="Sortie au musée")
        for i in range(5):
            body = dict(registration_body, email=f"famille{i}@exemple.fr")
            if i % 2:
                body["event_id"] = other.id
            assert _register(client, body).status_code == 201
        return other

    def test_defaults(self, client, admin_headers, registrations):
        response = client.get("/admin/registrations", headers=admin_headers)

        assert response.status_code == 200
        body = response.get_json()
        assert body["pagination"] == {"page": 1, "limit": 20, "total": 5, "totalPages": 1}
        assert len(body["registrations"]) == 5
        first = body["registrations"][0]
        assert set(first["events"]) == {"title", "date", "location"}

    def test_pagination(self, client, admin_headers, registrations):
        response = client.get("/admin/registrations?page=2&limit=2", headers=admin_headers)

        body = response.get_json()
        assert body["pagination"] == {"page": 2, "limit": 2, "total": 5, "totalPages": 3}
        assert len(body["registrations"]) == 2

    def test_limit_is_capped(self, client, admin_headers, registrations):
        response = client.get("/admin/registrations?limit=500", headers=admin_headers)
        assert response.get_json()["pagination"]["limit"] == 100

    def test_filters(self, client, admin_headers, registrations):
        by_event = client.get(
            f"/admin/registrations?event_id={registrations.id}", headers=admin_headers
        ).get_json()
        assert by_event["pagination"]["total"] == 2
        assert {r["events"]["title"] for r in by_event["registrations"]} == {"Sortie au musée"}

        by_status = client.get(
            "/admin/registrations?status=confirmed", headers=admin_headers
        ).get_json()
        assert by_status["pagination"]["total"] == 0

    @pytest.mark.parametrize("query", ["page=0", "page=abc", "limit=-1", "event_id=x"])
    def test_invalid_query(self, client, admin_headers, query):
        response = client.get(f"/admin/registrations?{query}", headers=admin_headers)

        assert response.status_code == 400
        assert response.get_json() == {"error": "Invalid query"}

    def test_empty(self, client, admin_headers):
        body = client.get("/admin/registrations", headers=admin_headers).get_json()
        assert body["registrations"] == []
        assert body["pagination"]["totalPages"] == 0


def test_end_to_end_from_captured_email(client, registration_body, mailer, admin_headers, event):
    """Register, follow the emailed link, then approve."""
    response = _register(client, registration_body)
    registration_id = response.get_json()["registration"]["id"]

    text = mailer.to("jeanne.dupont@exemple.fr")[0].text
    link = next(word for word in text.split() if "confirm-email?token=" in word)
    path = urlparse(link)
    confirm = client.get(f"{path.path}?{path.query}")
    assert _redirect_params(confirm)["success"] == "email_confirme"

    response = client.patch(
        f"/admin/registrations/{registration_id}",
        json={"status": "CONFIRMED"},
        headers=admin_headers,
    )
    assert response.status_code == 200

    finals = [
        content
        for content in mailer.to("jeanne.dupont@exemple.fr")
        if content.subject.startswith("Inscription validée")
    ]
    assert len(finals) == 1
    assert event.title in finals[0].text
    assert str(event.date.year) in finals[0].text
    assert _registration(registration_id).status == RegistrationStatus.CONFIRMED.value
