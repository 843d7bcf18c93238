import logging
import math
import secrets
import time
from datetime import timedelta
from urllib.parse import urlencode

from sqlalchemy.exc import SQLAlchemyError

from dorothy.exceptions import ConflictError, NotFoundError
from dorothy.models import Registration, RegistrationAction, RegistrationStatus
from dorothy.models.registration import hash_token
from dorothy.repositories import EventRepository, RegistrationRepository
from dorothy.utils.dates import utcnow
from dorothy.utils.email import (
    admin_notification_email,
    final_confirmation_email,
    user_confirmation_email,
)

logger = logging.getLogger(__name__)

TOKEN_LIFETIME = timedelta(hours=24)


def new_registration_id():
    return f"reg_{int(time.time() * 1000)}_{secrets.token_hex(4)}"


class RegistrationService:
    """Event registration workflow.

    A registration is created ``PENDING`` with a single-use email token. The
    registrant proves ownership of the address by following the emailed link
    (``EMAIL_CONFIRMED``), then an admin approves (``CONFIRMED``) or rejects
    (``CANCELLED``) it. Each step commits its status change before any email
    goes out, and email failures never undo or fail a step.
    """

    def __init__(self, settings, mailer):
        self.settings = settings
        self.mailer = mailer

    # Links

    def confirmation_link(self, token):
        return f"{self.settings.BACKEND_URL}/registrations/confirm-email?{urlencode({'token': token})}"

    def events_page(self, **params):
        return f"{self.settings.FRONTEND_URL}/evenements?{urlencode(params)}"

    # Steps

    def register(self, data):
        event = EventRepository.get_event(data["event_id"])
        if not event:
            raise NotFoundError("Event not found")

        # Read-then-insert: two simultaneous submissions can both pass.
        if RegistrationRepository.find_active(event.id, data["email"]):
            logger.warning(f"Duplicate registration for {data['email']} on event {event.id}")
            raise ConflictError("Already registered")

        token = secrets.token_hex(32)
        registration = RegistrationRepository.create(
            Registration(
                id=new_registration_id(),
                first_name=data["first_name"],
                last_name=data["last_name"],
                email=data["email"],
                phone=data["phone"],
                message=data.get("message"),
                status=RegistrationStatus.PENDING.value,
                event_id=event.id,
                email_token=token,
                email_token_expiry=utcnow() + TOKEN_LIFETIME,
            )
        )
        logger.info(f"Registration {registration.id} created for event {event.id}")

        self._notify(
            "confirmation",
            lambda: self.mailer.send(
                registration.email,
                user_confirmation_email(registration, event, self.confirmation_link(token)),
                to_name=registration.full_name,
            ),
        )
        return registration

    def confirm_email(self, token):
        """Consume an email token and return the redirect URL for the browser."""
        if not token:
            return self.events_page(error="token_invalide")

        try:
            registration = RegistrationRepository.find_by_token(token)
            if not registration:
                replayed = RegistrationRepository.find_by_consumed_token_hash(hash_token(token))
                if replayed and replayed.status in (
                    RegistrationStatus.EMAIL_CONFIRMED.value,
                    RegistrationStatus.CONFIRMED.value,
                ):
                    return self.events_page(success="deja_confirme")
                return self.events_page(error="token_invalide")

            if registration.status in (
                RegistrationStatus.EMAIL_CONFIRMED.value,
                RegistrationStatus.CONFIRMED.value,
            ):
                return self.events_page(success="deja_confirme")

            if registration.status != RegistrationStatus.PENDING.value:
                return self.events_page(error="token_invalide")

            if not registration.email_token_expiry or utcnow() > registration.email_token_expiry:
                logger.info(f"Expired email token for registration {registration.id}")
                return self.events_page(error="token_expire")

            registration.apply(RegistrationAction.CONFIRM_EMAIL)
            registration.email_confirmed_at = utcnow()
            RegistrationRepository.save(registration)
            logger.info(f"Registration {registration.id} email confirmed")

            event = EventRepository.get_event(registration.event_id)
        except SQLAlchemyError as e:
            logger.error(f"Database error while confirming email token: {e}")
            RegistrationRepository.rollback()
            return self.events_page(error="erreur_serveur")

        if not event:
            return self.events_page(error="evenement_introuvable")

        approval_link = f"{self.settings.FRONTEND_URL}/admin/registrations"
        self._notify(
            "admin notification",
            lambda: self.mailer.send_admin(
                admin_notification_email(registration, event, approval_link)
            ),
        )
        return self.events_page(success="email_confirme", event=event.id)

    def set_status(self, registration_id, status, admin_id):
        registration = RegistrationRepository.find_by_id(registration_id)
        if not registration:
            raise NotFoundError("Not found")

        if status == RegistrationStatus.CONFIRMED.value:
            registration.apply(RegistrationAction.APPROVE)
            registration.admin_approved_at = utcnow()
            registration.admin_approved_by = admin_id
        else:
            registration.apply(RegistrationAction.CANCEL)
            registration.admin_approved_at = None
            registration.admin_approved_by = None
        RegistrationRepository.save(registration)
        logger.info(f"Registration {registration.id} set to {registration.status} by admin {admin_id}")

        if registration.status == RegistrationStatus.CONFIRMED.value:
            try:
                event = EventRepository.get_event(registration.event_id)
            except SQLAlchemyError as e:
                logger.error(f"Could not load event for registration {registration.id}: {e}")
                RegistrationRepository.rollback()
                event = None
            if event:
                self._notify(
                    "final confirmation",
                    lambda: self.mailer.send(
                        registration.email,
                        final_confirmation_email(registration, event),
                        to_name=registration.full_name,
                    ),
                )
        return registration

    @staticmethod
    def list_registrations(page, limit, status=None, event_id=None):
        items, total = RegistrationRepository.paginate(page, limit, status, event_id)
        return {
            "registrations": [r.to_dict(include_event=True) for r in items],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": math.ceil(total / limit),
            },
        }

    @staticmethod
    def _notify(kind, send):
        """Run an email send whose outcome must not affect the caller."""
        try:
            sent = send()
        except Exception as e:
            logger.error(f"Failed to build or send {kind} email: {e}")
            return False
        if not sent:
            logger.warning(f"{kind.capitalize()} email was not delivered")
        return sent
