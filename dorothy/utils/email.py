import logging
from collections import namedtuple

import requests
from flask import render_template

from dorothy.utils.dates import format_french_date

logger = logging.getLogger(__name__)

BREVO_API_URL = "https://api.brevo.com/v3/smtp/email"
SENDER_NAME = "Centre Social Dorothy"
ADMIN_NAME = "Administrateur Dorothy"

EmailContent = namedtuple("EmailContent", ["subject", "html", "text"])


class BrevoMailer:
    """Sends transactional emails through the Brevo HTTP API.

    ``send`` never raises: it returns ``True`` when Brevo accepted the
    message and ``False`` otherwise, after logging the reason.
    """

    def __init__(self, settings, session=None, timeout=10):
        self.settings = settings
        self.session = session or requests.Session()
        self.timeout = timeout

    def send(self, to, content, to_name=None):
        if self.settings.MAIL_SUPPRESS_SEND:
            logger.info("--- MOCK EMAIL ---")
            logger.info(f"To: {to}")
            logger.info(f"Subject: {content.subject}")
            logger.info(f"Body: {content.text}")
            logger.info("--- END MOCK EMAIL ---")
            return True

        payload = {
            "sender": {"name": SENDER_NAME, "email": self.settings.sender_email},
            "to": [{"email": to, "name": to_name or to}],
            "subject": content.subject,
            "htmlContent": content.html,
            "textContent": content.text,
        }
        headers = {
            "accept": "application/json",
            "api-key": self.settings.BREVO_API_KEY,
            "content-type": "application/json",
        }

        try:
            response = self.session.post(
                BREVO_API_URL, json=payload, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"[Brevo] send error to {to}: {e}")
            return False

        if not response.ok:
            logger.error(f"[Brevo] API error {response.status_code}: {response.text}")
            return False

        logger.info(f"[Brevo] Sent '{content.subject}' to {to}")
        return True

    def send_admin(self, content):
        return self.send(self.settings.ADMIN_EMAIL, content, to_name=ADMIN_NAME)


def user_confirmation_email(registration, event, confirmation_link):
    event_date = format_french_date(event.date)
    return EmailContent(
        subject=f"Confirmez votre inscription - {event.title}",
        html=render_template(
            "email/confirm_registration.html",
            user_name=registration.full_name,
            event=event,
            event_date=event_date,
            confirmation_link=confirmation_link,
        ),
        text=(
            f"Bonjour {registration.full_name},\n\n"
            f"Confirmez votre inscription : {confirmation_link}\n\n"
            f"Événement: {event.title} - {event_date} - {event.location}"
        ),
    )


def admin_notification_email(registration, event, approval_link):
    event_date = format_french_date(event.date)
    return EmailContent(
        subject=f"Nouvelle inscription en attente - {event.title}",
        html=render_template(
            "email/admin_notification.html",
            registration=registration,
            event=event,
            event_date=event_date,
            approval_link=approval_link,
        ),
        text=(
            f"Nouvelle inscription: {event.title} ({event_date}) - "
            f"{registration.full_name} {registration.email} {registration.phone} "
            f"ID:{registration.id} - Admin: {approval_link}"
        ),
    )


def final_confirmation_email(registration, event):
    event_date = format_french_date(event.date)
    return EmailContent(
        subject=f"Inscription validée - {event.title}",
        html=render_template(
            "email/registration_validated.html",
            user_name=registration.full_name,
            event=event,
            event_date=event_date,
        ),
        text=(
            f"Bonjour {registration.full_name},\n"
            f"Votre inscription est validée: {event.title} - {event_date} "
            f"{event.time or ''} - {event.location}"
        ),
    )
