import hashlib

from dorothy.extensions import db
from dorothy.utils.dates import utcnow, isoformat
from dorothy.exceptions import InvalidTransitionError
from .enums import RegistrationAction, RegistrationStatus


# (current status, action) -> next status. Anything missing is illegal.
TRANSITIONS = {
    (RegistrationStatus.PENDING, RegistrationAction.CONFIRM_EMAIL): RegistrationStatus.EMAIL_CONFIRMED,
    (RegistrationStatus.PENDING, RegistrationAction.APPROVE): RegistrationStatus.CONFIRMED,
    (RegistrationStatus.EMAIL_CONFIRMED, RegistrationAction.APPROVE): RegistrationStatus.CONFIRMED,
    (RegistrationStatus.PENDING, RegistrationAction.CANCEL): RegistrationStatus.CANCELLED,
    (RegistrationStatus.EMAIL_CONFIRMED, RegistrationAction.CANCEL): RegistrationStatus.CANCELLED,
    (RegistrationStatus.CONFIRMED, RegistrationAction.CANCEL): RegistrationStatus.CANCELLED,
}


def hash_token(token):
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def next_status(current, action):
    """Return the status reached by applying ``action`` to ``current``."""
    current = RegistrationStatus(current)
    try:
        return TRANSITIONS[(current, action)]
    except KeyError:
        raise InvalidTransitionError(current.value, action.value)


class Registration(db.Model):
    __tablename__ = "registrations"

    id = db.Column(db.String(64), primary_key=True)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False, index=True)
    phone = db.Column(db.String(50), nullable=False)
    message = db.Column(db.Text, nullable=True)
    status = db.Column(
        db.String(20), nullable=False, default=RegistrationStatus.PENDING.value
    )
    event_id = db.Column(
        db.Integer, db.ForeignKey("events.id"), nullable=False, index=True
    )
    email_token = db.Column(db.String(128), nullable=True, unique=True)
    email_token_expiry = db.Column(db.DateTime, nullable=True)
    # SHA-256 of a consumed email token, so a replayed link is recognised
    confirmed_token_hash = db.Column(db.String(64), nullable=True, index=True)
    email_confirmed_at = db.Column(db.DateTime, nullable=True)
    admin_approved_at = db.Column(db.DateTime, nullable=True)
    admin_approved_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    event = db.relationship("Event", backref=db.backref("registrations", lazy=True))

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    def apply(self, action):
        """Move to the next status for ``action`` or raise InvalidTransitionError.

        Leaving ``PENDING`` retires the email token; its digest is kept so a
        replayed link can still be recognised.
        """
        new_status = next_status(self.status, action)
        if self.status == RegistrationStatus.PENDING.value and self.email_token:
            self.confirmed_token_hash = hash_token(self.email_token)
        self.email_token = None
        self.email_token_expiry = None
        self.status = new_status.value
        return self.status

    def to_dict(self, include_event=False):
        data = {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "message": self.message,
            "status": self.status,
            "event_id": self.event_id,
            "email_confirmed_at": isoformat(self.email_confirmed_at),
            "admin_approved_at": isoformat(self.admin_approved_at),
            "admin_approved_by": self.admin_approved_by,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        }
        if include_event:
            data["events"] = self.event.summary() if self.event else None
        return data

    def __repr__(self):
        return (
            f"Registration("
            f"id='{self.id}', "
            f"event_id={self.event_id}, "
            f"email='{self.email}', "
            f"status={self.status}"
            f")"
        )
