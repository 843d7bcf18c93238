from typing import List, Optional

from dorothy.extensions import db
from dorothy.models import Registration, RegistrationStatus


class RegistrationRepository:
    @staticmethod
    def create(registration: Registration) -> Registration:
        db.session.add(registration)
        db.session.commit()
        return registration

    @staticmethod
    def save(registration: Registration) -> Registration:
        db.session.commit()
        return registration

    @staticmethod
    def rollback():
        db.session.rollback()

    @staticmethod
    def find_by_id(registration_id: str) -> Optional[Registration]:
        return db.session.get(Registration, registration_id)

    @staticmethod
    def find_by_token(token: str) -> Optional[Registration]:
        return Registration.query.filter_by(email_token=token).first()

    @staticmethod
    def find_by_consumed_token_hash(token_hash: str) -> Optional[Registration]:
        return Registration.query.filter_by(confirmed_token_hash=token_hash).first()

    @staticmethod
    def find_active(event_id: int, email: str) -> List[Registration]:
        """Registrations for this event and email that are not cancelled."""
        return (
            Registration.query.filter(
                Registration.event_id == event_id,
                Registration.email == email,
                Registration.status != RegistrationStatus.CANCELLED.value,
            )
            .all()
        )

    @staticmethod
    def paginate(page: int, limit: int, status=None, event_id=None):
        query = Registration.query
        if status:
            query = query.filter(Registration.status == status)
        if event_id:
            query = query.filter(Registration.event_id == event_id)

        total = query.count()
        items = (
            query.order_by(Registration.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return items, total

    @staticmethod
    def count_by_status():
        rows = (
            db.session.query(Registration.status, db.func.count(Registration.id))
            .group_by(Registration.status)
            .all()
        )
        return {status: count for status, count in rows}
