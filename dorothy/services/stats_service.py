import csv
import io

from dorothy.extensions import db
from dorothy.models import (
    Contact,
    ContactStatus,
    Event,
    EventStatus,
    Registration,
    RegistrationStatus,
    TeamMember,
)
from dorothy.repositories import (
    ContactRepository,
    EventRepository,
    GalleryRepository,
    RegistrationRepository,
    TeamRepository,
)
from dorothy.utils.dates import isoformat, utcnow

EXPORT_TYPES = ("events", "registrations")


class StatsService:
    @staticmethod
    def public_counts():
        return {
            "events": EventRepository.count(),
            "gallery": GalleryRepository.count(),
            "team": TeamRepository.count(),
        }

    @staticmethod
    def dashboard():
        by_status = RegistrationRepository.count_by_status()
        by_category = (
            db.session.query(Event.category, Event.status, db.func.count(Event.id))
            .group_by(Event.category, Event.status)
            .all()
        )
        recent_contacts = (
            Contact.query.order_by(Contact.created_at.desc()).limit(5).all()
        )
        recent_registrations = (
            Registration.query.order_by(Registration.created_at.desc()).limit(5).all()
        )

        return {
            "totals": {
                "events": EventRepository.count(),
                "published_events": EventRepository.count(
                    Event.status == EventStatus.PUBLISHED.value
                ),
                "gallery": GalleryRepository.count(),
                "active_team": TeamRepository.count(TeamMember.active.is_(True)),
                "registrations": sum(by_status.values()),
                "pending_registrations": by_status.get(RegistrationStatus.PENDING.value, 0)
                + by_status.get(RegistrationStatus.EMAIL_CONFIRMED.value, 0),
                "contacts": ContactRepository.count(),
                "new_contacts": ContactRepository.count(
                    Contact.status == ContactStatus.NEW.value
                ),
            },
            "registrations_by_status": {
                status.value: by_status.get(status.value, 0) for status in RegistrationStatus
            },
            "events_by_category": [
                {"category": category, "status": status, "count": count}
                for category, status, count in by_category
            ],
            "recent_contacts": [c.to_dict() for c in recent_contacts],
            "recent_registrations": [r.to_dict(include_event=True) for r in recent_registrations],
        }

    @staticmethod
    def export_rows(export_type, status=None, category=None):
        """Flat rows for the admin export, newest first."""
        if export_type == "events":
            query = Event.query
            if status:
                query = query.filter(Event.status == status)
            if category:
                query = query.filter(Event.category == category)
            return [e.to_dict() for e in query.order_by(Event.date.desc()).all()]

        query = Registration.query.join(Event, Registration.event_id == Event.id)
        if status:
            query = query.filter(Registration.status == status)
        if category:
            query = query.filter(Event.category == category)

        rows = []
        for registration in query.order_by(Registration.created_at.desc()).all():
            row = registration.to_dict()
            row.update(
                {
                    "event_title": registration.event.title,
                    "event_date": isoformat(registration.event.date),
                    "event_location": registration.event.location,
                    "event_category": registration.event.category,
                }
            )
            rows.append(row)
        return rows

    @staticmethod
    def export_payload(export_type, rows):
        return {
            "type": export_type,
            "exportDate": isoformat(utcnow()),
            "count": len(rows),
            "data": rows,
        }

    @staticmethod
    def to_csv(rows):
        if not rows:
            return ""
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=list(rows[0].keys()), lineterminator="\n")
        writer.writeheader()
        for row in rows:
            writer.writerow(
                {
                    key: ",".join(value) if isinstance(value, list) else value
                    for key, value in row.items()
                }
            )
        return buffer.getvalue()
