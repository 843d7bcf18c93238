from typing import List, Optional

from dorothy.models import Event
from dorothy.repositories.base_repository import CrudRepository


class EventRepository(CrudRepository):
    model = Event
    list_fields = ("tags",)

    @staticmethod
    def get_event(event_id: int) -> Optional[Event]:
        return EventRepository.get(event_id)

    @staticmethod
    def list_events(status: Optional[str] = None, category: Optional[str] = None) -> List[Event]:
        query = Event.query
        if status:
            query = query.filter(Event.status == status)
        if category:
            query = query.filter(Event.category == category)
        return query.order_by(Event.date.desc(), Event.id.desc()).all()
