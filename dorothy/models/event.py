from dorothy.extensions import db
from dorothy.utils.dates import utcnow, isoformat
from dorothy.utils.tags import decode_tags
from .enums import EventStatus


class Event(db.Model):
    __tablename__ = "events"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    content = db.Column(db.Text, nullable=True)
    date = db.Column(db.Date, nullable=False)
    time = db.Column(db.String(50), nullable=True)
    location = db.Column(db.String(255), nullable=False)
    image_url = db.Column(db.String(1024), nullable=True)
    category = db.Column(db.String(30), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=EventStatus.DRAFT.value)
    featured = db.Column(db.Boolean, nullable=False, default=False)
    max_participants = db.Column(db.Integer, nullable=True)
    tags = db.Column(db.Text, nullable=False, default="[]")
    created_by_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def summary(self):
        return {
            "title": self.title,
            "date": isoformat(self.date),
            "location": self.location,
        }

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "content": self.content,
            "date": isoformat(self.date),
            "time": self.time,
            "location": self.location,
            "image_url": self.image_url,
            # camelCase alias still read by the public pages
            "imageUrl": self.image_url,
            "category": self.category,
            "status": self.status,
            "featured": self.featured,
            "max_participants": self.max_participants,
            "tags": decode_tags(self.tags),
            "created_by_id": self.created_by_id,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        }
