from dorothy.extensions import db
from dorothy.utils.dates import utcnow, isoformat
from .enums import Program


class TeamMember(db.Model):
    __tablename__ = "team_members"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    position = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(30), nullable=False, default=Program.GENERAL.value)
    bio = db.Column(db.Text, nullable=True)
    image_url = db.Column(db.String(1024), nullable=True)
    email = db.Column(db.String(255), nullable=True)
    phone = db.Column(db.String(50), nullable=True)
    active = db.Column(db.Boolean, nullable=False, default=True)
    sort_order = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "position": self.position,
            "category": self.category,
            "bio": self.bio,
            "image_url": self.image_url,
            "email": self.email,
            "phone": self.phone,
            "active": self.active,
            "sort_order": self.sort_order,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        }

    def to_admin_dict(self):
        """Shape expected by the admin team screens."""
        return {
            "id": str(self.id),
            "name": self.name,
            "role": self.position,
            "category": (self.category or Program.GENERAL.value).lower(),
            "email": self.email,
            "phone": self.phone,
            "image": self.image_url,
            "bio": self.bio or "",
            "isActive": bool(self.active),
            "order": self.sort_order,
            "joinedAt": isoformat(self.created_at),
        }
