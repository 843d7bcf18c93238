from dorothy.extensions import db
from dorothy.utils.dates import utcnow, isoformat


class Partner(db.Model):
    __tablename__ = "partners"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    logo_url = db.Column(db.String(1024), nullable=True)
    website_url = db.Column(db.String(1024), nullable=True)
    category = db.Column(db.String(30), nullable=False)
    active = db.Column(db.Boolean, nullable=False, default=True)
    sort_order = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "logo_url": self.logo_url,
            "website_url": self.website_url,
            "category": self.category,
            "active": self.active,
            "sort_order": self.sort_order,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        }
