from dorothy.extensions import db
from dorothy.utils.dates import utcnow, isoformat
from dorothy.utils.tags import decode_tags


class GalleryImage(db.Model):
    __tablename__ = "gallery_images"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=True)
    description = db.Column(db.Text, nullable=True)
    filename = db.Column(db.String(255), nullable=True)
    url = db.Column(db.String(1024), nullable=False)
    category = db.Column(db.String(30), nullable=True)
    tags = db.Column(db.Text, nullable=False, default="[]")
    size = db.Column(db.Integer, nullable=True)
    width = db.Column(db.Integer, nullable=True)
    height = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "filename": self.filename,
            "url": self.url,
            "category": self.category,
            "tags": decode_tags(self.tags),
            "size": self.size,
            "width": self.width,
            "height": self.height,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        }
