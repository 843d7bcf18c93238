from dorothy.extensions import db
from dorothy.utils.dates import utcnow, isoformat
from dorothy.utils.tags import decode_tags
from .enums import PostStatus


class Post(db.Model):
    __tablename__ = "posts"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    content = db.Column(db.Text, nullable=False)
    excerpt = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(30), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=PostStatus.DRAFT.value)
    image_url = db.Column(db.String(1024), nullable=True)
    featured = db.Column(db.Boolean, nullable=False, default=False)
    tags = db.Column(db.Text, nullable=False, default="[]")
    published_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "excerpt": self.excerpt,
            "category": self.category,
            "status": self.status,
            "image_url": self.image_url,
            "featured": self.featured,
            "tags": decode_tags(self.tags),
            "published_at": isoformat(self.published_at),
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        }
