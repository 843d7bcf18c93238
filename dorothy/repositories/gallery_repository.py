from dorothy.models import GalleryImage
from dorothy.repositories.base_repository import CrudRepository


class GalleryRepository(CrudRepository):
    model = GalleryImage
    list_fields = ("tags",)

    @staticmethod
    def list_images(category=None):
        query = GalleryImage.query
        if category:
            query = query.filter(GalleryImage.category == category)
        return query.order_by(GalleryImage.created_at.desc()).all()
