from dorothy.models import Post
from dorothy.repositories.base_repository import CrudRepository


class PostRepository(CrudRepository):
    model = Post
    list_fields = ("tags",)

    @staticmethod
    def list_posts(status):
        return (
            Post.query.filter(Post.status == status)
            .order_by(Post.published_at.desc(), Post.created_at.desc())
            .all()
        )
