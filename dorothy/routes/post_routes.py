from flask import Blueprint, jsonify, make_response

from dorothy.models.enums import PostStatus
from dorothy.repositories import PostRepository
from dorothy.routes.common import get_or_404, parse_body, parse_id, query_upper
from dorothy.schemas import PostCreateSchema, PostUpdateSchema
from dorothy.utils.auth import admin_required
from dorothy.utils.dates import utcnow

post_bp = Blueprint("post", __name__)


def _stamp_published(attrs):
    if attrs.get("status") == PostStatus.PUBLISHED.value:
        attrs["published_at"] = utcnow()
    return attrs


@post_bp.route("/posts", methods=["GET"])
def list_posts():
    posts = PostRepository.list_posts(query_upper("status", PostStatus.PUBLISHED.value))
    return jsonify({"posts": [post.to_dict() for post in posts]})


@post_bp.route("/posts/<post_id>", methods=["GET"])
def get_post(post_id):
    return jsonify({"post": get_or_404(PostRepository, post_id).to_dict()})


@post_bp.route("/admin/posts", methods=["POST"])
@admin_required
def create_post():
    attrs = _stamp_published(parse_body(PostCreateSchema).to_attrs())
    post = PostRepository.create(attrs)
    return make_response(jsonify({"post": post.to_dict()}), 201)


@post_bp.route("/admin/posts/<post_id>", methods=["PUT", "PATCH"])
@admin_required
def update_post(post_id):
    post_id = parse_id(post_id)
    attrs = _stamp_published(parse_body(PostUpdateSchema).to_attrs())
    post = PostRepository.update(get_or_404(PostRepository, post_id), attrs)
    return jsonify({"post": post.to_dict()})


@post_bp.route("/admin/posts/<post_id>", methods=["DELETE"])
@admin_required
def delete_post(post_id):
    PostRepository.delete(get_or_404(PostRepository, post_id))
    return jsonify({"ok": True})
