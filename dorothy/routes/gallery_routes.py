from flask import Blueprint, jsonify, make_response

from dorothy.repositories import GalleryRepository
from dorothy.routes.common import get_or_404, parse_body, parse_id, query_upper
from dorothy.schemas import GalleryCreateSchema, GalleryUpdateSchema
from dorothy.utils.auth import admin_required

gallery_bp = Blueprint("gallery", __name__)


@gallery_bp.route("/gallery", methods=["GET"])
def list_images():
    images = GalleryRepository.list_images(query_upper("category"))
    return jsonify([image.to_dict() for image in images])


@gallery_bp.route("/gallery/<image_id>", methods=["GET"])
def get_image(image_id):
    return jsonify({"image": get_or_404(GalleryRepository, image_id).to_dict()})


@gallery_bp.route("/admin/gallery", methods=["POST"])
@admin_required
def create_image():
    image = GalleryRepository.create(parse_body(GalleryCreateSchema).to_attrs())
    return make_response(jsonify({"image": image.to_dict()}), 201)


@gallery_bp.route("/admin/gallery/<image_id>", methods=["PUT", "PATCH"])
@admin_required
def update_image(image_id):
    image_id = parse_id(image_id)
    attrs = parse_body(GalleryUpdateSchema).to_attrs()
    image = GalleryRepository.update(get_or_404(GalleryRepository, image_id), attrs)
    return jsonify({"image": image.to_dict()})


@gallery_bp.route("/admin/gallery/<image_id>", methods=["DELETE"])
@admin_required
def delete_image(image_id):
    GalleryRepository.delete(get_or_404(GalleryRepository, image_id))
    return jsonify({"ok": True})
