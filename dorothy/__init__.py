from flask import Flask, jsonify
from flask_cors import CORS
from dotenv import load_dotenv
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException
from datetime import timedelta
import logging

from dorothy.config import Settings
from dorothy.exceptions import ApiError
from dorothy.extensions import db, migrate, jwt, limiter

# Load environment variables
load_dotenv()

# Multipart overhead on top of the 5 MB image limit.
MAX_CONTENT_LENGTH = 6 * 1024 * 1024


def create_app(settings=None, mailer=None, storage=None):
    """Build the application.

    ``settings`` defaults to one read from the environment; invalid or missing
    values raise ``pydantic.ValidationError`` here, before anything serves.
    ``mailer`` and ``storage`` replace the Brevo and Supabase clients.
    """
    app = Flask(__name__)

    # Configure logging
    logging.basicConfig(level=logging.INFO)
    app.logger.setLevel(logging.INFO)

    if settings is None:
        try:
            settings = Settings()
        except ValidationError as e:
            app.logger.error(f"Invalid backend environment variables: {e}")
            raise

    app.config["TESTING"] = settings.TESTING
    app.config["MAX_CONTENT_LENGTH"] = MAX_CONTENT_LENGTH
    app.json.sort_keys = False

    # Configure database
    app.config["SQLALCHEMY_DATABASE_URI"] = settings.DATABASE_URL
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False

    # Configure JWT
    app.config["JWT_SECRET_KEY"] = settings.JWT_SECRET
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = timedelta(days=1)
    app.config["JWT_TOKEN_LOCATION"] = ["headers"]
    app.config["JWT_HEADER_NAME"] = "Authorization"
    app.config["JWT_HEADER_TYPE"] = "Bearer"

    # Rate limiting
    app.config["RATELIMIT_ENABLED"] = settings.RATELIMIT_ENABLED
    app.config["RATELIMIT_STORAGE_URI"] = settings.RATELIMIT_STORAGE_URI

    # Initialize Flask extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)

    # Outbound services
    from dorothy.services import RegistrationService
    from dorothy.utils.email import BrevoMailer
    from dorothy.utils.storage import SupabaseStorage

    mailer = mailer or BrevoMailer(settings)
    app.extensions["settings"] = settings
    app.extensions["mailer"] = mailer
    app.extensions["storage"] = storage or SupabaseStorage(settings)
    app.extensions["registration_service"] = RegistrationService(settings, mailer)

    # Register blueprints
    from dorothy.routes.health_routes import health_bp
    from dorothy.routes.auth_routes import auth_bp
    from dorothy.routes.event_routes import event_bp
    from dorothy.routes.registration_routes import registration_bp
    from dorothy.routes.contact_routes import contact_bp
    from dorothy.routes.gallery_routes import gallery_bp
    from dorothy.routes.partner_routes import partner_bp
    from dorothy.routes.post_routes import post_bp
    from dorothy.routes.team_routes import team_bp
    from dorothy.routes.statistics_routes import statistics_bp
    from dorothy.routes.upload_routes import upload_bp
    from dorothy.routes.admin_routes import admin_bp

    for blueprint in (
        health_bp,
        auth_bp,
        event_bp,
        registration_bp,
        contact_bp,
        gallery_bp,
        partner_bp,
        post_bp,
        team_bp,
        statistics_bp,
        upload_bp,
        admin_bp,
    ):
        app.register_blueprint(blueprint)

    # Set up CORS
    app.logger.info(f"Initializing CORS with origins: {settings.cors_origins}")
    CORS(
        app,
        origins=settings.cors_origins,
        supports_credentials=False,
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_error_handlers(app)

    return app


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(e):
        return jsonify({"error": e.message}), e.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return jsonify({"error": "Invalid body"}), 400

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(e):
        db.session.rollback()
        app.logger.error(f"Database error: {e}")
        return jsonify({"error": "Database error"}), 500

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        messages = {
            404: "Not found",
            405: "Method not allowed",
            413: "File too large",
            429: "Too many requests",
        }
        return jsonify({"error": messages.get(e.code, e.name)}), e.code
