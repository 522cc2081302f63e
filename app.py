"""Application factory."""

import os
import uuid
from datetime import datetime, timezone

import click
from flask import Flask, g, jsonify, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_mail import Mail
from flask_migrate import Migrate
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException, InternalServerError

from config import Config
from models import db
from notifications import MailNotifier, NotificationDispatcher, verify_mailer
from routes.auth import auth_bp
from routes.checkout import checkout_bp
from routes.products import products_bp
from services import AccountService
from utils.errors import StoreError, json_error
from utils.security import register_token_handlers

migrate = Migrate()
jwt = JWTManager()
mail = Mail()
limiter = Limiter(key_func=get_remote_address)


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Core subsystems
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    register_token_handlers(jwt)
    mail.init_app(app)

    # Notifications
    app.extensions["notifier"] = MailNotifier(mail)
    NotificationDispatcher(app)

    # CORS
    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
        allow_headers=["Content-Type", "Authorization"],
    )

    # Rate limiting
    storage_uri = app.config.get("RATELIMIT_STORAGE_URI", "memory://")
    headers_enabled = app.config.get("RATELIMIT_HEADERS_ENABLED", True)
    key_prefix = app.config.get("RATELIMIT_KEY_PREFIX") or str(uuid.uuid4())

    global limiter
    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[lambda: app.config.get("RATE_LIMIT", "120 per minute")],
        storage_uri=storage_uri,
        headers_enabled=headers_enabled,
        key_prefix=key_prefix,
    )
    limiter.init_app(app)
    app.config["RATELIMIT_KEY_PREFIX"] = key_prefix

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(products_bp, url_prefix="/api/products")
    app.register_blueprint(checkout_bp, url_prefix="/api")

    # Health
    @app.route("/", methods=["GET"])
    def index():
        return "Storefront API running"

    @app.route("/healthz", methods=["GET"])
    def healthz():
        return jsonify(
            {"status": "ok", "time": datetime.now(timezone.utc).isoformat()}
        )

    @app.route("/api/health", methods=["GET"])
    def api_health():
        return jsonify({"ok": True})

    # Errors
    _register_error_handlers(app)
    _register_cli(app)

    return app


def _register_error_handlers(app: Flask) -> None:
    """Register JSON error handlers with request IDs."""

    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    @app.after_request
    def _add_request_id_header(response):
        request_id = g.get("request_id")
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        return json_error(error)

    @app.errorhandler(SQLAlchemyError)
    def _handle_store_error(error: SQLAlchemyError):
        db.session.rollback()
        app.logger.exception("Database error", exc_info=error)
        return json_error(StoreError())

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):
        app.logger.exception("Unhandled application error", exc_info=error)
        return json_error(InternalServerError("An unexpected error occurred."))


def _register_cli(app: Flask) -> None:
    @app.cli.command("seed-admins")
    @click.option("--file", "seed_file", default=None, help="JSON list of {email, password}.")
    def seed_admins_command(seed_file):
        """Create or update administrators from the seed file."""
        path = seed_file or app.config["ADMIN_SEED_PATH"]
        count = AccountService(db.session).seed_admins_from_file(path)
        click.echo(f"Admins seeded/updated: {count}")

    @app.cli.command("verify-mailer")
    def verify_mailer_command():
        """Check that the SMTP server accepts connections."""
        ok = verify_mailer(mail)
        click.echo("Mailer OK" if ok else "Mailer ERROR")


if __name__ == "__main__":
    application = create_app()
    with application.app_context():
        db.create_all()
        AccountService(db.session).seed_admins_from_file(application.config["ADMIN_SEED_PATH"])
        if application.config.get("MAILER_ENABLED"):
            verify_mailer(mail)
    application.run(host="0.0.0.0", port=int(os.environ.get("PORT", 10000)))
