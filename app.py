import logging
import os

from flask import Flask
from flask.logging import default_handler
from flask_smorest import Api
from flask_migrate import Migrate
from flask_cors import CORS

from db import db
from errors import register_error_handlers
from services import CloudinaryMediaStore, MediaStoreConfig, Mailer, MailConfig

from resources.project import blp as ProjectBlueprint
from resources.email import blp as EmailBlueprint


def _env_flag(name, default = "false"):
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def create_app(db_url = None, media_store = None, mailer = None, email_enabled = None):
    app = Flask(__name__)

    app.config["PROPAGATE_EXCEPTIONS"] = True
    app.config["API_TITLE"] = "Portfolio -- Projects API"
    app.config["API_VERSION"] = "v1"
    app.config["OPENAPI_VERSION"] = "3.0.3"
    app.config["OPENAPI_URL_PREFIX"] = "/"
    app.config["OPENAPI_SWAGGER_UI_PATH"] = "/swagger-ui"
    app.config["OPENAPI_SWAGGER_UI_URL"] = "https://cdn.jsdelivr.net/npm/swagger-ui-dist/"
    # Secrets only come from the environment, never from the code
    app.config["SQLALCHEMY_DATABASE_URI"] = db_url or os.getenv("DATABASE_URL", "sqlite:///data.db")
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    # Cloudinary credentials
    app.config["CLOUDINARY_CLOUD_NAME"] = os.getenv("CLOUDINARY_CLOUD_NAME")
    app.config["CLOUDINARY_API_KEY"] = os.getenv("CLOUDINARY_API_KEY")
    app.config["CLOUDINARY_API_SECRET"] = os.getenv("CLOUDINARY_API_SECRET")
    # SMTP relay and addresses for the contact emails
    app.config["EMAIL_ENABLED"] = _env_flag("EMAIL_ENABLED") if email_enabled is None else email_enabled
    app.config["SMTP_HOST"] = os.getenv("SMTP_HOST", "localhost")
    app.config["SMTP_PORT"] = int(os.getenv("SMTP_PORT", "587"))
    app.config["SMTP_SECURE"] = _env_flag("SMTP_SECURE")
    app.config["SMTP_USER"] = os.getenv("SMTP_USER")
    app.config["SMTP_PASSWORD"] = os.getenv("SMTP_PASSWORD")
    app.config["SMTP_TIMEOUT"] = float(os.getenv("SMTP_TIMEOUT", "60"))
    app.config["MAIL_FROM"] = os.getenv("MAIL_FROM")
    app.config["MAIL_OPERATOR_ADDRESS"] = os.getenv("MAIL_OPERATOR_ADDRESS")
    app.config["MAIL_WELCOME_SUBJECT"] = os.getenv("MAIL_WELCOME_SUBJECT")
    app.config["MAIL_NOTIFICATION_SUBJECT"] = os.getenv("MAIL_NOTIFICATION_SUBJECT")

    app.logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    # Service module loggers share the app's handler and level
    services_logger = logging.getLogger("services")
    services_logger.setLevel(app.logger.level)
    if default_handler not in services_logger.handlers:
        services_logger.addHandler(default_handler)

    origins = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]
    CORS(
        app,
        resources={r"/*": {
            "origins": origins,
            "methods": ["GET", "POST", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Accept"],
        }},
    )

    # Connects Flask app to SQLAlchemy
    db.init_app(app)
    api = Api(app)

    # Initialize flask migrate
    migrate = Migrate(app, db)

    # Collaborators are created once and shared by every request
    app.extensions["media_store"] = media_store or CloudinaryMediaStore(MediaStoreConfig.from_mapping(app.config))
    app.extensions["mailer"] = mailer or Mailer(MailConfig.from_mapping(app.config))

    register_error_handlers(app)

    api.register_blueprint(ProjectBlueprint)
    if app.config["EMAIL_ENABLED"]:
        api.register_blueprint(EmailBlueprint)
    else:
        app.logger.info("EMAIL_ENABLED is off, /sendemail is not registered")

    # Creates the projects table if it doesn't already exist
    with app.app_context():
        db.create_all()

    return app


if __name__ == "__main__":
    create_app().run(host = "0.0.0.0", port = int(os.getenv("PORT", "7000")))
