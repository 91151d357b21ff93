import io

import aiosmtplib
import cloudinary.uploader
import pytest
from cloudinary.exceptions import Error as CloudinaryError

from app import create_app
from db import db
from services import CloudinaryMediaStore, MediaStoreConfig, Mailer, MailConfig


class FakeCloudinary:
    """Stands in for cloudinary.uploader and records every call."""

    def __init__(self):
        self.uploads = []
        self.destroyed = []
        self.fail_upload = False
        self.fail_destroy = False

    def upload(self, file, **options):
        if self.fail_upload:
            raise CloudinaryError("Upload rejected")
        self.uploads.append(options)
        public_id = f"{options['folder']}/image_{len(self.uploads)}"
        return {
            "public_id": public_id,
            "secure_url": f"https://res.cloudinary.com/{options['cloud_name']}/image/upload/{public_id}.jpg",
        }

    def destroy(self, public_id, **options):
        self.destroyed.append(public_id)
        if self.fail_destroy:
            raise CloudinaryError("Resource not reachable")
        return {"result": "ok"}


class Outbox:
    """Replaces aiosmtplib.send and records every attempt."""

    def __init__(self):
        self.connections = []
        self.logins = []
        self.attempts = []
        self.sent = []
        # 1-based attempt numbers that should fail
        self.fail_on = set()

    async def send(self, message, **options):
        self.connections.append(options)
        if options.get("username"):
            self.logins.append((options["username"], options["password"]))
        self.attempts.append(message)
        if len(self.attempts) in self.fail_on:
            raise aiosmtplib.SMTPResponseException(554, "Relay refused the message")
        self.sent.append(message)


@pytest.fixture()
def fake_cloudinary(monkeypatch):
    fake = FakeCloudinary()
    monkeypatch.setattr(cloudinary.uploader, "upload", fake.upload)
    monkeypatch.setattr(cloudinary.uploader, "destroy", fake.destroy)
    return fake


@pytest.fixture()
def outbox(monkeypatch):
    box = Outbox()
    monkeypatch.setattr(aiosmtplib, "send", box.send)
    return box


@pytest.fixture()
def mail_config():
    return MailConfig(
        host = "smtp.example.com",
        port = 587,
        user = "mailer@example.com",
        password = "app-password",
        sender = "mailer@example.com",
        operator_address = "owner@example.com",
    )


@pytest.fixture()
def app(fake_cloudinary, outbox, mail_config):
    media_store = CloudinaryMediaStore(MediaStoreConfig(cloud_name = "demo", api_key = "key", api_secret = "secret"))
    app = create_app(
        db_url = "sqlite://",
        media_store = media_store,
        mailer = Mailer(mail_config),
        email_enabled = True,
    )
    app.config["TESTING"] = True
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def create_project(client):
    def _create(description = "A portfolio piece", filename = "photo.jpg"):
        return client.post(
            "/project",
            data = {"description": description, "image": (io.BytesIO(b"fake image bytes"), filename)},
            content_type = "multipart/form-data",
        )
    return _create
