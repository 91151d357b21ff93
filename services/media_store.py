'''
----------------------------
Cloudinary media store (project images)
NOT BY USER INTERACTION
----------------------------
'''

import logging
from dataclasses import dataclass, field
from typing import Optional

import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from werkzeug.utils import secure_filename


logger = logging.getLogger(__name__)

# Cloudinary folder holding every project image
PROJECT_FOLDER = "projects"
# Allowed image file types
ALLOWED_FORMATS = ("jpg", "jpeg", "png")
# Fit inside 500x500, never upscale or distort
PROJECT_TRANSFORMATION = [{"width": 500, "height": 500, "crop": "limit"}]


class MediaStoreError(Exception):
    pass


class UnsupportedImageFormat(MediaStoreError):
    pass


@dataclass
class MediaStoreConfig:
    cloud_name: Optional[str] = None
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    folder: str = PROJECT_FOLDER
    allowed_formats: tuple = ALLOWED_FORMATS
    transformation: list = field(default_factory = lambda: list(PROJECT_TRANSFORMATION))

    @classmethod
    def from_mapping(cls, config) -> "MediaStoreConfig":
        return cls(
            cloud_name = config.get("CLOUDINARY_CLOUD_NAME"),
            api_key = config.get("CLOUDINARY_API_KEY"),
            api_secret = config.get("CLOUDINARY_API_SECRET"),
        )

    def credentials(self) -> dict:
        return {
            "cloud_name": self.cloud_name,
            "api_key": self.api_key,
            "api_secret": self.api_secret,
        }


@dataclass
class UploadedImage:
    # Public URL of the stored image
    url: str
    # Opaque identifier used to delete it later
    public_id: str


def file_extension(filename: Optional[str]) -> str:
    safe_filename = secure_filename(filename or "")
    if '.' not in safe_filename:
        return ""
    # Split list starting from the right, only dividing into 2 parts
    return safe_filename.rsplit('.', 1)[1].lower()


class CloudinaryMediaStore:
    """Uploads project images to Cloudinary and deletes them by public ID.

    Credentials are passed on every call instead of through
    ``cloudinary.config()``, so several stores can coexist in one process.
    """

    def __init__(self, config: MediaStoreConfig):
        self.config = config

    def upload(self, file_storage) -> UploadedImage:
        # file_storage is a werkzeug FileStorage taken from request.files
        extension = file_extension(getattr(file_storage, "filename", None))
        if extension not in self.config.allowed_formats:
            raise UnsupportedImageFormat(
                f"File type '{extension or 'unknown'}' not allowed. Please upload one of: {', '.join(self.config.allowed_formats)}"
            )

        try:
            result = cloudinary.uploader.upload(
                file_storage.stream,
                folder = self.config.folder,
                allowed_formats = list(self.config.allowed_formats),
                transformation = self.config.transformation,
                **self.config.credentials(),
            )
        except CloudinaryError as e:
            logger.error("Cloudinary upload failed for %s: %s", file_storage.filename, e)
            raise MediaStoreError(f"Failed to upload image to Cloudinary: {e}") from e

        url = result.get("secure_url") or result.get("url")
        public_id = result.get("public_id")
        if not url or not public_id:
            raise MediaStoreError("Cloudinary upload response is missing the URL or public ID")

        logger.info("Uploaded %s to Cloudinary as %s", file_storage.filename, public_id)
        return UploadedImage(url = url, public_id = public_id)

    def destroy(self, public_id: str) -> None:
        try:
            result = cloudinary.uploader.destroy(public_id, **self.config.credentials())
        except CloudinaryError as e:
            logger.error("Cloudinary delete failed for %s: %s", public_id, e)
            raise MediaStoreError(f"Failed to delete image {public_id} from Cloudinary: {e}") from e

        outcome = result.get("result")
        if outcome != "ok":
            raise MediaStoreError(f"Cloudinary refused to delete {public_id}: {outcome}")
        logger.info("Deleted %s from Cloudinary", public_id)
