from services.media_store import CloudinaryMediaStore, MediaStoreConfig, MediaStoreError, UnsupportedImageFormat, UploadedImage
from services.mailer import Mailer, MailConfig, MailerError
