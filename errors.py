'''
----------------------------
API error kinds and their HTTP mapping
----------------------------
'''

from flask import jsonify


class ApiError(Exception):
    # Base class, carries the message sent back to the client
    def __init__(self, message):
        super().__init__(message)
        self.message = message


# Lookup by id found nothing
class NotFoundError(ApiError):
    pass


# Anything failing in the database, media store, templates or SMTP
class UpstreamFailure(ApiError):
    pass


# Error kind -> HTTP status code
STATUS_CODES = {
    NotFoundError: 404,
    UpstreamFailure: 500,
}


def status_for(error):
    for kind, status in STATUS_CODES.items():
        if isinstance(error, kind):
            return status
    return 500


def handle_api_error(error):
    return jsonify({"error": error.message}), status_for(error)


def register_error_handlers(app):
    app.register_error_handler(ApiError, handle_api_error)
