'''
----------------------------
Contact emails (welcome + operator notification)
USER INTERACTIONS
----------------------------
'''

from flask import current_app
from flask.views import MethodView
from flask_smorest import Blueprint

from errors import UpstreamFailure
from schemas import SendEmailSchema, SendEmailResponseSchema

blp = Blueprint("email", __name__, description = "Transactional email notifications")

# Kept literally, existing clients match on this text
SEND_ERROR = "Failed to send OTP"


@blp.route("/sendemail")
class SendEmail(MethodView):
    @blp.arguments(SendEmailSchema)
    @blp.response(200, SendEmailResponseSchema)
    def post(self, email_data):
        mailer = current_app.extensions["mailer"]
        try:
            mailer.send_contact_emails(
                email = email_data.get("email"),
                name = email_data.get("name"),
                message = email_data.get("message"),
            )
        except Exception:
            # No partial success: one failed render or send fails the request
            current_app.logger.exception("POST /sendemail: sending to %s failed", email_data.get("email"))
            raise UpstreamFailure(SEND_ERROR)

        return {"status": True}
