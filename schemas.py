from marshmallow import Schema, fields, EXCLUDE

# --- Project schemas ---

# Project as returned to clients
class ProjectSchema(Schema):
    id = fields.Int(dump_only = True)
    description = fields.Str(dump_only = True)
    # Cloudinary URL of the project image
    image = fields.Str(dump_only = True)
    # Public ID on Cloudinary, exposed under its original key
    cloudinary_id = fields.Str(dump_only = True, data_key = "cloudinaryId", allow_none = True)

# Text part of the multipart create form (the image itself comes from request.files)
class ProjectCreateFormSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    # Not required on purpose: a missing description fails at the database
    description = fields.Str(load_default = None, allow_none = True)

# --- Email schemas ---

class SendEmailSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    # Passed through untouched, the endpoint does no field validation
    email = fields.Raw(load_default = None, allow_none = True)
    name = fields.Raw(load_default = None, allow_none = True)
    message = fields.Raw(load_default = None, allow_none = True)

class SendEmailResponseSchema(Schema):
    status = fields.Bool(dump_only = True)
