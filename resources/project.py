'''
----------------------------
Project actions
USER INTERACTIONS
----------------------------
'''

from flask import current_app, request
from flask.views import MethodView
from flask_smorest import Blueprint

from db import db
from errors import NotFoundError, UpstreamFailure
from models import ProjectModel
from schemas import ProjectSchema, ProjectCreateFormSchema

# Define the Blueprint for projects
blp = Blueprint("projects", __name__, description = "Operations on portfolio projects")

FETCH_ERROR = "An error occurred while fetching projects"
CREATE_ERROR = "An error occurred while creating the project"
DELETE_ERROR = "An error occurred while deleting the project"
NOT_FOUND_ERROR = "Project not found"


def _media_store():
    return current_app.extensions["media_store"]


def _discard_uploaded_image(public_id):
    # Row insert failed after the upload, try not to leave an orphan behind
    try:
        _media_store().destroy(public_id)
    except Exception as e:
        current_app.logger.warning("POST /project: could not remove orphaned image %s: %s", public_id, e)


@blp.route("/projects")
class ProjectList(MethodView):
    @blp.response(200, ProjectSchema(many = True))
    def get(self):
        try:
            return ProjectModel.query.all()
        except Exception:
            db.session.rollback()
            current_app.logger.exception("GET /projects: failed to fetch projects")
            raise UpstreamFailure(FETCH_ERROR)


@blp.route("/project")
class ProjectCreate(MethodView):
    @blp.arguments(ProjectCreateFormSchema, location = "form")
    @blp.response(201, ProjectSchema)
    def post(self, form_data):
        file = request.files.get("image")

        try:
            if file is None or file.filename == '':
                raise ValueError("No image file part in the request")
            uploaded = _media_store().upload(file)
        except Exception:
            current_app.logger.exception(
                "POST /project: image upload failed (filename=%s)", getattr(file, "filename", None)
            )
            raise UpstreamFailure(CREATE_ERROR)

        project = ProjectModel(
            description = form_data.get("description"),
            image = uploaded.url,
            cloudinary_id = uploaded.public_id,
        )

        try:
            db.session.add(project)
            db.session.commit()
        # Includes a missing description hitting the NOT NULL constraint
        except Exception:
            db.session.rollback()
            current_app.logger.exception(
                "POST /project: failed to save project for image %s", uploaded.public_id
            )
            _discard_uploaded_image(uploaded.public_id)
            raise UpstreamFailure(CREATE_ERROR)

        current_app.logger.info("POST /project: created project %s", project.id)
        return project


@blp.route("/project/<project_id>")
class ProjectResource(MethodView):
    def delete(self, project_id):
        try:
            project = ProjectModel.query.filter_by(id = int(project_id)).first()
        # Non-numeric or out of range ids end up here too
        except Exception:
            db.session.rollback()
            current_app.logger.exception("DELETE /project/%s: lookup failed", project_id)
            raise UpstreamFailure(DELETE_ERROR)

        if project is None:
            raise NotFoundError(NOT_FOUND_ERROR)

        # Remote image first; its failure never blocks the row delete
        if project.cloudinary_id:
            try:
                _media_store().destroy(project.cloudinary_id)
            except Exception as e:
                current_app.logger.warning(
                    "DELETE /project/%s: image %s was not removed from Cloudinary: %s",
                    project.id, project.cloudinary_id, e
                )

        try:
            db.session.delete(project)
            db.session.commit()
        except Exception:
            db.session.rollback()
            current_app.logger.exception("DELETE /project/%s: failed to delete row", project_id)
            raise UpstreamFailure(DELETE_ERROR)

        current_app.logger.info("DELETE /project/%s: project deleted", project_id)
        return {"message": "Project deleted successfully"}
