from db import db

class ProjectModel(db.Model):
    __tablename__ = "projects"

    # Project id, assigned by the database
    id = db.Column(db.Integer, primary_key = True)
    description = db.Column(db.Text, nullable = False)
    # Public URL of the uploaded image on Cloudinary
    image = db.Column(db.Text, nullable = False)
    # Cloudinary public ID, needed to delete the image later
    cloudinary_id = db.Column("cloudinaryId", db.Text, nullable = True)

    def __repr__(self):
        return f"<ProjectModel id={self.id} cloudinary_id={self.cloudinary_id}>"
