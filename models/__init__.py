# By having it in __init__.py, we can use "from models import ProjectModel"
from models.project import ProjectModel
