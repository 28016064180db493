"""
Projects Blueprint - Portfolio projects
Handles: Owner-scoped project CRUD, stored image cleanup
"""

from flask import Blueprint

projects_bp = Blueprint('projects', __name__, url_prefix='/api')

from . import routes
