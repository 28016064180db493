"""
Resume Blueprint - Work experience and education entries
Handles: Owner-scoped CRUD for experience and education
"""

from flask import Blueprint

resume_bp = Blueprint('resume', __name__, url_prefix='/api')

from . import routes
