"""
Uploads Blueprint - Object storage uploads
Handles: Project image upload, presigned uploads, image URL checks
"""

from flask import Blueprint

uploads_bp = Blueprint('uploads', __name__, url_prefix='/api')

from . import routes
