"""
Blog Blueprint - Blog posts
Handles: Owner-scoped blog CRUD
"""

from flask import Blueprint

blog_bp = Blueprint('blog', __name__, url_prefix='/api')

from . import routes
