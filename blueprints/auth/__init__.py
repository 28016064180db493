"""
Auth Blueprint - Authentication and authorization
Handles: Registration, Login, Logout, current-user lookup
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__, url_prefix='')

from . import routes
