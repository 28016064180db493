"""
Account Blueprint - Admin profile editor
Handles: Profile fields, social links, security settings, profile image, storage setup
"""

from flask import Blueprint

account_bp = Blueprint('account', __name__, url_prefix='')

from . import routes
