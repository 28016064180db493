"""
Portfolio Blueprint - Public portfolio views
Handles: Landing page, user portfolios, project and blog pages, public profile API
"""

from flask import Blueprint

portfolio_bp = Blueprint('portfolio', __name__, url_prefix='')

from . import routes
