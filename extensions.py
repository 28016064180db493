"""
Extensions Module - shared db and login manager, bound later by create_app()
"""

from flask import jsonify, redirect, request, url_for, flash
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager

db = SQLAlchemy()
login_manager = LoginManager()
login_manager.login_view = 'auth.login_page'
login_manager.login_message = 'Please log in to access this page.'
login_manager.login_message_category = 'info'


@login_manager.user_loader
def load_user(user_id):
    from models import User
    return db.session.get(User, user_id)


@login_manager.unauthorized_handler
def unauthorized():
    """JSON 401 for API calls, redirect to the login page for everything else"""
    if request.path.startswith('/api/'):
        return jsonify({'error': 'Unauthorized'}), 401
    flash(login_manager.login_message, login_manager.login_message_category)
    return redirect(url_for('auth.login_page', next=request.path))


__all__ = ['db', 'login_manager']
