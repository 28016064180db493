"""
Folio - portfolio platform

Builds the Flask app: config, database, login sessions, Jinja filters,
blueprints, error pages and the `flask seed` command. Routes live in blueprints.
"""

import os
import logging
import click
from datetime import datetime
from flask import Flask, render_template, request, jsonify, flash, redirect
from config import get_config
from extensions import db, login_manager
from utils.dates import format_date, calculate_duration

from blueprints.auth import auth_bp
from blueprints.account import account_bp
from blueprints.resume import resume_bp
from blueprints.projects import projects_bp
from blueprints.blog import blog_bp
from blueprints.uploads import uploads_bp
from blueprints.portfolio import portfolio_bp


def create_app(config_name=None):
    """
    Build a configured app instance.

    Args:
        config_name (str): 'development', 'production' or 'testing';
            defaults to FLASK_ENV

    Returns:
        Flask: the application
    """
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))

    configure_logging(app)
    initialize_extensions(app)

    # Date helpers for resume and blog pages
    app.jinja_env.filters['format_date'] = format_date
    app.jinja_env.filters['duration'] = lambda start, end=None: calculate_duration(start, end)

    register_blueprints(app)
    register_error_handlers(app)
    register_hooks(app)
    register_commands(app)

    @app.route('/health')
    def health_check():
        return {'status': 'ok', 'message': 'Folio is running'}, 200

    return app


def configure_logging(app):
    """Send app logs to stderr at a level that shows state changes"""
    level = logging.DEBUG if app.debug else logging.INFO
    app.logger.setLevel(os.environ.get('LOG_LEVEL', logging.getLevelName(level)))


def initialize_extensions(app):
    """Bind db and login manager, then make sure the schema exists"""
    db.init_app(app)
    login_manager.init_app(app)

    with app.app_context():
        try:
            from sqlalchemy import text
            import models  # noqa: F401
            db.create_all()
            db.session.execute(text('SELECT 1'))
            app.logger.info("✓ Database ready")
        except Exception as e:
            app.logger.error(f"✗ Database initialization failed: {str(e)}")


def register_blueprints(app):
    """Register all application blueprints"""
    app.register_blueprint(auth_bp)
    app.register_blueprint(account_bp)
    app.register_blueprint(resume_bp)
    app.register_blueprint(projects_bp)
    app.register_blueprint(blog_bp)
    app.register_blueprint(uploads_bp)
    app.register_blueprint(portfolio_bp)


def wants_json():
    return request.path.startswith('/api/')


def register_error_handlers(app):
    """Register custom error handlers - JSON under /api/, pages elsewhere"""

    def error_response(status, message, template=None):
        if wants_json():
            return jsonify({'error': message}), status
        return render_template(template or 'error.html', status=status, message=message), status

    @app.errorhandler(400)
    def bad_request(e):
        return error_response(400, 'Bad request')

    @app.errorhandler(401)
    def unauthorized(e):
        return error_response(401, 'Unauthorized')

    @app.errorhandler(403)
    def forbidden(e):
        return error_response(403, 'Forbidden')

    @app.errorhandler(404)
    def page_not_found(e):
        return error_response(404, 'Not found', '404.html')

    @app.errorhandler(405)
    def method_not_allowed(e):
        return error_response(405, 'Method not allowed')

    @app.errorhandler(500)
    def internal_server_error(e):
        db.session.rollback()
        app.logger.error(f"Server Error: {str(e)}")
        return error_response(500, 'Internal server error')

    @app.errorhandler(413)
    def file_too_large(e):
        limit_mb = app.config['MAX_CONTENT_LENGTH'] // (1024 * 1024)
        if wants_json():
            return jsonify({'error': f'File is too large. Maximum size is {limit_mb}MB.'}), 413
        flash(f'File is too large. Maximum size is {limit_mb}MB.', 'error')
        return redirect(request.referrer or '/'), 413


def register_hooks(app):
    """Register request/response hooks and context processors"""

    @app.context_processor
    def inject_global_vars():
        return {
            'current_year': datetime.now().year,
            'site_name': 'Folio'
        }

    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses, CORS headers to the API"""
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        if not app.debug:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        if request.path.startswith('/api/'):
            origin = request.headers.get('Origin')
            if origin and origin in app.config.get('CORS_ORIGINS', []):
                response.headers['Access-Control-Allow-Origin'] = origin
                response.headers['Access-Control-Allow-Credentials'] = 'true'
                response.headers.add('Vary', 'Origin')
            else:
                # Unlisted origins may read public data but never with cookies
                response.headers['Access-Control-Allow-Origin'] = '*'
            response.headers['Access-Control-Allow-Methods'] = 'GET,OPTIONS,PATCH,DELETE,POST,PUT'
            response.headers['Access-Control-Allow-Headers'] = (
                'X-CSRF-Token, X-Requested-With, Accept, Accept-Version, Content-Length, '
                'Content-MD5, Content-Type, Date, X-Api-Version'
            )
        return response


def register_commands(app):
    """Register flask CLI commands"""

    @app.cli.command('seed')
    @click.option('--email', default='test@example.com', help='Email of the demo account')
    @click.option('--password', default='test1234', help='Password of the demo account')
    def seed_command(email, password):
        """Create a demo user with sample portfolio entries."""
        from migrations.seed_demo_data import seed_demo_data
        user = seed_demo_data(email=email, password=password)
        click.echo(f"Seeded demo user {user.email} ({user.id})")


if __name__ == '__main__':
    env = os.environ.get('FLASK_ENV', 'development')
    create_app(env).run(
        host='0.0.0.0',
        port=int(os.environ.get('PORT', 5000)),
        debug=(env == 'development')
    )
