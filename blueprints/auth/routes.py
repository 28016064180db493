"""
Auth Routes - Authentication and authorization
"""

from flask import render_template, redirect, url_for, request, flash, jsonify, current_app
from flask_login import login_user, logout_user, login_required, current_user
from utils.security import check_rate_limit, hash_password, verify_password, log_audit_event
from utils.helpers import is_safe_redirect, normalize_email, is_valid_email
from models import User
from extensions import db
from . import auth_bp


def authenticate(email, password):
    """Return the user for a valid email/password pair, else None"""
    user = User.query.filter_by(email=normalize_email(email)).first()
    if user and verify_password(password, user.password_hash):
        return user
    return None


def register_user(email, password, name=None):
    """
    Create an account.

    Returns:
        tuple: (user, None) on success, (None, error message) on rejected input
    """
    email = normalize_email(email)
    if not email or not password or not isinstance(password, str):
        return None, 'Email and password are required'
    if not is_valid_email(email):
        return None, 'Invalid email address'
    min_length = current_app.config.get('MIN_PASSWORD_LENGTH', 8)
    if len(password) < min_length:
        return None, f'Password must be at least {min_length} characters long'
    if User.query.filter_by(email=email).first():
        return None, 'Email already in use'

    user = User(
        email=email,
        password_hash=hash_password(password),
        name=(name if isinstance(name, str) else '').strip()[:255],
        title='',
        bio='',
        location=''
    )
    db.session.add(user)
    db.session.commit()
    current_app.logger.info(f"Registered user {user.id} ({email})")
    return user, None


@auth_bp.route('/api/auth/register', methods=['POST'])
def api_register():
    """Register a new account and start a session"""
    if not check_rate_limit('register'):
        return jsonify({'error': 'Too many requests'}), 429

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    try:
        user, error = register_user(data.get('email'), data.get('password'), data.get('name'))
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Registration error: {str(e)}")
        return jsonify({'error': 'Failed to register'}), 500

    if error:
        log_audit_event('register_rejected', email=data.get('email'), details=error)
        return jsonify({'error': error}), 400

    login_user(user, remember=True)
    log_audit_event('register', email=user.email)
    return jsonify({'message': 'Registration successful', 'userId': user.id}), 201


@auth_bp.route('/api/auth/login', methods=['POST'])
def api_login():
    """Email/password login"""
    if not check_rate_limit('login'):
        return jsonify({'error': 'Too many login attempts. Try again later.'}), 429

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    email = data.get('email')
    password = data.get('password')

    if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
        return jsonify({'error': 'Email and password are required'}), 400

    try:
        user = authenticate(email, password)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Login error: {str(e)}")
        return jsonify({'error': 'Failed to login'}), 500

    if not user:
        log_audit_event('failed_login', email=email)
        return jsonify({'error': 'Invalid email or password'}), 400

    login_user(user, remember=True)
    log_audit_event('login', email=user.email)
    return jsonify({'message': 'Login successful', 'userId': user.id}), 200


@auth_bp.route('/api/auth/logout', methods=['GET', 'POST'])
@auth_bp.route('/logout', methods=['GET', 'POST'])
def logout():
    """End the session and bounce back to a same-site page"""
    callback_url = request.args.get('callbackUrl', '/')
    if not is_safe_redirect(callback_url):
        callback_url = '/'

    if current_user.is_authenticated:
        log_audit_event('logout', email=current_user.email)
        logout_user()
    current_app.logger.info(f"Logout initiated, redirecting to: {callback_url}")
    return redirect(callback_url)


@auth_bp.route('/api/user/me')
@login_required
def me():
    """Identity of the logged-in user"""
    return jsonify({
        'id': current_user.id,
        'name': current_user.name,
        'email': current_user.email,
        'image': current_user.image
    })


@auth_bp.route('/login', methods=['GET', 'POST'])
def login_page():
    """HTML login form"""
    if current_user.is_authenticated:
        return redirect(url_for('portfolio.user_portfolio', user_id=current_user.id))

    if request.method == 'POST':
        if not check_rate_limit('login'):
            flash('Too many login attempts. Try again later.', 'error')
            return render_template('auth/login.html'), 429

        email = request.form.get('email', '')
        user = authenticate(email, request.form.get('password', ''))
        if user:
            login_user(user, remember=bool(request.form.get('remember')))
            log_audit_event('login', email=user.email)
            flash('Welcome back!', 'success')
            next_url = request.args.get('next')
            if is_safe_redirect(next_url):
                return redirect(next_url)
            return redirect(url_for('portfolio.user_portfolio', user_id=user.id))

        log_audit_event('failed_login', email=email)
        flash('Invalid email or password', 'error')

    return render_template('auth/login.html')


@auth_bp.route('/register', methods=['GET', 'POST'])
def register_page():
    """HTML registration form"""
    if current_user.is_authenticated:
        return redirect(url_for('portfolio.user_portfolio', user_id=current_user.id))

    if request.method == 'POST':
        if not check_rate_limit('register'):
            flash('Too many requests. Try again later.', 'error')
            return render_template('auth/register.html'), 429

        password = request.form.get('password', '')
        if password != request.form.get('confirm_password', password):
            flash('Password and confirmation do not match', 'error')
            return render_template('auth/register.html'), 400

        try:
            user, error = register_user(request.form.get('email'), password, request.form.get('name'))
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Registration error: {str(e)}")
            flash('Registration failed. Please try again.', 'error')
            return render_template('auth/register.html'), 500

        if error:
            flash(error, 'error')
            return render_template('auth/register.html'), 400

        login_user(user, remember=True)
        log_audit_event('register', email=user.email)
        flash('Welcome to Folio! Your account is ready.', 'success')
        return redirect(url_for('portfolio.user_portfolio', user_id=user.id))

    return render_template('auth/register.html')
