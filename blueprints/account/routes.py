"""
Account Routes - Admin profile editor and storage setup
"""

import os
import uuid
from flask import render_template, request, jsonify, current_app
from flask_login import login_required, current_user
from werkzeug.utils import secure_filename
from utils.decorators import json_body_required, api_errors
from utils.security import hash_password, verify_password, log_audit_event
from utils.helpers import allowed_file, non_string_fields, is_http_url, normalize_email, is_valid_email
from utils.storage import StorageError, upload_file, bucket_status, bucket_exists, apply_public_read_policy
from models import User, Image
from extensions import db
from . import account_bp


UPLOAD_FOLDERS = {
    'profile': 'profile-images',
    'company-logo': 'company-logos'
}


@account_bp.route('/admin')
@login_required
def admin_page():
    """Account management page - profile, experience, education, projects, blog"""
    return render_template('admin/account.html', profile=current_user.to_profile())


@account_bp.route('/admin/s3-setup')
@login_required
def s3_setup_page():
    """Storage diagnostics page"""
    return render_template('admin/s3_setup.html')


@account_bp.route('/api/admin/account', methods=['GET'])
@login_required
def get_account():
    """Profile of the logged-in user"""
    return jsonify(current_user.to_profile())


PROFILE_TEXT = ('name', 'bio', 'title', 'location', 'profileImageUrl')
SOCIAL_FIELDS = {
    'github': 'github_url',
    'linkedin': 'linkedin_url',
    'twitter': 'twitter_url',
    'website': 'website_url'
}


@account_bp.route('/api/admin/account', methods=['PUT'])
@login_required
@json_body_required
@api_errors('Failed to update profile')
def update_account():
    """Update profile fields and social links"""
    data = request.get_json()
    social = data.get('socialLinks') or {}
    if not isinstance(social, dict):
        return jsonify({'error': 'socialLinks must be an object'}), 400

    bad = non_string_fields(data, PROFILE_TEXT) + non_string_fields(social, SOCIAL_FIELDS)
    if bad:
        return jsonify({'error': f"Fields must be strings: {', '.join(bad)}"}), 400
    for key in SOCIAL_FIELDS:
        if social.get(key) and not is_http_url(social[key]):
            current_app.logger.warning(f"Rejected {key} link for user {current_user.id}: {social[key]}")
            return jsonify({'error': f'Invalid {key} URL. Links must start with http:// or https://'}), 400
    image = data.get('profileImageUrl')
    if image and not (is_http_url(image) or image.startswith('/uploads/')):
        return jsonify({'error': 'Invalid profile image URL'}), 400

    user = current_user
    user.name = (data.get('name') or '').strip()[:255]
    user.bio = data.get('bio') or ''
    user.title = (data.get('title') or '')[:255]
    user.location = (data.get('location') or '')[:255]
    user.image = image or ''
    for key, column in SOCIAL_FIELDS.items():
        setattr(user, column, (social.get(key) or '').strip()[:500])
    db.session.commit()

    current_app.logger.info(f"Updated profile for user {user.id}")
    return jsonify(user.to_profile())


@account_bp.route('/api/admin/account/security', methods=['PUT'])
@login_required
@json_body_required
@api_errors('Failed to update security settings')
def update_security():
    """Change password and/or email after re-checking the current password"""
    data = request.get_json()
    current_password = data.get('currentPassword')
    new_password = data.get('newPassword') or None
    raw_email = data.get('newEmail')
    new_email = normalize_email(raw_email)

    if not isinstance(current_password, str) or not current_password:
        return jsonify({'error': 'Current password is required'}), 400
    if new_password is not None and not isinstance(new_password, str):
        return jsonify({'error': 'newPassword must be a string'}), 400
    if raw_email and not isinstance(raw_email, str):
        return jsonify({'error': 'newEmail must be a string'}), 400
    if not new_password and not new_email:
        return jsonify({'error': 'No changes requested'}), 400
    if new_email and not is_valid_email(new_email):
        return jsonify({'error': 'Invalid email address'}), 400

    user = current_user
    if not verify_password(current_password, user.password_hash):
        log_audit_event('security_update_rejected', email=user.email, details='bad current password')
        return jsonify({'error': 'Current password is incorrect'}), 400

    if new_password:
        min_length = current_app.config.get('MIN_PASSWORD_LENGTH', 8)
        if len(new_password) < min_length:
            return jsonify({'error': f'Password must be at least {min_length} characters long'}), 400
        user.password_hash = hash_password(new_password)

    if new_email and new_email != user.email:
        existing = User.query.filter_by(email=new_email).first()
        if existing and existing.id != user.id:
            return jsonify({'error': 'Email already in use'}), 400
        user.email = new_email

    db.session.commit()
    log_audit_event('security_updated', email=user.email,
                    details=f"password={'yes' if new_password else 'no'} email={'yes' if new_email else 'no'}")
    return jsonify({'message': 'Security settings updated successfully', 'email': user.email})


@account_bp.route('/api/admin/account/profile-image', methods=['POST'])
@login_required
def upload_profile_image():
    """Upload a profile image or company logo to S3"""
    file = request.files.get('file')
    upload_type = request.form.get('type') or 'profile'

    if not file or not file.filename:
        current_app.logger.warning('No file provided for image upload')
        return jsonify({'error': 'No file provided'}), 400

    if not (file.mimetype or '').startswith('image/') or not allowed_file(file.filename):
        current_app.logger.warning(f"Invalid file type for image: {file.mimetype}")
        return jsonify({'error': 'File must be an image'}), 400

    ext = os.path.splitext(secure_filename(file.filename))[1].lower()
    filename = f"{uuid.uuid4()}{ext}"
    folder = UPLOAD_FOLDERS.get(upload_type, UPLOAD_FOLDERS['profile'])

    try:
        image_url = upload_file(file, f"{folder}/{filename}", content_type=file.mimetype)
    except StorageError as e:
        current_app.logger.error(f"Error uploading image: {str(e)}")
        return jsonify({
            'error': 'Failed to upload image to S3. Check your AWS configuration.',
            'details': str(e)
        }), 500

    try:
        db.session.add(Image(url=image_url, filename=filename, storage_type='s3', user_id=current_user.id))
        if upload_type == 'profile':
            current_user.image = image_url
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error saving image record: {str(e)}")
        return jsonify({'error': 'Failed to save image', 'details': str(e)}), 500

    current_app.logger.info(f"Stored {upload_type} image for user {current_user.id}: {image_url}")
    return jsonify({'success': True, 'imageUrl': image_url})


@account_bp.route('/api/admin/s3-setup', methods=['GET'])
@login_required
@api_errors('Failed to check S3 status')
def s3_status():
    """Report credentials, bucket reachability and policy"""
    return jsonify(bucket_status())


@account_bp.route('/api/admin/s3-setup', methods=['POST'])
@login_required
@api_errors('Failed to configure S3')
def s3_configure():
    """Apply the public-read policy to the configured bucket"""
    bucket = current_app.config.get('AWS_S3_BUCKET')
    if not bucket_exists():
        return jsonify({'error': f'Bucket {bucket} does not exist or cannot be accessed'}), 400

    try:
        apply_public_read_policy()
    except StorageError as e:
        current_app.logger.error(f"Error applying bucket policy: {str(e)}")
        return jsonify({'error': 'Failed to apply bucket policy. Check IAM permissions.'}), 500

    return jsonify({'success': True})
