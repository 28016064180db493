"""
Uploads Routes - Project images in object storage
"""

import requests
from urllib.parse import urlparse
from flask import request, jsonify, current_app
from flask_login import login_required, current_user
from utils.decorators import json_body_required, api_errors
from utils.helpers import allowed_file, is_http_url
from utils.security import is_public_host
from utils.storage import StorageError, upload_file, presigned_upload_url, project_key
from models import Image
from extensions import db
from . import uploads_bp


IMAGE_CHECK_TIMEOUT = 5  # seconds


@uploads_bp.route('/upload', methods=['POST'])
@login_required
def upload():
    """Store a project image and record it in the image ledger"""
    file = request.files.get('file')
    if not file or not file.filename:
        return jsonify({'error': 'No file provided'}), 400
    if not allowed_file(file.filename):
        current_app.logger.warning(f"Rejected upload with disallowed type: {file.filename}")
        return jsonify({'error': 'File type not allowed'}), 400

    try:
        url = upload_file(file, project_key(file.filename), content_type=file.mimetype)
    except StorageError as e:
        current_app.logger.error(f"S3 upload error: {str(e)}")
        return jsonify({
            'error': 'Failed to upload to S3. Please check your AWS credentials and permissions.',
            'details': str(e)
        }), 500

    try:
        image = Image(url=url, filename=file.filename, storage_type='s3', user_id=current_user.id)
        db.session.add(image)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error saving image record: {str(e)}")
        return jsonify({'error': 'Failed to save image', 'details': str(e)}), 500

    return jsonify({'success': True, 'image': image.to_dict()})


@uploads_bp.route('/upload/presign', methods=['POST'])
@login_required
@json_body_required
def presign():
    """Presigned PUT URL for direct browser uploads"""
    data = request.get_json()
    filename = data.get('fileName')
    content_type = data.get('contentType')

    if not isinstance(filename, str) or not isinstance(content_type, str) \
            or not filename.strip() or not content_type.strip():
        return jsonify({'error': 'fileName and contentType are required'}), 400
    if not allowed_file(filename):
        return jsonify({'error': 'File type not allowed'}), 400

    try:
        return jsonify(presigned_upload_url(filename.strip(), content_type.strip()))
    except StorageError as e:
        current_app.logger.error(f"Error generating presigned URL: {str(e)}")
        return jsonify({'error': 'Failed to generate upload URL'}), 500


@uploads_bp.route('/check-image', methods=['POST'])
@login_required
@json_body_required
@api_errors('Failed to check image URL')
def check_image():
    """Report whether an image URL is reachable"""
    image_url = request.get_json().get('imageUrl')
    if not isinstance(image_url, str) or not image_url.strip():
        return jsonify({'error': 'No image URL provided'}), 400
    image_url = image_url.strip()

    current_app.logger.info(f"Checking image URL: {image_url}")

    if image_url.startswith('http'):
        if not is_http_url(image_url):
            return jsonify({'exists': False, 'message': 'Invalid image URL format'})
        if not is_public_host(urlparse(image_url).hostname):
            current_app.logger.warning(f"Refused image check for non-public host: {image_url}")
            return jsonify({'error': 'Image URL must point to a public host'}), 400

        try:
            response = requests.head(image_url, timeout=IMAGE_CHECK_TIMEOUT, allow_redirects=False)
        except requests.RequestException as e:
            return jsonify({
                'exists': False,
                'message': f'Failed to access image: {str(e)}'
            })

        if 300 <= response.status_code < 400:
            return jsonify({
                'exists': False,
                'status': response.status_code,
                'message': 'Image URL redirects elsewhere. Use the final image address.'
            })
        if response.ok:
            return jsonify({
                'exists': True,
                'status': response.status_code,
                'contentType': response.headers.get('content-type'),
                'message': 'Image is accessible'
            })
        return jsonify({
            'exists': False,
            'status': response.status_code,
            'message': f'Image is not accessible. Server returned status {response.status_code}'
        })

    if image_url.startswith('/'):
        # Served by this app, nothing to probe
        return jsonify({'exists': True, 'message': 'Local image path (assuming it exists)'})

    return jsonify({'exists': False, 'message': 'Invalid image URL format'})
