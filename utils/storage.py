"""
Storage Module - S3 object storage for uploaded images
Handles: uploads, deletion by URL, presigned uploads, bucket status and policy
"""

import os
import json
import time
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app
from werkzeug.utils import secure_filename


class StorageError(Exception):
    """Raised when an object storage call fails"""


def get_s3_client():
    """Build an S3 client from app config (falls back to the default AWS credential chain)"""
    cfg = current_app.config
    return boto3.client(
        's3',
        region_name=cfg.get('AWS_REGION'),
        aws_access_key_id=cfg.get('AWS_ACCESS_KEY_ID') or None,
        aws_secret_access_key=cfg.get('AWS_SECRET_ACCESS_KEY') or None
    )


def get_bucket_name():
    return current_app.config.get('AWS_S3_BUCKET')


def object_url(key):
    """Public URL of an object in the configured bucket"""
    return f"https://{get_bucket_name()}.s3.{current_app.config.get('AWS_REGION')}.amazonaws.com/{key}"


def key_from_url(url):
    """Extract the object key from an S3 URL, None if it is not one"""
    if not url or '.amazonaws.com/' not in url:
        return None
    key = url.split('.amazonaws.com/', 1)[1]
    return key or None


def project_key(filename):
    """projects/<unix-ms>-<filename with spaces as dashes>"""
    safe_name = secure_filename(filename.replace(' ', '-')) or 'upload'
    return f"projects/{int(time.time() * 1000)}-{safe_name}"


def upload_file(file_storage, key, content_type=None):
    """
    Upload a werkzeug FileStorage (or any file-like object) to S3.

    Returns:
        str: Public URL of the stored object

    Raises:
        StorageError: If the bucket rejects the upload
    """
    bucket = get_bucket_name()
    if not bucket:
        raise StorageError('S3 is not configured. Check your environment variables.')

    body = file_storage.read()
    content_type = content_type or getattr(file_storage, 'mimetype', None) or 'application/octet-stream'

    current_app.logger.info(f"Uploading to S3: {key} ({len(body)} bytes)")
    try:
        get_s3_client().put_object(Bucket=bucket, Key=key, Body=body, ContentType=content_type)
    except ClientError as e:
        code = e.response.get('Error', {}).get('Code')
        if code == 'AccessDenied':
            current_app.logger.error('S3 Access Denied. Please check your IAM permissions.')
        raise StorageError(f"S3 upload failed: {str(e)}") from e
    except BotoCoreError as e:
        raise StorageError(f"S3 upload failed: {str(e)}") from e

    url = object_url(key)
    current_app.logger.info(f"S3 upload successful: {url}")
    return url


def delete_from_s3(url):
    """Delete the object behind an S3 URL"""
    key = key_from_url(url)
    if not key:
        current_app.logger.warning(f"Invalid S3 URL format: {url}")
        return False
    try:
        get_s3_client().delete_object(Bucket=get_bucket_name(), Key=key)
    except (BotoCoreError, ClientError) as e:
        raise StorageError(f"S3 delete failed: {str(e)}") from e
    current_app.logger.info(f"Deleted S3 object: {key}")
    return True


def delete_local_upload(url):
    """Delete a legacy /uploads/ file from the upload folder"""
    filename = os.path.basename(url.split('/uploads/', 1)[1])
    path = os.path.join(current_app.root_path, current_app.config['UPLOAD_FOLDER'], filename)
    os.remove(path)
    current_app.logger.info(f"Deleted local image file: {path}")
    return True


def delete_image(url):
    """
    Remove a stored image, whichever backend holds it.

    Failures are logged, never raised.
    """
    if not url:
        return False
    try:
        if '.amazonaws.com/' in url:
            return delete_from_s3(url)
        if url.startswith('/uploads/'):
            return delete_local_upload(url)
    except (StorageError, OSError) as e:
        current_app.logger.error(f"Error deleting image {url}: {str(e)}")
    return False


def presigned_upload_url(filename, content_type, expires_in=None):
    """Presigned PUT URL so a browser can upload straight to the bucket"""
    key = project_key(filename)
    expires_in = expires_in or current_app.config.get('S3_PRESIGNED_EXPIRES', 60)
    try:
        url = get_s3_client().generate_presigned_url(
            'put_object',
            Params={'Bucket': get_bucket_name(), 'Key': key, 'ContentType': content_type},
            ExpiresIn=expires_in
        )
    except (BotoCoreError, ClientError) as e:
        raise StorageError(f"Could not presign upload: {str(e)}") from e
    return {'url': url, 'key': key, 'fileUrl': object_url(key)}


def public_read_policy(bucket):
    return {
        'Version': '2012-10-17',
        'Statement': [
            {
                'Sid': 'PublicReadGetObject',
                'Effect': 'Allow',
                'Principal': '*',
                'Action': 's3:GetObject',
                'Resource': f"arn:aws:s3:::{bucket}/*"
            }
        ]
    }


def bucket_exists(client=None):
    client = client or get_s3_client()
    try:
        client.head_bucket(Bucket=get_bucket_name())
        return True
    except (BotoCoreError, ClientError) as e:
        current_app.logger.error(f"Error checking bucket: {str(e)}")
        return False


def get_bucket_policy(client=None):
    client = client or get_s3_client()
    try:
        return client.get_bucket_policy(Bucket=get_bucket_name()).get('Policy')
    except (BotoCoreError, ClientError) as e:
        current_app.logger.error(f"Error getting bucket policy: {str(e)}")
        return None


def apply_public_read_policy(client=None):
    """Allow anonymous GetObject on every key in the bucket"""
    client = client or get_s3_client()
    bucket = get_bucket_name()
    try:
        client.put_bucket_policy(Bucket=bucket, Policy=json.dumps(public_read_policy(bucket)))
    except (BotoCoreError, ClientError) as e:
        raise StorageError(f"Failed to apply bucket policy: {str(e)}") from e
    current_app.logger.info(f"Applied public read policy to bucket: {bucket}")
    return True


def bucket_status():
    """Diagnostics for the storage setup page"""
    cfg = current_app.config
    client = get_s3_client()

    can_list = False
    try:
        client.list_buckets()
        can_list = True
    except (BotoCoreError, ClientError) as e:
        current_app.logger.error(f"Error listing buckets: {str(e)}")

    exists = bucket_exists(client)
    return {
        'isConfigured': bool(cfg.get('AWS_ACCESS_KEY_ID') and cfg.get('AWS_SECRET_ACCESS_KEY')),
        'canListBuckets': can_list,
        'bucketExists': exists,
        'bucketPolicy': get_bucket_policy(client) if exists else None,
        'bucketCors': False,
        'region': cfg.get('AWS_REGION'),
        'bucketName': get_bucket_name()
    }


__all__ = [
    'StorageError',
    'get_s3_client',
    'object_url',
    'key_from_url',
    'project_key',
    'upload_file',
    'delete_from_s3',
    'delete_local_upload',
    'delete_image',
    'presigned_upload_url',
    'public_read_policy',
    'bucket_exists',
    'get_bucket_policy',
    'apply_public_read_policy',
    'bucket_status'
]
