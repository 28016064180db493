"""
Utils Package - request guards, security, parsing, dates and object storage
"""

from .decorators import json_body_required, api_errors
from .security import (
    get_client_ip,
    check_rate_limit,
    hash_password,
    verify_password,
    log_audit_event
)
from .helpers import (
    DEFAULT_PROFILE,
    allowed_file,
    parse_date,
    missing_fields,
    string_list,
    filter_image_urls,
    get_owned,
    build_public_profile,
    is_safe_redirect
)
from .dates import format_date, calculate_duration
from .storage import (
    StorageError,
    upload_file,
    delete_image,
    presigned_upload_url,
    bucket_status,
    apply_public_read_policy
)

__all__ = [
    # Decorators
    'json_body_required',
    'api_errors',

    # Security
    'get_client_ip',
    'check_rate_limit',
    'hash_password',
    'verify_password',
    'log_audit_event',

    # Helpers
    'DEFAULT_PROFILE',
    'allowed_file',
    'parse_date',
    'missing_fields',
    'string_list',
    'filter_image_urls',
    'get_owned',
    'build_public_profile',
    'is_safe_redirect',

    # Dates
    'format_date',
    'calculate_duration',

    # Storage
    'StorageError',
    'upload_file',
    'delete_image',
    'presigned_upload_url',
    'bucket_status',
    'apply_public_read_policy'
]
