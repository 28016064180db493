"""
Helpers Module - Utility functions for common operations
"""

import re
from datetime import datetime, date
from urllib.parse import urlparse
from flask import current_app
from flask_login import current_user
from extensions import db
from models import User, Experience, Education, Project, Blog, Image


EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


DEFAULT_PROFILE = {
    'name': 'Portfolio Owner',
    'title': 'Software Developer',
    'bio': 'Passionate about building great web applications',
    'location': '',
    'profileImageUrl': '',
    'socialLinks': {
        'github': 'https://github.com',
        'linkedin': 'https://linkedin.com',
        'twitter': 'https://twitter.com',
        'website': ''
    }
}


def allowed_file(filename):
    """Check if file extension is allowed"""
    allowed_extensions = current_app.config.get(
        'ALLOWED_EXTENSIONS', {'png', 'jpg', 'jpeg', 'gif', 'webp'})
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in allowed_extensions


def parse_date(value):
    """
    Parse an incoming date value.

    Accepts ``YYYY-MM-DD`` and ISO datetimes (a trailing ``Z`` is allowed).
    Returns None for empty input and raises ValueError for garbage.
    """
    if value in (None, ''):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid date: {value!r}")

    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1]
    formats = [
        '%Y-%m-%d',
        '%Y-%m-%dT%H:%M:%S.%f',
        '%Y-%m-%dT%H:%M:%S',
        '%Y-%m-%d %H:%M:%S'
    ]
    for fmt in formats:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Invalid date: {value!r}")


def missing_fields(data, required):
    """Names of required fields that are absent or blank"""
    missing = []
    for field in required:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    return missing


def non_string_fields(data, fields):
    """Names of fields that are present but not strings"""
    return [field for field in fields
            if data.get(field) is not None and not isinstance(data.get(field), str)]


def normalize_email(email):
    if not isinstance(email, str):
        return ''
    return email.strip().lower()


def is_valid_email(email):
    return bool(EMAIL_RE.match(email or ''))


def is_http_url(value):
    """Absolute http(s) URL with a host; anything else is unsafe in an href"""
    if not isinstance(value, str):
        return False
    parsed = urlparse(value.strip())
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


def string_list(value):
    """Coerce an array field to a list of non-empty strings"""
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


def to_int(value, default=0):
    try:
        return int(value)
    except (ValueError, TypeError):
        return default


def is_valid_image_url(url):
    if not url or not isinstance(url, str):
        return False
    return (url.startswith('http')
            or 'amazonaws.com' in url
            or url.startswith('/uploads/'))


def filter_image_urls(value, limit=None):
    """Keep only hosted or legacy-local image URLs"""
    if not isinstance(value, list):
        return []
    images = [url for url in value if is_valid_image_url(url)]
    if limit is not None:
        images = images[:limit]
    return images


def get_owned(model, record_id):
    """Fetch a row by id only if it belongs to the logged-in user"""
    return model.query.filter_by(id=record_id, user_id=current_user.id).first()


def save(instance):
    db.session.add(instance)
    db.session.commit()
    return instance


def images_in_use():
    """Every image URL still referenced by a user, entry, project or post"""
    used = set()
    for (images,) in db.session.query(Project.images).all():
        used.update(images or [])
    for (images,) in db.session.query(Blog.images).all():
        used.update(images or [])
    for column in (User.image, Experience.company_logo, Education.logo_image_url):
        used.update(url for (url,) in db.session.query(column).all() if url)
    return used


def releasable_images(urls):
    """
    Subset of urls the logged-in user may remove from storage.

    A URL qualifies only when the image ledger records it as uploaded by
    the current user and nothing references it any more.
    """
    candidates = set(url for url in urls if url)
    if not candidates:
        return []
    owned = set(url for (url,) in db.session.query(Image.url).filter(
        Image.url.in_(candidates), Image.user_id == current_user.id).all())
    in_use = images_in_use()
    return [url for url in dict.fromkeys(urls) if url in owned and url not in in_use]


def build_public_profile(user):
    """Public profile with defaults for anything the owner left blank"""
    defaults = DEFAULT_PROFILE
    social = defaults['socialLinks']
    return {
        'id': user.id if user else None,
        'name': (user and user.name) or defaults['name'],
        'title': (user and user.title) or defaults['title'],
        'bio': (user and user.bio) or defaults['bio'],
        'location': (user and user.location) or defaults['location'],
        'profileImageUrl': (user and user.image) or '',
        'socialLinks': {
            'github': (user and user.github_url) or social['github'],
            'linkedin': (user and user.linkedin_url) or social['linkedin'],
            'twitter': (user and user.twitter_url) or social['twitter'],
            'website': (user and user.website_url) or social['website']
        }
    }


def initials(name):
    """Up to two uppercase initials for the avatar fallback"""
    return ''.join(word[0] for word in (name or '').split() if word).upper()[:2]


def is_safe_redirect(target):
    """Only allow relative, same-site redirect targets"""
    if not target:
        return False
    parsed = urlparse(target)
    return not parsed.scheme and not parsed.netloc and target.startswith('/') \
        and not target.startswith('//')


__all__ = [
    'DEFAULT_PROFILE',
    'allowed_file',
    'parse_date',
    'EMAIL_RE',
    'missing_fields',
    'non_string_fields',
    'normalize_email',
    'is_valid_email',
    'is_http_url',
    'string_list',
    'to_int',
    'is_valid_image_url',
    'filter_image_urls',
    'get_owned',
    'save',
    'images_in_use',
    'releasable_images',
    'build_public_profile',
    'initials',
    'is_safe_redirect'
]
