import os
from datetime import timedelta


def _database_uri():
    """DATABASE_URL, else a URL assembled from the PG* variables, else local SQLite"""
    url = os.environ.get('DATABASE_URL')
    if not url:
        parts = [os.environ.get(name) for name in ('PGUSER', 'PGPASSWORD', 'PGHOST', 'PGPORT', 'PGDATABASE')]
        if all(parts):
            url = "postgresql://{}:{}@{}:{}/{}".format(*parts)

    # SQLAlchemy only accepts the postgresql:// scheme
    if url and url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url or 'sqlite:///folio.db'


class Config:
    """Settings shared by every environment"""

    # Sessions
    SECRET_KEY = os.environ.get('SESSION_SECRET', 'CHANGE-THIS-SECRET-KEY-IN-PRODUCTION')
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)
    REMEMBER_COOKIE_DURATION = timedelta(days=7)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_COOKIE_SECURE = False

    # Database
    SQLALCHEMY_DATABASE_URI = _database_uri()
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 3600,
    }
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Uploads
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB
    ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp', 'svg'}
    UPLOAD_FOLDER = 'static/uploads'  # legacy local images only
    MAX_BLOG_IMAGES = 4

    # Object storage
    AWS_REGION = os.environ.get('AWS_REGION', 'us-east-1')
    AWS_ACCESS_KEY_ID = os.environ.get('AWS_ACCESS_KEY_ID')
    AWS_SECRET_ACCESS_KEY = os.environ.get('AWS_SECRET_ACCESS_KEY')
    AWS_S3_BUCKET = os.environ.get('AWS_S3_BUCKET', 'folio-uploads')
    S3_PRESIGNED_EXPIRES = 60  # seconds

    # Accounts
    MIN_PASSWORD_LENGTH = 8
    LOGIN_RATE_LIMIT = 10  # attempts per window
    LOGIN_RATE_WINDOW = 60  # seconds

    # Browser origins allowed to call the API with cookies
    CORS_ORIGINS = [origin.strip() for origin in os.environ.get('CORS_ORIGINS', '').split(',')
                    if origin.strip()]

    JSON_AS_ASCII = False


class DevelopmentConfig(Config):
    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = True
    REMEMBER_COOKIE_SECURE = True


class TestingConfig(Config):
    """In-memory database, no real bucket, relaxed rate limits"""
    DEBUG = True
    TESTING = True
    SECRET_KEY = 'testing-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    # SQLite's StaticPool rejects pool tuning options
    SQLALCHEMY_ENGINE_OPTIONS = {}
    AWS_S3_BUCKET = 'test-bucket'
    LOGIN_RATE_LIMIT = 1000


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config(config_name=None):
    """Get configuration by name, falling back to FLASK_ENV"""
    env = config_name or os.environ.get('FLASK_ENV', 'development')
    return config.get(env, config['default'])
