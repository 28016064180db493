from extensions import db
from datetime import datetime
from flask_login import UserMixin
from sqlalchemy import JSON
import uuid

# Custom JSON type that uses JSONB on PostgreSQL and JSON/Text on SQLite
class SafeJSON(db.TypeDecorator):
    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            from sqlalchemy.dialects.postgresql import JSONB
            return dialect.type_descriptor(JSONB())
        else:
            return dialect.type_descriptor(JSON())


def _iso(value):
    return value.isoformat() if value else None


class User(UserMixin, db.Model):
    __tablename__ = 'users'
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(255))
    title = db.Column(db.String(255))
    bio = db.Column(db.Text)
    location = db.Column(db.String(255))
    image = db.Column(db.String(500))  # profile image URL
    github_url = db.Column(db.String(500))
    linkedin_url = db.Column(db.String(500))
    twitter_url = db.Column(db.String(500))
    website_url = db.Column(db.String(500))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    experiences = db.relationship('Experience', backref='user', lazy=True, cascade='all, delete-orphan')
    educations = db.relationship('Education', backref='user', lazy=True, cascade='all, delete-orphan')
    projects = db.relationship('Project', backref='user', lazy=True, cascade='all, delete-orphan')
    blogs = db.relationship('Blog', backref='user', lazy=True, cascade='all, delete-orphan')
    images = db.relationship('Image', backref='user', lazy=True, cascade='all, delete-orphan')

    def to_profile(self):
        """Account/profile shape used by the admin editor"""
        return {
            'id': self.id,
            'name': self.name or '',
            'email': self.email,
            'bio': self.bio or '',
            'title': self.title or '',
            'location': self.location or '',
            'profileImageUrl': self.image or '',
            'socialLinks': {
                'github': self.github_url or '',
                'linkedin': self.linkedin_url or '',
                'twitter': self.twitter_url or '',
                'website': self.website_url or ''
            }
        }


class Experience(db.Model):
    __tablename__ = 'experiences'
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)
    job_title = db.Column(db.String(255), nullable=False)
    company = db.Column(db.String(255), nullable=False)
    location = db.Column(db.String(255), default='')
    description = db.Column(db.Text, default='')
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date)
    current = db.Column(db.Boolean, default=False)
    company_logo = db.Column(db.String(500))
    order = db.Column(db.Integer, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'jobTitle': self.job_title,
            'company': self.company,
            'location': self.location or '',
            'description': self.description or '',
            'startDate': _iso(self.start_date),
            'endDate': _iso(self.end_date),
            'current': bool(self.current),
            'companyLogo': self.company_logo,
            'order': self.order or 0,
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
            'userId': self.user_id
        }


class Education(db.Model):
    __tablename__ = 'educations'
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)
    university_name = db.Column(db.String(255), nullable=False)
    location = db.Column(db.String(255), default='')
    degree = db.Column(db.String(255), nullable=False)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date)
    gpa = db.Column(db.String(20))
    logo_image_url = db.Column(db.String(500))
    courses = db.Column(SafeJSON, default=list)
    order = db.Column(db.Integer, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'universityName': self.university_name,
            'location': self.location or '',
            'degree': self.degree,
            'startDate': _iso(self.start_date),
            'endDate': _iso(self.end_date),
            'gpa': self.gpa,
            'logoImageUrl': self.logo_image_url,
            'courses': self.courses or [],
            'order': self.order or 0,
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
            'userId': self.user_id
        }


class Project(db.Model):
    __tablename__ = 'projects'
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    location = db.Column(db.String(255), default='')
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date)
    current = db.Column(db.Boolean, default=False)
    images = db.Column(SafeJSON, default=list)
    lessons_learned = db.Column(SafeJSON, default=list)
    tech_stack = db.Column(SafeJSON, default=list)
    tags = db.Column(SafeJSON, default=list)
    github_url = db.Column(db.String(500))
    demo_url = db.Column(db.String(500))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'location': self.location or '',
            'startDate': _iso(self.start_date),
            'endDate': _iso(self.end_date),
            'current': bool(self.current),
            'images': self.images or [],
            'lessonsLearned': self.lessons_learned or [],
            'techStack': self.tech_stack or [],
            'tags': self.tags or [],
            'githubUrl': self.github_url,
            'demoUrl': self.demo_url,
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
            'userId': self.user_id
        }


class Blog(db.Model):
    __tablename__ = 'blogs'
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    location = db.Column(db.String(255), default='')
    event_date = db.Column(db.Date, nullable=False)
    skills_learned = db.Column(SafeJSON, default=list)
    images = db.Column(SafeJSON, default=list)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'location': self.location or '',
            'eventDate': _iso(self.event_date),
            'skillsLearned': self.skills_learned or [],
            'images': self.images or [],
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
            'userId': self.user_id
        }


# Ledger of every file pushed to object storage
class Image(db.Model):
    __tablename__ = 'images'
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), index=True)  # uploader
    url = db.Column(db.String(1000), nullable=False)
    filename = db.Column(db.String(500))
    storage_type = db.Column(db.String(20), default='s3')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'url': self.url,
            'filename': self.filename,
            'storageType': self.storage_type,
            'userId': self.user_id
        }
