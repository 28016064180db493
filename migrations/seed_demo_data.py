"""
Seed Script: demo portfolio
Creates a demo user with sample experience, education, projects and blog posts

Usage:
    python migrations/seed_demo_data.py
    flask --app app seed
"""

import os
import sys
from datetime import date

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from extensions import db
from models import User, Experience, Education, Project, Blog
from utils.security import hash_password


def seed_demo_data(email='test@example.com', password='test1234'):
    """Create (or return the existing) demo user with sample entries"""
    existing = User.query.filter_by(email=email).first()
    if existing:
        print(f"  User {email} already exists, skipping...")
        return existing

    user = User(
        email=email,
        password_hash=hash_password(password),
        name='Test User',
        title='Full Stack Developer',
        bio='A passionate developer',
        location='San Francisco, CA',
        github_url='https://github.com/testuser',
        linkedin_url='https://linkedin.com/in/testuser',
        twitter_url='https://twitter.com/testuser',
        website_url='https://testuser.com'
    )
    db.session.add(user)
    db.session.flush()

    print("Creating experiences...")
    db.session.add_all([
        Experience(
            user_id=user.id,
            job_title='Senior Software Engineer',
            company='Tech Corp',
            location='San Francisco, CA',
            description='Leading development of core products',
            start_date=date(2020, 1, 1),
            current=True,
            order=1
        ),
        Experience(
            user_id=user.id,
            job_title='Software Engineer',
            company='Startup Inc',
            location='San Francisco, CA',
            description='Developed and maintained web applications',
            start_date=date(2018, 1, 1),
            end_date=date(2019, 12, 31),
            order=2
        )
    ])

    print("Creating education entries...")
    db.session.add(Education(
        user_id=user.id,
        university_name='University of Technology',
        location='San Francisco, CA',
        degree='Bachelor of Science in Computer Science',
        start_date=date(2014, 9, 1),
        end_date=date(2018, 5, 31),
        gpa='3.8',
        courses=['Data Structures', 'Algorithms', 'Web Development'],
        order=1
    ))

    print("Creating projects...")
    db.session.add(Project(
        user_id=user.id,
        title='Portfolio Website',
        description='A modern portfolio website built with Flask',
        start_date=date(2024, 1, 1),
        tech_stack=['Flask', 'SQLAlchemy', 'Jinja2'],
        tags=['Web Development', 'Backend'],
        github_url='https://github.com/testuser/portfolio',
        demo_url='https://portfolio.testuser.com',
        images=['https://example.com/portfolio.jpg']
    ))

    print("Creating blog posts...")
    db.session.add(Blog(
        user_id=user.id,
        title='Getting Started with Flask',
        description='Learn how to build modern web applications with Flask',
        location='San Francisco, CA',
        event_date=date(2024, 2, 1),
        skills_learned=['Flask', 'SQLAlchemy', 'Jinja2'],
        images=['https://example.com/blog1.jpg']
    ))

    db.session.commit()
    print('Database has been seeded!')
    return user


def main():
    from app import create_app
    app = create_app()
    with app.app_context():
        try:
            seed_demo_data()
        except Exception as e:
            db.session.rollback()
            print(f"Seeding failed: {str(e)}")
            sys.exit(1)


if __name__ == '__main__':
    main()
