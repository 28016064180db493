"""
Blog Routes - Blog posts of the logged-in user
"""

from flask import request, jsonify, current_app
from flask_login import login_required, current_user
from utils.decorators import json_body_required, api_errors
from utils.helpers import (parse_date, missing_fields, non_string_fields, string_list, filter_image_urls,
                           get_owned, save)
from models import Blog
from extensions import db
from . import blog_bp


BLOG_REQUIRED = ('title', 'description', 'eventDate')


def apply_blog(post, data):
    """Copy request data onto a Blog. Returns an error message or None."""
    if missing_fields(data, BLOG_REQUIRED):
        return 'Missing required fields (title, description, or eventDate)'
    if non_string_fields(data, ('location',)):
        return 'Fields must be strings: location'
    try:
        event_date = parse_date(data.get('eventDate'))
    except ValueError as e:
        return str(e)

    post.title = str(data['title']).strip()[:255]
    post.description = str(data['description']).strip()
    post.location = data.get('location') or ''
    post.event_date = event_date
    post.skills_learned = string_list(data.get('skillsLearned'))
    post.images = filter_image_urls(
        data.get('images'), limit=current_app.config.get('MAX_BLOG_IMAGES', 4))
    return None


@blog_bp.route('/blog', methods=['GET'])
@login_required
@api_errors('Failed to fetch blog posts')
def list_posts():
    posts = Blog.query.filter_by(user_id=current_user.id).order_by(
        Blog.event_date.desc()
    ).all()
    return jsonify([p.to_dict() for p in posts])


@blog_bp.route('/blog', methods=['POST'])
@login_required
@json_body_required
@api_errors('Failed to create blog post')
def create_post():
    post = Blog(user_id=current_user.id)
    error = apply_blog(post, request.get_json())
    if error:
        return jsonify({'error': error}), 400

    save(post)
    current_app.logger.info(f"Created blog post {post.id} for user {current_user.id}")
    return jsonify(post.to_dict()), 201


@blog_bp.route('/blog/<post_id>', methods=['GET'])
@login_required
@api_errors('Failed to fetch blog post')
def get_post(post_id):
    post = get_owned(Blog, post_id)
    if not post:
        return jsonify({'error': 'Blog post not found'}), 404
    return jsonify(post.to_dict())


@blog_bp.route('/blog/<post_id>', methods=['PUT'])
@login_required
@json_body_required
@api_errors('Failed to update blog post')
def update_post(post_id):
    post = get_owned(Blog, post_id)
    if not post:
        return jsonify({'error': 'Blog post not found'}), 404

    error = apply_blog(post, request.get_json())
    if error:
        db.session.rollback()
        return jsonify({'error': error}), 400

    db.session.commit()
    current_app.logger.info(f"Updated blog post {post.id}")
    return jsonify(post.to_dict())


@blog_bp.route('/blog/<post_id>', methods=['DELETE'])
@login_required
@api_errors('Failed to delete blog post')
def delete_post(post_id):
    post = get_owned(Blog, post_id)
    if not post:
        return jsonify({'error': 'Blog post not found'}), 404

    db.session.delete(post)
    db.session.commit()
    current_app.logger.info(f"Deleted blog post {post_id}")
    return jsonify({
        'success': True,
        'message': 'Blog post deleted successfully',
        'id': post_id
    })
