"""
Projects Routes - Portfolio projects of the logged-in user
Stored images that a project stops referencing are removed from storage.
"""

from flask import request, jsonify, current_app
from flask_login import login_required, current_user
from utils.decorators import json_body_required, api_errors
from utils.helpers import (parse_date, missing_fields, non_string_fields, string_list, is_http_url,
                           filter_image_urls, releasable_images, get_owned, save)
from utils.storage import delete_image
from models import Project, Image
from extensions import db
from . import projects_bp


PROJECT_REQUIRED = ('title', 'description', 'startDate')
PROJECT_TEXT = ('location', 'githubUrl', 'demoUrl')


def apply_project(project, data):
    """Copy request data onto a Project. Returns an error message or None."""
    if missing_fields(data, PROJECT_REQUIRED):
        return 'Missing required fields: title, description, or startDate'
    bad = non_string_fields(data, PROJECT_TEXT)
    if bad:
        return f"Fields must be strings: {', '.join(bad)}"
    for field in ('githubUrl', 'demoUrl'):
        if data.get(field) and not is_http_url(data[field]):
            return f'{field} must be an http(s) URL'

    current = bool(data.get('current'))
    try:
        start_date = parse_date(data.get('startDate'))
        # An ongoing project has no end date
        end_date = parse_date(data.get('endDate')) if not current else None
    except ValueError as e:
        return str(e)

    project.title = str(data['title']).strip()[:255]
    project.description = str(data['description']).strip()
    project.location = data.get('location') or ''
    project.start_date = start_date
    project.end_date = end_date
    project.current = current
    project.images = filter_image_urls(data.get('images'))
    project.lessons_learned = string_list(data.get('lessonsLearned'))
    project.tech_stack = string_list(data.get('techStack'))
    project.tags = string_list(data.get('tags'))
    project.github_url = (data.get('githubUrl') or '').strip()[:500] or None
    project.demo_url = (data.get('demoUrl') or '').strip()[:500] or None
    return None


def remove_stored_images(urls):
    """Delete the caller's unreferenced uploads from storage and the ledger"""
    removable = releasable_images(urls)
    for url in removable:
        delete_image(url)
    if removable:
        Image.query.filter(Image.url.in_(removable)).delete(synchronize_session=False)
        db.session.commit()
    return removable


@projects_bp.route('/projects', methods=['GET'])
@login_required
@api_errors('Failed to fetch projects')
def list_projects():
    projects = Project.query.filter_by(user_id=current_user.id).order_by(
        Project.start_date.desc()
    ).all()
    return jsonify([p.to_dict() for p in projects])


@projects_bp.route('/projects', methods=['POST'])
@login_required
@json_body_required
@api_errors('Failed to create project')
def create_project():
    data = request.get_json()
    current_app.logger.debug(f"Creating project with data: {data}")

    project = Project(user_id=current_user.id)
    error = apply_project(project, data)
    if error:
        return jsonify({'error': error}), 400

    save(project)
    current_app.logger.info(f"Created project {project.id} for user {current_user.id}")
    return jsonify(project.to_dict()), 201


@projects_bp.route('/projects/<project_id>', methods=['GET'])
@login_required
@api_errors('Failed to fetch project')
def get_project(project_id):
    project = get_owned(Project, project_id)
    if not project:
        return jsonify({'error': 'Project not found'}), 404
    return jsonify(project.to_dict())


@projects_bp.route('/projects/<project_id>', methods=['PUT'])
@login_required
@json_body_required
@api_errors('Failed to update project')
def update_project(project_id):
    project = get_owned(Project, project_id)
    if not project:
        return jsonify({'error': 'Project not found'}), 404

    previous_images = list(project.images or [])
    error = apply_project(project, request.get_json())
    if error:
        db.session.rollback()
        return jsonify({'error': error}), 400

    db.session.commit()

    stale = [url for url in previous_images if url not in project.images]
    removed = remove_stored_images(stale)

    current_app.logger.info(f"Updated project {project.id}, removed {len(removed)} stale images")
    return jsonify(project.to_dict())


@projects_bp.route('/projects/<project_id>', methods=['DELETE'])
@login_required
@api_errors('Failed to delete project')
def delete_project(project_id):
    project = get_owned(Project, project_id)
    if not project:
        return jsonify({'error': 'Project not found'}), 404

    images = list(project.images or [])
    db.session.delete(project)
    db.session.commit()

    removed = remove_stored_images(images)

    current_app.logger.info(f"Deleted project {project_id} and {len(removed)} images")
    return jsonify({
        'success': True,
        'message': 'Project deleted successfully',
        'id': project_id
    })
