"""
Resume Routes - Experience and education entries of the logged-in user
"""

from flask import request, jsonify, current_app
from flask_login import login_required, current_user
from utils.decorators import json_body_required, api_errors
from utils.helpers import (parse_date, missing_fields, non_string_fields, string_list, to_int,
                           is_valid_image_url, get_owned, save)
from models import Experience, Education
from extensions import db
from . import resume_bp


EXPERIENCE_REQUIRED = ('jobTitle', 'company', 'startDate')
EDUCATION_REQUIRED = ('universityName', 'degree', 'startDate')
EXPERIENCE_TEXT = ('location', 'description', 'companyLogo')
EDUCATION_TEXT = ('location', 'logoImageUrl')


def apply_experience(experience, data):
    """Copy request data onto an Experience. Returns an error message or None."""
    if missing_fields(data, EXPERIENCE_REQUIRED):
        return 'Missing required fields (jobTitle, company, or startDate)'
    bad = non_string_fields(data, EXPERIENCE_TEXT)
    if bad:
        return f"Fields must be strings: {', '.join(bad)}"
    if data.get('companyLogo') and not is_valid_image_url(data['companyLogo']):
        return 'Invalid companyLogo URL'
    try:
        start_date = parse_date(data.get('startDate'))
        end_date = parse_date(data.get('endDate'))
    except ValueError as e:
        return str(e)

    experience.job_title = str(data['jobTitle']).strip()[:255]
    experience.company = str(data['company']).strip()[:255]
    experience.location = data.get('location') or ''
    experience.description = data.get('description') or ''
    experience.start_date = start_date
    experience.end_date = end_date
    experience.current = bool(data.get('current'))
    experience.company_logo = data.get('companyLogo') or None
    if 'order' in data:
        experience.order = to_int(data.get('order'))
    return None


def apply_education(education, data):
    """Copy request data onto an Education. Returns an error message or None."""
    if missing_fields(data, EDUCATION_REQUIRED):
        return 'Missing required fields (universityName, degree, or startDate)'
    bad = non_string_fields(data, EDUCATION_TEXT)
    if bad:
        return f"Fields must be strings: {', '.join(bad)}"
    if data.get('logoImageUrl') and not is_valid_image_url(data['logoImageUrl']):
        return 'Invalid logoImageUrl URL'
    try:
        start_date = parse_date(data.get('startDate'))
        end_date = parse_date(data.get('endDate'))
    except ValueError as e:
        return str(e)

    education.university_name = str(data['universityName']).strip()[:255]
    education.degree = str(data['degree']).strip()[:255]
    education.location = data.get('location') or ''
    education.start_date = start_date
    education.end_date = end_date
    education.gpa = str(data['gpa'])[:20] if data.get('gpa') else None
    education.logo_image_url = data.get('logoImageUrl') or None
    education.courses = string_list(data.get('courses'))
    if 'order' in data:
        education.order = to_int(data.get('order'))
    return None


# ----- Experience -----

@resume_bp.route('/experience', methods=['GET'])
@login_required
@api_errors('Failed to fetch experiences')
def list_experiences():
    """Current role first, then most recent start date"""
    experiences = Experience.query.filter_by(user_id=current_user.id).order_by(
        Experience.current.desc(),
        Experience.start_date.desc()
    ).all()
    return jsonify([e.to_dict() for e in experiences])


@resume_bp.route('/experience', methods=['POST'])
@login_required
@json_body_required
@api_errors('Failed to create or save experience')
def create_experience():
    data = request.get_json()
    experience = Experience(user_id=current_user.id)
    error = apply_experience(experience, data)
    if error:
        return jsonify({'error': error}), 400

    save(experience)
    current_app.logger.info(f"Created experience {experience.id} for user {current_user.id}")
    return jsonify(experience.to_dict()), 201


@resume_bp.route('/experience/<experience_id>', methods=['GET'])
@login_required
@api_errors('Failed to fetch experience')
def get_experience(experience_id):
    experience = get_owned(Experience, experience_id)
    if not experience:
        return jsonify({'error': 'Experience not found'}), 404
    return jsonify(experience.to_dict())


@resume_bp.route('/experience/<experience_id>', methods=['PUT'])
@login_required
@json_body_required
@api_errors('Failed to update experience')
def update_experience(experience_id):
    experience = get_owned(Experience, experience_id)
    if not experience:
        return jsonify({'error': 'Experience not found'}), 404

    error = apply_experience(experience, request.get_json())
    if error:
        db.session.rollback()
        return jsonify({'error': error}), 400

    db.session.commit()
    current_app.logger.info(f"Updated experience {experience.id}")
    return jsonify(experience.to_dict())


@resume_bp.route('/experience/<experience_id>', methods=['DELETE'])
@login_required
@api_errors('Failed to delete experience')
def delete_experience(experience_id):
    experience = get_owned(Experience, experience_id)
    if not experience:
        return jsonify({'error': 'Experience not found'}), 404

    db.session.delete(experience)
    db.session.commit()
    current_app.logger.info(f"Deleted experience {experience_id}")
    return jsonify({
        'success': True,
        'message': 'Experience deleted successfully',
        'id': experience_id
    })


# ----- Education -----

@resume_bp.route('/education', methods=['GET'])
@login_required
@api_errors('Failed to fetch education entries')
def list_educations():
    """Ongoing studies first, then most recent end and start dates"""
    educations = Education.query.filter_by(user_id=current_user.id).order_by(
        Education.end_date.desc().nullsfirst(),
        Education.start_date.desc()
    ).all()
    return jsonify([e.to_dict() for e in educations])


@resume_bp.route('/education', methods=['POST'])
@login_required
@json_body_required
@api_errors('Failed to create or save education entry')
def create_education():
    data = request.get_json()
    education = Education(user_id=current_user.id)
    error = apply_education(education, data)
    if error:
        return jsonify({'error': error}), 400

    save(education)
    current_app.logger.info(f"Created education {education.id} for user {current_user.id}")
    return jsonify(education.to_dict()), 201


@resume_bp.route('/education/<education_id>', methods=['GET'])
@login_required
@api_errors('Failed to fetch education entry')
def get_education(education_id):
    education = get_owned(Education, education_id)
    if not education:
        return jsonify({'error': 'Education entry not found'}), 404
    return jsonify(education.to_dict())


@resume_bp.route('/education/<education_id>', methods=['PUT'])
@login_required
@json_body_required
@api_errors('Failed to update education entry')
def update_education(education_id):
    education = get_owned(Education, education_id)
    if not education:
        return jsonify({'error': 'Education entry not found'}), 404

    error = apply_education(education, request.get_json())
    if error:
        db.session.rollback()
        return jsonify({'error': error}), 400

    db.session.commit()
    current_app.logger.info(f"Updated education {education.id}")
    return jsonify(education.to_dict())


@resume_bp.route('/education/<education_id>', methods=['DELETE'])
@login_required
@api_errors('Failed to delete education entry')
def delete_education(education_id):
    education = get_owned(Education, education_id)
    if not education:
        return jsonify({'error': 'Education entry not found'}), 404

    db.session.delete(education)
    db.session.commit()
    current_app.logger.info(f"Deleted education {education_id}")
    return jsonify({
        'success': True,
        'message': 'Education entry deleted successfully',
        'id': education_id
    })
