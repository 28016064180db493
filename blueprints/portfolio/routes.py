"""
Portfolio Routes - Public portfolio views
Handles: Landing page, user portfolio, project and blog listings, public profile API
"""

from flask import render_template, redirect, url_for, request, jsonify, current_app, abort
from flask_login import current_user
from utils.helpers import DEFAULT_PROFILE, build_public_profile, initials
from models import User, Experience, Education, Project, Blog
from . import portfolio_bp


PREVIEW_LIMIT = 3


@portfolio_bp.route('/')
def index():
    """Landing page - logged-in users go straight to their portfolio"""
    if current_user.is_authenticated:
        return redirect(url_for('portfolio.user_portfolio', user_id=current_user.id))

    users = User.query.order_by(User.created_at.asc()).all()
    portfolios = [build_public_profile(u) for u in users]
    return render_template('landing.html', portfolios=portfolios)


@portfolio_bp.route('/projects')
def projects():
    """All projects, newest first"""
    all_projects = Project.query.order_by(Project.start_date.desc()).all()
    return render_template('projects.html', projects=all_projects)


@portfolio_bp.route('/blog')
def blog():
    """All blog posts, newest first"""
    posts = Blog.query.order_by(Blog.event_date.desc()).all()
    return render_template('blog/index.html', posts=posts)


@portfolio_bp.route('/blog/<post_id>')
def blog_post(post_id):
    """Single blog post"""
    post = Blog.query.filter_by(id=post_id).first()
    if not post:
        abort(404)
    return render_template('blog/post.html', post=post)


@portfolio_bp.route('/<user_id>')
def user_portfolio(user_id):
    """Public view of a user's portfolio"""
    user = User.query.filter_by(id=user_id).first()
    if not user:
        return render_template('404.html', message='User not found'), 404

    is_owner = current_user.is_authenticated and current_user.id == user.id

    experiences = Experience.query.filter_by(user_id=user.id).order_by(
        Experience.current.desc(),
        Experience.end_date.desc().nullsfirst(),
        Experience.start_date.desc(),
        Experience.order.asc()
    ).all()
    educations = Education.query.filter_by(user_id=user.id).order_by(
        Education.end_date.desc().nullsfirst(),
        Education.start_date.desc(),
        Education.order.asc()
    ).all()
    recent_projects = Project.query.filter_by(user_id=user.id).order_by(
        Project.start_date.desc()
    ).limit(PREVIEW_LIMIT).all()
    recent_posts = Blog.query.filter_by(user_id=user.id).order_by(
        Blog.event_date.desc()
    ).limit(PREVIEW_LIMIT).all()

    profile = build_public_profile(user)
    social = profile['socialLinks']
    image_url = profile['profileImageUrl']

    return render_template('portfolio.html',
                           profile=profile,
                           is_owner=is_owner,
                           has_social_links=any(social.values()),
                           has_image=bool(image_url and image_url != '/placeholder-profile.jpg'),
                           initials=initials(profile['name']),
                           experiences=experiences,
                           educations=educations,
                           projects=recent_projects,
                           posts=recent_posts)


@portfolio_bp.route('/api/profile')
def public_profile():
    """Public profile of the portfolio owner (first registered user)"""
    try:
        user = User.query.order_by(User.created_at.asc()).first()
        if not user:
            return jsonify({'error': 'Profile not found', 'defaultProfile': DEFAULT_PROFILE}), 404
        return jsonify(build_public_profile(user))
    except Exception as e:
        current_app.logger.error(f"Error fetching public profile: {str(e)}")
        return jsonify({'error': 'Failed to fetch profile', 'defaultProfile': DEFAULT_PROFILE}), 500


@portfolio_bp.route('/api/public/projects')
def public_projects():
    """Projects for everyone, optionally narrowed to one user"""
    try:
        query = Project.query
        user_id = request.args.get('userId')
        if user_id:
            query = query.filter_by(user_id=user_id)
        projects_list = query.order_by(Project.start_date.desc()).all()
        return jsonify([p.to_dict() for p in projects_list])
    except Exception as e:
        current_app.logger.error(f"Error fetching public projects: {str(e)}")
        return jsonify({'error': 'Failed to fetch projects'}), 500
