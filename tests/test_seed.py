"""
Tests for the demo data seeder and the `flask seed` command.
"""
from models import Blog, Education, Experience, Project, User
from migrations.seed_demo_data import seed_demo_data
from utils.security import verify_password


def test_seed_demo_data_creates_full_portfolio(app):
    user = seed_demo_data(email='demo@example.com', password='demo-pass')

    assert User.query.count() == 1
    assert verify_password('demo-pass', user.password_hash)
    assert Experience.query.filter_by(user_id=user.id).count() == 2
    assert Education.query.filter_by(user_id=user.id).count() == 1
    assert Project.query.filter_by(user_id=user.id).count() == 1
    assert Blog.query.filter_by(user_id=user.id).count() == 1


def test_seed_demo_data_is_idempotent(app, user):
    again = seed_demo_data(email=user.email)

    assert again.id == user.id
    assert User.query.count() == 1
    assert Experience.query.count() == 0


def test_seed_command(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=['seed', '--email', 'cli@example.com', '--password', 'cli-pass-1'])

    assert result.exit_code == 0
    user = User.query.filter_by(email='cli@example.com').one()
    assert f"Seeded demo user cli@example.com ({user.id})" in result.output
    assert Project.query.filter_by(user_id=user.id).count() == 1


def test_seeded_user_can_log_in(app, client):
    app.test_cli_runner().invoke(args=['seed'])
    response = client.post('/api/auth/login', json={'email': 'test@example.com', 'password': 'test1234'})
    assert response.status_code == 200
