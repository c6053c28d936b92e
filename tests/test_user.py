import pytest
from flask_jwt_extended import create_access_token
from passlib.hash import pbkdf2_sha256

from db import db
from models import UserModel
from app import create_app


@pytest.fixture
def app():
    app = create_app(db_url="sqlite:///:memory:")
    with app.app_context():
        db.create_all()
        volunteer = UserModel(username='volunteer1', email='vol@example.com', password=pbkdf2_sha256.hash('Secret123'),
                              role='Volunteer', department='Civil', skills='first aid, cooking')
        admin = UserModel(username='admin1', email='admin@example.com', password=pbkdf2_sha256.hash('Secret123'),
                          role='Admin')
        db.session.add(volunteer)
        db.session.add(admin)
        db.session.commit()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def volunteer_id(app):
    with app.app_context():
        return UserModel.query.filter_by(username='volunteer1').first().user_id


@pytest.fixture
def access_token(app, volunteer_id):
    with app.app_context():
        return create_access_token(identity=str(volunteer_id))


def signup_data(**overrides):
    data = {
        'username': 'newbie',
        'email': 'newbie@example.com',
        'password': 'Abcdefg1',
        'phone': '1234567890',
        'year': '2',
        'department': 'Mechanical',
        'skills': 'painting,  driving ,',
    }
    data.update(overrides)
    return data


def test_create_user(app, client):
    response = client.post('/users', json=signup_data())
    assert response.status_code == 201
    assert response.json['username'] == 'newbie'
    assert response.json['role'] == 'Volunteer'
    assert response.json['skills'] == ['painting', 'driving']
    assert 'password' not in response.json

    with app.app_context():
        user = db.session.get(UserModel, response.json['user_id'])
        assert user.password != 'Abcdefg1'
        assert pbkdf2_sha256.verify('Abcdefg1', user.password)


def test_create_user_duplicate_username(client):
    response = client.post('/users', json=signup_data(username='volunteer1'))
    assert response.status_code == 409


def test_create_user_duplicate_email(client):
    response = client.post('/users', json=signup_data(email='vol@example.com'))
    assert response.status_code == 409
    assert response.json['message'] == "A user with email 'vol@example.com' already exists"


def test_create_user_blank_username(client):
    response = client.post('/users', json=signup_data(username='   '))
    assert response.status_code == 400


def test_update_user_duplicate_email(client, volunteer_id):
    response = client.put(f'/users/{volunteer_id}', json={'email': 'admin@example.com'})
    assert response.status_code == 409
    assert response.json['message'] == "A user with email 'admin@example.com' already exists"
    assert 'details' not in response.json


def test_update_user_keeps_own_email(client, volunteer_id):
    response = client.put(f'/users/{volunteer_id}', json={'email': 'vol@example.com', 'username': 'volunteer1'})
    assert response.status_code == 200


def test_create_user_invalid_email(client):
    response = client.post('/users', json=signup_data(email='not-an-email'))
    assert response.status_code == 400


def test_skills_stored_as_list(client, volunteer_id):
    response = client.get(f'/users/{volunteer_id}')
    assert response.status_code == 200
    assert response.json['skills'] == ['first aid', 'cooking']


def test_login_and_logout(client):
    response = client.post('/login', json={'username': 'volunteer1', 'password': 'Secret123'})
    assert response.status_code == 200
    token = response.json['access_token']
    assert response.json['role'] == 'Volunteer'

    headers = {'Authorization': f'Bearer {token}'}
    assert client.post('/logout', headers=headers).status_code == 200
    assert client.post('/logout', headers=headers).status_code == 401


def test_login_wrong_password(client):
    response = client.post('/login', json={'username': 'volunteer1', 'password': 'wrong'})
    assert response.status_code == 401


def test_logout_requires_token(client):
    assert client.post('/logout').status_code == 401


def test_update_user_ignores_role_and_password(app, client, volunteer_id, access_token):
    headers = {'Authorization': f'Bearer {access_token}'}
    data = {
        'username': '  volunteer-renamed ',
        'role': 'Admin',
        'password': 'hijacked',
        'skills': ['cooking', 'driving'],
        'availability': 'partTime',
    }
    response = client.put(f'/users/{volunteer_id}', json=data, headers=headers)
    assert response.status_code == 200
    assert response.json['username'] == 'volunteer-renamed'
    assert response.json['role'] == 'Volunteer'
    assert response.json['skills'] == ['cooking', 'driving']

    with app.app_context():
        user = db.session.get(UserModel, volunteer_id)
        assert pbkdf2_sha256.verify('Secret123', user.password)


def test_update_user_empty_username(client, volunteer_id):
    response = client.put(f'/users/{volunteer_id}', json={'username': '   '})
    assert response.status_code == 400


def test_update_missing_user(client):
    assert client.put('/users/999', json={'username': 'ghost'}).status_code == 404


def test_delete_user(client, volunteer_id):
    client.post('/notifications', json={'user_id': volunteer_id, 'message': 'bye'})

    assert client.delete(f'/users/{volunteer_id}').status_code == 204
    assert client.get(f'/users/{volunteer_id}').status_code == 404
    assert client.get(f'/notifications/{volunteer_id}').json == []


def test_list_users_and_volunteers(client):
    response = client.get('/users/all')
    assert response.status_code == 200
    assert len(response.json) == 2

    response = client.get('/users/volunteers')
    assert [u['username'] for u in response.json] == ['volunteer1']

    response = client.get('/users/volunteers?department=Mechanical')
    assert response.json == []
