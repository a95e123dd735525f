from datetime import datetime

import pytest

from backend.auth.jwt_handler import Identity
from backend.core.errors import NotFoundError
from backend.models.complaint import ComplaintStatus
from backend.models.resolution import Resolution
from backend.models.user import Role, User
from backend.routes.admin_routes import ResolveComplaintRequest, list_all_complaints, resolve_complaint


def _admin_identity() -> Identity:
    return Identity(id=1, email='admin@x.com', phone_number='900', role=Role.ADMIN)


@pytest.fixture
def admin(make_user):
    return make_user(email='admin@x.com', phone_number='900', role=Role.ADMIN, full_name='Admin')


@pytest.fixture
def citizen(make_user):
    return make_user(email='citizen@x.com', phone_number='100')


def test_resolve_route_returns_complaint_and_resolution(db, make_complaint) -> None:
    complaint = make_complaint(user_id=7)

    response = resolve_complaint(
        ResolveComplaintRequest(response='fixed'),
        complaint_id=str(complaint.id),
        _admin=_admin_identity(),
        db=db,
    )

    assert response.data.complaint.complaint_status == 'Resolved'
    assert response.data.resolve.response == 'fixed'
    assert response.data.resolve.complaint_id == complaint.id


def test_resolve_route_unknown_complaint(db) -> None:
    with pytest.raises(NotFoundError):
        resolve_complaint(
            ResolveComplaintRequest(response='fixed'),
            complaint_id='404',
            _admin=_admin_identity(),
            db=db,
        )


def test_list_all_route_is_empty_not_an_error(db) -> None:
    response = list_all_complaints(_admin=_admin_identity(), db=db)

    assert response.success is True
    assert response.data == []


@pytest.mark.parametrize(
    ('method', 'path'),
    [
        ('get', '/admin/all-complaints'),
        ('post', '/admin/resolve-complaint?complaintId=1'),
        ('get', '/admin/users'),
        ('patch', '/admin/users/1/role'),
    ],
)
def test_admin_routes_reject_non_admins(client, citizen, auth_headers, method: str, path: str) -> None:
    kwargs = {'headers': auth_headers(citizen)}
    if method != 'get':
        kwargs['json'] = {'response': 'fixed', 'role': 'admin'}

    response = getattr(client, method)(path, **kwargs)

    assert response.status_code == 403
    assert response.json()['success'] is False


def test_admin_routes_reject_anonymous_callers(client) -> None:
    assert client.get('/admin/all-complaints').status_code == 401
    assert client.get('/admin/users').status_code == 401


def test_resolve_over_http_validates_input(client, admin, auth_headers, make_complaint) -> None:
    complaint = make_complaint(user_id=7)
    headers = auth_headers(admin)

    missing_id = client.post('/admin/resolve-complaint', json={'response': 'fixed'}, headers=headers)
    missing_response = client.post(
        f'/admin/resolve-complaint?complaintId={complaint.id}',
        json={},
        headers=headers,
    )
    unknown = client.post('/admin/resolve-complaint?complaintId=9999', json={'response': 'fixed'}, headers=headers)

    assert missing_id.status_code == 400
    assert missing_response.status_code == 400
    assert unknown.status_code == 404


def test_all_complaints_joins_latest_resolution(client, db, admin, auth_headers, make_complaint) -> None:
    answered = make_complaint(user_id=7, detail='answered', created=datetime(2026, 1, 1, 9, 0))
    make_complaint(user_id=8, detail='waiting', created=datetime(2026, 1, 2, 9, 0))
    db.add(Resolution(complaint_id=answered.id, response='old', updated=datetime(2026, 1, 3, 9, 0)))
    db.add(Resolution(complaint_id=answered.id, response='new', updated=datetime(2026, 1, 4, 9, 0)))
    db.commit()

    response = client.get('/admin/all-complaints', headers=auth_headers(admin))

    assert response.status_code == 200
    data = response.json()['data']
    assert [item['complaintDetail'] for item in data] == ['waiting', 'answered']
    assert data[0]['resolution'] is None
    assert data[1]['resolution']['response'] == 'new'


def test_users_listing_and_role_update(client, db, admin, citizen, auth_headers) -> None:
    headers = auth_headers(admin)

    listing = client.get('/admin/users', headers=headers)
    assert listing.status_code == 200
    assert {user['email'] for user in listing.json()['data']} == {'admin@x.com', 'citizen@x.com'}
    assert all('hashedPassword' not in user for user in listing.json()['data'])

    updated = client.patch(f'/admin/users/{citizen.id}/role', json={'role': 'Employee'}, headers=headers)
    invalid = client.patch(f'/admin/users/{citizen.id}/role', json={'role': 'wizard'}, headers=headers)
    unknown = client.patch('/admin/users/9999/role', json={'role': 'Employee'}, headers=headers)

    assert updated.status_code == 200
    assert updated.json()['data']['role'] == 'Employee'
    assert invalid.status_code == 400
    assert unknown.status_code == 404
    db.expire_all()
    assert db.get(User, citizen.id).role is Role.EMPLOYEE


def test_complaint_lifecycle_end_to_end(client, admin, auth_headers) -> None:
    signup = client.post(
        '/accounts/signup',
        json={
            'fullName': 'Asha Rao',
            'email': 'a@x.com',
            'phoneNumber': '1',
            'password': 'secret1',
            'role': 'Citizen',
        },
    )
    assert signup.status_code == 201

    login = client.post('/accounts/login', json={'email': 'a@x.com', 'password': 'secret1'})
    assert login.status_code == 200
    token = login.json()['token']
    assert token
    citizen_headers = {'Authorization': f'Bearer {token}'}

    raised = client.post(
        '/complaint/raiseComplaint',
        json={
            'firstName': 'Asha',
            'lastName': 'Rao',
            'email': 'a@x.com',
            'phoneNumber': '1',
            'complaintDetail': 'leak in pipe',
        },
        headers=citizen_headers,
    )
    assert raised.status_code == 201
    assert raised.json()['data']['complaintStatus'] == 'Open'
    complaint_id = raised.json()['data']['id']

    resolved = client.post(
        f'/admin/resolve-complaint?complaintId={complaint_id}',
        json={'response': 'fixed'},
        headers=auth_headers(admin),
    )
    assert resolved.status_code == 200
    assert resolved.json()['data']['resolve']['response'] == 'fixed'

    mine = client.get('/complaint/myComplaint', headers=citizen_headers)
    assert mine.status_code == 200
    assert [item['complaintStatus'] for item in mine.json()['data']] == [ComplaintStatus.RESOLVED.value]


def test_resolve_over_http_with_oversized_id_is_not_found(client, admin, auth_headers) -> None:
    response = client.post(
        '/admin/resolve-complaint?complaintId=99999999999999999999999',
        json={'response': 'fixed'},
        headers=auth_headers(admin),
    )

    assert response.status_code == 404
    assert response.json() == {'success': False, 'message': 'Complaint not found'}
