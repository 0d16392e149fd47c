# tests/test_client.py
import pytest
import requests
from datetime import datetime, timedelta, timezone
from unittest import mock
from rentmatch.client import RentMatchClient
from rentmatch.errors import DuplicateRequest, LimitExceeded, InvalidTransition, NotFound, ValidationFailed

NOW = datetime(2024, 3, 10, 12, 0, 0, tzinfo=timezone.utc)

def _response(status=200, body=None):
    resp = mock.Mock()
    resp.status_code = status
    resp.ok = 200 <= status < 400
    if body is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = body
    if not resp.ok:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    return resp

@pytest.fixture
def session():
    s = mock.Mock()
    s.headers = {}
    return s

@pytest.fixture
def api(session):
    return RentMatchClient(base_url='http://backend.test/api/', session=session)

def _pending(id, tenant_id, hours_ago):
    return {'id': id, 'landlord_id': 1, 'tenant_id': tenant_id, 'status': 'Pending',
            'created_at': (NOW - timedelta(hours=hours_ago)).isoformat()}

def test_calls_use_base_url_and_json(api, session):
    session.request.return_value = _response(201, {'id': 3, 'status': 'Pending'})
    assert api.create_request(1, 2) == {'id': 3, 'status': 'Pending'}
    session.request.assert_called_once_with(
        'POST', 'http://backend.test/api/requests',
        json={'landlord_id': 1, 'tenant_id': 2}, timeout=10,
    )
    assert session.headers['Content-Type'] == 'application/json'

def test_fetch_requests_paths(api, session):
    session.request.return_value = _response(200, [])
    api.fetch_landlord_requests(5)
    api.fetch_tenant_requests(6)
    paths = [c.args[1] for c in session.request.call_args_list]
    assert paths == ['http://backend.test/api/landlords/5/requests',
                     'http://backend.test/api/tenants/6/requests']

@pytest.mark.parametrize("code, exc", [
    ('duplicate_request', DuplicateRequest),
    ('limit_exceeded', LimitExceeded),
    ('invalid_transition', InvalidTransition),
    ('not_found', NotFound),
])
def test_backend_errors_surface_as_exceptions(api, session, code, exc):
    session.request.return_value = _response(409, {'error': code, 'message': 'nope'})
    with pytest.raises(exc) as info:
        api.update_request_status(1, 'Accepted')
    assert info.value.message == 'nope'

def test_limit_payload_is_kept(api, session):
    body = {'error': 'limit_exceeded', 'message': 'wait', 'next_available_at': '2024-03-11T00:00:00+00:00'}
    session.request.return_value = _response(409, body)
    with pytest.raises(LimitExceeded) as info:
        api.create_request(1, 2)
    assert info.value.payload == {'next_available_at': '2024-03-11T00:00:00+00:00'}

def test_route_validation_errors_surface_as_validation_failed(api, session):
    body = {'error': 'validation_failed', 'message': 'status is required'}
    session.request.return_value = _response(400, body)
    with pytest.raises(ValidationFailed) as info:
        api.update_request_status(1, '')
    assert info.value.message == 'status is required'
    assert info.value.status_code == 400

def test_unknown_errors_raise_http_error(api, session):
    session.request.return_value = _response(502)
    with pytest.raises(requests.HTTPError):
        api.health()

def test_send_request_prechecks_limit_without_posting(api, session):
    session.request.return_value = _response(200, [_pending(1, 10, 2), _pending(2, 11, 5)])
    with pytest.raises(LimitExceeded) as info:
        api.send_request(1, 12, now=NOW)
    assert info.value.payload['next_available_at'] == (NOW + timedelta(hours=19)).isoformat()
    assert [c.args[0] for c in session.request.call_args_list] == ['GET']

def test_send_request_prechecks_duplicate(api, session):
    session.request.return_value = _response(200, [_pending(1, 10, 30)])
    with pytest.raises(DuplicateRequest):
        api.send_request(1, 10, now=NOW)

def test_send_request_posts_when_eligible_and_backend_still_decides(api, session):
    session.request.side_effect = [
        _response(200, [_pending(1, 10, 2)]),
        _response(409, {'error': 'limit_exceeded', 'message': 'another tab won'}),
    ]
    with pytest.raises(LimitExceeded):
        api.send_request(1, 11, now=NOW)
    assert [c.args[0] for c in session.request.call_args_list] == ['GET', 'POST']

def test_tenant_activity_combines_profile_and_requests(api, session):
    accepted = {'id': 1, 'tenant_id': 4, 'status': 'Accepted',
                'created_at': (NOW - timedelta(days=1)).isoformat()}
    session.request.side_effect = [
        _response(200, {'id': 4, 'is_active': False}),
        _response(200, [accepted]),
    ]
    state = api.tenant_activity(4, now=NOW)
    assert state['display_state'] == 'inactive'
    assert state['countdown'] == {'days': 4, 'hours': 0, 'minutes': 0, 'seconds': 0}

def test_search_skips_backend_for_short_numbers(api, session):
    assert api.search_user('12-34') == {'found': False}
    session.request.assert_not_called()
    session.request.return_value = _response(200, {'found': True, 'role': 'Tenant'})
    assert api.search_user('91234 56780')['role'] == 'Tenant'
    assert session.request.call_args.args[1] == 'http://backend.test/api/search/9123456780'

def test_available_rooms_returns_count(api, session):
    session.request.return_value = _response(200, {'count': 7})
    assert api.available_rooms() == 7
