import pytest

from vacation_api.models.enums import VacationStatus
from vacation_api.routes.vacation_routes import get_validation_errors, parse_date

VALID_REQUEST = {
    'date_from': '2026-07-01',
    'date_to': '2026-07-10',
    'reason': 'Summer holiday with family',
}


def _create(client, headers, **overrides) -> int:
    response = client.post('/vacations', json={**VALID_REQUEST, **overrides}, headers=headers)
    assert response.status_code == 201
    return response.json()['id']


@pytest.mark.parametrize(
    ('value', 'expected_valid'),
    [('2026-02-28', True), ('2026-02-30', False), ('2026-2-1', False), ('01-02-2026', False), (20260101, False), ('', False)],
)
def test_parse_date_is_strict(value, expected_valid) -> None:
    assert (parse_date(value) is not None) is expected_valid


def test_validation_reports_every_missing_field() -> None:
    assert get_validation_errors({}) == [
        'Start date (date_from) is required',
        'End date (date_to) is required',
        'Reason is required',
    ]


def test_validation_reports_bad_formats_and_short_reason_together() -> None:
    errors = get_validation_errors({'date_from': '2026/07/01', 'date_to': 'tomorrow', 'reason': 'short'})

    assert errors == [
        'Start date (date_from) must be a valid date in format YYYY-MM-DD',
        'End date (date_to) must be a valid date in format YYYY-MM-DD',
        'Reason must be at least 10 characters long',
    ]


def test_validation_accepts_single_day_request() -> None:
    assert get_validation_errors({**VALID_REQUEST, 'date_to': VALID_REQUEST['date_from']}) == []


def test_store_rejects_date_to_before_date_from(client, user_headers) -> None:
    response = client.post(
        '/vacations',
        json={**VALID_REQUEST, 'date_from': '2026-07-10', 'date_to': '2026-07-01'},
        headers=user_headers,
    )

    assert response.status_code == 422
    assert 'End date must be after or equal to start date' in response.json()['errors']


def test_store_rejects_nine_character_reason(client, user_headers) -> None:
    response = client.post('/vacations', json={**VALID_REQUEST, 'reason': 'x' * 9}, headers=user_headers)

    assert response.status_code == 422
    assert response.json() == {'errors': ['Reason must be at least 10 characters long']}


def test_store_requires_token(client) -> None:
    response = client.post('/vacations', json=VALID_REQUEST)

    assert response.status_code == 401


def test_store_forces_pending_status_and_caller_ownership(
    client, regular_user, other_user, user_headers, admin_headers
) -> None:
    vacation_id = _create(
        client,
        user_headers,
        status_id=VacationStatus.APPROVED.value,
        user_id=other_user.id,
    )

    response = client.get(f'/vacations/{vacation_id}', headers=admin_headers)

    record = response.json()
    assert record['status_id'] == VacationStatus.PENDING.value
    assert record['status_name'] == 'PENDING'
    assert record['user_id'] == regular_user.id
    assert record['username'] == 'alice'
    assert record['date_from'] == '2026-07-01'


def test_store_response_reports_pending(client, user_headers) -> None:
    response = client.post('/vacations', json=VALID_REQUEST, headers=user_headers)

    assert response.json()['status'] == 'PENDING'
    assert response.json()['message'] == 'Vacation request created successfully'


def test_index_for_user_lists_only_own_newest_first(client, user_headers, other_headers) -> None:
    first = _create(client, user_headers)
    _create(client, other_headers)
    second = _create(client, user_headers, reason='Second trip of the year')

    response = client.get('/vacations', headers=user_headers)

    assert response.status_code == 200
    assert [record['id'] for record in response.json()] == [second, first]


def test_index_for_admin_lists_pending_first(client, user_headers, other_headers, admin_headers) -> None:
    approved = _create(client, user_headers)
    pending = _create(client, other_headers)
    rejected = _create(client, user_headers, reason='Another long reason')
    client.put(f'/vacations/{approved}', json={'status_id': 1}, headers=admin_headers)
    client.put(f'/vacations/{rejected}', json={'status_id': 2}, headers=admin_headers)

    response = client.get('/vacations', headers=admin_headers)

    records = response.json()
    assert [record['id'] for record in records] == [pending, rejected, approved]
    assert {record['username'] for record in records} == {'alice', 'bob'}


def test_my_lists_callers_vacations_even_for_admin(client, user_headers, admin_headers) -> None:
    _create(client, user_headers)
    own = _create(client, admin_headers)

    response = client.get('/vacations/my', headers=admin_headers)

    assert [record['id'] for record in response.json()] == [own]


def test_show_restricted_to_owner_or_admin(client, user_headers, other_headers, admin_headers) -> None:
    vacation_id = _create(client, user_headers)

    assert client.get(f'/vacations/{vacation_id}', headers=user_headers).status_code == 200
    assert client.get(f'/vacations/{vacation_id}', headers=admin_headers).status_code == 200

    response = client.get(f'/vacations/{vacation_id}', headers=other_headers)
    assert response.status_code == 403
    assert response.json() == {'error': 'Access denied'}


def test_show_unknown_vacation(client, user_headers) -> None:
    response = client.get('/vacations/999', headers=user_headers)

    assert response.status_code == 404
    assert response.json() == {'error': 'Vacation not found'}


def test_update_status_to_approved(client, user_headers, admin_headers) -> None:
    vacation_id = _create(client, user_headers)

    response = client.put(f'/vacations/{vacation_id}', json={'status_id': 1}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {
        'message': 'Vacation status updated successfully',
        'id': vacation_id,
        'status': 'APPROVED',
    }
    record = client.get(f'/vacations/{vacation_id}', headers=admin_headers).json()
    assert record['status_name'] == 'APPROVED'
    assert record['updated_at'] >= record['created_at']


def test_update_rejects_unknown_status(client, user_headers, admin_headers) -> None:
    vacation_id = _create(client, user_headers)

    response = client.patch(f'/vacations/{vacation_id}', json={'status_id': 5}, headers=admin_headers)

    assert response.status_code == 422
    assert response.json() == {
        'errors': ['Invalid status_id. Must be 1 (APPROVED), 2 (REJECTED), or 3 (PENDING)']
    }


def test_update_requires_status_id(client, user_headers, admin_headers) -> None:
    vacation_id = _create(client, user_headers)

    response = client.put(f'/vacations/{vacation_id}', json={'reason': 'changed my mind'}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json() == {'error': 'status_id is required'}


def test_update_requires_admin(client, user_headers) -> None:
    vacation_id = _create(client, user_headers)

    response = client.put(f'/vacations/{vacation_id}', json={'status_id': 1}, headers=user_headers)

    assert response.status_code == 403


def test_update_unknown_vacation(client, admin_headers) -> None:
    response = client.put('/vacations/999', json={'status_id': 1}, headers=admin_headers)

    assert response.status_code == 404


def test_destroy(client, user_headers, admin_headers) -> None:
    vacation_id = _create(client, user_headers)

    assert client.delete(f'/vacations/{vacation_id}', headers=user_headers).status_code == 403

    response = client.delete(f'/vacations/{vacation_id}', headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {'message': 'Vacation deleted successfully'}
    assert client.delete(f'/vacations/{vacation_id}', headers=admin_headers).status_code == 404


def test_statuses(client, user_headers) -> None:
    response = client.get('/vacations/statuses', headers=user_headers)

    assert response.status_code == 200
    assert response.json() == [
        {'id': 1, 'status': 'APPROVED'},
        {'id': 2, 'status': 'REJECTED'},
        {'id': 3, 'status': 'PENDING'},
    ]


def test_statuses_requires_token(client) -> None:
    assert client.get('/vacations/statuses').status_code == 401


def test_unknown_vacation_action(client) -> None:
    response = client.get('/vacations/calendar')

    assert response.status_code == 404
    assert response.json() == {'error': "Action 'calendar' not found"}


def test_users_actions_are_not_vacation_actions(client, user_headers) -> None:
    response = client.get('/vacations/profile', headers=user_headers)

    assert response.status_code == 404
    assert response.json() == {'error': "Action 'profile' not found"}


@pytest.mark.parametrize('method', ['GET', 'PUT', 'DELETE'])
def test_id_beyond_integer_range_is_not_found(client, admin_headers, method) -> None:
    response = client.request(method, '/vacations/99999999999999999999', json={'status_id': 1}, headers=admin_headers)

    assert response.status_code == 404
    assert response.json() == {'error': 'Vacation not found'}
