from datetime import datetime

import pytest

from agenda.models import Appointment


def book(client, headers, doctor_id, **fields):
    payload = {'doctor': doctor_id, 'dateTime': '2030-05-01T09:00:00Z', 'type': 'in-person'}
    payload.update(fields)
    return client.post('/api/appointments', json=payload, headers=headers)


@pytest.fixture
def other_patient(register):
    return register(role='patient', first_name='Other', last_name='Patient')


@pytest.fixture
def booked(client, patient, doctor):
    _, patient_headers = patient
    doctor_user, _ = doctor
    resp = book(client, patient_headers, doctor_user['id'], symptoms=['cough', ' fever '], notes='Since Monday')
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()['data']


def test_create_appointment_defaults(booked, patient, doctor):
    patient_user, _ = patient
    doctor_user, _ = doctor

    assert booked['patient']['id'] == patient_user['id']
    assert booked['doctor'] == {'id': doctor_user['id'], 'firstName': 'Doc', 'lastName': 'Tor'}
    assert booked['status'] == 'scheduled'
    assert booked['duration'] == 30
    assert booked['followUp'] is False
    assert booked['type'] == 'in-person'
    assert booked['symptoms'] == ['cough', 'fever']
    assert booked['dateTime'] == '2030-05-01T09:00:00'
    assert booked['createdAt'] == booked['updatedAt']


def test_create_uses_caller_as_patient(client, patient, doctor, other_patient):
    _, headers = patient
    doctor_user, _ = doctor
    other_user, _ = other_patient
    resp = book(client, headers, doctor_user['id'], patient=other_user['id'])
    assert resp.status_code == 201
    assert resp.get_json()['data']['patient']['id'] != other_user['id']


@pytest.mark.parametrize('doctor_ref', ['missing-doctor-id', 'patient', 5, ['not-a-string']])
def test_create_rejects_invalid_doctor_and_persists_nothing(app, client, patient, other_patient, doctor_ref):
    _, headers = patient
    other_user, _ = other_patient
    doctor_id = other_user['id'] if doctor_ref == 'patient' else doctor_ref

    resp = book(client, headers, doctor_id)
    assert resp.status_code == 400
    body = resp.get_json()
    assert body['code'] == 'reference_error'
    assert body['error'] == 'Invalid doctor selected'
    assert Appointment.query.count() == 0


@pytest.mark.parametrize('payload,field', [
    ({'dateTime': '2030-05-01T09:00:00Z', 'type': 'in-person'}, 'doctor'),
    ({'doctor': 'x', 'type': 'in-person'}, 'dateTime'),
    ({'doctor': 'x', 'dateTime': '2030-05-01T09:00:00Z'}, 'type'),
])
def test_create_requires_fields(client, patient, payload, field):
    _, headers = patient
    resp = client.post('/api/appointments', json=payload, headers=headers)
    assert resp.status_code == 400
    body = resp.get_json()
    assert body['code'] == 'validation_error'
    assert field in body['details']


@pytest.mark.parametrize('fields', [
    {'type': 'house-call'},
    {'status': 'pending'},
    {'dateTime': 'tomorrow'},
    {'duration': 0},
    {'duration': 'long'},
    {'symptoms': 'cough'},
    {'followUp': 'yes'},
])
def test_create_rejects_invalid_values(client, patient, doctor, fields):
    _, headers = patient
    doctor_user, _ = doctor
    resp = book(client, headers, doctor_user['id'], **fields)
    assert resp.status_code == 400
    assert resp.get_json()['code'] == 'validation_error'


def test_list_is_scoped_by_role(client, booked, patient, doctor, other_patient, admin):
    _, patient_headers = patient
    _, doctor_headers = doctor
    _, other_headers = other_patient
    _, admin_headers = admin

    assert [a['id'] for a in client.get('/api/appointments', headers=patient_headers).get_json()['data']] == [booked['id']]
    assert [a['id'] for a in client.get('/api/appointments', headers=doctor_headers).get_json()['data']] == [booked['id']]
    assert client.get('/api/appointments', headers=other_headers).get_json()['data'] == []
    # Admins list their own bookings; they reach others' appointments by id
    assert client.get('/api/appointments', headers=admin_headers).get_json()['data'] == []


def test_list_orders_by_date_time_and_filters(client, patient, doctor):
    _, headers = patient
    doctor_user, _ = doctor
    book(client, headers, doctor_user['id'], dateTime='2030-05-03T09:00:00', type='telemedicine')
    book(client, headers, doctor_user['id'], dateTime='2030-05-01T09:00:00')
    late = book(client, headers, doctor_user['id'], dateTime='2030-05-02T09:00:00').get_json()['data']
    client.put(f"/api/appointments/{late['id']}", json={'status': 'cancelled'}, headers=headers)

    listed = client.get('/api/appointments', headers=headers).get_json()['data']
    assert [a['dateTime'] for a in listed] == [
        '2030-05-01T09:00:00', '2030-05-02T09:00:00', '2030-05-03T09:00:00',
    ]

    cancelled = client.get('/api/appointments?status=cancelled', headers=headers).get_json()['data']
    assert [a['id'] for a in cancelled] == [late['id']]

    remote = client.get('/api/appointments?type=telemedicine', headers=headers).get_json()['data']
    assert [a['dateTime'] for a in remote] == ['2030-05-03T09:00:00']

    assert client.get('/api/appointments?type=phone', headers=headers).status_code == 400


def test_get_appointment_access(client, booked, patient, doctor, other_patient, admin):
    for _, headers in (patient, doctor, admin):
        resp = client.get(f"/api/appointments/{booked['id']}", headers=headers)
        assert resp.status_code == 200
        assert resp.get_json()['data']['id'] == booked['id']

    _, other_headers = other_patient
    resp = client.get(f"/api/appointments/{booked['id']}", headers=other_headers)
    assert resp.status_code == 403
    assert resp.get_json() == {
        'success': False,
        'error': 'Not authorized to view this appointment',
        'code': 'forbidden',
    }

    missing = client.get('/api/appointments/nope', headers=other_headers)
    assert missing.status_code == 404


def test_doctor_updates_appointment(client, booked, doctor):
    _, headers = doctor
    resp = client.put(
        f"/api/appointments/{booked['id']}",
        json={'status': 'completed', 'followUp': True, 'notes': 'Rest and fluids'},
        headers=headers,
    )
    assert resp.status_code == 200
    data = resp.get_json()['data']
    assert data['status'] == 'completed'
    assert data['followUp'] is True
    assert data['notes'] == 'Rest and fluids'
    assert data['symptoms'] == booked['symptoms']
    assert datetime.fromisoformat(data['updatedAt']) > datetime.fromisoformat(booked['updatedAt'])


def test_update_can_move_to_another_doctor_only(client, booked, patient, register, other_patient):
    _, headers = patient
    new_doctor, _ = register(role='doctor', first_name='New', last_name='Doc')
    other_user, _ = other_patient

    bad = client.put(f"/api/appointments/{booked['id']}", json={'doctor': other_user['id']}, headers=headers)
    assert bad.status_code == 400
    assert bad.get_json()['code'] == 'reference_error'

    good = client.put(f"/api/appointments/{booked['id']}", json={'doctor': new_doctor['id']}, headers=headers)
    assert good.status_code == 200
    assert good.get_json()['data']['doctor']['id'] == new_doctor['id']


def test_update_rejects_invalid_status(client, booked, patient):
    _, headers = patient
    resp = client.put(f"/api/appointments/{booked['id']}", json={'status': 'postponed'}, headers=headers)
    assert resp.status_code == 400
    current = client.get(f"/api/appointments/{booked['id']}", headers=headers).get_json()['data']
    assert current['status'] == 'scheduled'


def test_outsider_cannot_update_or_delete(client, booked, other_patient):
    _, headers = other_patient
    update = client.put(f"/api/appointments/{booked['id']}", json={'status': 'cancelled'}, headers=headers)
    assert update.status_code == 403
    assert update.get_json()['error'] == 'Not authorized to update this appointment'

    delete = client.delete(f"/api/appointments/{booked['id']}", headers=headers)
    assert delete.status_code == 403
    assert delete.get_json()['error'] == 'Not authorized to delete this appointment'


def test_admin_can_delete_and_delete_is_not_idempotent(client, booked, admin, patient):
    _, admin_headers = admin
    _, patient_headers = patient

    resp = client.delete(f"/api/appointments/{booked['id']}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.get_json()['message'] == 'Appointment removed'

    assert client.delete(f"/api/appointments/{booked['id']}", headers=patient_headers).status_code == 404
    assert client.get(f"/api/appointments/{booked['id']}", headers=patient_headers).status_code == 404


def test_null_status_on_create_falls_back_to_default(client, patient, doctor):
    _, headers = patient
    doctor_user, _ = doctor
    resp = book(client, headers, doctor_user['id'], status=None, duration=None, followUp=None)
    assert resp.status_code == 201
    data = resp.get_json()['data']
    assert data['status'] == 'scheduled'
    assert data['duration'] == 30
    assert data['followUp'] is False


def test_null_status_on_update_is_rejected(client, booked, patient):
    _, headers = patient
    resp = client.put(f"/api/appointments/{booked['id']}", json={'status': None}, headers=headers)
    assert resp.status_code == 400
    assert resp.get_json()['code'] == 'validation_error'
