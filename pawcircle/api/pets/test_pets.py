# pawcircle/api/pets/test_pets.py
"""
반려동물 API 테스트

사용법: python -m pytest pawcircle/api/pets/test_pets.py -v
"""

from pawcircle.models.breeding import BreedingDecision

PET_PAYLOAD = {
    'name': 'Coco',
    'pet_type': 'Dog',
    'breed': 'Maltese',
    'age': 3,
    'weight': 4.2,
    'gender': 'Female',
}

def test_register_pet_links_owner(client, auth_header, fake_db, make_user):
    user = make_user('alice')
    res = client.post('/api/pets/', json=PET_PAYLOAD, headers=auth_header(user.user_id))

    assert res.status_code == 201
    body = res.get_json()
    assert body['user_id'] == user.user_id
    assert body['available_for_breeding'] is False
    assert fake_db.documents('users')[user.user_id]['pet_ids'] == [body['pet_id']]

def test_register_pet_validation(client, auth_header, make_user):
    user = make_user('alice')
    payload = dict(PET_PAYLOAD, age=120, pet_type='Dragon', weight=0)
    res = client.post('/api/pets/', json=payload, headers=auth_header(user.user_id))

    assert res.status_code == 400
    details = res.get_json()['details']
    assert {'age', 'pet_type', 'weight'} <= set(details)

def test_register_pet_for_unknown_user(client, auth_header):
    res = client.post('/api/pets/', json=PET_PAYLOAD, headers=auth_header('ghost'))
    assert res.status_code == 404

def test_list_pets(client, auth_header, make_user, make_pet):
    user = make_user('alice')
    other = make_user('bob')
    make_pet(user.user_id, 'First')
    make_pet(user.user_id, 'Second')
    make_pet(other.user_id, 'NotMine')

    res = client.get(f'/api/pets/{user.user_id}/returnPets', headers=auth_header(other.user_id))
    assert res.status_code == 200
    assert [p['name'] for p in res.get_json()['pets']] == ['First', 'Second']

    res = client.get('/api/pets/', headers=auth_header(user.user_id))
    assert len(res.get_json()['pets']) == 2

def test_list_pets_empty_and_unknown_user(client, auth_header, make_user):
    user = make_user('alice')
    res = client.get(f'/api/pets/{user.user_id}/returnPets', headers=auth_header(user.user_id))
    assert res.status_code == 200
    assert res.get_json() == {'pets': []}

    res = client.get('/api/pets/ghost/returnPets', headers=auth_header(user.user_id))
    assert res.status_code == 404

def test_update_pet(client, auth_header, make_user, make_pet):
    user = make_user('alice')
    other = make_user('bob')
    pet = make_pet(user.user_id)

    res = client.patch(f'/api/pets/{pet.pet_id}', json={}, headers=auth_header(user.user_id))
    assert res.status_code == 400
    assert res.get_json()['error_code'] == 'NO_UPDATE_DATA'

    res = client.patch(f'/api/pets/{pet.pet_id}', json={'age': 4}, headers=auth_header(other.user_id))
    assert res.status_code == 403

    res = client.patch(f'/api/pets/{pet.pet_id}', json={'age': 4, 'name': 'Coco2'}, headers=auth_header(user.user_id))
    assert res.status_code == 200
    assert res.get_json()['age'] == 4
    assert res.get_json()['name'] == 'Coco2'

def test_update_breeding_status_accepts_string_bool(client, auth_header, make_user, make_pet):
    user = make_user('alice')
    pet = make_pet(user.user_id)

    res = client.put(f'/api/pets/{pet.pet_id}/updateBreedingStatus', json={'status': 'true'},
                     headers=auth_header(user.user_id))
    assert res.status_code == 200
    assert res.get_json()['available_for_breeding'] is True

    res = client.put(f'/api/pets/{pet.pet_id}/updateBreedingStatus', json={'status': False},
                     headers=auth_header(user.user_id))
    assert res.get_json()['available_for_breeding'] is False

    res = client.put(f'/api/pets/{pet.pet_id}/updateBreedingStatus', json={},
                     headers=auth_header(user.user_id))
    assert res.status_code == 400

def test_delete_pet_cascades(app, client, auth_header, fake_db, make_user, make_pet):
    """반려동물 삭제 시 의료 기록, 매칭 요청, 매칭 결과가 함께 삭제된다"""
    alice = make_user('alice')
    bob = make_user('bob')
    carol = make_user('carol')
    p1 = make_pet(alice.user_id, 'P1', available_for_breeding=True)
    p2 = make_pet(bob.user_id, 'P2', available_for_breeding=True)
    p3 = make_pet(carol.user_id, 'P3', available_for_breeding=True)

    app.services['medical'].add_record(p1.pet_id, alice.user_id, {'pic_url': 'https://example.com/x.png'})
    petmate = app.services['petmate']
    matched = petmate.request_breeding(alice.user_id, p1.pet_id, p2.pet_id)
    petmate.resolve_request(bob.user_id, matched.request_id, BreedingDecision.ACCEPT)
    petmate.request_breeding(carol.user_id, p3.pet_id, p1.pet_id)
    untouched = petmate.request_breeding(carol.user_id, p3.pet_id, p2.pet_id)

    res = client.delete(f'/api/pets/{p1.pet_id}', headers=auth_header(bob.user_id))
    assert res.status_code == 403

    res = client.delete(f'/api/pets/{p1.pet_id}', headers=auth_header(alice.user_id))
    assert res.status_code == 204

    assert p1.pet_id not in fake_db.documents('pets')
    assert fake_db.documents('medical_records') == {}
    assert fake_db.documents('matches') == {}
    assert list(fake_db.documents('breeding_requests')) == [untouched.request_id]
    assert fake_db.documents('users')[alice.user_id]['pet_ids'] == []

def test_get_missing_pet(client, auth_header, make_user):
    user = make_user('alice')
    res = client.get('/api/pets/nothing-here', headers=auth_header(user.user_id))
    assert res.status_code == 404
    assert res.get_json()['error_code'] == 'PET_NOT_FOUND'

def test_missing_or_non_json_body_is_validation_error(client, auth_header, make_user, make_pet):
    """JSON이 아닌 본문이나 빈 본문은 400 VALIDATION_ERROR"""
    user = make_user('alice')
    pet = make_pet(user.user_id)

    res = client.post('/api/pets/', data='name=x', headers=auth_header(user.user_id))
    assert res.status_code == 400
    assert res.get_json()['error_code'] == 'VALIDATION_ERROR'

    res = client.put(f'/api/pets/{pet.pet_id}/updateBreedingStatus', headers=auth_header(user.user_id))
    assert res.status_code == 400
    assert res.get_json()['error_code'] == 'VALIDATION_ERROR'

    res = client.patch(f'/api/pets/{pet.pet_id}', headers=auth_header(user.user_id))
    assert res.status_code == 400
    assert res.get_json()['error_code'] == 'NO_UPDATE_DATA'
