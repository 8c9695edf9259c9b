# pawcircle/api/medical/test_medical.py
"""
의료 기록 API 테스트

사용법: python -m pytest pawcircle/api/medical/test_medical.py -v
"""

def test_add_record_sets_back_reference(client, auth_header, fake_db, make_user, make_pet):
    user = make_user('alice')
    pet = make_pet(user.user_id)

    res = client.post(f'/api/medical/{pet.pet_id}/records',
                      json={'pic_url': 'https://example.com/xray.png', 'description': '예방접종'},
                      headers=auth_header(user.user_id))
    assert res.status_code == 201
    record = res.get_json()
    assert record['pet_id'] == pet.pet_id

    stored = fake_db.documents('medical_records')[record['record_id']]
    assert stored['pet_id'] == pet.pet_id
    assert fake_db.documents('pets')[pet.pet_id]['medical_record_ids'] == [record['record_id']]

def test_add_record_requires_owner_and_url(client, auth_header, make_user, make_pet):
    owner = make_user('alice')
    other = make_user('bob')
    pet = make_pet(owner.user_id)

    res = client.post(f'/api/medical/{pet.pet_id}/records', json={'pic_url': 'https://example.com/a.png'},
                      headers=auth_header(other.user_id))
    assert res.status_code == 403

    res = client.post(f'/api/medical/{pet.pet_id}/records', json={'pic_url': 'not a url'},
                      headers=auth_header(owner.user_id))
    assert res.status_code == 400

    res = client.post('/api/medical/missing/records', json={'pic_url': 'https://example.com/a.png'},
                      headers=auth_header(owner.user_id))
    assert res.status_code == 404

def test_list_and_delete_records(client, auth_header, fake_db, make_user, make_pet):
    user = make_user('alice')
    pet = make_pet(user.user_id)
    headers = auth_header(user.user_id)

    res = client.get(f'/api/medical/{pet.pet_id}/records', headers=headers)
    assert res.status_code == 200
    assert res.get_json() == {'medical_records': []}

    first = client.post(f'/api/medical/{pet.pet_id}/records', json={'pic_url': 'https://example.com/1.png'},
                        headers=headers).get_json()
    second = client.post(f'/api/medical/{pet.pet_id}/records', json={'pic_url': 'https://example.com/2.png'},
                         headers=headers).get_json()

    res = client.get(f'/api/medical/{pet.pet_id}/records', headers=headers)
    assert [r['record_id'] for r in res.get_json()['medical_records']] == [second['record_id'], first['record_id']]

    assert client.delete(f"/api/medical/records/{first['record_id']}", headers=headers).status_code == 204
    assert client.delete(f"/api/medical/records/{first['record_id']}", headers=headers).status_code == 404
    assert fake_db.documents('pets')[pet.pet_id]['medical_record_ids'] == [second['record_id']]
