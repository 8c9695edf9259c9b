# pawcircle/api/users/test_users.py
"""
사용자 프로필/알림 API 테스트

사용법: python -m pytest pawcircle/api/users/test_users.py -v
"""

from pawcircle.models.notification import NotificationType

def test_public_profile_hides_contact_info(client, make_user, make_pet):
    user = make_user('alice')
    make_pet(user.user_id)

    res = client.get(f'/api/users/{user.user_id}')
    assert res.status_code == 200
    body = res.get_json()
    assert body['user_name'] == 'alice'
    assert body['pet_count'] == 1
    assert 'email' not in body
    assert 'phone_no' not in body

    assert client.get('/api/users/ghost').status_code == 404

def test_my_profile(client, auth_header, make_user):
    user = make_user('alice')
    res = client.get('/api/users/me', headers=auth_header(user.user_id))
    assert res.status_code == 200
    assert res.get_json()['email'] == 'alice@example.com'
    assert 'password_hash' not in res.get_json()

def test_notifications_list_and_mark_read(app, client, auth_header, make_user):
    alice = make_user('alice')
    bob = make_user('bob')
    notifications = app.services['notifications']
    first_id = notifications.create_notification(alice.user_id, bob.user_id, NotificationType.BREEDING_REQUEST, 'req-1')
    notifications.create_notification(alice.user_id, bob.user_id, NotificationType.BREEDING_ACCEPTED, 'req-1')
    assert notifications.create_notification(alice.user_id, alice.user_id, NotificationType.FORUM_REPLY, 't') is None

    res = client.get('/api/users/me/notifications', headers=auth_header(alice.user_id))
    items = res.get_json()['notifications']
    assert [n['type'] for n in items] == ['BREEDING_ACCEPTED', 'BREEDING_REQUEST']

    res = client.patch(f'/api/users/me/notifications/{first_id}/read', headers=auth_header(bob.user_id))
    assert res.status_code == 403

    res = client.patch(f'/api/users/me/notifications/{first_id}/read', headers=auth_header(alice.user_id))
    assert res.status_code == 200
    assert res.get_json()['is_read'] is True

    res = client.get('/api/users/me/notifications?unread_only=true', headers=auth_header(alice.user_id))
    assert [n['type'] for n in res.get_json()['notifications']] == ['BREEDING_ACCEPTED']
