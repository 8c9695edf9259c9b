# pawcircle/api/forum/test_forum.py
"""
커뮤니티 게시판 API 테스트

사용법: python -m pytest pawcircle/api/forum/test_forum.py -v
"""

import pytest

@pytest.fixture
def category(client, auth_header, make_user):
    user = make_user('alice')
    res = client.post('/api/community/categories', json={'name': 'Health', 'tags': ['vet', 'food']},
                      headers=auth_header(user.user_id))
    assert res.status_code == 201
    return user, res.get_json()

def test_category_name_rules(client, auth_header, category):
    user, _ = category
    headers = auth_header(user.user_id)

    res = client.post('/api/community/categories', json={'name': 'Health'}, headers=headers)
    assert res.status_code == 409

    res = client.post('/api/community/categories', json={'name': 'x' * 13, 'tags': ['y' * 11]}, headers=headers)
    assert res.status_code == 400
    assert {'name', 'tags'} <= set(res.get_json()['details'])

    res = client.get('/api/community/categories')
    assert [c['name'] for c in res.get_json()['categories']] == ['Health']

def test_topic_lifecycle(client, auth_header, fake_db, make_user, category):
    author, created = category
    category_id = created['category_id']
    other = make_user('bob')

    res = client.post(f'/api/community/categories/{category_id}/topics',
                      json={'name': 'Hi', 'content': 'too short'}, headers=auth_header(author.user_id))
    assert res.status_code == 400

    res = client.post(f'/api/community/categories/{category_id}/topics',
                      json={'name': 'Vaccines', 'content': 'Which vaccines first?'}, headers=auth_header(author.user_id))
    assert res.status_code == 201
    topic = res.get_json()
    assert topic['author']['user_name'] == 'alice'
    assert fake_db.documents('forum_categories')[category_id]['topic_count'] == 1

    res = client.post(f"/api/community/topics/{topic['topic_id']}/replies",
                      json={'content': 'Rabies first'}, headers=auth_header(other.user_id))
    assert res.status_code == 201
    assert fake_db.documents('forum_topics')[topic['topic_id']]['reply_count'] == 1
    notification, = fake_db.documents('notifications').values()
    assert notification['type'] == 'FORUM_REPLY'
    assert notification['recipient_id'] == author.user_id

    res = client.patch(f"/api/community/topics/{topic['topic_id']}",
                       json={'name': 'Changed'}, headers=auth_header(other.user_id))
    assert res.status_code == 403

    res = client.get(f'/api/community/categories/{category_id}/topics')
    assert [t['topic_id'] for t in res.get_json()['topics']] == [topic['topic_id']]

    res = client.get(f"/api/community/topics/{topic['topic_id']}/replies")
    assert [r['content'] for r in res.get_json()['replies']] == ['Rabies first']

    res = client.delete(f"/api/community/topics/{topic['topic_id']}", headers=auth_header(author.user_id))
    assert res.status_code == 204
    assert fake_db.documents('forum_replies') == {}
    assert fake_db.documents('forum_categories')[category_id]['topic_count'] == 0

def test_topic_in_missing_category(client, auth_header, make_user):
    user = make_user('alice')
    res = client.post('/api/community/categories/missing/topics',
                      json={'name': 'Vaccines', 'content': 'Which vaccines first?'}, headers=auth_header(user.user_id))
    assert res.status_code == 404
