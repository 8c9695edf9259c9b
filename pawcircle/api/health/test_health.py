# pawcircle/api/health/test_health.py
"""
헬스 체크 API 테스트

사용법: python -m pytest pawcircle/api/health/test_health.py -v
"""

def test_health_ok(client):
    res = client.get('/api/health')
    assert res.status_code == 200
    body = res.get_json()
    assert body['status'] == 'ok'
    assert body['timestamp'].endswith('Z')

def test_health_head(client):
    res = client.head('/api/health')
    assert res.status_code == 200
    assert res.data == b''

def test_health_degraded_when_datastore_unreachable(client, fake_db):
    fake_db.fail_reads = True
    res = client.get('/api/health')
    assert res.status_code == 503
    assert res.get_json()['status'] == 'degraded'
