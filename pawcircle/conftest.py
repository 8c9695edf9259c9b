# pawcircle/conftest.py
"""
pytest 공용 픽스처

Firestore 대신 메모리 기반 FakeFirestore를 create_app(db=...)으로 주입합니다.
트랜잭션 쓰기는 커밋 시점에 한 번에 반영되고, 예외가 나면 아무것도 반영되지 않습니다.
"""

import copy
import functools
import uuid

import pytest
from firebase_admin import firestore
from flask_jwt_extended import create_access_token, create_refresh_token
from google.api_core.exceptions import AlreadyExists

from pawcircle import create_app

# =====================================================================================
# FakeFirestore
# =====================================================================================
def _get_path(data, path):
    current = data
    for part in path.split('.'):
        if not isinstance(current, dict) or part not in current:
            return _MISSING
        current = current[part]
    return current

_MISSING = object()

def _matches(data, field_path, op, value):
    actual = _get_path(data, field_path)
    if actual is _MISSING:
        return False
    if op == '==':
        return actual == value
    if op == '!=':
        return actual != value
    if op == 'in':
        return actual in value
    if op == 'not-in':
        return actual not in value
    if op == 'array_contains':
        return isinstance(actual, list) and value in actual
    if op == 'array_contains_any':
        return isinstance(actual, list) and any(v in actual for v in value)
    if actual is None:
        return False
    if op == '<':
        return actual < value
    if op == '<=':
        return actual <= value
    if op == '>':
        return actual > value
    if op == '>=':
        return actual >= value
    raise ValueError(f"Unsupported operator: {op}")

def _apply_transform(current, value):
    """ArrayUnion / ArrayRemove / Increment / DELETE_FIELD 센티널을 실제 값으로 바꿉니다."""
    if isinstance(value, firestore.ArrayUnion):
        result = list(current) if isinstance(current, list) else []
        for item in value.values:
            if item not in result:
                result.append(item)
        return result
    if isinstance(value, firestore.ArrayRemove):
        result = list(current) if isinstance(current, list) else []
        return [item for item in result if item not in value.values]
    if isinstance(value, firestore.Increment):
        base = current if isinstance(current, (int, float)) else 0
        return base + value.value
    return copy.deepcopy(value)

def _apply_update(data, updates):
    for field_path, value in updates.items():
        parts = field_path.split('.')
        target = data
        for part in parts[:-1]:
            target = target.setdefault(part, {})
        if value is firestore.DELETE_FIELD:
            target.pop(parts[-1], None)
        else:
            target[parts[-1]] = _apply_transform(target.get(parts[-1]), value)

class FakeDocumentSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None

    def get(self, field_path):
        value = _get_path(self._data or {}, field_path)
        return None if value is _MISSING else copy.deepcopy(value)

class FakeDocumentReference:
    def __init__(self, db, collection_name, doc_id):
        self._db = db
        self._collection_name = collection_name
        self.id = doc_id

    @property
    def path(self):
        return f"{self._collection_name}/{self.id}"

    def _store(self):
        return self._db._data.setdefault(self._collection_name, {})

    def get(self, transaction=None):
        return FakeDocumentSnapshot(self, copy.deepcopy(self._store().get(self.id)))

    def set(self, data, merge=False):
        self._db._apply([('set', self, data, merge)])

    def create(self, data):
        self._db._apply([('create', self, data, False)])

    def update(self, data):
        self._db._apply([('update', self, data, False)])

    def delete(self):
        self._db._apply([('delete', self, None, False)])

class FakeQuery:
    def __init__(self, db, collection_name, filters=None, orders=None, limit_count=None):
        self._db = db
        self._collection_name = collection_name
        self._filters = filters or []
        self._orders = orders or []
        self._limit = limit_count

    def _copy(self, **changes):
        params = dict(filters=list(self._filters), orders=list(self._orders), limit_count=self._limit)
        params.update(changes)
        return FakeQuery(self._db, self._collection_name, **params)

    def where(self, field_path, op_string, value):
        return self._copy(filters=self._filters + [(field_path, op_string, value)])

    def order_by(self, field_path, direction='ASCENDING'):
        return self._copy(orders=self._orders + [(field_path, direction)])

    def limit(self, count):
        return self._copy(limit_count=count)

    def stream(self, transaction=None):
        store = self._db._data.get(self._collection_name, {})
        results = [
            (doc_id, data) for doc_id, data in store.items()
            if all(_matches(data, f, op, v) for f, op, v in self._filters)
        ]
        for field_path, direction in reversed(self._orders):
            results = [r for r in results if _get_path(r[1], field_path) is not _MISSING]
            results.sort(
                key=lambda r: _get_path(r[1], field_path),
                reverse=(direction == firestore.Query.DESCENDING)
            )
        if self._limit is not None:
            results = results[:self._limit]
        for doc_id, data in results:
            ref = FakeDocumentReference(self._db, self._collection_name, doc_id)
            yield FakeDocumentSnapshot(ref, copy.deepcopy(data))

    def get(self, transaction=None):
        return list(self.stream(transaction=transaction))

class FakeCollectionReference(FakeQuery):
    def __init__(self, db, name):
        super().__init__(db, name)
        self.id = name

    def document(self, doc_id=None):
        return FakeDocumentReference(self._db, self._collection_name, doc_id or uuid.uuid4().hex)

class FakeTransaction:
    """set/create/update/delete를 모았다가 commit()에서 한 번에 반영합니다."""
    def __init__(self, db):
        self._db = db
        self._writes = []

    def set(self, reference, data, merge=False):
        self._writes.append(('set', reference, data, merge))

    def create(self, reference, data):
        self._writes.append(('create', reference, data, False))

    def update(self, reference, data):
        self._writes.append(('update', reference, data, False))

    def delete(self, reference):
        self._writes.append(('delete', reference, None, False))

    def commit(self):
        writes, self._writes = self._writes, []
        self._db._apply(writes)

    def rollback(self):
        self._writes = []

class FakeFirestore:
    def __init__(self):
        self._data = {}
        # 커밋 직전에 한 번 호출되는 훅. 동시 트랜잭션 재현에 사용합니다.
        self.before_commit = None
        self.fail_reads = False

    def collection(self, name):
        if self.fail_reads:
            raise ConnectionError("datastore unreachable")
        return FakeCollectionReference(self, name)

    def transaction(self):
        return FakeTransaction(self)

    def documents(self, collection_name):
        """테스트 검증용: 컬렉션의 모든 문서를 {doc_id: data}로 반환합니다."""
        return copy.deepcopy(self._data.get(collection_name, {}))

    def _apply(self, writes):
        if self.before_commit:
            hook, self.before_commit = self.before_commit, None
            hook()

        staged = copy.deepcopy(self._data)
        for op, ref, data, merge in writes:
            store = staged.setdefault(ref._collection_name, {})
            if op == 'create':
                if ref.id in store:
                    raise AlreadyExists(f"Document already exists: {ref.path}")
                store[ref.id] = {}
                _apply_update(store[ref.id], data)
            elif op == 'set':
                if not merge or ref.id not in store:
                    store[ref.id] = {}
                _apply_update(store[ref.id], data)
            elif op == 'update':
                if ref.id not in store:
                    raise LookupError(f"No document to update: {ref.path}")
                _apply_update(store[ref.id], data)
            elif op == 'delete':
                store.pop(ref.id, None)
        self._data = staged

def fake_transactional(to_wrap):
    """firestore.transactional 대체: 함수 실행 후 커밋, 예외 시 롤백."""
    @functools.wraps(to_wrap)
    def wrapper(transaction, *args, **kwargs):
        try:
            result = to_wrap(transaction, *args, **kwargs)
        except Exception:
            transaction.rollback()
            raise
        transaction.commit()
        return result
    return wrapper

# =====================================================================================
# 픽스처
# =====================================================================================
@pytest.fixture
def fake_db(monkeypatch):
    monkeypatch.setattr(firestore, 'transactional', fake_transactional)
    return FakeFirestore()

@pytest.fixture
def app(fake_db):
    app = create_app('testing', db=fake_db)
    yield app

@pytest.fixture
def client(app):
    return app.test_client()

@pytest.fixture
def auth_header(app):
    """auth_header(user_id) -> {'Authorization': 'Bearer ...'}"""
    def _make(user_id, refresh=False):
        with app.app_context():
            token = create_refresh_token(identity=user_id) if refresh else create_access_token(identity=user_id)
        return {'Authorization': f'Bearer {token}'}
    return _make

@pytest.fixture
def make_user(app):
    """서비스를 통해 사용자를 생성합니다. 유일 필드는 이름에서 만들어집니다."""
    counter = {'n': 0}

    def _make(user_name='user', password='secret123', **overrides):
        counter['n'] += 1
        data = {
            'user_name': user_name,
            'name': overrides.pop('name', user_name.title()),
            'email': overrides.pop('email', f'{user_name}@example.com'),
            'phone_no': overrides.pop('phone_no', f'0101234{counter["n"]:04d}'),
            'password': password,
        }
        data.update(overrides)
        return app.services['auth'].register_user(data)
    return _make

@pytest.fixture
def make_pet(app):
    """make_pet(user_id, name, available_for_breeding=False, **fields) -> Pet"""
    def _make(user_id, name='Coco', available_for_breeding=False, **overrides):
        data = {
            'name': name,
            'pet_type': 'Dog',
            'breed': 'Maltese',
            'age': 3,
            'weight': 4.2,
            'gender': 'Female',
            'available_for_breeding': available_for_breeding,
        }
        data.update(overrides)
        return app.services['pets'].register_pet(user_id, data)
    return _make
