from __future__ import annotations

import json

import pytest
from sqlalchemy.exc import OperationalError

from logrelay.db.log_store import LogSink, SqlLogStore, sql_log_store
from logrelay.db.schema import LogRecord, SessionLocal, init_db
from logrelay.utils.errors import PersistenceFailure


@pytest.fixture
def log_table():
    init_db()
    db = SessionLocal()
    try:
        db.query(LogRecord).delete()
        db.commit()
    finally:
        db.close()

    def _rows():
        s = SessionLocal()
        try:
            return [(r.service, r.instance, r.level, r.message) for r in s.query(LogRecord).order_by(LogRecord.id).all()]
        finally:
            s.close()

    return _rows


def test_sql_store_satisfies_sink_protocol():
    assert isinstance(sql_log_store, LogSink)


def test_append_writes_one_row(log_table):
    sql_log_store.append('auth', 'auth-1', 2, 'login ok')
    assert log_table() == [('auth', 'auth-1', 2, 'login ok')]


def test_log_table_uses_legacy_column_names():
    assert LogRecord.__tablename__ == 'log1'
    assert [c.name for c in LogRecord.__table__.columns] == ['id', 'c1', 'c2', 'i1', 't1']


def test_identical_appends_are_not_deduplicated(log_table):
    sql_log_store.append('auth', 'auth-1', 2, 'login ok')
    sql_log_store.append('auth', 'auth-1', 2, 'login ok')
    assert len(log_table()) == 2


def test_driver_error_becomes_persistence_failure():
    class _BrokenSession:
        rolled_back = False
        closed = False

        def add(self, _row):
            pass

        def commit(self):
            raise OperationalError('INSERT INTO log1', {}, Exception('database is locked'))

        def rollback(self):
            self.rolled_back = True

        def close(self):
            self.closed = True

    session = _BrokenSession()
    store = SqlLogStore(session_factory=lambda: session)
    with pytest.raises(PersistenceFailure) as exc_info:
        store.append('s', 'i', 1, 'm')
    assert exc_info.value.code == 'DB_ERROR'
    assert str(exc_info.value) == 'database is locked'
    assert session.rolled_back and session.closed


def test_replayed_webhook_stores_duplicate_rows_end_to_end(client, log_table, ably_headers):
    event = {'service': 'edge', 'instance': 'edge-1', 'level': 1, 'message': 'heartbeat'}
    body = {'items': [{'data': json.dumps({'payload': event})}]}
    assert client.post('/ably', json=body, headers=ably_headers).text == 'OK'
    assert client.post('/ably', json=body, headers=ably_headers).text == 'OK'
    assert log_table() == [('edge', 'edge-1', 1, 'heartbeat')] * 2


def test_direct_api_end_to_end(client, log_table, api_headers):
    resp = client.post(
        '/api',
        json={'request_id': 'e2e-1', 'payload': {'service': 'web', 'instance': 'web-3', 'level': 0, 'message': 'boot'}},
        headers=api_headers,
    )
    assert resp.json() == {'type': 'ack', 'request_id': 'e2e-1'}
    assert log_table() == [('web', 'web-3', 0, 'boot')]
