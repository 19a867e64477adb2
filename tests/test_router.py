from __future__ import annotations

import pytest


@pytest.mark.parametrize('method', ['GET', 'PUT', 'DELETE', 'PATCH'])
@pytest.mark.parametrize('path', ['/api', '/ably', '/elsewhere'])
def test_non_post_is_405_before_anything_else(client, relay, method, path):
    resp = client.request(method, path, json={'payload': {'message': 'x'}})
    assert resp.status_code == 405
    assert resp.text == 'Method Not Allowed'
    assert relay.store.rows == []
    assert relay.notifier.sent == []


def test_unknown_post_path_is_plain_404(client, relay):
    resp = client.post('/v1/logs', json={})
    assert resp.status_code == 404
    assert resp.text == 'Not Found'
    assert resp.headers['content-type'].startswith('text/plain')


def test_docs_are_not_served(client):
    assert client.get('/docs').status_code == 405
    assert client.post('/openapi.json').status_code == 404


def test_request_id_header_is_echoed(client, relay):
    resp = client.post('/nowhere', headers={'x-request-id': 'trace-42'})
    assert resp.headers['x-request-id'] == 'trace-42'
    assert 'x-elapsed-ms' in resp.headers


def test_request_id_header_is_generated(client, relay):
    resp = client.get('/api')
    assert len(resp.headers['x-request-id']) == 36
