"""Unit tests for the ordered target fallback helper."""

import httpx
import pytest

from cli.fallback import TargetStatusError, fetch_with_fallback


def make_session(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_uses_primary_when_ok():
    """Test the primary target answers and no fallback is tried."""
    calls = []

    def handler(request):
        calls.append(str(request.url))
        return httpx.Response(200, json={'ok': True})

    response = fetch_with_fallback(make_session(handler), ['http://primary.test'], path='/api/d')

    assert response.status_code == 200
    assert calls == ['http://primary.test/api/d']


def test_falls_back_on_network_error():
    """Test a connection failure moves on to the next target."""
    calls = []

    def handler(request):
        calls.append(request.url.host)
        if request.url.host == 'primary.test':
            raise httpx.ConnectError('network fail', request=request)
        return httpx.Response(200)

    response = fetch_with_fallback(
        make_session(handler),
        ['http://primary.test', 'https://fallback.test'],
        method='POST',
        path='/api/u',
        content=b'abc',
    )

    assert response.status_code == 200
    assert calls == ['primary.test', 'fallback.test']


def test_falls_back_on_error_status():
    """Test a non-2xx status moves on to the next target."""
    def handler(request):
        if request.url.host == 'primary.test':
            return httpx.Response(503)
        return httpx.Response(204)

    response = fetch_with_fallback(
        make_session(handler), ['http://primary.test', 'http://fallback.test'], path='/health'
    )

    assert response.status_code == 204
    assert response.url.host == 'fallback.test'


def test_all_fail_raises_last_status_error():
    """Test the last error is surfaced when every target fails."""
    def handler(request):
        if request.url.host == 'primary.test':
            raise httpx.ConnectError('network fail', request=request)
        return httpx.Response(502, json={'code': 'INTERNAL_ERROR'})

    with pytest.raises(TargetStatusError) as exc_info:
        fetch_with_fallback(make_session(handler), ['http://primary.test', 'http://fallback.test'])

    assert exc_info.value.status_code == 502
    assert str(exc_info.value) == 'status 502'
    assert exc_info.value.response.json()['code'] == 'INTERNAL_ERROR'


def test_all_fail_raises_last_network_error():
    """Test a network failure on the last target is raised as is."""
    def handler(request):
        if request.url.host == 'primary.test':
            return httpx.Response(500)
        raise httpx.ConnectTimeout('too slow', request=request)

    with pytest.raises(httpx.ConnectTimeout):
        fetch_with_fallback(make_session(handler), ['http://primary.test', 'http://fallback.test'])


def test_no_targets():
    """Test an empty target list fails without sending anything."""
    def handler(request):
        raise AssertionError('should not be called')

    with pytest.raises(ConnectionError, match='All fetch attempts failed'):
        fetch_with_fallback(make_session(handler), [])


def test_streamed_response_left_unread():
    """Test stream=True returns a response whose body can be iterated."""
    def handler(request):
        return httpx.Response(200, content=b'x' * 5000)

    response = fetch_with_fallback(make_session(handler), ['http://primary.test/'], path='/download', stream=True)

    try:
        assert sum(len(chunk) for chunk in response.iter_bytes()) == 5000
        assert response.url.path == '/download'
    finally:
        response.close()
